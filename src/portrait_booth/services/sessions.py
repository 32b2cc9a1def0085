"""Session persistence interface and admin listing."""

from dataclasses import dataclass
from typing import Protocol

from portrait_booth.domain.sessions import SessionRecord, SubjectIdentity


class SessionRepository(Protocol):
    """Persistence interface for composition sessions."""

    def create_session(
        self,
        identity: SubjectIdentity,
        layout_id: str,
        consent: bool,
        storage_url: str,
        storage_id: str,
    ) -> SessionRecord:
        """Insert a session and return it."""

    def delete_by_storage_id(self, storage_id: str) -> SessionRecord | None:
        """Delete the session for a storage id and return it, if present."""

    def list_sessions(self, limit: int) -> list[SessionRecord]:
        """Return the most recent sessions."""


@dataclass
class SessionService:
    """Read access to sessions for reporting."""

    repository: SessionRepository

    def list_recent(self, limit: int = 20) -> list[dict[str, object]]:
        """Return recent sessions as JSON-friendly dicts."""
        return [
            {
                "id": str(record.id),
                "subject_name": record.subject_name,
                "subject_email": record.subject_email,
                "layout_id": record.layout_id,
                "consent": record.consent,
                "storage_url": record.storage_url,
                "storage_id": record.storage_id,
                "created_at": record.created_at.isoformat(),
            }
            for record in self.repository.list_sessions(limit)
        ]
