"""Supabase-backed session repository."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from portrait_booth.domain.sessions import SessionRecord, SubjectIdentity
from portrait_booth.services.sessions import SessionRepository

_COLUMNS = (
    "id, subject_name, subject_email, layout_id, consent, "
    "storage_url, storage_id, created_at"
)


@dataclass
class SupabaseSessionRepository(SessionRepository):
    """Supabase implementation for composition sessions."""

    client: Client
    table_name: str = "sessions"

    def create_session(
        self,
        identity: SubjectIdentity,
        layout_id: str,
        consent: bool,
        storage_url: str,
        storage_id: str,
    ) -> SessionRecord:
        """Insert a session row and return it."""
        response = (
            self.client.table(self.table_name)
            .insert(
                {
                    "subject_name": identity.name,
                    "subject_email": identity.email,
                    "layout_id": layout_id,
                    "consent": consent,
                    "storage_url": storage_url,
                    "storage_id": storage_id,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create session")
        return _to_record(response.data[0])

    def delete_by_storage_id(self, storage_id: str) -> SessionRecord | None:
        """Delete sessions for a storage id and return the first removed row."""
        response = (
            self.client.table(self.table_name)
            .delete()
            .eq("storage_id", storage_id)
            .execute()
        )
        if not response.data:
            return None
        return _to_record(response.data[0])

    def list_sessions(self, limit: int) -> list[SessionRecord]:
        """Return the most recent sessions."""
        response = (
            self.client.table(self.table_name)
            .select(_COLUMNS)
            .order("created_at", desc=True)
            .limit(limit)
            .execute()
        )
        return [_to_record(row) for row in response.data or []]


def _to_record(row: dict[str, object]) -> SessionRecord:
    created_at = row.get("created_at")
    return SessionRecord(
        id=UUID(str(row["id"])),
        subject_name=str(row["subject_name"]),
        subject_email=str(row["subject_email"]),
        layout_id=str(row["layout_id"]),
        consent=bool(row["consent"]),
        storage_url=row.get("storage_url"),  # type: ignore[arg-type]
        storage_id=row.get("storage_id"),  # type: ignore[arg-type]
        created_at=(
            datetime.fromisoformat(str(created_at))
            if created_at
            else datetime.now(tz=UTC)
        ),
    )
