"""Domain models for kiosk sessions."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class SubjectIdentity:
    """Name and e-mail captured at the kiosk."""

    name: str
    email: str


@dataclass(frozen=True)
class SessionRecord:
    """Represents a persisted composition session."""

    id: UUID
    subject_name: str
    subject_email: str
    layout_id: str
    consent: bool
    storage_url: str | None
    storage_id: str | None
    created_at: datetime
