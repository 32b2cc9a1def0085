"""Result models for composition and retake."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from uuid import UUID

from portrait_booth.domain.placement import PlacementResult


class CompositionStage(str, Enum):
    """Progress of a single composition request."""

    RECEIVED = "received"
    BACKGROUND_REMOVED = "background_removed"
    COMPOSITED = "composited"
    PERSISTED_LOCAL = "persisted_local"
    PERSISTED_REMOTE = "persisted_remote"
    RECORD_WRITTEN = "record_written"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class StoredObject:
    """Durable object returned by remote storage."""

    url: str
    id: str


@dataclass(frozen=True)
class CompositionResult:
    """Final encoded image plus whatever storage metadata was obtained."""

    encoded: bytes
    data_uri: str
    local_path: Path
    placement: PlacementResult
    storage_url: str | None = None
    storage_id: str | None = None
    session_id: UUID | None = None
    last_stage: CompositionStage = CompositionStage.PERSISTED_LOCAL


@dataclass
class CleanupReport:
    """Outcome of the two independent retake deletions."""

    storage_id: str
    asset_deleted: bool = False
    record_deleted: bool = False
    errors: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors
