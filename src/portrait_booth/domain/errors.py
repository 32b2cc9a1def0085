"""Error taxonomy for the composition engine."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from portrait_booth.domain.composition import CleanupReport


class PortraitBoothError(Exception):
    """Base error carrying a human-readable reason and the failing stage."""

    def __init__(self, reason: str, *, stage: str | None = None) -> None:
        super().__init__(reason)
        self.reason = reason
        self.stage = stage


class DecodeError(PortraitBoothError):
    """Transport image is not valid base64 or not a supported image."""


class InvalidDimensionsError(PortraitBoothError):
    """Subject or frame has a zero or negative dimension."""


class LayoutNotFoundError(PortraitBoothError):
    """Template assets for a layout are missing."""

    def __init__(self, layout_id: str, reason: str | None = None) -> None:
        super().__init__(reason or f"Layout or layer not found for {layout_id}")
        self.layout_id = layout_id


class BackgroundRemovalError(PortraitBoothError):
    """Background-removal collaborator failed or timed out."""


class CompositionError(PortraitBoothError):
    """A layer could not be decoded or blended."""

    def __init__(self, layer: str, reason: str) -> None:
        super().__init__(f"Layer '{layer}' failed: {reason}")
        self.layer = layer


class ArtifactWriteError(PortraitBoothError):
    """The composed image could not be written to local storage."""


class UploadError(PortraitBoothError):
    """Remote upload failed; the request degrades to a local-only result."""


class CleanupError(PortraitBoothError):
    """One or both retake deletions raised."""

    def __init__(self, reason: str, report: CleanupReport | None = None) -> None:
        super().__init__(reason)
        self.report = report
