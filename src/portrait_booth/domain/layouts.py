"""Domain models for branded templates."""

from dataclasses import dataclass

from portrait_booth.domain.imaging import RasterBuffer
from portrait_booth.domain.placement import Frame, PlacementPolicy


@dataclass(frozen=True)
class LayoutAssets:
    """Raw template files as returned by an asset provider."""

    layout_id: str
    background: bytes
    overlay: bytes
    version: str
    policy: PlacementPolicy | None = None


@dataclass(frozen=True)
class Layout:
    """Decoded template ready for compositing."""

    layout_id: str
    background: RasterBuffer
    overlay: RasterBuffer
    version: str
    policy: PlacementPolicy | None = None

    @property
    def frame(self) -> Frame:
        """Frame size defined by the background layer."""
        return Frame(width=self.background.width, height=self.background.height)
