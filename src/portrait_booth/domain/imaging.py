"""In-memory raster representation."""

from dataclasses import dataclass

from PIL import Image


@dataclass(frozen=True)
class RasterBuffer:
    """Decoded image plus its pixel metadata."""

    image: Image.Image

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    @property
    def channels(self) -> int:
        return len(self.image.getbands())

    @property
    def has_alpha(self) -> bool:
        return "A" in self.image.getbands()

    def to_rgba(self) -> "RasterBuffer":
        """Return an RGBA view, converting only when needed."""
        if self.image.mode == "RGBA":
            return self
        return RasterBuffer(self.image.convert("RGBA"))
