"""Layer stacking and export of the final print image."""

from collections.abc import Sequence
from dataclasses import dataclass

from PIL import Image

from portrait_booth.domain.errors import CompositionError, DecodeError
from portrait_booth.domain.imaging import RasterBuffer
from portrait_booth.domain.placement import Frame, PlacementResult
from portrait_booth.services import codec

_TRANSPARENT = (0, 0, 0, 0)


@dataclass(frozen=True)
class PositionedLayer:
    """Raster to draw into a rectangle of the canvas."""

    name: str
    raster: RasterBuffer
    placement: PlacementResult


def full_frame_layer(name: str, raster: RasterBuffer, frame: Frame) -> PositionedLayer:
    """Layer stretched over the whole canvas, e.g. the decorative overlay."""
    return PositionedLayer(
        name=name,
        raster=raster,
        placement=PlacementResult(
            target_width=frame.width, target_height=frame.height, left=0, top=0
        ),
    )


def load_layer(name: str, data: bytes) -> RasterBuffer:
    """Decode layer bytes, reporting failures against the layer name."""
    try:
        return codec.decode_bytes(data)
    except DecodeError as exc:
        raise CompositionError(name, exc.reason) from exc


def compose(
    background: RasterBuffer,
    layers: Sequence[PositionedLayer],
    canvas_size: Frame,
) -> RasterBuffer:
    """Draw the background, then alpha-blend each layer over it in order."""
    try:
        canvas = background.image.convert("RGBA")
        if canvas.size != canvas_size.size:
            canvas = canvas.resize(canvas_size.size, Image.Resampling.LANCZOS)
    except (OSError, ValueError) as exc:
        raise CompositionError("background", str(exc)) from exc

    for layer in layers:
        try:
            canvas = _blend_over(canvas, layer)
        except (OSError, ValueError) as exc:
            raise CompositionError(layer.name, str(exc)) from exc
    return RasterBuffer(canvas)


def _blend_over(canvas: Image.Image, layer: PositionedLayer) -> Image.Image:
    placement = layer.placement
    source = layer.raster.image.convert("RGBA")
    target_size = (placement.target_width, placement.target_height)
    if source.size != target_size:
        source = source.resize(target_size, Image.Resampling.LANCZOS)
    # Anything outside the canvas is clipped by paste.
    sheet = Image.new("RGBA", canvas.size, _TRANSPARENT)
    sheet.paste(source, (placement.left, placement.top))
    return Image.alpha_composite(canvas, sheet)


def flatten(raster: RasterBuffer, color: str = "#ffffff") -> RasterBuffer:
    """Drop the alpha channel over a solid backing color."""
    rgba = raster.to_rgba().image
    backing = Image.new("RGBA", rgba.size, color)
    return RasterBuffer(Image.alpha_composite(backing, rgba).convert("RGB"))


def export_jpeg(raster: RasterBuffer, color: str = "#ffffff") -> bytes:
    """Flatten and encode at maximal quality with 4:4:4 chroma."""
    return codec.encode(flatten(raster, color), format="JPEG")
