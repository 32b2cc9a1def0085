"""Conversions between transport strings, encoded bytes and rasters."""

import base64
import binascii
import io
import re

from PIL import Image, UnidentifiedImageError

from portrait_booth.domain.errors import DecodeError
from portrait_booth.domain.imaging import RasterBuffer

_DATA_URI_PREFIX = re.compile(r"^data:image/[\w.+-]+;base64,", re.IGNORECASE)

JPEG_QUALITY = 100
# Pillow's "4:4:4" setting, i.e. no chroma subsampling.
JPEG_SUBSAMPLING = 0


def decode_transport_bytes(transport_image: str) -> bytes:
    """Strip an optional data URI prefix and decode strict base64."""
    if not transport_image or not transport_image.strip():
        raise DecodeError("Empty image payload")
    payload = _DATA_URI_PREFIX.sub("", transport_image.strip(), count=1)
    payload = "".join(payload.split())
    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise DecodeError(f"Malformed base64 image: {exc}") from exc
    if not data:
        raise DecodeError("Empty image payload")
    return data


def decode_bytes(data: bytes) -> RasterBuffer:
    """Decode encoded image bytes into a fully loaded raster."""
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (
        UnidentifiedImageError,
        Image.DecompressionBombError,
        OSError,
        ValueError,
    ) as exc:
        raise DecodeError(f"Unsupported image format: {exc}") from exc
    return RasterBuffer(image)


def decode(transport_image: str) -> RasterBuffer:
    """Decode a base64 transport image, with or without a data URI prefix."""
    return decode_bytes(decode_transport_bytes(transport_image))


def encode(
    raster: RasterBuffer, format: str = "JPEG", quality: int = JPEG_QUALITY
) -> bytes:
    """Encode a raster; JPEG output always keeps full chroma resolution."""
    buffer = io.BytesIO()
    image = raster.image
    if format.upper() in {"JPEG", "JPG"}:
        if image.mode != "RGB":
            image = image.convert("RGB")
        image.save(
            buffer, format="JPEG", quality=quality, subsampling=JPEG_SUBSAMPLING
        )
    else:
        image.save(buffer, format=format.upper())
    return buffer.getvalue()


def encode_png(raster: RasterBuffer) -> bytes:
    """Lossless encoding for masked intermediates."""
    return encode(raster, format="PNG")


def to_data_uri(data: bytes, mime_type: str = "image/jpeg") -> str:
    """Wrap encoded bytes in a base64 data URI."""
    encoded = base64.b64encode(data).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"


def detect_mime_type(data: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if data.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if data.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"
    return "application/octet-stream"
