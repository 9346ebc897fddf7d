"""Image decoding, resizing and encoding utilities for the upload pipeline."""

import io
from dataclasses import dataclass
from typing import Any, Dict, Tuple, Union

from PIL import Image

from .exceptions import (
    DecodeError,
    EncodeError,
    ResizeError,
    UnsupportedFormatError,
    translate_errors,
)


PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
JPEG_SIGNATURE = b"\xff\xd8\xff"

DEFAULT_CONTENT_TYPE = "application/octet-stream"

CONTENT_TYPES = {
    "jpeg": "image/jpeg",
    "png": "image/png",
}


@dataclass(frozen=True)
class JpegFormat:
    """Lossy JPEG output at a fixed quality factor."""

    quality: int = 85

    name = "jpeg"


@dataclass(frozen=True)
class PngFormat:
    """Lossless PNG output at zlib's default level."""

    compress_level: int = 6

    name = "png"


ImageFormat = Union[JpegFormat, PngFormat]


@dataclass
class DecodedImage:
    """A fully loaded raster plus the format it was encoded in."""

    raster: "Image.Image"
    format: ImageFormat

    @property
    def size(self) -> Tuple[int, int]:
        return self.raster.size


def content_type_for(format_name: str) -> str:
    """Map a format tag to the content type stored alongside the artifact."""
    return CONTENT_TYPES.get(format_name, DEFAULT_CONTENT_TYPE)


def detect_format(image_bytes: bytes) -> ImageFormat:
    """
    Identify the encoding from the leading bytes of the payload.

    Raises:
        UnsupportedFormatError: If no supported signature matches
    """
    if image_bytes.startswith(PNG_SIGNATURE):
        return PngFormat()
    if image_bytes.startswith(JPEG_SIGNATURE):
        return JpegFormat()
    raise UnsupportedFormatError("Unsupported image format: expected JPEG or PNG data")


def decode_image(image_bytes: bytes) -> DecodedImage:
    """
    Decode raw bytes into a pixel-addressable raster.

    The format comes from the byte signature; any filename extension the
    caller holds is irrelevant here.

    Args:
        image_bytes: Complete encoded image

    Returns:
        DecodedImage with the loaded raster and detected format

    Raises:
        UnsupportedFormatError: If the payload is not JPEG or PNG
        DecodeError: If the payload is truncated or otherwise corrupt
    """
    image_format = detect_format(image_bytes)

    with translate_errors(DecodeError, f"Failed to decode {image_format.name} image"):
        image = Image.open(io.BytesIO(image_bytes))
        image.load()

    return DecodedImage(raster=image, format=image_format)


def _filterable(raster: "Image.Image") -> "Image.Image":
    # Pillow falls back to nearest-neighbour for palette and bilevel modes
    if raster.mode in ("P", "PA"):
        keep_alpha = raster.mode == "PA" or "transparency" in raster.info
        return raster.convert("RGBA" if keep_alpha else "RGB")
    if raster.mode == "1":
        return raster.convert("L")
    return raster


def resize_image(raster: "Image.Image", width: int, height: int) -> "Image.Image":
    """
    Resample a raster to exactly ``width`` x ``height`` with Lanczos filtering.

    Each axis is scaled independently, so the aspect ratio is not preserved
    and targets larger than the source upscale. Palette images come back as
    RGB (RGBA when they carry transparency) and bilevel images as L.

    Raises:
        ResizeError: If the target is not positive or resampling fails
    """
    if width <= 0 or height <= 0:
        raise ResizeError(f"Invalid target size {width}x{height}")

    with translate_errors(ResizeError, f"Failed to resize image to {width}x{height}"):
        return _filterable(raster).resize((width, height), Image.Resampling.LANCZOS)


def save_options(image_format: ImageFormat) -> Dict[str, Any]:
    """Pillow ``save`` keyword arguments for an output format."""
    if isinstance(image_format, JpegFormat):
        return {"format": "JPEG", "quality": image_format.quality}
    if isinstance(image_format, PngFormat):
        return {"format": "PNG", "compress_level": image_format.compress_level}
    raise EncodeError(f"No encoder for format {image_format!r}")


def encode_image(raster: "Image.Image", image_format: ImageFormat) -> bytes:
    """
    Serialize a raster using the encoder for ``image_format``.

    Raises:
        EncodeError: If serialization fails
    """
    options = save_options(image_format)

    with translate_errors(EncodeError, f"Failed to encode {image_format.name} image"):
        output_stream = io.BytesIO()
        raster.save(output_stream, **options)
        return output_stream.getvalue()
