"""Core components for the image upload pipeline."""

from .image_utils import (
    DecodedImage,
    ImageFormat,
    JpegFormat,
    PngFormat,
    content_type_for,
    decode_image,
    encode_image,
    resize_image,
)
from .logging_config import configure_logging, get_logger
from .exceptions import (
    ImageUploadError,
    ConfigurationError,
    DecodeError,
    UnsupportedFormatError,
    StoreError,
    OriginalUploadFailed,
    ImageNotFoundError,
    VariantProcessingError,
    ResizeError,
    EncodeError,
    VariantUploadFailed,
    translate_errors,
)
from .models import CompressSpec, ImageResult, StorageConfig, UploadResult
from .naming import KeyNamer, parse_variant_dimensions

__all__ = [
    "CompressSpec",
    "ImageResult",
    "UploadResult",
    "StorageConfig",
    "DecodedImage",
    "ImageFormat",
    "JpegFormat",
    "PngFormat",
    "content_type_for",
    "decode_image",
    "encode_image",
    "resize_image",
    "KeyNamer",
    "parse_variant_dimensions",
    "configure_logging",
    "get_logger",
    "ImageUploadError",
    "ConfigurationError",
    "DecodeError",
    "UnsupportedFormatError",
    "StoreError",
    "OriginalUploadFailed",
    "ImageNotFoundError",
    "VariantProcessingError",
    "ResizeError",
    "EncodeError",
    "VariantUploadFailed",
    "translate_errors",
]
