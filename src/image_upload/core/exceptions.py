"""Custom exceptions and error handling utilities for the image upload pipeline."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Type

from .logging_config import get_logger


class ImageUploadError(Exception):
    """Base exception for all image upload errors."""


class ConfigurationError(ImageUploadError):
    """Error raised for invalid or missing configuration."""


class DecodeError(ImageUploadError):
    """Source bytes carry a known signature but cannot be decoded."""


class UnsupportedFormatError(DecodeError):
    """Source bytes do not match any supported image signature."""


class StoreError(ImageUploadError):
    """Error raised when the artifact store rejects or cannot serve a call."""


class OriginalUploadFailed(ImageUploadError):
    """The original artifact could not be committed to the store."""


class ImageNotFoundError(ImageUploadError):
    """No artifact exists under the requested key."""


class VariantProcessingError(ImageUploadError):
    """Failure confined to a single resized variant."""


class ResizeError(VariantProcessingError):
    """Resampling a raster to the requested bounds failed."""


class EncodeError(VariantProcessingError):
    """Serializing a raster back to bytes failed."""


class VariantUploadFailed(VariantProcessingError):
    """The store rejected a variant artifact."""


@contextmanager
def translate_errors(error_cls: Type[ImageUploadError], message: str) -> Iterator[None]:
    """Re-raise third-party failures inside the block as ``error_cls``.

    Errors that already belong to the pipeline taxonomy pass through untouched.
    """
    try:
        yield
    except ImageUploadError:
        raise
    except Exception as exc:  # noqa: BLE001
        get_logger("image-upload.errors").debug(f"{message}: {exc}", exc_info=True)
        raise error_cls(f"{message}: {exc}") from exc
