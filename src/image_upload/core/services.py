"""Service implementations for the image upload pipeline."""

import time
from dataclasses import dataclass
from typing import Callable, ClassVar, List, Optional, Sequence, Union

from .exceptions import (
    DecodeError,
    ImageNotFoundError,
    OriginalUploadFailed,
    StoreError,
    VariantProcessingError,
    VariantUploadFailed,
)
from .image_utils import (
    DecodedImage,
    content_type_for,
    decode_image,
    encode_image,
    resize_image,
)
from .models import CompressSpec, ImageResult, UploadResult
from .naming import KeyNamer, parse_variant_dimensions
from .observability import LogContext, LoggingOutcomeSink
from .protocols import ArtifactStoreProtocol, LoggerProtocol, OutcomeSinkProtocol


@dataclass
class VariantSuccess:
    """A variant that was resized, encoded and committed to the store."""

    spec: CompressSpec
    key: str
    image: ImageResult

    success: ClassVar[bool] = True


@dataclass
class VariantFailure:
    """A variant dropped from the response, with the stage that failed."""

    spec: CompressSpec
    key: str
    stage: str
    error: VariantProcessingError

    success: ClassVar[bool] = False


VariantOutcome = Union[VariantSuccess, VariantFailure]


class ImageUploadService:
    """
    Stores an uploaded image and its resized variants.

    The request fails only when the original cannot be secured (undecodable
    input or a rejected original upload). Each variant is attempted in spec
    order; a variant that fails to resize, encode or upload is reported to
    the outcome sink and left out of the result.
    """

    def __init__(
        self,
        store: ArtifactStoreProtocol,
        logger: LoggerProtocol,
        outcome_sink: Optional[OutcomeSinkProtocol] = None,
        clock: Callable[[], int] = time.time_ns,
    ):
        self._store = store
        self._logger = logger
        self._outcome_sink = outcome_sink or LoggingOutcomeSink(logger)
        self._clock = clock

    def process(
        self, file_bytes: bytes, filename: str, specs: Sequence[CompressSpec]
    ) -> UploadResult:
        """
        Decode, store the original, then store one variant per spec.

        Args:
            file_bytes: The complete uploaded file
            filename: Client-supplied filename, used only for key naming
            specs: Requested variant sizes, in response order

        Returns:
            UploadResult with the original and every variant that succeeded

        Raises:
            DecodeError: If the bytes are not a decodable JPEG/PNG
                (UnsupportedFormatError for unrecognized data)
            OriginalUploadFailed: If the store rejects the original
        """
        start_time = time.time()
        log_context = LogContext(
            operation="upload_image", component="image_upload_service"
        ).with_metadata(filename=filename, spec_count=len(specs))

        result = self._process(file_bytes, filename, specs, log_context)
        self._logger.info(
            "Upload completed",
            log_context,
            variants_stored=len(result.variants),
            duration_ms=(time.time() - start_time) * 1000,
        )
        return result

    def _process(
        self,
        file_bytes: bytes,
        filename: str,
        specs: Sequence[CompressSpec],
        log_context: LogContext,
    ) -> UploadResult:
        try:
            decoded = decode_image(file_bytes)
        except DecodeError as e:
            self._logger.error(f"Failed to decode image: {e}", log_context)
            raise

        width, height = decoded.size
        self._logger.debug(
            "Image decoded",
            log_context.with_operation("decode_image"),
            format=decoded.format.name,
            width=width,
            height=height,
        )

        namer = KeyNamer.from_filename(filename, self._clock())
        original_key = namer.original_key()

        try:
            self._store.put(
                original_key, file_bytes, content_type_for(decoded.format.name)
            )
        except StoreError as e:
            self._logger.error(
                f"Failed to upload original image: {e}",
                log_context.with_metadata(key=original_key),
            )
            raise OriginalUploadFailed(f"Failed to upload original image: {e}") from e

        original = ImageResult(
            width=width, height=height, url=self._store.url_for(original_key)
        )

        outcomes: List[VariantOutcome] = [
            self._process_variant(decoded, spec, namer, log_context) for spec in specs
        ]
        self._outcome_sink.record(outcomes, log_context)

        return UploadResult(
            original=original,
            variants=[outcome.image for outcome in outcomes if outcome.success],
        )

    def _process_variant(
        self,
        decoded: DecodedImage,
        spec: CompressSpec,
        namer: KeyNamer,
        log_context: LogContext,
    ) -> VariantOutcome:
        key = namer.variant_key(spec.width, spec.height)
        stage = "resize"

        try:
            resized = resize_image(decoded.raster, spec.width, spec.height)
            stage = "encode"
            data = encode_image(resized, decoded.format)
            stage = "upload"
            try:
                self._store.put(key, data, content_type_for(decoded.format.name))
            except StoreError as e:
                raise VariantUploadFailed(str(e)) from e
        except VariantProcessingError as e:
            return VariantFailure(spec=spec, key=key, stage=stage, error=e)

        width, height = resized.size
        self._logger.debug(
            "Variant uploaded",
            log_context.with_operation("process_variant"),
            key=key,
            size=len(data),
        )
        return VariantSuccess(
            spec=spec,
            key=key,
            image=ImageResult(width=width, height=height, url=self._store.url_for(key)),
        )


class ImageLookupService:
    """Read-side queries against the artifact store."""

    def __init__(self, store: ArtifactStoreProtocol, logger: LoggerProtocol):
        self._store = store
        self._logger = logger

    def get_image_info(self, key: str) -> ImageResult:
        """
        Describe a stored artifact by key.

        Dimensions are read from variant-shaped keys; originals and foreign
        objects report 0x0.

        Raises:
            ImageNotFoundError: If the key is absent or the store cannot
                answer for it
        """
        try:
            found = self._store.exists(key)
        except StoreError as e:
            self._logger.warning(f"Lookup failed for {key}: {e}")
            raise ImageNotFoundError(f"Image not found: {key}") from e

        if not found:
            raise ImageNotFoundError(f"Image not found: {key}")

        width, height = parse_variant_dimensions(key) or (0, 0)
        return ImageResult(width=width, height=height, url=self._store.url_for(key))

    def list_images(self) -> List[str]:
        """List every key in the store. StoreError propagates."""
        keys = self._store.list_keys()
        self._logger.info(f"Listed {len(keys)} images")
        return keys
