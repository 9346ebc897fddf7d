"""Factory classes for creating configured service instances."""

from typing import Any, Callable, Optional, TYPE_CHECKING

import boto3

from .models import StorageConfig
from .observability import StructuredLogger
from .protocols import (
    ArtifactStoreProtocol,
    LoggerProtocol,
    OutcomeSinkProtocol,
    S3ClientProtocol,
)
from .services import ImageLookupService, ImageUploadService
from .storage import S3ArtifactStore

if TYPE_CHECKING:
    from mypy_boto3_s3.client import S3Client
else:
    S3Client = Any


class LoggerFactory:
    """Factory for creating logger instances."""

    @staticmethod
    def create_logger(name: str, level: Optional[int] = None) -> StructuredLogger:
        """Create a configured structured logger."""
        return StructuredLogger(name, level)


class S3ClientFactory:
    """Factory for creating S3 client instances."""

    @staticmethod
    def create_s3_client(config: StorageConfig, **kwargs: Any) -> S3Client:
        """
        Create an S3 client for the configured region.

        A custom endpoint (MinIO, LocalStack) is passed through as
        ``endpoint_url``; static credentials are used when both halves are
        configured, otherwise boto3's default credential chain applies.
        """
        session = boto3.Session()
        client_kwargs: dict = {"region_name": config.region}
        if config.endpoint:
            client_kwargs["endpoint_url"] = config.endpoint
        if config.access_key_id and config.secret_access_key:
            client_kwargs["aws_access_key_id"] = config.access_key_id
            client_kwargs["aws_secret_access_key"] = config.secret_access_key
        client_kwargs.update(kwargs)
        return session.client("s3", **client_kwargs)


class UploadPipelineFactory:
    """Factory for wiring the upload and lookup services to one store."""

    @staticmethod
    def create_store(
        config: StorageConfig,
        s3_client: Optional[S3ClientProtocol] = None,
        logger: Optional[LoggerProtocol] = None,
    ) -> S3ArtifactStore:
        """Create the S3 store, building a client when none is supplied."""
        if s3_client is None:
            s3_client = S3ClientFactory.create_s3_client(config)

        if logger is None:
            logger = LoggerFactory.create_logger("image-upload.storage")

        return S3ArtifactStore(s3_client, config, logger)

    @staticmethod
    def create_upload_service(
        store: ArtifactStoreProtocol,
        logger: Optional[LoggerProtocol] = None,
        outcome_sink: Optional[OutcomeSinkProtocol] = None,
        clock: Optional[Callable[[], int]] = None,
    ) -> ImageUploadService:
        """Create an upload service bound to ``store``."""
        if logger is None:
            logger = LoggerFactory.create_logger("image-upload")

        kwargs: dict = {}
        if clock is not None:
            kwargs["clock"] = clock

        return ImageUploadService(
            store=store,
            logger=logger,
            outcome_sink=outcome_sink,
            **kwargs,
        )

    @staticmethod
    def create_lookup_service(
        store: ArtifactStoreProtocol, logger: Optional[LoggerProtocol] = None
    ) -> ImageLookupService:
        """Create a lookup service bound to ``store``."""
        if logger is None:
            logger = LoggerFactory.create_logger("image-upload")
        return ImageLookupService(store, logger)
