"""Protocol definitions for dependency injection and testability."""

from typing import Any, Dict, List, Protocol, Sequence, TYPE_CHECKING

if TYPE_CHECKING:
    from .services import VariantOutcome
    from .observability import LogContext


class S3ClientProtocol(Protocol):
    """Protocol for the subset of the boto3 S3 client the store uses."""

    def put_object(
        self, Bucket: str, Key: str, Body: bytes, ContentType: str
    ) -> Dict[str, Any]:
        """Put object to S3."""
        ...

    def head_object(self, Bucket: str, Key: str) -> Dict[str, Any]:
        """Fetch object metadata without the body."""
        ...

    def get_paginator(self, operation_name: str) -> Any:
        """Get paginator for S3 operations."""
        ...


class ArtifactStoreProtocol(Protocol):
    """Durable object store the upload pipeline writes artifacts into."""

    def put(self, key: str, data: bytes, content_type: str) -> None:
        """Store ``data`` under ``key``, replacing any existing artifact."""
        ...

    def exists(self, key: str) -> bool:
        """Check whether ``key`` is present without fetching it."""
        ...

    def list_keys(self) -> List[str]:
        """Return every key currently in the store."""
        ...

    def url_for(self, key: str) -> str:
        """Public URL of ``key``; performs no I/O."""
        ...


class LoggerProtocol(Protocol):
    """Protocol for logging operations."""

    def debug(self, message: str, context: Any = None, **kwargs: Any) -> None:
        """Log debug message."""
        ...

    def info(self, message: str, context: Any = None, **kwargs: Any) -> None:
        """Log info message."""
        ...

    def warning(self, message: str, context: Any = None, **kwargs: Any) -> None:
        """Log warning message."""
        ...

    def error(self, message: str, context: Any = None, **kwargs: Any) -> None:
        """Log error message."""
        ...


class OutcomeSinkProtocol(Protocol):
    """Receives every per-variant outcome of an upload, failures included."""

    def record(
        self, outcomes: Sequence["VariantOutcome"], context: "LogContext"
    ) -> None:
        """Observe the outcomes of one request."""
        ...
