"""Request-scoped logging and variant outcome reporting."""

import logging
import uuid
from typing import Any, Dict, Optional, Sequence, TYPE_CHECKING
from dataclasses import dataclass, field, replace

from .logging_config import get_logger
from .protocols import LoggerProtocol

if TYPE_CHECKING:
    from .services import VariantOutcome


@dataclass(frozen=True)
class LogContext:
    """Correlation id and key=value metadata carried through one upload."""

    correlation_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    operation: str = ""
    component: str = ""
    metadata: Dict[str, Any] = field(default_factory=dict)

    def with_operation(self, operation: str) -> "LogContext":
        return replace(self, operation=operation, metadata=dict(self.metadata))

    def with_metadata(self, **kwargs: Any) -> "LogContext":
        return replace(self, metadata={**self.metadata, **kwargs})


class StructuredLogger:
    """
    Adapter from ``LoggerProtocol`` calls to a stdlib logger.

    Messages are rendered as ``[operation] [correlation_id] message (k=v, ...)``
    with the context metadata first and call-site keywords after it.
    """

    def __init__(self, name: str, level: Optional[int] = None):
        self._logger = get_logger(name)
        if level is not None:
            self._logger.setLevel(level)

    @property
    def name(self) -> str:
        return self._logger.name

    def _format(self, message: str, context: Optional[LogContext], **kwargs: Any) -> str:
        fields = {**context.metadata, **kwargs} if context else kwargs
        if context:
            message = f"[{context.correlation_id}] {message}"
            if context.operation:
                message = f"[{context.operation}] {message}"
        if fields:
            message += " (" + ", ".join(f"{k}={v}" for k, v in fields.items()) + ")"
        return message

    def _log(self, level: int, message: str, context: Optional[LogContext], **kwargs: Any) -> None:
        if self._logger.isEnabledFor(level):
            self._logger.log(level, self._format(message, context, **kwargs), stacklevel=3)

    def debug(self, message: str, context: Optional[LogContext] = None, **kwargs: Any) -> None:
        self._log(logging.DEBUG, message, context, **kwargs)

    def info(self, message: str, context: Optional[LogContext] = None, **kwargs: Any) -> None:
        self._log(logging.INFO, message, context, **kwargs)

    def warning(self, message: str, context: Optional[LogContext] = None, **kwargs: Any) -> None:
        self._log(logging.WARNING, message, context, **kwargs)

    def error(self, message: str, context: Optional[LogContext] = None, **kwargs: Any) -> None:
        self._log(logging.ERROR, message, context, **kwargs)


class LoggingOutcomeSink:
    """
    Default outcome sink: writes variant failures to the server-side log.

    Callers only ever see the surviving variants; this sink is where the
    reason a variant went missing ends up.
    """

    def __init__(self, logger: LoggerProtocol):
        self._logger = logger

    def record(self, outcomes: Sequence["VariantOutcome"], context: LogContext) -> None:
        failed = 0
        for outcome in outcomes:
            outcome_context = context.with_metadata(
                spec=outcome.spec.label(), key=outcome.key
            )
            if outcome.success:
                self._logger.debug("Variant stored", outcome_context)
            else:
                failed += 1
                self._logger.error(
                    f"Variant {outcome.stage} failed: {outcome.error}",
                    outcome_context,
                    error_type=type(outcome.error).__name__,
                )

        if failed:
            self._logger.warning(
                f"{failed} of {len(outcomes)} variant(s) dropped", context
            )
