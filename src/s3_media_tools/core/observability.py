"""Observability setup for s3-media-tools."""

import logging
import sys
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol

import structlog
from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter

from .config import settings


def setup_tracing() -> None:
    """Set up OpenTelemetry tracing."""
    if not settings.otel_enabled:
        return

    resource = Resource.create({"service.name": settings.otel_service_name})
    provider = TracerProvider(resource=resource)

    # Console only; OTLP export is configured by the host if needed
    processor = BatchSpanProcessor(ConsoleSpanExporter())
    provider.add_span_processor(processor)

    trace.set_tracer_provider(provider)


def setup_logging() -> None:
    """Set up structured logging with structlog."""
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.log_level.upper()),
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> Any:
    """Get a logger instance."""
    return structlog.get_logger(name)


def get_tracer(name: str) -> trace.Tracer:
    """Get a tracer instance."""
    return trace.get_tracer(name)


class DiagnosticsSink(Protocol):
    """Receives user-facing diagnostic messages. Fire-and-forget."""

    def record(
        self, message: str, severity: str = "error", context: str = ""
    ) -> None:
        """Record a diagnostic message."""
        ...


@dataclass(frozen=True)
class Diagnostic:
    """One recorded diagnostic message."""

    message: str
    severity: str
    context: str


MAX_DIAGNOSTICS = 1000


@dataclass
class LogDiagnostics:
    """Diagnostics sink that logs through structlog and keeps the records.

    The host reads ``records`` to show messages to the user and calls
    ``clear()`` once they are shown. Only the newest ``MAX_DIAGNOSTICS``
    records are kept.
    """

    records: deque = field(default_factory=lambda: deque(maxlen=MAX_DIAGNOSTICS))

    def record(
        self, message: str, severity: str = "error", context: str = ""
    ) -> None:
        self.records.append(Diagnostic(message, severity, context))
        log = get_logger("s3_media_tools.diagnostics")
        level = severity if severity in ("debug", "info", "warning", "error") else "info"
        getattr(log, level)(message, context=context)

    def messages(self, severity: Optional[str] = None) -> list[str]:
        """Return recorded messages, optionally filtered by severity."""
        return [
            d.message for d in self.records if severity is None or d.severity == severity
        ]

    def clear(self) -> None:
        self.records.clear()


# Initialize on import
setup_logging()
setup_tracing()
