"""
Observability hooks.
Exceptions are reported through the application logger; an OpenTelemetry
or Sentry exporter can be attached here without touching the handlers.
"""

from fastapi import Request
import logging

from app.core.config import settings

logger = logging.getLogger(__name__)


def setup_observability() -> None:
    """Initialize the observability stack for this service."""
    logger.info(
        "Setting up observability",
        extra={
            "service_name": settings.OTEL_SERVICE_NAME,
            "environment": settings.OTEL_ENVIRONMENT,
        },
    )


def record_exception(exc: Exception, request: Request) -> None:
    """
    Record an exception in the observability backend.

    Args:
        exc: The exception that occurred
        request: The FastAPI request object
    """
    logger.error(
        f"Exception recorded: {type(exc).__name__}",
        extra={
            "exception_message": str(exc),
            "path": request.url.path,
            "method": request.method,
        },
    )
