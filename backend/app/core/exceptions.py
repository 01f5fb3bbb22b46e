"""
Application exceptions and global exception handlers for the FastAPI application.
Every error response is logged and reported to the observability hook.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging
from typing import Any, Dict, List, Optional

from app.core.config import settings as default_settings
from app.core.integrations.observability import record_exception


logger = logging.getLogger(__name__)

E_INVALID_PARAM = "E_INVALID_PARAM"
E_DUPLICATE_CODE = "E_DUPLICATE_CODE"
E_RETRIEVAL_ERROR = "E_RETRIEVAL_ERROR"
E_CREATION_ERROR = "E_CREATION_ERROR"
E_UPDATE_ERROR = "E_UPDATE_ERROR"
E_DELETION_ERROR = "E_DELETION_ERROR"


class AppException(Exception):
    """Base application exception."""
    def __init__(
        self,
        message: str,
        status_code: int = 500,
        code: Optional[str] = None,
        details: Any = None,
    ):
        self.message = message
        self.status_code = status_code
        self.code = code
        self.details = details
        super().__init__(self.message)


class ValidationFailedException(AppException):
    """Input failed validation; details map field names to messages."""
    def __init__(self, errors: Dict[str, List[str]], code: str = E_INVALID_PARAM):
        super().__init__(
            "Validation failed",
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            code=code,
            details=errors,
        )

    @property
    def errors(self) -> Dict[str, List[str]]:
        return self.details


class DuplicateCodeException(ValidationFailedException):
    """A location with the same code already exists."""
    def __init__(self, code_value: Optional[str] = None):
        self.code_value = code_value
        super().__init__(
            {"code": ["The code has already been taken."]},
            code=E_DUPLICATE_CODE,
        )


class LocationOperationError(AppException):
    """Unexpected failure while reading or writing locations."""
    def __init__(self, message: str, code: str, details: Optional[str] = None):
        super().__init__(
            message,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            code=code,
            details=details,
        )


class UnauthorizedException(AppException):
    """Missing or mismatched API key."""
    def __init__(self, message: str = "Invalid or missing API key"):
        super().__init__(message, status_code=status.HTTP_401_UNAUTHORIZED)


def _debug_enabled(request: Request) -> bool:
    app_settings = getattr(request.app.state, "settings", None) or default_settings
    return bool(app_settings.DEBUG)


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Handle custom application exceptions."""
    if exc.status_code >= 500:
        logger.error(
            f"Application exception: {exc.message}",
            extra={
                "status_code": exc.status_code,
                "path": request.url.path,
                "code": exc.code,
                "details": exc.details,
            },
        )
        record_exception(exc, request)
    else:
        logger.warning(
            f"Application exception: {exc.message}",
            extra={
                "status_code": exc.status_code,
                "path": request.url.path,
                "code": exc.code,
            },
        )

    error: Dict[str, Any] = {"message": exc.message, "code": exc.code}
    if isinstance(exc, ValidationFailedException):
        error["details"] = exc.details
    elif exc.details and _debug_enabled(request):
        error["details"] = exc.details

    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": error},
    )


async def unauthorized_exception_handler(request: Request, exc: UnauthorizedException) -> JSONResponse:
    """Handle API key failures."""
    logger.warning(
        "Rejected request with invalid API key",
        extra={
            "path": request.url.path,
            "method": request.method,
        },
    )

    return JSONResponse(
        status_code=exc.status_code,
        content={"error": "Unauthorized", "message": exc.message},
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handle HTTP exceptions."""
    logger.warning(
        f"HTTP exception: {exc.detail}",
        extra={
            "status_code": exc.status_code,
            "path": request.url.path,
        },
    )

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "message": exc.detail,
            "error": {
                "message": exc.detail,
                "status_code": exc.status_code,
                "path": request.url.path,
            },
        },
        headers=getattr(exc, "headers", None),
    )


def _field_name(error: Dict[str, Any]) -> str:
    """Reduce a pydantic error location to the offending field name."""
    # A malformed JSON document is located by byte offset, not by field
    if error.get("type") == "json_invalid":
        return "body"
    loc = tuple(error.get("loc", ()))
    parts = [str(part) for part in loc if part not in ("body", "query", "path", "header")]
    return ".".join(parts) if parts else str(loc[0]) if loc else "request"


def _serialize_validation_errors(errors: list) -> Dict[str, List[str]]:
    """Group validation errors by field name."""
    serialized: Dict[str, List[str]] = {}
    for error in errors:
        field = _field_name(error)
        message = error.get("msg")
        if isinstance(message, Exception):
            message = str(message)
        serialized.setdefault(field, []).append(message)
    return serialized


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle request validation errors."""
    serialized_errors = _serialize_validation_errors(exc.errors())

    logger.warning(
        f"Validation error: {serialized_errors}",
        extra={
            "path": request.url.path,
            "errors": serialized_errors,
        },
    )

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "success": False,
            "error": {
                "message": "Validation failed",
                "code": E_INVALID_PARAM,
                "details": serialized_errors,
            },
        },
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.exception(
        f"Unhandled exception: {str(exc)}",
        extra={
            "path": request.url.path,
            "exception_type": type(exc).__name__,
        },
    )

    record_exception(exc, request)

    error: Dict[str, Any] = {"message": "Internal server error"}
    if _debug_enabled(request):
        error["details"] = str(exc)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "error": error},
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI app."""
    app.add_exception_handler(UnauthorizedException, unauthorized_exception_handler)
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
