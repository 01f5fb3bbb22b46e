"""
API middleware for authentication.
Every request under the API prefix, except health, must carry the configured
shared secret in the X-API-Key header. The check runs before routing, so no
body parsing, validation or controller work happens for rejected requests.
"""

import secrets
from typing import Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response
from starlette.types import ASGIApp

from app.core.config import Settings, settings as default_settings
from app.core.exceptions import UnauthorizedException, unauthorized_exception_handler

API_KEY_HEADER = "X-API-Key"


def get_settings(request: Request) -> Settings:
    """Settings the running app was built with."""
    return getattr(request.app.state, "settings", None) or default_settings


def is_valid_api_key(api_key: Optional[str], expected: Optional[str]) -> bool:
    """Constant-time comparison; an unconfigured key never matches."""
    if not api_key or not expected:
        return False
    return secrets.compare_digest(api_key.encode("utf-8"), expected.encode("utf-8"))


class ApiKeyMiddleware(BaseHTTPMiddleware):
    """Reject protected requests whose X-API-Key does not match settings.API_KEY."""

    def __init__(self, app: ASGIApp, app_settings: Settings):
        super().__init__(app)
        self.settings = app_settings
        prefix = app_settings.API_V1_PREFIX.rstrip("/")
        self.protected_prefix = f"{prefix}/"
        self.public_paths = {
            f"{prefix}/health",
            f"{prefix}/openapi.json",
        }

    def is_protected(self, request: Request) -> bool:
        if request.method == "OPTIONS":
            return False
        path = request.url.path.rstrip("/")
        if path in self.public_paths:
            return False
        return f"{path}/".startswith(self.protected_prefix)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if self.is_protected(request) and not is_valid_api_key(
            request.headers.get(API_KEY_HEADER), self.settings.API_KEY
        ):
            return await unauthorized_exception_handler(request, UnauthorizedException())
        return await call_next(request)
