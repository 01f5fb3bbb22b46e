"""
Generic async HTTP client wrapper using httpx.
Classifies failures into network, auth, not-found, validation and server errors.
"""

from typing import Any, Dict, List, Optional

import httpx
import logging

logger = logging.getLogger(__name__)


class ApiClientError(Exception):
    """Base class for errors raised by the HTTP client."""
    def __init__(self, message: str, status_code: Optional[int] = None, payload: Any = None):
        self.message = message
        self.status_code = status_code
        self.payload = payload
        super().__init__(message)


class ApiNetworkError(ApiClientError):
    """No response was received (connection failure, timeout)."""


class ApiAuthError(ApiClientError):
    """The server rejected the API key."""


class ApiNotFoundError(ApiClientError):
    """The requested resource does not exist."""


class ApiValidationError(ApiClientError):
    """The server rejected the request payload."""
    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, List[str]]] = None,
        status_code: int = 422,
        payload: Any = None,
    ):
        self.code = code
        self.details = details or {}
        super().__init__(message, status_code=status_code, payload=payload)


class ApiServerError(ApiClientError):
    """The server failed or answered with an unexpected status."""


def _json_or_none(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


def _error_message(payload: Any, default: str) -> str:
    if isinstance(payload, dict):
        error = payload.get("error")
        if isinstance(error, dict) and error.get("message"):
            return error["message"]
        if payload.get("message"):
            return payload["message"]
    return default


def raise_for_response(response: httpx.Response) -> None:
    """Raise the classified client error for a non-2xx response."""
    if response.is_success:
        return

    payload = _json_or_none(response)
    status_code = response.status_code
    message = _error_message(payload, f"HTTP {status_code}")

    if status_code == 401:
        raise ApiAuthError(message, status_code=status_code, payload=payload)
    if status_code == 404:
        raise ApiNotFoundError(message, status_code=status_code, payload=payload)
    if status_code in (400, 422):
        error = payload.get("error") if isinstance(payload, dict) else None
        error = error if isinstance(error, dict) else {}
        raise ApiValidationError(
            message,
            code=error.get("code"),
            details=error.get("details"),
            status_code=status_code,
            payload=payload,
        )
    raise ApiServerError(message, status_code=status_code, payload=payload)


class HttpClient:
    """
    Async HTTP client wrapper using httpx.
    Each call is a single attempt; failures surface as ApiClientError subclasses.
    """

    def __init__(
        self,
        base_url: str,
        headers: Optional[Dict[str, str]] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize HTTP client.

        Args:
            base_url: Base URL for all requests
            headers: Default headers sent with every request
            timeout: Request timeout in seconds
            transport: Optional transport (e.g. httpx.ASGITransport in tests)
        """
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    async def close(self) -> None:
        """Close the underlying connection pool."""
        await self._client.aclose()

    async def __aenter__(self) -> "HttpClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    def _build_url(self, endpoint: str) -> str:
        """Build full URL from endpoint."""
        return f"{self.base_url}/{endpoint.lstrip('/')}"

    async def request(self, method: str, endpoint: str, **kwargs: Any) -> Any:
        """
        Make an HTTP request and return the decoded JSON body.

        Raises:
            ApiNetworkError: If no response was received
            ApiClientError: Subclass matching the error status
        """
        url = self._build_url(endpoint)
        logger.debug(f"{method} {url}")
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.TransportError as e:
            logger.error(f"Network error calling {method} {url}: {e}")
            raise ApiNetworkError(f"Network error: {e}") from e

        if not response.is_success:
            logger.warning(f"{method} {url} failed with HTTP {response.status_code}")
        raise_for_response(response)
        return _json_or_none(response)

    async def get(
        self,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Make GET request."""
        return await self.request("GET", endpoint, params=params)

    async def post(
        self,
        endpoint: str,
        json: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Make POST request."""
        return await self.request("POST", endpoint, json=json)

    async def put(
        self,
        endpoint: str,
        json: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Make PUT request."""
        return await self.request("PUT", endpoint, json=json)

    async def delete(self, endpoint: str) -> Any:
        """Make DELETE request."""
        return await self.request("DELETE", endpoint)
