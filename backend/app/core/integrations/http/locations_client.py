"""
Typed client for the Locations API.

Used by front-end and integration code; it marshals requests and responses
and leaves all state (filters, current page, record being edited) to the caller.
"""

import re
from typing import Any, Dict, List, Optional, Tuple

import httpx
from pydantic import BaseModel, Field, ValidationError, field_validator

from app.api.v1.middleware import API_KEY_HEADER
from app.core.integrations.http.http_client import ApiClientError, HttpClient
from app.schemas.health import AuthResponse, HealthResponse
from app.schemas.location import (
    LocationEnvelope,
    LocationListResponse,
    LocationResponse,
    MessageResponse,
)

IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".gif", ".webp", ".svg")
_FORM_CODE_RE = re.compile(r"^[A-Z0-9_-]+$")


class LocationFilters(BaseModel):
    """List query state: substring filters plus the page window."""
    name: Optional[str] = None
    code: Optional[str] = None
    page: Optional[int] = Field(None, ge=1)
    per_page: Optional[int] = Field(None, ge=1)

    def to_params(self) -> Dict[str, Any]:
        """Query parameters, skipping unset and blank values."""
        return {key: value for key, value in self.model_dump().items() if value not in (None, "")}


class LocationFormData(BaseModel):
    """Location form as entered by a user, with the form's stricter rules."""
    code: str = Field(..., min_length=2, max_length=10)
    name: str = Field(..., min_length=2, max_length=100)
    image: str = Field(..., min_length=1)

    @field_validator("name", mode="before")
    @classmethod
    def trim_name(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    @field_validator("code")
    @classmethod
    def validate_code(cls, value: str) -> str:
        if not _FORM_CODE_RE.match(value):
            raise ValueError(
                "The code may only contain uppercase letters, numbers, hyphens and underscores."
            )
        return value

    @field_validator("image")
    @classmethod
    def validate_image(cls, value: str) -> str:
        try:
            url = httpx.URL(value)
        except httpx.InvalidURL as exc:
            raise ValueError("The image must be a valid URL.") from exc
        if url.scheme not in ("http", "https") or not url.host:
            raise ValueError("The image must be a valid URL.")
        if not any(ext in value.lower() for ext in IMAGE_EXTENSIONS):
            raise ValueError(
                "The image URL must point to an image (jpg, jpeg, png, gif, webp, svg)."
            )
        return value


def validate_location_form(data: Dict[str, Any]) -> Tuple[Optional[LocationFormData], Dict[str, List[str]]]:
    """
    Validate form input before it is sent.

    Returns:
        (form, {}) when valid, otherwise (None, field errors)
    """
    try:
        return LocationFormData.model_validate(data), {}
    except ValidationError as exc:
        errors: Dict[str, List[str]] = {}
        for error in exc.errors():
            field = ".".join(str(part) for part in error["loc"]) or "form"
            errors.setdefault(field, []).append(error["msg"])
        return None, errors


class LocationsClient:
    """Async client for the /locations, /auth and /health endpoints."""

    endpoint = "/locations"

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.http = HttpClient(
            base_url,
            headers={API_KEY_HEADER: api_key, "Accept": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    async def close(self) -> None:
        await self.http.close()

    async def __aenter__(self) -> "LocationsClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def health_check(self) -> HealthResponse:
        """Fetch service health."""
        return HealthResponse.model_validate(await self.http.get("/health"))

    async def test_auth(self) -> bool:
        """Whether the configured API key is accepted."""
        try:
            payload = await self.http.post("/auth")
        except ApiClientError:
            return False
        return AuthResponse.model_validate(payload).authenticated

    async def get_locations(self, filters: Optional[LocationFilters] = None) -> LocationListResponse:
        """Get one page of locations."""
        params = (filters or LocationFilters()).to_params()
        return LocationListResponse.model_validate(await self.http.get(self.endpoint, params=params))

    async def get_all(self) -> List[LocationResponse]:
        """Get every location by walking all pages."""
        locations: List[LocationResponse] = []
        page = 1
        while True:
            result = await self.get_locations(LocationFilters(page=page))
            locations.extend(result.data)
            if page >= result.meta.total_pages:
                return locations
            page += 1

    async def get_location(self, location_id: int) -> LocationResponse:
        """Get a single location."""
        payload = await self.http.get(f"{self.endpoint}/{location_id}")
        return LocationEnvelope.model_validate(payload).data

    async def create_location(self, data: Dict[str, Any]) -> LocationResponse:
        """Create a location."""
        payload = await self.http.post(self.endpoint, json=data)
        return LocationEnvelope.model_validate(payload).data

    async def update_location(self, location_id: int, data: Dict[str, Any]) -> LocationResponse:
        """Update the given fields of a location."""
        payload = await self.http.put(f"{self.endpoint}/{location_id}", json=data)
        return LocationEnvelope.model_validate(payload).data

    async def delete_location(self, location_id: int) -> MessageResponse:
        """Delete a location."""
        return MessageResponse.model_validate(await self.http.delete(f"{self.endpoint}/{location_id}"))
