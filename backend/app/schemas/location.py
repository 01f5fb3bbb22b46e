"""
Location Pydantic schemas for request/response validation.
"""

from datetime import datetime
from pydantic import BaseModel, Field, ValidationInfo, field_validator
from typing import Optional, List

from app.utils.sanitize import normalize_image_url


class LocationBase(BaseModel):
    """Base location schema with common fields."""
    code: str = Field(..., min_length=1, max_length=50)
    name: str = Field(..., min_length=1, max_length=255)
    image: Optional[str] = Field(None, max_length=500)


class LocationCreate(LocationBase):
    """Schema for creating a location."""

    @field_validator("image")
    @classmethod
    def validate_image(cls, value: Optional[str]) -> Optional[str]:
        return normalize_image_url(value)


class LocationUpdate(BaseModel):
    """Schema for updating a location (all fields optional)."""
    code: Optional[str] = Field(None, min_length=1, max_length=50)
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    image: Optional[str] = Field(None, max_length=500)

    @field_validator("code", "name")
    @classmethod
    def reject_null(cls, value: Optional[str], info: ValidationInfo) -> str:
        # Omitting a field keeps it; sending null would blank a required column
        if value is None:
            raise ValueError(f"The {info.field_name} field may not be null.")
        return value

    @field_validator("image")
    @classmethod
    def validate_image(cls, value: Optional[str]) -> Optional[str]:
        return normalize_image_url(value)


class LocationResponse(LocationBase):
    """Schema for a serialized location."""
    id: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class LocationFilters(BaseModel):
    """Optional substring filters for location listings."""
    name: Optional[str] = None
    code: Optional[str] = None


class PaginationMeta(BaseModel):
    """Page metadata for a windowed result set."""
    current_page: int
    per_page: int
    total: int
    total_pages: int
    count: int


class PaginationLinks(BaseModel):
    """Navigation links for a paginated listing."""
    first: Optional[str] = None
    last: Optional[str] = None
    prev: Optional[str] = None
    next: Optional[str] = None


class LocationEnvelope(BaseModel):
    """Single location wrapped with a success flag and message."""
    success: bool = True
    message: str
    data: LocationResponse


class LocationListResponse(BaseModel):
    """Paginated location listing."""
    success: bool = True
    message: str
    data: List[LocationResponse]
    meta: PaginationMeta
    links: PaginationLinks


class MessageResponse(BaseModel):
    """Plain success/message acknowledgement."""
    success: bool = True
    message: str
