"""
Location API endpoints.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.middleware import get_settings
from app.core.config import Settings
from app.db.session import get_db
from app.controllers.location_controller import LocationController
from app.schemas.location import (
    LocationCreate,
    LocationEnvelope,
    LocationFilters,
    LocationListResponse,
    LocationUpdate,
    MessageResponse,
)

router = APIRouter()


def _not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Location not found",
    )


@router.get("", response_model=LocationListResponse)
async def list_locations(
    request: Request,
    name: Optional[str] = Query(None, max_length=255),
    code: Optional[str] = Query(None, max_length=50),
    page: int = Query(1, ge=1),
    per_page: Optional[int] = Query(None, ge=1),
    app_settings: Settings = Depends(get_settings),
    db: AsyncSession = Depends(get_db),
) -> LocationListResponse:
    """List locations with optional name/code filters and pagination."""
    if per_page is None:
        per_page = app_settings.DEFAULT_PER_PAGE
    per_page = min(per_page, app_settings.MAX_PER_PAGE)

    controller = LocationController(db)
    return await controller.list_locations(
        LocationFilters(name=name, code=code),
        page=page,
        per_page=per_page,
        url=request.url,
    )


@router.post("", response_model=LocationEnvelope, status_code=status.HTTP_201_CREATED)
async def create_location(
    location_data: LocationCreate,
    db: AsyncSession = Depends(get_db),
) -> LocationEnvelope:
    """Create a new location."""
    controller = LocationController(db)
    return await controller.create_location(location_data)


@router.get("/{location_id}", response_model=LocationEnvelope)
async def get_location(
    location_id: int,
    db: AsyncSession = Depends(get_db),
) -> LocationEnvelope:
    """Get location by ID."""
    controller = LocationController(db)
    location = await controller.get_location(location_id)
    if not location:
        raise _not_found()
    return location


@router.put("/{location_id}", response_model=LocationEnvelope)
async def update_location(
    location_id: int,
    location_data: LocationUpdate,
    db: AsyncSession = Depends(get_db),
) -> LocationEnvelope:
    """Update a location; only the fields sent are changed."""
    controller = LocationController(db)
    location = await controller.update_location(location_id, location_data)
    if not location:
        raise _not_found()
    return location


@router.delete("/{location_id}", response_model=MessageResponse)
async def delete_location(
    location_id: int,
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    """Delete a location."""
    controller = LocationController(db)
    deleted = await controller.delete_location(location_id)
    if not deleted:
        raise _not_found()
    return deleted
