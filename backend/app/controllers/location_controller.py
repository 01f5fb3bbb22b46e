"""
Location controller.
Shapes service results into response envelopes and maps unexpected
failures to operation-specific error codes.
"""

from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from starlette.datastructures import URL

from app.controllers.base_controller import BaseController
from app.core.exceptions import (
    AppException,
    E_CREATION_ERROR,
    E_DELETION_ERROR,
    E_RETRIEVAL_ERROR,
    E_UPDATE_ERROR,
    LocationOperationError,
)
from app.core.logging import get_logger
from app.schemas.location import (
    LocationCreate,
    LocationEnvelope,
    LocationFilters,
    LocationListResponse,
    LocationResponse,
    LocationUpdate,
    MessageResponse,
)
from app.services.location_service import LocationService
from app.utils.pagination import build_pagination

logger = get_logger(__name__)


@contextmanager
def translate_errors(message: str, code: str) -> Iterator[None]:
    """Re-raise anything that is not an application error as LocationOperationError."""
    try:
        yield
    except AppException:
        raise
    except Exception as exc:
        logger.exception(message, extra={"code": code})
        raise LocationOperationError(message, code, details=str(exc)) from exc


class LocationController(BaseController):
    """Controller for location operations."""

    def __init__(self, session: AsyncSession, location_service: Optional[LocationService] = None):
        self.location_service = location_service or LocationService(session)

    async def list_locations(
        self,
        filters: LocationFilters,
        page: int = 1,
        per_page: int = 15,
        url: Optional[URL] = None,
    ) -> LocationListResponse:
        """List locations matching the filters, one page at a time."""
        with translate_errors("Error retrieving locations", E_RETRIEVAL_ERROR):
            locations, total = await self.location_service.get_paginated_locations(
                filters.model_dump(exclude_none=True),
                per_page=per_page,
                page=page,
            )
        meta, links = build_pagination(total, page, per_page, len(locations), url)
        return LocationListResponse(
            message="Locations retrieved successfully",
            data=[LocationResponse.model_validate(loc) for loc in locations],
            meta=meta,
            links=links,
        )

    async def get_location(self, location_id: int) -> Optional[LocationEnvelope]:
        """Get location by ID."""
        with translate_errors("Error retrieving location", E_RETRIEVAL_ERROR):
            location = await self.location_service.find_location(location_id)
        if not location:
            return None
        return LocationEnvelope(
            message="Location retrieved successfully",
            data=LocationResponse.model_validate(location),
        )

    async def create_location(self, location_data: LocationCreate) -> LocationEnvelope:
        """Create a new location."""
        with translate_errors("Error creating location", E_CREATION_ERROR):
            location = await self.location_service.create_location(location_data.model_dump())
        return LocationEnvelope(
            message="Location created successfully",
            data=LocationResponse.model_validate(location),
        )

    async def update_location(
        self,
        location_id: int,
        location_data: LocationUpdate,
    ) -> Optional[LocationEnvelope]:
        """Update a location with the fields that were sent."""
        with translate_errors("Error updating location", E_UPDATE_ERROR):
            location = await self.location_service.find_location(location_id)
            if not location:
                return None
            updated = await self.location_service.update_location(
                location,
                location_data.model_dump(exclude_unset=True),
            )
        return LocationEnvelope(
            message="Location updated successfully",
            data=LocationResponse.model_validate(updated),
        )

    async def delete_location(self, location_id: int) -> Optional[MessageResponse]:
        """Delete a location."""
        with translate_errors("Error deleting location", E_DELETION_ERROR):
            location = await self.location_service.find_location(location_id)
            if not location:
                return None
            deleted = await self.location_service.delete_location(location)
        if not deleted:
            return None
        return MessageResponse(message="Location deleted successfully")
