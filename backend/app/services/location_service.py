"""
Location service: sanitizes input and delegates persistence to the repository.
"""

from typing import Any, Dict, List, Mapping, Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ValidationFailedException
from app.core.logging import get_logger
from app.db.repositories.location_repository import (
    DEFAULT_PER_PAGE,
    LocationRepository,
    LocationRepositoryProtocol,
)
from app.models.location import Location
from app.services.base_service import BaseService
from app.utils.sanitize import sanitize_location_data

logger = get_logger(__name__)

REQUIRED_FIELDS = ("code", "name")


class LocationService(BaseService):
    """Service for location operations."""

    def __init__(
        self,
        session: Optional[AsyncSession],
        repository: Optional[LocationRepositoryProtocol] = None,
    ):
        self.session = session
        self.location_repo = repository or LocationRepository(session)

    async def _commit(self, location: Optional[Location] = None) -> None:
        if self.session is None:
            return
        await self.session.commit()
        if location is not None:
            await self.session.refresh(location)

    def _clean(self, data: Mapping[str, Any], creating: bool) -> Dict[str, Any]:
        """Sanitize ``data`` and reject required fields left blank."""
        try:
            sanitized = sanitize_location_data(data)
        except ValueError as exc:
            raise ValidationFailedException({"image": [str(exc)]}) from exc

        errors: Dict[str, List[str]] = {}
        for field in REQUIRED_FIELDS:
            present = field in sanitized
            if (creating and not present) or (present and not sanitized[field]):
                errors[field] = [f"The {field} field is required."]
        if errors:
            raise ValidationFailedException(errors)
        return sanitized

    async def get_paginated_locations(
        self,
        filters: Optional[Mapping[str, Optional[str]]] = None,
        per_page: int = DEFAULT_PER_PAGE,
        page: int = 1,
    ) -> Tuple[List[Location], int]:
        """Get one page of locations with optional filters."""
        return await self.location_repo.get_paginated(filters or {}, per_page, page)

    async def get_all_locations(self) -> List[Location]:
        """Get all locations."""
        return await self.location_repo.get_all()

    async def find_location(self, location_id: int) -> Optional[Location]:
        """Find a location by ID."""
        return await self.location_repo.find_by_id(location_id)

    async def create_location(self, data: Mapping[str, Any]) -> Location:
        """Create a new location from sanitized input."""
        sanitized = self._clean(data, creating=True)
        location = await self.location_repo.create(sanitized)
        await self._commit(location)
        logger.info("Location created", extra={"location_id": location.id, "code": location.code})
        return location

    async def update_location(self, location: Location, data: Mapping[str, Any]) -> Location:
        """Update only the fields present in ``data``."""
        sanitized = self._clean(data, creating=False)
        updated = await self.location_repo.update(location, sanitized)
        await self._commit(updated)
        logger.info(
            "Location updated",
            extra={"location_id": updated.id, "fields": sorted(sanitized)},
        )
        return updated

    async def delete_location(self, location: Location) -> bool:
        """Delete a location."""
        location_id = location.id
        deleted = await self.location_repo.delete(location)
        await self._commit()
        if deleted:
            logger.info("Location deleted", extra={"location_id": location_id})
        return deleted

    async def is_code_unique(self, code: str, exclude_id: Optional[int] = None) -> bool:
        """Check if a location code is unique."""
        return await self.location_repo.is_code_unique(code, exclude_id)
