"""
Location repository for database operations.
"""

from typing import Any, Dict, List, Mapping, Optional, Protocol, Tuple
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import DuplicateCodeException
from app.core.logging import get_logger
from app.db.repositories.base_repository import BaseRepository
from app.models.location import Location, utcnow

logger = get_logger(__name__)

DEFAULT_PER_PAGE = 15


class LocationRepositoryProtocol(Protocol):
    """Data-access surface the location service depends on."""

    async def get_all(self) -> List[Location]: ...

    async def get_paginated(
        self,
        filters: Optional[Mapping[str, Optional[str]]] = None,
        per_page: int = DEFAULT_PER_PAGE,
        page: int = 1,
    ) -> Tuple[List[Location], int]: ...

    async def find_by_id(self, id: int) -> Optional[Location]: ...

    async def create(self, data: Dict[str, Any]) -> Location: ...

    async def update(self, location: Location, data: Dict[str, Any]) -> Location: ...

    async def delete(self, location: Location) -> bool: ...

    async def is_code_unique(self, code: str, exclude_id: Optional[int] = None) -> bool: ...


class LocationRepository(BaseRepository[Location]):
    """Repository for location operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(Location, session)

    @staticmethod
    def _newest_first():
        return (Location.created_at.desc(), Location.id.desc())

    async def get_all(self) -> List[Location]:
        """All locations, newest first."""
        return await self.list_all(*self._newest_first())

    def _filtered(self, query, filters: Mapping[str, Optional[str]]):
        name = filters.get("name")
        if name:
            query = query.where(Location.name.icontains(name, autoescape=True))
        code = filters.get("code")
        if code:
            query = query.where(Location.code.icontains(code, autoescape=True))
        return query

    async def get_paginated(
        self,
        filters: Optional[Mapping[str, Optional[str]]] = None,
        per_page: int = DEFAULT_PER_PAGE,
        page: int = 1,
    ) -> Tuple[List[Location], int]:
        """
        One page of locations matching the filters, newest first.

        Args:
            filters: Optional ``name``/``code`` case-insensitive substrings, AND-ed
            per_page: Page size
            page: 1-indexed page number

        Returns:
            Tuple of (locations on the page, total matching locations)
        """
        filters = filters or {}
        count_query = self._filtered(select(func.count(Location.id)), filters)
        total = (await self.session.execute(count_query)).scalar() or 0

        offset = (page - 1) * per_page
        # Past the end; also keeps oversized offsets away from the driver
        if offset >= total:
            return [], total

        query = (
            self._filtered(select(Location), filters)
            .order_by(*self._newest_first())
            .offset(offset)
            .limit(per_page)
        )
        result = await self.session.execute(query)
        return list(result.scalars().all()), total

    async def find_by_id(self, id: int) -> Optional[Location]:
        """Get location by ID."""
        return await self.get(id)

    async def get_by_code(self, code: str) -> Optional[Location]:
        """Get location by code."""
        result = await self.session.execute(
            select(Location).where(Location.code == code)
        )
        return result.scalar_one_or_none()

    async def is_code_unique(self, code: str, exclude_id: Optional[int] = None) -> bool:
        """Whether no location other than ``exclude_id`` uses ``code``."""
        query = select(Location.id).where(Location.code == code)
        if exclude_id is not None:
            query = query.where(Location.id != exclude_id)
        result = await self.session.execute(query.limit(1))
        return result.first() is None

    async def create(self, data: Dict[str, Any]) -> Location:
        """
        Create a location.

        Raises:
            DuplicateCodeException: If another location already uses the code
        """
        code = data.get("code")
        if code is not None and not await self.is_code_unique(code):
            raise DuplicateCodeException(code)
        try:
            return await super().create(data)
        except IntegrityError as exc:
            # Lost a race with a concurrent insert; the unique index is authoritative
            await self.session.rollback()
            logger.warning("Unique constraint rejected location code", extra={"code": code})
            raise DuplicateCodeException(code) from exc

    async def update(self, location: Location, data: Dict[str, Any]) -> Location:
        """
        Apply the fields present in ``data`` to a location.

        Raises:
            DuplicateCodeException: If the new code belongs to a different location
        """
        code = data.get("code")
        if code is not None and code != location.code and not await self.is_code_unique(code, location.id):
            raise DuplicateCodeException(code)
        if data:
            data = {**data, "updated_at": utcnow()}
        try:
            return await super().update(location, data)
        except IntegrityError as exc:
            await self.session.rollback()
            logger.warning("Unique constraint rejected location code", extra={"code": code})
            raise DuplicateCodeException(code) from exc
