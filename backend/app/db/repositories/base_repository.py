"""
Base repository class with common CRUD operations.
Repositories handle database access using async SQLAlchemy sessions.
"""

from typing import Any, Dict, Generic, TypeVar, Type, Optional, List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import func, select

from app.db.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Base repository with common CRUD operations."""

    def __init__(self, model: Type[ModelType], session: AsyncSession):
        """
        Initialize repository.

        Args:
            model: SQLAlchemy model class
            session: Async database session
        """
        self.model = model
        self.session = session

    async def create(self, data: Dict[str, Any]) -> ModelType:
        """
        Create a new record.

        Args:
            data: Model attributes

        Returns:
            Created model instance
        """
        instance = self.model(**data)
        self.session.add(instance)
        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def get(self, id: int) -> Optional[ModelType]:
        """
        Get a record by ID.

        Args:
            id: Record ID

        Returns:
            Model instance or None
        """
        return await self.session.get(self.model, id)

    async def count(self) -> int:
        """Count all records."""
        result = await self.session.execute(
            select(func.count()).select_from(self.model)
        )
        return result.scalar() or 0

    async def update(self, instance: ModelType, data: Dict[str, Any]) -> ModelType:
        """
        Apply attribute changes to a record.

        Args:
            instance: Persistent model instance
            data: Attributes to update

        Returns:
            Updated model instance
        """
        for key, value in data.items():
            setattr(instance, key, value)
        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def delete(self, instance: ModelType) -> bool:
        """
        Delete a record.

        Args:
            instance: Persistent model instance

        Returns:
            True if deleted, False if it no longer exists
        """
        current = await self.get(instance.id)
        if current is None:
            return False
        await self.session.delete(current)
        await self.session.flush()
        return True

    async def list_all(self, *order_by: Any) -> List[ModelType]:
        """List every record in the given order."""
        result = await self.session.execute(select(self.model).order_by(*order_by))
        return list(result.scalars().all())
