"""
Database initialization and bootstrapping.
Creates tables and seeds the landmark locations into an empty database.
"""

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from app.db.base import Base
from app.core.logging import get_logger
from app.db.repositories.location_repository import LocationRepository
import app.models  # noqa: F401 - register models with Base

logger = get_logger(__name__)

SEED_LOCATIONS = [
    {"code": "EIFFEL", "name": "Torre Eiffel", "image": "https://example.com/images/eiffel-tower.jpg"},
    {"code": "SAGRADA", "name": "Sagrada Familia", "image": "https://example.com/images/sagrada-familia.jpg"},
    {"code": "COLISEO", "name": "Coliseo Romano", "image": "https://example.com/images/colosseum.jpg"},
    {"code": "BIGBEN", "name": "Big Ben", "image": "https://example.com/images/big-ben.jpg"},
    {"code": "LIBERTY", "name": "Estatua de la Libertad", "image": "https://example.com/images/statue-of-liberty.jpg"},
    {"code": "MACHU", "name": "Machu Picchu", "image": "https://example.com/images/machu-picchu.jpg"},
    {"code": "TAJMAHAL", "name": "Taj Mahal", "image": "https://example.com/images/taj-mahal.jpg"},
    {"code": "CRISTO", "name": "Cristo Redentor", "image": "https://example.com/images/cristo-redentor.jpg"},
    {"code": "PETRA", "name": "Petra", "image": "https://example.com/images/petra.jpg"},
    {"code": "CHICHEN", "name": "Chichen Itzá", "image": "https://example.com/images/chichen-itza.jpg"},
]


async def create_tables(engine: AsyncEngine) -> None:
    """Create all database tables that do not exist yet."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    logger.info("Database tables initialized")


async def seed_initial_data(session: AsyncSession) -> int:
    """
    Seed the landmark locations when the table is empty.

    Returns:
        Number of locations inserted
    """
    repo = LocationRepository(session)
    if await repo.count() > 0:
        logger.info("Initial data seeding skipped; locations already present")
        return 0

    for data in SEED_LOCATIONS:
        await repo.create(dict(data))
    await session.commit()

    logger.info("Initial data seeded", extra={"locations": len(SEED_LOCATIONS)})
    return len(SEED_LOCATIONS)
