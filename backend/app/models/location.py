"""
Location model: a named, coded place with an optional image URL.
"""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String

from app.db.base import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Location(Base):
    """Location record; code is unique across the table."""

    __tablename__ = "locations"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    code = Column(String(50), nullable=False, unique=True, index=True)  # e.g., "EIFFEL"
    name = Column(String(255), nullable=False)
    image = Column(String(500), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    def __repr__(self) -> str:
        return f"<Location id={self.id} code={self.code!r}>"
