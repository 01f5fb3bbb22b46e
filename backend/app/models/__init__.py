"""
Database models.
Import all models here to ensure they're registered with Base.
"""

from app.models.location import Location

__all__ = [
    "Location",
]
