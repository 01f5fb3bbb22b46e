"""
Base controller class.
Controllers call services and return Pydantic schemas.
"""

from abc import ABC


class BaseController(ABC):
    """Base controller class for all controllers."""
    pass
