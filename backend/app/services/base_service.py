"""
Base service class.
Services hold input rules and coordinate repositories.
"""

from abc import ABC


class BaseService(ABC):
    """Base service class for all services."""
    pass
