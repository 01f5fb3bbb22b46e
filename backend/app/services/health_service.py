"""
Health service.
Reports liveness and the running version.
"""

from datetime import datetime, timezone

from app.core.config import settings
from app.services.base_service import BaseService
from app.schemas.health import HealthResponse


class HealthService(BaseService):
    """Service for health check operations."""

    def __init__(self, project_name: str = None, version: str = None):
        self.project_name = project_name or settings.PROJECT_NAME
        self.version = version or settings.VERSION

    async def get_health(self) -> HealthResponse:
        """
        Get system health status.

        Returns:
            HealthResponse with status, message, timestamp and version
        """
        return HealthResponse(
            status="ok",
            message=f"{self.project_name} is running",
            timestamp=datetime.now(timezone.utc).isoformat(),
            version=self.version,
        )
