"""
Dependency injection container using dependency-injector.
Wires configuration, services and controllers that live for the whole app.
"""

from typing import Optional

from dependency_injector import containers, providers

from app.core.config import Settings, settings
from app.services.health_service import HealthService
from app.controllers.health_controller import HealthController


class Container(containers.DeclarativeContainer):
    """Dependency injection container."""

    # Configuration
    config = providers.Configuration()

    # Services
    health_service = providers.Singleton(
        HealthService,
        project_name=config.project_name,
        version=config.version,
    )

    # Controllers
    health_controller = providers.Factory(
        HealthController,
        health_service=health_service,
    )


# Global container instance
_container: Optional[Container] = None


def build_container(app_settings: Settings) -> Container:
    """Create a container configured from application settings."""
    container = Container()
    container.config.from_dict({
        "project_name": app_settings.PROJECT_NAME,
        "version": app_settings.VERSION,
    })
    return container


def set_container(container: Container) -> None:
    """Install the container used by request handlers."""
    global _container
    _container = container


def get_container() -> Container:
    """Get the global dependency injection container."""
    global _container
    if _container is None:
        _container = build_container(settings)
    return _container
