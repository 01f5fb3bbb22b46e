"""
FastAPI application entry point.
Assembles the app with routers, middleware, lifespan handlers, and exception handlers.
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from app.api.v1.middleware import ApiKeyMiddleware
from app.api.v1.router import api_router
from app.core.config import Settings, settings as default_settings
from app.core.exceptions import setup_exception_handlers
from app.core.integrations.observability import setup_observability
from app.core.logging import get_logger, setup_logging
from app.db import session as db_session
from app.db.init_db import create_tables, seed_initial_data
from app.deps.di_container import build_container, set_container

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.
    Initializes logging, the database and the DI container.
    """
    app_settings: Settings = app.state.settings

    # Startup
    setup_logging(app_settings.LOG_LEVEL)
    setup_observability()

    db_session.create_engine(app_settings.DATABASE_URL)
    await db_session.init_db()
    if app_settings.AUTO_CREATE_TABLES:
        await create_tables(db_session.engine)
    if app_settings.SEED_ON_STARTUP:
        async with db_session.async_session_maker() as session:
            await seed_initial_data(session)

    yield

    # Shutdown
    await db_session.close_db()


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    app_settings = app_settings or default_settings

    app = FastAPI(
        title=app_settings.PROJECT_NAME,
        version=app_settings.VERSION,
        description="Location records API",
        openapi_url=f"{app_settings.API_V1_PREFIX}/openapi.json",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = app_settings

    container = build_container(app_settings)
    app.state.container = container
    set_container(container)

    # API key middleware (innermost, so CORS and rate limiting wrap it)
    app.add_middleware(ApiKeyMiddleware, app_settings=app_settings)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Rate limiting middleware
    limiter = Limiter(
        key_func=get_remote_address,
        default_limits=[f"{app_settings.RATE_LIMIT_PER_MINUTE}/minute"],
        enabled=app_settings.RATE_LIMIT_ENABLED,
    )
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    # Include API router
    app.include_router(api_router, prefix=app_settings.API_V1_PREFIX)

    # Add root-level health endpoint for convenience
    from app.api.v1.endpoints.health import get_health

    @app.get("/health", response_model=None, include_in_schema=False)
    async def root_health():
        """Root-level health check endpoint."""
        return await get_health()

    setup_exception_handlers(app)

    return app


app = create_app()
