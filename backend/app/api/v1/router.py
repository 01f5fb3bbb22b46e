"""
API v1 router that aggregates all endpoint routers.
All routes except health require the API key, enforced by ApiKeyMiddleware.
"""

from fastapi import APIRouter

from app.api.v1.endpoints import (
    health,
    auth,
    locations,
)

api_router = APIRouter()

# Public routes (no API key required)
api_router.include_router(health.router, tags=["health"])

# Protected routes
api_router.include_router(auth.router, prefix="/auth", tags=["authentication"])
api_router.include_router(locations.router, prefix="/locations", tags=["locations"])
