"""
Health and authentication check response schemas.
"""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Health check response schema."""
    status: str
    message: str
    timestamp: str
    version: str


class AuthResponse(BaseModel):
    """API key verification response."""
    success: bool
    message: str
    authenticated: bool
