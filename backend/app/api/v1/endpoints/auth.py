"""
API key verification endpoint.
The router-level dependency has already checked the key when this runs.
"""

from fastapi import APIRouter

from app.schemas.health import AuthResponse

router = APIRouter()


@router.post("", response_model=AuthResponse)
async def authenticate() -> AuthResponse:
    """Confirm the supplied API key is valid."""
    return AuthResponse(
        success=True,
        message="Authentication successful",
        authenticated=True,
    )
