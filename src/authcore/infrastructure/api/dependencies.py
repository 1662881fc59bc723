"""FastAPI dependencies for the authentication routes."""

from fastapi import Request

from authcore.domain.entities import ClientMeta
from authcore.domain.services import AuthService

LOCATION_HEADER = "X-Client-Location"


def get_auth_service(request: Request) -> AuthService:
    """Return the AuthService built at application startup."""
    return request.app.state.auth_service


def get_client_meta(request: Request) -> ClientMeta:
    """Describe the calling client from the request."""
    return ClientMeta(
        ip_address=request.client.host if request.client else "0.0.0.0",
        user_agent=request.headers.get("user-agent", ""),
        location=request.headers.get(LOCATION_HEADER, ""),
    )
