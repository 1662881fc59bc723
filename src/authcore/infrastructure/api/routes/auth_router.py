"""Authentication API routes.

Exposes login, signup, logout and forgot-password. ``AuthError`` raised by
the service is turned into a response by the application's exception
handler.
"""

from fastapi import APIRouter, Depends, status

from authcore.domain.entities import ClientMeta
from authcore.domain.services import AuthService
from authcore.infrastructure.api.dependencies import get_auth_service, get_client_meta
from authcore.infrastructure.api.schemas import (
    AcknowledgementResponse,
    ErrorResponse,
    ForgotPasswordRequest,
    LoginRequest,
    LoginResponse,
    LogoutRequest,
    SignupRequest,
)

router = APIRouter()


@router.post(
    "/login",
    status_code=status.HTTP_200_OK,
    response_model=LoginResponse,
    responses={
        401: {"model": ErrorResponse, "description": "Invalid credentials"},
        403: {"model": ErrorResponse, "description": "Too many failed attempts"},
    },
)
async def login(
    request: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
    client_meta: ClientMeta = Depends(get_client_meta),
) -> LoginResponse:
    """Authenticate by email or username and open a session."""
    result = await auth_service.login(request.identifier, request.password, client_meta)
    return LoginResponse(
        user_id=result.user_id,
        access_token=result.access_token,
        refresh_token=result.refresh_token,
        session_token=result.session_token,
    )


@router.post(
    "/signup",
    status_code=status.HTTP_201_CREATED,
    response_model=AcknowledgementResponse,
    responses={409: {"model": ErrorResponse, "description": "User already exists"}},
)
async def signup(
    request: SignupRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> AcknowledgementResponse:
    """Register a new user."""
    ack = await auth_service.signup(str(request.email), request.password)
    return AcknowledgementResponse(message=ack.message, success=ack.success, error=ack.error)


@router.post(
    "/logout",
    status_code=status.HTTP_200_OK,
    response_model=AcknowledgementResponse,
    responses={403: {"model": ErrorResponse, "description": "Logout refused"}},
)
async def logout(
    request: LogoutRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> AcknowledgementResponse:
    """End the session identified by the access/session token pair."""
    ack = await auth_service.logout(request.access_token, request.session_token)
    return AcknowledgementResponse(message=ack.message, success=ack.success, error=ack.error)


@router.post(
    "/forgot-password",
    status_code=status.HTTP_200_OK,
    response_model=AcknowledgementResponse,
)
async def forgot_password(
    request: ForgotPasswordRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> AcknowledgementResponse:
    """Start a password reset. The response never reveals whether the email exists."""
    ack = await auth_service.forgot_password(request.email)
    return AcknowledgementResponse(message=ack.message, success=ack.success, error=ack.error)
