"""API request and response schemas."""

from authcore.infrastructure.api.schemas.auth_schemas import (
    AcknowledgementResponse,
    ErrorResponse,
    ForgotPasswordRequest,
    LoginRequest,
    LoginResponse,
    LogoutRequest,
    SignupRequest,
)

__all__ = [
    "AcknowledgementResponse",
    "ErrorResponse",
    "ForgotPasswordRequest",
    "LoginRequest",
    "LoginResponse",
    "LogoutRequest",
    "SignupRequest",
]
