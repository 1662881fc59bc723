"""Pydantic schemas for authentication endpoints."""

from pydantic import BaseModel, EmailStr, Field, model_validator


class LoginRequest(BaseModel):
    """Request body for login. Either email or username identifies the user."""

    email: str | None = Field(None, description="User's email address")
    username: str | None = Field(None, description="User's username")
    password: str = Field(..., min_length=1, description="User's password")

    @model_validator(mode="after")
    def require_identifier(self) -> "LoginRequest":
        if not self.email and not self.username:
            raise ValueError("email or username is required")
        return self

    @property
    def identifier(self) -> str:
        """The login identifier; email wins when both are given."""
        return self.email or self.username or ""


class LoginResponse(BaseModel):
    """Response for a successful login."""

    user_id: str = Field(..., description="User ID")
    access_token: str = Field(..., description="Signed access token")
    refresh_token: str = Field(..., description="Signed refresh token")
    session_token: str = Field(..., description="Signed session handle, presented at logout")


class SignupRequest(BaseModel):
    """Request body for signup."""

    email: EmailStr = Field(..., max_length=50, description="User's email address")
    password: str = Field(..., min_length=1, description="User's password")


class LogoutRequest(BaseModel):
    """Request body for logout."""

    access_token: str = Field(..., min_length=1, description="Access token of the session")
    session_token: str = Field(..., min_length=1, description="Session token returned at login")


class ForgotPasswordRequest(BaseModel):
    """Request body for forgot-password."""

    email: str = Field(..., min_length=1, description="Email address of the account")


class AcknowledgementResponse(BaseModel):
    """Generic success response."""

    message: str = Field(..., description="Machine-readable result code")
    success: bool = Field(True, description="Whether the operation succeeded")
    error: bool = Field(False, description="Whether an error occurred")


class ErrorResponse(BaseModel):
    """Response body for classified errors."""

    error: str = Field(..., description="Error kind, e.g. INVALID_PASSWORD")
    message: str = Field(..., description="Human-readable error message")
