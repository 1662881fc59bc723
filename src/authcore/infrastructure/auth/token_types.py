"""Token types and claim models.

Each signed token type has its own claims model. The access token carries
the refresh token it was issued with as a nested claim.
"""

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class TokenType(str, Enum):
    """Signed token types issued by authcore."""

    ACCESS = "access"
    REFRESH = "refresh"
    SESSION = "session"


class TokenClaims(BaseModel):
    """Registered claims shared by every token type."""

    model_config = ConfigDict(extra="ignore")

    type: TokenType = Field(..., description="Token type")
    iat: int = Field(..., description="Unix timestamp when the token was issued")
    exp: int = Field(..., description="Unix timestamp when the token expires")


class RefreshTokenClaims(TokenClaims):
    """Claims of a refresh token."""

    id: str = Field(..., description="User ID")
    jti: str = Field(..., description="Unique token ID")


class AccessTokenClaims(TokenClaims):
    """Claims of an access token."""

    id: str = Field(..., description="User ID")
    email: str = Field(..., description="User's email address")
    username: str | None = Field(None, description="User's username")
    verified: bool = Field(..., description="Whether the user's email is verified")
    refresh_token: str = Field(..., description="Refresh token issued together with this token")


class SessionTokenClaims(TokenClaims):
    """Claims of a session token."""

    id: str = Field(..., description="Session record ID")


@dataclass(frozen=True)
class AuthTokens:
    """Access/refresh token pair issued at login."""

    access_token: str
    refresh_token: str
