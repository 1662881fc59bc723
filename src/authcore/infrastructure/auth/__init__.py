"""Authentication infrastructure components.

This module provides password hashing and the signed token service.
"""

from authcore.infrastructure.auth.jwt_service import TokenIssuer
from authcore.infrastructure.auth.password_hasher import (
    CredentialVerifier,
    PasswordHashConfig,
)
from authcore.infrastructure.auth.token_types import (
    AccessTokenClaims,
    AuthTokens,
    RefreshTokenClaims,
    SessionTokenClaims,
    TokenType,
)

__all__ = [
    "AccessTokenClaims",
    "AuthTokens",
    "CredentialVerifier",
    "PasswordHashConfig",
    "RefreshTokenClaims",
    "SessionTokenClaims",
    "TokenIssuer",
    "TokenType",
]
