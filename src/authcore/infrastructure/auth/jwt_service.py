"""JWT token service.

Mints and validates the three signed token types used by authcore:

* refresh token - user id, signed with the refresh secret (30 days)
* access token - user profile claims plus the embedded refresh token,
  signed with the access secret (15 minutes)
* session token - session record id, signed with the session secret (30 days)

Each type is signed with its own secret so that a leaked secret of one type
cannot forge another.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Protocol, TypeVar

import jwt
from pydantic import ValidationError

from authcore.core.config import Settings, get_settings
from authcore.core.logging import get_logger
from authcore.domain.exceptions import AuthError, AuthErrorKind, ErrorCategory
from authcore.infrastructure.auth.token_types import (
    AccessTokenClaims,
    AuthTokens,
    RefreshTokenClaims,
    SessionTokenClaims,
    TokenClaims,
    TokenType,
)

logger = get_logger(__name__)

ClaimsT = TypeVar("ClaimsT", bound=TokenClaims)


class TokenSubject(Protocol):
    """The user fields carried by an access token."""

    id: str
    email: str
    username: str | None
    verified: bool


def token_invalid() -> AuthError:
    return AuthError(AuthErrorKind.TOKEN_INVALID, ErrorCategory.UNAUTHENTICATED)


class TokenIssuer:
    """Service for creating and validating signed tokens."""

    ALGORITHM = "HS256"
    ISSUER = "authcore"

    def __init__(self, settings: Settings | None = None) -> None:
        """Initialize the token issuer.

        Args:
            settings: Settings providing the three secrets and token lifetimes.
                Defaults to the process-wide settings.
        """
        self.settings = settings or get_settings()

    @property
    def access_secret(self) -> str:
        return self.settings.jwt_secret_access

    @property
    def refresh_secret(self) -> str:
        return self.settings.jwt_secret_refresh

    @property
    def session_secret(self) -> str:
        return self.settings.session_secret

    def _encode(
        self,
        token_type: TokenType,
        claims: dict[str, Any],
        secret: str,
        expires_delta: timedelta,
    ) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "iss": self.ISSUER,
            "iat": now,
            "exp": now + expires_delta,
            "type": token_type.value,
            **claims,
        }
        return jwt.encode(payload, secret, algorithm=self.ALGORITHM)

    def create_refresh_token(self, user_id: str) -> str:
        """Create a refresh token carrying the user id.

        A random ``jti`` keeps tokens unique when one user logs in twice
        within the same second.
        """
        return self._encode(
            TokenType.REFRESH,
            {"id": user_id, "jti": str(uuid.uuid4())},
            self.refresh_secret,
            timedelta(days=self.settings.refresh_token_expire_days),
        )

    def create_access_token(self, user: TokenSubject, refresh_token: str) -> str:
        """Create an access token embedding ``refresh_token``."""
        return self._encode(
            TokenType.ACCESS,
            {
                "id": user.id,
                "email": user.email,
                "username": user.username,
                "verified": user.verified,
                "refresh_token": refresh_token,
            },
            self.access_secret,
            timedelta(minutes=self.settings.access_token_expire_minutes),
        )

    def issue_auth_tokens(self, user: TokenSubject) -> AuthTokens:
        """Issue the access/refresh pair for a user.

        The refresh token is minted first because it is embedded in the
        access token's claims.
        """
        refresh_token = self.create_refresh_token(user.id)
        access_token = self.create_access_token(user, refresh_token)
        return AuthTokens(access_token=access_token, refresh_token=refresh_token)

    def issue_session_token(self, session_id: str) -> str:
        """Sign a session record id into an opaque session token."""
        return self._encode(
            TokenType.SESSION,
            {"id": session_id},
            self.session_secret,
            timedelta(days=self.settings.session_expire_days),
        )

    def decode_token(self, token: str, secret: str) -> dict[str, Any]:
        """Verify a token's signature and expiry and return its payload.

        Args:
            token: The encoded token.
            secret: The secret the token is expected to be signed with.

        Returns:
            Decoded token payload.

        Raises:
            AuthError: TOKEN_INVALID on a bad signature, expiry or malformed token.
        """
        try:
            return jwt.decode(
                token,
                secret,
                algorithms=[self.ALGORITHM],
                issuer=self.ISSUER,
                options={"require": ["exp", "iat", "iss"]},
            )
        except jwt.ExpiredSignatureError as e:
            logger.info("Token expired")
            raise token_invalid() from e
        except jwt.InvalidTokenError as e:
            logger.info("Token rejected", reason=str(e))
            raise token_invalid() from e

    def _verify(
        self,
        token: str,
        secret: str,
        token_type: TokenType,
        claims_model: type[ClaimsT],
    ) -> ClaimsT:
        payload = self.decode_token(token, secret)
        try:
            claims = claims_model.model_validate(payload)
        except ValidationError as e:
            logger.info("Token claims malformed", token_type=token_type.value)
            raise token_invalid() from e
        if claims.type != token_type:
            logger.info(
                "Token type mismatch",
                expected=token_type.value,
                actual=claims.type.value,
            )
            raise token_invalid()
        return claims

    def verify_access_token(self, token: str) -> AccessTokenClaims:
        """Verify an access token and return its claims."""
        return self._verify(token, self.access_secret, TokenType.ACCESS, AccessTokenClaims)

    def verify_refresh_token(self, token: str) -> RefreshTokenClaims:
        """Verify a refresh token and return its claims."""
        return self._verify(token, self.refresh_secret, TokenType.REFRESH, RefreshTokenClaims)

    def verify_session_token(self, token: str) -> SessionTokenClaims:
        """Verify a session token and return its claims."""
        return self._verify(token, self.session_secret, TokenType.SESSION, SessionTokenClaims)
