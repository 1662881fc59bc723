"""Domain services for authcore."""

from authcore.domain.services.auth_service import AuthService
from authcore.domain.services.login_throttle import (
    LOGIN_BLOCK_SECONDS,
    MAX_LOGIN_ATTEMPTS,
    LoginThrottle,
)
from authcore.domain.services.session_store import CreatedSession, SessionStore

__all__ = [
    "AuthService",
    "CreatedSession",
    "LOGIN_BLOCK_SECONDS",
    "LoginThrottle",
    "MAX_LOGIN_ATTEMPTS",
    "SessionStore",
]
