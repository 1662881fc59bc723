"""Classified authentication errors.

Every failure that reaches a caller is an ``AuthError`` carrying a
machine-readable kind and the category a transport maps to a status code.
"""

from enum import Enum


class ErrorCategory(str, Enum):
    """Caller-visible category of an error."""

    UNAUTHENTICATED = "unauthenticated"
    PERMISSION_DENIED = "permission_denied"
    ALREADY_EXISTS = "already_exists"
    UNKNOWN = "unknown"


class AuthErrorKind(str, Enum):
    """Error kinds returned by the authentication operations."""

    INVALID_EMAIL_USERNAME = "INVALID_EMAIL_USERNAME"
    INVALID_PASSWORD = "INVALID_PASSWORD"
    LOGIN_ATTEMPTS_LIMIT_REACHED = "LOGIN_ATTEMPTS_LIMIT_REACHED"
    LOGIN_ERROR = "LOGIN_ERROR"
    USER_EXISTS = "USER_EXISTS"
    SIGNUP_ERROR = "SIGNUP_ERROR"
    LOGOUT_NOT_ALLOWED = "LOGOUT_NOT_ALLOWED"
    LOGOUT_SESSION_INVALID = "LOGOUT_SESSION_INVALID"
    TOKEN_INVALID = "TOKEN_INVALID"


# Identifier and password failures share one message so the boundary
# does not reveal which of the two was wrong.
_MESSAGES: dict[AuthErrorKind, str] = {
    AuthErrorKind.INVALID_EMAIL_USERNAME: "Invalid credentials",
    AuthErrorKind.INVALID_PASSWORD: "Invalid credentials",
    AuthErrorKind.LOGIN_ATTEMPTS_LIMIT_REACHED: "Too many failed login attempts, try again later",
    AuthErrorKind.LOGIN_ERROR: "Login failed",
    AuthErrorKind.USER_EXISTS: "User already exists",
    AuthErrorKind.SIGNUP_ERROR: "Signup failed",
    AuthErrorKind.LOGOUT_NOT_ALLOWED: "Logout not allowed",
    AuthErrorKind.LOGOUT_SESSION_INVALID: "Session is invalid",
    AuthErrorKind.TOKEN_INVALID: "Token is invalid",
}


class AuthError(Exception):
    """A classified authentication error.

    Attributes:
        kind: Machine-readable error kind.
        category: Caller-visible category.
        message: Human-readable text safe to return to the caller.
    """

    def __init__(
        self,
        kind: AuthErrorKind,
        category: ErrorCategory,
        message: str | None = None,
    ) -> None:
        self.kind = kind
        self.category = category
        self.message = message or _MESSAGES[kind]
        super().__init__(kind.value)

    def __repr__(self) -> str:
        return f"AuthError(kind={self.kind.value!r}, category={self.category.value!r})"
