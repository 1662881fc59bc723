"""Persistence repositories for database operations."""

from authcore.infrastructure.persistence.repositories.user_repository import (
    UserRepository,
)
from authcore.infrastructure.persistence.repositories.user_session_repository import (
    UserSessionRepository,
)

__all__ = [
    "UserRepository",
    "UserSessionRepository",
]
