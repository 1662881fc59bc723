"""SQLAlchemy models for authcore tables."""

from authcore.infrastructure.persistence.models.user import UserModel
from authcore.infrastructure.persistence.models.user_session import UserSessionModel

__all__ = [
    "UserModel",
    "UserSessionModel",
]
