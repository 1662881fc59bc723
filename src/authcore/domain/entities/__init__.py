"""Domain entities for authcore."""

from authcore.domain.entities.auth import (
    Acknowledgement,
    CachedSession,
    ClientMeta,
    LoginResult,
)

__all__ = [
    "Acknowledgement",
    "CachedSession",
    "ClientMeta",
    "LoginResult",
]
