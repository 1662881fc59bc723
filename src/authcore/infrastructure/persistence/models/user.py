"""SQLAlchemy model for the users table.

Users are identified at login by email or username. Removed users are kept
as soft-deleted rows.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from authcore.infrastructure.persistence.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserModel(Base):
    """SQLAlchemy model for the users table.

    Attributes:
        id: Primary key (UUID string).
        username: Optional username, usable as a login identifier.
        email: User's email address.
        password_hash: Argon2 encoded password hash.
        verified: Whether the email address is verified.
        verified_at: When the email address was verified.
        removed: Soft-delete flag.
        created_at: Timestamp when the user was created.
        updated_at: Timestamp when the user was last updated.
        removed_at: Timestamp when the user was removed.
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
        comment="User ID (UUID)",
    )
    username: Mapped[str | None] = mapped_column(
        String(20),
        nullable=True,
        comment="Optional username",
    )
    email: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        unique=True,
        index=True,
        comment="User email address",
    )
    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Argon2 password hash",
    )
    verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    verified_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    removed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )
    removed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    sessions: Mapped[list["UserSessionModel"]] = relationship(  # noqa: F821
        "UserSessionModel",
        back_populates="user",
    )

    __table_args__ = (
        UniqueConstraint("username", "email", name="uq_users_username_email"),
        Index("ix_users_username_email", "username", "email"),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, removed={self.removed})>"
