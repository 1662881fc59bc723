"""SQLAlchemy model for user sessions.

One row per authenticated device. The refresh token issued at login is the
row's durable lookup key.
"""

import uuid
from datetime import datetime, timedelta

from sqlalchemy import Boolean, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from authcore.infrastructure.persistence.database import Base
from authcore.infrastructure.persistence.models.user import utcnow

DEFAULT_SESSION_DAYS = 30


def default_expiry() -> datetime:
    return utcnow() + timedelta(days=DEFAULT_SESSION_DAYS)


class UserSessionModel(Base):
    """User session model.

    Attributes:
        id: Primary key (UUID string).
        user_id: Owning user.
        token: Refresh token the session was opened with (unique).
        ip_address: Client IP address.
        user_agent: Client user agent.
        location: Client location.
        removed: Set when the session is invalidated.
        expires_at: Fixed at creation; set to the removal time on logout.
        last_used_at: Last time the session was used.
    """

    __tablename__ = "user_sessions"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    token: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    ip_address: Mapped[str] = mapped_column(String(45), nullable=False, default="0.0.0.0")
    user_agent: Mapped[str] = mapped_column(Text, nullable=False, default="")
    location: Mapped[str] = mapped_column(Text, nullable=False, default="")
    removed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=default_expiry,
    )
    last_used_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
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

    user: Mapped["UserModel"] = relationship(  # noqa: F821
        "UserModel",
        back_populates="sessions",
    )

    def __repr__(self) -> str:
        return f"UserSessionModel(id={self.id!r}, user_id={self.user_id!r}, removed={self.removed!r})"
