"""Repository for user session operations."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from authcore.infrastructure.persistence.models import UserSessionModel


class UserSessionRepository:
    """Repository for user session database operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    async def create(self, model: UserSessionModel) -> UserSessionModel:
        """Store a new session.

        Args:
            model: The UserSessionModel to store.

        Returns:
            The stored model with generated fields populated.
        """
        self.session.add(model)
        await self.session.flush()
        return model

    async def update(self, model: UserSessionModel) -> UserSessionModel:
        """Flush changes made to a session."""
        self.session.add(model)
        await self.session.flush()
        return model

    async def get_by_id(self, session_id: str) -> UserSessionModel | None:
        """Get a session by ID, live or removed."""
        result = await self.session.execute(
            select(UserSessionModel).where(UserSessionModel.id == session_id)
        )
        return result.scalar_one_or_none()

    async def get_live_by_token(self, token: str) -> UserSessionModel | None:
        """Look up the live (non-removed) session opened with a refresh token.

        Args:
            token: The refresh token string.

        Returns:
            The session if found, None otherwise.
        """
        result = await self.session.execute(
            select(UserSessionModel).where(
                UserSessionModel.token == token,
                UserSessionModel.removed == False,  # noqa: E712
            )
        )
        return result.scalar_one_or_none()
