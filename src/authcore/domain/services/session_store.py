"""Session lifecycle across durable storage and the cache.

The ``user_sessions`` row is authoritative. Each live session is mirrored in
the cache under its signed session token; the mirror is a disposable
projection that expires with the session and is rebuilt from the row when
missing.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from authcore.core.config import Settings
from authcore.core.logging import get_logger
from authcore.domain.entities import CachedSession, ClientMeta
from authcore.infrastructure.auth import TokenIssuer
from authcore.infrastructure.cache import CacheBackend
from authcore.infrastructure.persistence.models import UserModel, UserSessionModel
from authcore.infrastructure.persistence.repositories import UserSessionRepository

logger = get_logger(__name__)

_KEY_PREFIX = "session:"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _seconds_until(moment: datetime) -> int:
    # SQLite returns naive datetimes; they are stored as UTC.
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return int((moment - _utcnow()).total_seconds())


@dataclass(frozen=True)
class CreatedSession:
    """A newly persisted session and the token handed to the caller."""

    record: UserSessionModel
    session_token: str


class SessionStore:
    """Creates, resolves and invalidates user sessions.

    Bound to one unit of work: ``session`` is the database session of the
    operation using the store, and every write commits it.
    """

    def __init__(
        self,
        session: AsyncSession,
        session_repo: UserSessionRepository,
        token_issuer: TokenIssuer,
        cache: CacheBackend,
        settings: Settings,
    ) -> None:
        self.session = session
        self.session_repo = session_repo
        self.token_issuer = token_issuer
        self.cache = cache
        self.settings = settings

    @staticmethod
    def cache_key(session_token: str) -> str:
        return f"{_KEY_PREFIX}{session_token}"

    @staticmethod
    def _mirror(record: UserSessionModel) -> CachedSession:
        return CachedSession(
            id=record.id,
            user_id=record.user_id,
            ip_address=record.ip_address,
            user_agent=record.user_agent,
            location=record.location,
        )

    async def create(
        self,
        user: UserModel,
        refresh_token: str,
        client_meta: ClientMeta,
    ) -> CreatedSession:
        """Persist a session, sign its id and mirror it in the cache.

        The transaction is committed only after the token is signed and the
        cache entry is written; a failure in any step leaves no session behind.

        Args:
            user: The authenticated user.
            refresh_token: Refresh token issued for this login.
            client_meta: Client the session is opened from.

        Returns:
            The stored session and its session token.
        """
        now = _utcnow()
        ttl = self.settings.session_ttl_seconds
        record = UserSessionModel(
            user_id=user.id,
            token=refresh_token,
            ip_address=client_meta.ip_address,
            user_agent=client_meta.user_agent,
            location=client_meta.location,
            expires_at=now + timedelta(seconds=ttl),
            last_used_at=now,
        )
        await self.session_repo.create(record)

        session_token = self.token_issuer.issue_session_token(record.id)
        await self.cache.set(self.cache_key(session_token), self._mirror(record).to_dict(), ttl)

        await self.session.commit()
        logger.info("Session created", session_id=record.id, user_id=user.id)
        return CreatedSession(record=record, session_token=session_token)

    async def find_by_refresh_token(self, refresh_token: str) -> UserSessionModel | None:
        """Find the live session opened with ``refresh_token``."""
        return await self.session_repo.get_live_by_token(refresh_token)

    async def invalidate(self, record: UserSessionModel, session_token: str) -> None:
        """End a session.

        Marks the row removed and expired, commits, then drops the cache
        mirror. The commit is authoritative; a failed cache delete is logged
        and the mirror expires on its own.
        """
        now = _utcnow()
        record.removed = True
        record.expires_at = now
        record.removed_at = now
        await self.session_repo.update(record)
        await self.session.commit()

        try:
            await self.cache.delete(self.cache_key(session_token))
        except Exception:
            logger.exception("Failed to delete session cache entry", session_id=record.id)
        logger.info("Session invalidated", session_id=record.id, user_id=record.user_id)

    async def resolve(self, session_token: str) -> CachedSession | None:
        """Resolve a session token to its live session.

        Reads the cache mirror first. On a miss the durable row decides, and
        a live row re-warms the cache for its remaining lifetime.

        Raises:
            AuthError: TOKEN_INVALID if the session token does not verify.
        """
        claims = self.token_issuer.verify_session_token(session_token)
        key = self.cache_key(session_token)

        cached = await self.cache.get(key)
        if cached is not None:
            return CachedSession(**cached)

        record = await self.session_repo.get_by_id(claims.id)
        if record is None or record.removed:
            return None
        remaining = _seconds_until(record.expires_at)
        if remaining <= 0:
            return None

        mirror = self._mirror(record)
        await self.cache.set(key, mirror.to_dict(), remaining)
        logger.info("Session cache entry rebuilt", session_id=record.id)
        return mirror
