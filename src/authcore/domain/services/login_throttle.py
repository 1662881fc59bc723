"""Failed-login throttling.

Failed attempts are counted per login identifier (email or username) in the
cache. Once the count exceeds ``MAX_LOGIN_ATTEMPTS`` further logins are
refused until the counter expires, ``LOGIN_BLOCK_SECONDS`` after the last
failure.

The counter is only written on failure paths; a successful login does not
reset it.
"""

from authcore.core.logging import get_logger
from authcore.domain.exceptions import AuthError, AuthErrorKind, ErrorCategory
from authcore.infrastructure.cache import CacheBackend

logger = get_logger(__name__)

MAX_LOGIN_ATTEMPTS = 3
LOGIN_BLOCK_SECONDS = 30 * 60

# An absent counter counts as one attempt, so the first failure stores 2.
_ABSENT_COUNT = 1

_KEY_PREFIX = "login_attempts:"


class LoginThrottle:
    """Tracks and limits failed login attempts per identifier."""

    def __init__(self, cache: CacheBackend) -> None:
        self.cache = cache

    @staticmethod
    def _key(identifier: str) -> str:
        return f"{_KEY_PREFIX}{identifier}"

    async def attempts(self, identifier: str) -> int:
        """Return the stored attempt count, 0 when absent."""
        value = await self.cache.get(self._key(identifier))
        return int(value) if value else 0

    async def check(self, identifier: str) -> None:
        """Refuse the login if the identifier is blocked.

        Raises:
            AuthError: LOGIN_ATTEMPTS_LIMIT_REACHED when the count exceeds the limit.
        """
        attempts = await self.attempts(identifier)
        if attempts > MAX_LOGIN_ATTEMPTS:
            logger.warning("Login blocked", identifier=identifier, attempts=attempts)
            raise AuthError(
                AuthErrorKind.LOGIN_ATTEMPTS_LIMIT_REACHED,
                ErrorCategory.PERMISSION_DENIED,
            )

    async def record_failure(self, identifier: str) -> int:
        """Count a failed attempt and restart the block window.

        Returns:
            The attempt count after this failure.
        """
        attempts = await self.cache.increment(
            self._key(identifier),
            LOGIN_BLOCK_SECONDS,
            initial=_ABSENT_COUNT,
        )
        logger.info("Login failure recorded", identifier=identifier, attempts=attempts)
        return attempts
