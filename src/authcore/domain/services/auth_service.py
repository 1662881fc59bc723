"""Authentication operations: login, signup, logout and forgot-password.

Each operation runs in its own database session (one unit of work) and
raises ``AuthError`` for every failure the caller is meant to see.
"""

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from authcore.core.config import Settings, get_settings
from authcore.core.logging import LoggingContext, get_logger
from authcore.domain.entities import Acknowledgement, ClientMeta, LoginResult
from authcore.domain.exceptions import AuthError, AuthErrorKind, ErrorCategory
from authcore.domain.services.login_throttle import LoginThrottle
from authcore.domain.services.session_store import SessionStore
from authcore.infrastructure.auth import CredentialVerifier, TokenIssuer
from authcore.infrastructure.cache import CacheBackend
from authcore.infrastructure.persistence.models import UserModel
from authcore.infrastructure.persistence.repositories import (
    UserRepository,
    UserSessionRepository,
)
from authcore.infrastructure.services import PasswordResetSender

logger = get_logger(__name__)

# Logout verdicts reported to the caller. Any other logout failure is
# logged and answered with the success acknowledgement.
_LOGOUT_VERDICTS = frozenset(
    {AuthErrorKind.LOGOUT_NOT_ALLOWED, AuthErrorKind.LOGOUT_SESSION_INVALID}
)


class AuthService:
    """Composes throttling, credential checks, tokens and sessions."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        credential_verifier: CredentialVerifier,
        token_issuer: TokenIssuer,
        cache: CacheBackend,
        reset_sender: PasswordResetSender | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            session_factory: Factory opening one database session per operation.
            credential_verifier: Password hasher/verifier.
            token_issuer: Signed token service.
            cache: Cache backing the login throttle and session mirrors.
            reset_sender: Password reset delivery.
            settings: Application settings.
        """
        self.session_factory = session_factory
        self.credential_verifier = credential_verifier
        self.token_issuer = token_issuer
        self.cache = cache
        self.reset_sender = reset_sender or PasswordResetSender()
        self.settings = settings or get_settings()
        self.throttle = LoginThrottle(cache)

    def _session_store(self, session: AsyncSession) -> SessionStore:
        return SessionStore(
            session=session,
            session_repo=UserSessionRepository(session),
            token_issuer=self.token_issuer,
            cache=self.cache,
            settings=self.settings,
        )

    async def login(
        self,
        identifier: str,
        password: str,
        client_meta: ClientMeta | None = None,
    ) -> LoginResult:
        """Authenticate by email or username and open a session.

        Every failure, including a refused attempt on a blocked identifier,
        is counted against ``identifier``.

        Args:
            identifier: Email or username.
            password: Plaintext password.
            client_meta: Client the session is opened from.

        Returns:
            The user id and the access, refresh and session tokens.

        Raises:
            AuthError: LOGIN_ATTEMPTS_LIMIT_REACHED, INVALID_EMAIL_USERNAME,
                INVALID_PASSWORD, or LOGIN_ERROR for internal failures.
        """
        client_meta = client_meta or ClientMeta()
        with LoggingContext(operation="login"):
            async with self.session_factory() as session:
                try:
                    return await self._login(session, identifier, password, client_meta)
                except AuthError:
                    await self._record_failure(identifier)
                    raise
                except Exception as e:
                    await self._record_failure(identifier)
                    logger.exception("Login failed with an internal error")
                    raise AuthError(AuthErrorKind.LOGIN_ERROR, ErrorCategory.UNAUTHENTICATED) from e

    async def _login(
        self,
        session: AsyncSession,
        identifier: str,
        password: str,
        client_meta: ClientMeta,
    ) -> LoginResult:
        await self.throttle.check(identifier)

        user_repo = UserRepository(session)
        user = await user_repo.get_active_by_identifier(identifier)
        if user is None:
            self.credential_verifier.verify_dummy(password)
            logger.info("Login failed: user not found", identifier=identifier)
            raise AuthError(AuthErrorKind.INVALID_EMAIL_USERNAME, ErrorCategory.UNAUTHENTICATED)

        if not self.credential_verifier.verify(user.password_hash, password):
            logger.info("Login failed: invalid password", user_id=user.id, email=user.email)
            raise AuthError(AuthErrorKind.INVALID_PASSWORD, ErrorCategory.UNAUTHENTICATED)

        # Committed together with the new session.
        if self.credential_verifier.needs_rehash(user.password_hash):
            user.password_hash = self.credential_verifier.hash(password)
            await user_repo.update(user)
            logger.info("Password hash upgraded", user_id=user.id)

        tokens = self.token_issuer.issue_auth_tokens(user)
        created = await self._session_store(session).create(user, tokens.refresh_token, client_meta)

        logger.info("Login succeeded", user_id=user.id, session_id=created.record.id)
        return LoginResult(
            user_id=user.id,
            access_token=tokens.access_token,
            refresh_token=tokens.refresh_token,
            session_token=created.session_token,
        )

    async def _record_failure(self, identifier: str) -> None:
        try:
            await self.throttle.record_failure(identifier)
        except Exception:
            logger.exception("Failed to record login failure", identifier=identifier)

    async def signup(self, email: str, password: str) -> Acknowledgement:
        """Register a new, unverified user.

        No tokens are issued; the user logs in separately.

        Raises:
            AuthError: USER_EXISTS if the email is taken, including by a
                removed user; SIGNUP_ERROR for internal failures.
        """
        with LoggingContext(operation="signup"):
            async with self.session_factory() as session:
                try:
                    user_repo = UserRepository(session)
                    existing = await user_repo.get_by_email(email)
                    if existing is not None:
                        logger.info("Signup failed: user exists", user_id=existing.id)
                        raise AuthError(AuthErrorKind.USER_EXISTS, ErrorCategory.ALREADY_EXISTS)

                    user = UserModel(
                        email=email,
                        password_hash=self.credential_verifier.hash(password),
                        verified=False,
                        removed=False,
                    )
                    await user_repo.create(user)
                    await session.commit()
                except AuthError:
                    raise
                except IntegrityError as e:
                    # A concurrent signup inserted the same email first.
                    logger.info("Signup failed: email taken concurrently")
                    raise AuthError(AuthErrorKind.USER_EXISTS, ErrorCategory.ALREADY_EXISTS) from e
                except Exception as e:
                    logger.exception("Signup failed with an internal error")
                    raise AuthError(AuthErrorKind.SIGNUP_ERROR, ErrorCategory.UNKNOWN) from e

            logger.info("User signed up", user_id=user.id)
        return Acknowledgement(message="SIGNUP_SUCCESS")

    async def logout(self, access_token: str, session_token: str) -> Acknowledgement:
        """End the session identified by an access/session token pair.

        Raises:
            AuthError: LOGOUT_NOT_ALLOWED when the access token's embedded
                refresh token belongs to another user; LOGOUT_SESSION_INVALID
                when the session does not exist or does not match the session
                token. Invalid tokens and internal errors are logged and the
                success acknowledgement is returned.
        """
        with LoggingContext(operation="logout"):
            async with self.session_factory() as session:
                try:
                    await self._logout(session, access_token, session_token)
                except AuthError as e:
                    if e.kind in _LOGOUT_VERDICTS:
                        raise
                    logger.info("Logout ignored: token rejected", error_kind=e.kind.value)
                except Exception:
                    logger.exception("Logout failed with an internal error")
        return Acknowledgement(message="LOGOUT_SUCCESS")

    async def _logout(self, session: AsyncSession, access_token: str, session_token: str) -> None:
        # Access token first: the refresh token is only trusted as its claim.
        access_claims = self.token_issuer.verify_access_token(access_token)
        refresh_claims = self.token_issuer.verify_refresh_token(access_claims.refresh_token)
        if access_claims.id != refresh_claims.id:
            logger.warning(
                "Logout refused: token user mismatch",
                access_user_id=access_claims.id,
                refresh_user_id=refresh_claims.id,
            )
            raise AuthError(AuthErrorKind.LOGOUT_NOT_ALLOWED, ErrorCategory.PERMISSION_DENIED)

        store = self._session_store(session)
        record = await store.find_by_refresh_token(access_claims.refresh_token)
        session_claims = self.token_issuer.verify_session_token(session_token)
        if record is None or record.id != session_claims.id:
            logger.warning(
                "Logout refused: session invalid",
                user_id=access_claims.id,
                session_id=session_claims.id,
            )
            raise AuthError(AuthErrorKind.LOGOUT_SESSION_INVALID, ErrorCategory.PERMISSION_DENIED)

        await store.invalidate(record, session_token)

    async def forgot_password(self, email: str) -> Acknowledgement:
        """Start a password reset.

        The acknowledgement is identical whether or not the email is known.
        """
        with LoggingContext(operation="forgot_password"):
            async with self.session_factory() as session:
                user = await UserRepository(session).get_by_email(email)

            if user is None:
                logger.info("Password reset requested for unknown email")
            else:
                try:
                    await self.reset_sender.send_reset(user.id, user.email)
                except Exception:
                    logger.exception("Password reset delivery failed", user_id=user.id)
        return Acknowledgement(message="FORGOT_PASSWORD_SUCCESS")
