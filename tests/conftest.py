"""Pytest configuration for all tests."""

from typing import AsyncGenerator, Awaitable, Callable

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from authcore.core.config import Settings
from authcore.domain.services import AuthService
from authcore.infrastructure.auth import CredentialVerifier, PasswordHashConfig, TokenIssuer
from authcore.infrastructure.cache import MemoryCache
from authcore.infrastructure.persistence import models  # noqa: F401
from authcore.infrastructure.persistence.database import Base
from authcore.infrastructure.persistence.models import UserModel


@pytest.fixture
def settings() -> Settings:
    """Settings with distinct test secrets and cheap Argon2 parameters."""
    return Settings(
        environment="testing",
        database_url="sqlite+aiosqlite:///:memory:",
        jwt_secret_access="test-access-secret-0123456789abcdef0123456789",
        jwt_secret_refresh="test-refresh-secret-0123456789abcdef012345678",
        session_secret="test-session-secret-0123456789abcdef012345678",
        password_time_cost=1,
        password_memory_cost=1024,
        password_parallelism=1,
        log_format="console",
    )


@pytest.fixture
def credential_verifier(settings: Settings) -> CredentialVerifier:
    return CredentialVerifier(PasswordHashConfig.from_settings(settings))


@pytest.fixture
def token_issuer(settings: Settings) -> TokenIssuer:
    return TokenIssuer(settings)


@pytest.fixture
def cache() -> MemoryCache:
    return MemoryCache()


@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """In-memory SQLite engine with all tables created."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def make_user(
    session_factory: async_sessionmaker[AsyncSession],
    credential_verifier: CredentialVerifier,
) -> Callable[..., Awaitable[UserModel]]:
    """Factory inserting a committed user row."""

    async def _make_user(
        email: str = "user@example.com",
        password: str = "Secret123!",
        username: str | None = None,
        removed: bool = False,
        verified: bool = False,
        verifier: CredentialVerifier | None = None,
    ) -> UserModel:
        user = UserModel(
            email=email,
            username=username,
            password_hash=(verifier or credential_verifier).hash(password),
            removed=removed,
            verified=verified,
        )
        async with session_factory() as session:
            session.add(user)
            await session.commit()
        return user

    return _make_user


@pytest.fixture
def auth_service(
    session_factory: async_sessionmaker[AsyncSession],
    credential_verifier: CredentialVerifier,
    token_issuer: TokenIssuer,
    cache: MemoryCache,
    settings: Settings,
) -> AuthService:
    return AuthService(
        session_factory=session_factory,
        credential_verifier=credential_verifier,
        token_issuer=token_issuer,
        cache=cache,
        settings=settings,
    )
