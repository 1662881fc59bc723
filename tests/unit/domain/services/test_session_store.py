"""Tests for the session store."""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest
from sqlalchemy import func, select

from authcore.domain.entities import CachedSession, ClientMeta
from authcore.domain.exceptions import AuthError, AuthErrorKind
from authcore.domain.services import SessionStore
from authcore.infrastructure.persistence.models import UserSessionModel
from authcore.infrastructure.persistence.repositories import UserSessionRepository

CLIENT = ClientMeta(ip_address="10.0.0.1", user_agent="pytest", location="Lab")


def make_store(session, token_issuer, cache, settings) -> SessionStore:
    return SessionStore(
        session=session,
        session_repo=UserSessionRepository(session),
        token_issuer=token_issuer,
        cache=cache,
        settings=settings,
    )


async def count_sessions(session_factory) -> int:
    async with session_factory() as session:
        return await session.scalar(select(func.count()).select_from(UserSessionModel))


@pytest.mark.asyncio
async def test_create_persists_and_mirrors(session_factory, token_issuer, cache, settings, make_user):
    user = await make_user(email="a@x.com", password="pw1")
    refresh_token = token_issuer.create_refresh_token(user.id)

    async with session_factory() as session:
        created = await make_store(session, token_issuer, cache, settings).create(
            user, refresh_token, CLIENT
        )

    assert token_issuer.verify_session_token(created.session_token).id == created.record.id
    assert created.record.token == refresh_token
    assert created.record.user_id == user.id

    mirror = await cache.get(SessionStore.cache_key(created.session_token))
    assert mirror == {
        "id": created.record.id,
        "user_id": user.id,
        "ip_address": "10.0.0.1",
        "user_agent": "pytest",
        "location": "Lab",
    }
    assert await count_sessions(session_factory) == 1


@pytest.mark.asyncio
async def test_create_sets_expiry(session_factory, token_issuer, cache, settings, make_user):
    user = await make_user()
    before = datetime.now(timezone.utc)

    async with session_factory() as session:
        created = await make_store(session, token_issuer, cache, settings).create(
            user, token_issuer.create_refresh_token(user.id), CLIENT
        )

    expires_at = created.record.expires_at
    if expires_at.tzinfo is None:
        expires_at = expires_at.replace(tzinfo=timezone.utc)
    expected = before + timedelta(days=30)
    assert expected - timedelta(seconds=5) <= expires_at <= expected + timedelta(seconds=5)


@pytest.mark.asyncio
async def test_create_leaves_nothing_when_cache_fails(session_factory, token_issuer, settings, make_user):
    user = await make_user()
    cache = AsyncMock()
    cache.set.side_effect = ConnectionError("cache down")

    async with session_factory() as session:
        with pytest.raises(ConnectionError):
            await make_store(session, token_issuer, cache, settings).create(
                user, token_issuer.create_refresh_token(user.id), CLIENT
            )
        await session.rollback()

    assert await count_sessions(session_factory) == 0


@pytest.mark.asyncio
async def test_invalidate_marks_removed_and_drops_mirror(
    session_factory, token_issuer, cache, settings, make_user
):
    user = await make_user()
    refresh_token = token_issuer.create_refresh_token(user.id)
    async with session_factory() as session:
        created = await make_store(session, token_issuer, cache, settings).create(
            user, refresh_token, CLIENT
        )

    async with session_factory() as session:
        store = make_store(session, token_issuer, cache, settings)
        record = await store.find_by_refresh_token(refresh_token)
        await store.invalidate(record, created.session_token)

    async with session_factory() as session:
        stored = await UserSessionRepository(session).get_by_id(created.record.id)
        assert stored.removed is True
        assert stored.removed_at is not None
        assert await make_store(session, token_issuer, cache, settings).find_by_refresh_token(
            refresh_token
        ) is None

    assert await cache.get(SessionStore.cache_key(created.session_token)) is None


@pytest.mark.asyncio
async def test_invalidate_survives_cache_delete_failure(
    session_factory, token_issuer, cache, settings, make_user
):
    user = await make_user()
    refresh_token = token_issuer.create_refresh_token(user.id)
    async with session_factory() as session:
        created = await make_store(session, token_issuer, cache, settings).create(
            user, refresh_token, CLIENT
        )

    broken = AsyncMock()
    broken.delete.side_effect = ConnectionError("cache down")
    async with session_factory() as session:
        store = make_store(session, token_issuer, broken, settings)
        record = await store.find_by_refresh_token(refresh_token)
        await store.invalidate(record, created.session_token)

    async with session_factory() as session:
        assert (await UserSessionRepository(session).get_by_id(created.record.id)).removed is True


@pytest.mark.asyncio
async def test_resolve_from_cache(session_factory, token_issuer, cache, settings, make_user):
    user = await make_user()
    async with session_factory() as session:
        store = make_store(session, token_issuer, cache, settings)
        created = await store.create(user, token_issuer.create_refresh_token(user.id), CLIENT)

        resolved = await store.resolve(created.session_token)

    assert resolved == CachedSession(
        id=created.record.id,
        user_id=user.id,
        ip_address="10.0.0.1",
        user_agent="pytest",
        location="Lab",
    )


@pytest.mark.asyncio
async def test_resolve_rebuilds_missing_mirror(session_factory, token_issuer, cache, settings, make_user):
    user = await make_user()
    async with session_factory() as session:
        created = await make_store(session, token_issuer, cache, settings).create(
            user, token_issuer.create_refresh_token(user.id), CLIENT
        )
    key = SessionStore.cache_key(created.session_token)
    await cache.delete(key)

    async with session_factory() as session:
        resolved = await make_store(session, token_issuer, cache, settings).resolve(
            created.session_token
        )

    assert resolved is not None
    assert resolved.id == created.record.id
    assert (await cache.get(key))["user_id"] == user.id


@pytest.mark.asyncio
async def test_resolve_removed_session_is_none(session_factory, token_issuer, cache, settings, make_user):
    user = await make_user()
    refresh_token = token_issuer.create_refresh_token(user.id)
    async with session_factory() as session:
        created = await make_store(session, token_issuer, cache, settings).create(
            user, refresh_token, CLIENT
        )
    async with session_factory() as session:
        store = make_store(session, token_issuer, cache, settings)
        await store.invalidate(await store.find_by_refresh_token(refresh_token), created.session_token)

    async with session_factory() as session:
        assert await make_store(session, token_issuer, cache, settings).resolve(
            created.session_token
        ) is None


@pytest.mark.asyncio
async def test_resolve_rejects_invalid_token(session_factory, token_issuer, cache, settings):
    async with session_factory() as session:
        with pytest.raises(AuthError) as exc_info:
            await make_store(session, token_issuer, cache, settings).resolve("garbage")

    assert exc_info.value.kind == AuthErrorKind.TOKEN_INVALID
