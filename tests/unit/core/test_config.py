"""Tests for application settings."""

import pytest
from pydantic import ValidationError

from authcore.core.config import Settings


def test_defaults():
    settings = Settings(_env_file=None)

    assert settings.access_token_expire_minutes == 15
    assert settings.refresh_token_expire_days == 30
    assert settings.session_expire_days == 30
    assert settings.session_ttl_seconds == 30 * 86400
    assert settings.password_hash_type == "argon2id"
    assert settings.password_time_cost == 5
    assert settings.password_memory_cost == 65536
    assert settings.password_parallelism == 4


def test_secrets_must_differ():
    with pytest.raises(ValidationError, match="must all differ"):
        Settings(
            _env_file=None,
            jwt_secret_access="same-secret",
            jwt_secret_refresh="same-secret",
            session_secret="other-secret",
        )


def test_env_prefix(monkeypatch):
    monkeypatch.setenv("AUTHCORE_SESSION_EXPIRE_DAYS", "7")
    monkeypatch.setenv("AUTHCORE_REDIS_URL", "redis://cache:6379/1")

    settings = Settings(_env_file=None)

    assert settings.session_ttl_seconds == 7 * 86400
    assert settings.redis_url == "redis://cache:6379/1"


def test_sqlite_rejects_multiple_workers():
    with pytest.raises(ValidationError, match="SQLite does not support multiple worker"):
        Settings(_env_file=None, database_url="sqlite+aiosqlite:///./x.db", workers=2)


def test_environment_flags(settings):
    assert settings.is_testing is True
    assert settings.is_production is False
    assert settings.is_development is False
