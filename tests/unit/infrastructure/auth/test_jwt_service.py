"""Unit tests for the token issuer."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt
import pytest

from authcore.domain.exceptions import AuthError, AuthErrorKind, ErrorCategory
from authcore.infrastructure.auth import TokenIssuer
from authcore.infrastructure.auth.token_types import TokenType


@dataclass
class FakeUser:
    id: str = "user-123"
    email: str = "test@example.com"
    username: str | None = "tester"
    verified: bool = False


@pytest.fixture
def user() -> FakeUser:
    return FakeUser()


def assert_token_invalid(exc_info):
    assert exc_info.value.kind == AuthErrorKind.TOKEN_INVALID
    assert exc_info.value.category == ErrorCategory.UNAUTHENTICATED


class TestIssue:
    def test_access_token_claims(self, token_issuer, user):
        tokens = token_issuer.issue_auth_tokens(user)

        claims = token_issuer.verify_access_token(tokens.access_token)

        assert claims.id == "user-123"
        assert claims.email == "test@example.com"
        assert claims.username == "tester"
        assert claims.verified is False
        assert claims.type == TokenType.ACCESS

    def test_access_token_embeds_refresh_token(self, token_issuer, user):
        tokens = token_issuer.issue_auth_tokens(user)

        claims = token_issuer.verify_access_token(tokens.access_token)

        assert claims.refresh_token == tokens.refresh_token
        assert token_issuer.verify_refresh_token(claims.refresh_token).id == "user-123"

    def test_refresh_tokens_are_unique(self, token_issuer):
        first = token_issuer.create_refresh_token("user-123")
        second = token_issuer.create_refresh_token("user-123")

        assert first != second
        assert token_issuer.verify_refresh_token(first).jti != token_issuer.verify_refresh_token(second).jti

    def test_session_token_round_trip(self, token_issuer):
        token = token_issuer.issue_session_token("session-1")

        assert token_issuer.verify_session_token(token).id == "session-1"

    def test_access_token_lifetime(self, token_issuer, user):
        start = datetime.now(timezone.utc)
        tokens = token_issuer.issue_auth_tokens(user)

        claims = token_issuer.verify_access_token(tokens.access_token)
        exp = datetime.fromtimestamp(claims.exp, tz=timezone.utc)

        expected = start + timedelta(minutes=15)
        assert expected - timedelta(seconds=2) <= exp <= expected + timedelta(seconds=2)

    def test_refresh_and_session_token_lifetime(self, token_issuer):
        start = datetime.now(timezone.utc)
        refresh = token_issuer.verify_refresh_token(token_issuer.create_refresh_token("u"))
        session = token_issuer.verify_session_token(token_issuer.issue_session_token("s"))

        expected = start + timedelta(days=30)
        for claims in (refresh, session):
            exp = datetime.fromtimestamp(claims.exp, tz=timezone.utc)
            assert expected - timedelta(seconds=2) <= exp <= expected + timedelta(seconds=2)

    def test_tokens_carry_issuer(self, token_issuer, settings):
        token = token_issuer.issue_session_token("s")

        payload = jwt.decode(token, settings.session_secret, algorithms=["HS256"], issuer="authcore")

        assert payload["iss"] == "authcore"
        assert payload["type"] == "session"


class TestVerify:
    def test_secrets_are_not_interchangeable(self, token_issuer, user):
        """A token only verifies with the secret of its own type."""
        tokens = token_issuer.issue_auth_tokens(user)
        session_token = token_issuer.issue_session_token("session-1")

        with pytest.raises(AuthError) as exc_info:
            token_issuer.verify_refresh_token(tokens.access_token)
        assert_token_invalid(exc_info)

        with pytest.raises(AuthError) as exc_info:
            token_issuer.verify_session_token(tokens.refresh_token)
        assert_token_invalid(exc_info)

        with pytest.raises(AuthError) as exc_info:
            token_issuer.verify_access_token(session_token)
        assert_token_invalid(exc_info)

    def test_wrong_type_with_right_secret_rejected(self, token_issuer, settings):
        """A payload signed with the access secret but typed as refresh is rejected."""
        now = datetime.now(timezone.utc)
        forged = jwt.encode(
            {
                "iss": "authcore",
                "iat": now,
                "exp": now + timedelta(minutes=5),
                "type": "refresh",
                "id": "user-123",
                "email": "test@example.com",
                "verified": True,
                "refresh_token": "x",
            },
            settings.jwt_secret_access,
            algorithm="HS256",
        )

        with pytest.raises(AuthError) as exc_info:
            token_issuer.verify_access_token(forged)
        assert_token_invalid(exc_info)

    def test_expired_token_rejected(self, token_issuer, settings):
        past = datetime.now(timezone.utc) - timedelta(hours=1)
        expired = jwt.encode(
            {"iss": "authcore", "iat": past, "exp": past + timedelta(minutes=1), "type": "session", "id": "s"},
            settings.session_secret,
            algorithm="HS256",
        )

        with pytest.raises(AuthError) as exc_info:
            token_issuer.verify_session_token(expired)
        assert_token_invalid(exc_info)

    def test_malformed_token_rejected(self, token_issuer):
        with pytest.raises(AuthError) as exc_info:
            token_issuer.verify_access_token("not.a.token")
        assert_token_invalid(exc_info)

    def test_missing_claims_rejected(self, token_issuer, settings):
        now = datetime.now(timezone.utc)
        token = jwt.encode(
            {"iss": "authcore", "iat": now, "exp": now + timedelta(minutes=5), "type": "access", "id": "u"},
            settings.jwt_secret_access,
            algorithm="HS256",
        )

        with pytest.raises(AuthError) as exc_info:
            token_issuer.verify_access_token(token)
        assert_token_invalid(exc_info)

    def test_foreign_issuer_rejected(self, token_issuer, settings):
        now = datetime.now(timezone.utc)
        token = jwt.encode(
            {"iss": "someone-else", "iat": now, "exp": now + timedelta(minutes=5), "type": "session", "id": "s"},
            settings.session_secret,
            algorithm="HS256",
        )

        with pytest.raises(AuthError) as exc_info:
            token_issuer.verify_session_token(token)
        assert_token_invalid(exc_info)

    def test_tampered_token_rejected(self, token_issuer):
        token = token_issuer.issue_session_token("session-1")
        header, payload, signature = token.split(".")
        tampered = ".".join([header, payload, signature[::-1]])

        with pytest.raises(AuthError) as exc_info:
            token_issuer.verify_session_token(tampered)
        assert_token_invalid(exc_info)


def test_default_settings_used_when_none_given():
    issuer = TokenIssuer()

    assert issuer.settings is not None
    assert issuer.access_secret == issuer.settings.jwt_secret_access
