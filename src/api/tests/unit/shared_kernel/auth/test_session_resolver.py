"""Unit tests for SessionResolver."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from shared_kernel.auth import (
    BearerTokenValidator,
    InvalidTokenError,
    ResolvedSession,
    SessionProbe,
    SessionResolver,
    SessionSource,
    TokenClaims,
    extract_bearer_token,
)


@pytest.fixture
def mock_validator() -> MagicMock:
    validator = MagicMock(spec=BearerTokenValidator)
    validator.validate_token.return_value = TokenClaims(
        sub="bearer-user", email=None, app_role=None
    )
    return validator


@pytest.fixture
def mock_probe() -> MagicMock:
    return MagicMock(spec=SessionProbe)


@pytest.fixture
def resolver(mock_validator, mock_probe) -> SessionResolver:
    return SessionResolver(token_validator=mock_validator, probe=mock_probe)


class TestExtractBearerToken:
    """Tests for Authorization header parsing."""

    @pytest.mark.parametrize(
        ("header", "expected"),
        [
            ("Bearer abc", "abc"),
            ("bearer abc", "abc"),
            ("  Bearer   abc  ", "abc"),
            ("Basic abc", None),
            ("Bearer ", None),
            ("", None),
            (None, None),
        ],
    )
    def test_parsing(self, header, expected):
        assert extract_bearer_token(header) == expected


class TestCookieSession:
    """Identity from the signed cookie session."""

    def test_user_record_resolves_subject(self, resolver, mock_validator):
        resolved = resolver.resolve({"user": {"id": "u1", "role": "member"}}, None)

        assert resolved == ResolvedSession("u1", False, SessionSource.SESSION)
        mock_validator.validate_token.assert_not_called()

    def test_admin_role_marks_platform_admin(self, resolver):
        resolved = resolver.resolve({"user": {"id": "u1", "role": "admin"}}, None)

        assert resolved.is_platform_admin

    def test_legacy_user_id_is_never_admin(self, resolver):
        resolved = resolver.resolve({"userId": "u2", "role": "admin"}, None)

        assert resolved.subject_id == "u2"
        assert not resolved.is_platform_admin

    def test_session_wins_over_bearer(self, resolver, mock_validator):
        resolved = resolver.resolve({"user": {"id": "u1"}}, "Bearer token")

        assert resolved.subject_id == "u1"
        mock_validator.validate_token.assert_not_called()

    def test_user_without_id_falls_through(self, resolver):
        resolved = resolver.resolve({"user": {"role": "admin"}}, None)

        assert not resolved.is_authenticated


class TestBearerToken:
    """Identity from a bearer token."""

    def test_valid_token_resolves_subject(self, resolver):
        resolved = resolver.resolve(None, "Bearer token")

        assert resolved == ResolvedSession("bearer-user", False, SessionSource.BEARER)

    def test_admin_app_role(self, resolver, mock_validator):
        mock_validator.validate_token.return_value = TokenClaims(
            sub="boss", email=None, app_role="admin"
        )

        assert resolver.resolve(None, "Bearer token").is_platform_admin

    def test_invalid_token_is_anonymous(self, resolver, mock_validator, mock_probe):
        mock_validator.validate_token.side_effect = InvalidTokenError("bad")

        resolved = resolver.resolve(None, "Bearer token")

        assert resolved == ResolvedSession.anonymous()
        mock_probe.bearer_token_rejected.assert_called_once_with(reason="bad")
        mock_probe.anonymous_request.assert_called_once()


class TestAnonymous:
    """Absence of credentials is a normal outcome."""

    def test_nothing_present(self, resolver, mock_probe):
        resolved = resolver.resolve(None, None)

        assert not resolved.is_authenticated
        assert resolved.source is SessionSource.ANONYMOUS
        mock_probe.anonymous_request.assert_called_once()

    def test_empty_session(self, resolver):
        assert resolver.resolve({}, None) == ResolvedSession.anonymous()
