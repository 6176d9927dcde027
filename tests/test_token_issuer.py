from __future__ import annotations

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from authflow.core.enums import Role
from authflow.core.exceptions import InvalidTokenError
from authflow.security.tokens import TokenIssuer, parse_duration


def test_issue_and_verify_round_trip(tokens):
    token = tokens.issue(7, "alice@x.com")
    claims = tokens.verify(token)

    assert claims.user_id == 7
    assert claims.email == "alice@x.com"
    assert claims.role == Role.USER


def test_admin_role_is_carried(tokens):
    claims = tokens.verify(tokens.issue(3, "root@x.com", role=Role.ADMIN))
    assert claims.role == Role.ADMIN


def test_expired_token_rejected(tokens):
    past = datetime.now(timezone.utc) - timedelta(hours=2)
    token = tokens.issue(7, "alice@x.com", now=past)

    with pytest.raises(InvalidTokenError):
        tokens.verify(token)


def test_forged_token_rejected(tokens):
    other = TokenIssuer("some-other-secret-0123456789abcdef")
    with pytest.raises(InvalidTokenError):
        tokens.verify(other.issue(7, "alice@x.com"))


@pytest.mark.parametrize("token", ["", "not-a-token", "a.b.c"])
def test_malformed_token_rejected(tokens, token):
    with pytest.raises(InvalidTokenError):
        tokens.verify(token)


def test_token_missing_claims_rejected(tokens):
    token = jwt.encode(
        {"sub": "1", "exp": datetime.now(timezone.utc) + timedelta(minutes=5)},
        "test-jwt-secret-0123456789abcdef",
        algorithm="HS256",
    )
    with pytest.raises(InvalidTokenError):
        tokens.verify(token)


@pytest.mark.parametrize(
    "value,expected",
    [("3600", 3600), ("1h", 3600), ("30m", 1800), ("2d", 172800), ("45s", 45), ("junk", 3600), (None, 3600)],
)
def test_parse_duration(value, expected):
    assert parse_duration(value) == expected
