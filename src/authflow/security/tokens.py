from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from ..core.constants import DEFAULT_TOKEN_TTL_SECONDS
from ..core.enums import Role
from ..core.exceptions import InvalidTokenError

_ALGORITHM = "HS256"
_DURATION_RE = re.compile(r"^\s*(\d+)\s*([smhd]?)\s*$", re.IGNORECASE)
_UNIT_SECONDS = {"": 1, "s": 1, "m": 60, "h": 3600, "d": 86400}


def parse_duration(value: Optional[str], fallback: int = DEFAULT_TOKEN_TTL_SECONDS) -> int:
    """Seconds from ``"3600"``, ``"30m"``, ``"1h"`` or ``"7d"``."""
    if value is None:
        return fallback
    match = _DURATION_RE.match(str(value))
    if not match:
        return fallback
    amount, unit = match.groups()
    return int(amount) * _UNIT_SECONDS[unit.lower()]


@dataclass(frozen=True)
class TokenClaims:
    user_id: int
    email: str
    role: Role
    expires_at: datetime


class TokenIssuer:
    """Mints and checks HS256 bearer tokens. Stateless."""

    def __init__(self, secret: str, *, ttl_seconds: int = DEFAULT_TOKEN_TTL_SECONDS):
        if not secret:
            raise ValueError("JWT secret must not be empty")
        self._secret = secret
        self._ttl = int(ttl_seconds)

    def issue(self, subject_id: int, email: str, *, role: Role = Role.USER, now: Optional[datetime] = None) -> str:
        now = now or datetime.now(timezone.utc)
        payload = {
            "sub": str(subject_id),
            "user_id": int(subject_id),
            "email": email,
            "role": role.value,
            "iat": now,
            "exp": now + timedelta(seconds=self._ttl),
        }
        return jwt.encode(payload, self._secret, algorithm=_ALGORITHM)

    def verify(self, token: str) -> TokenClaims:
        # Expired, forged and malformed tokens are reported the same way.
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[_ALGORITHM],
                options={"require": ["exp", "sub"]},
            )
            return TokenClaims(
                user_id=int(payload["user_id"]),
                email=str(payload["email"]),
                role=Role(payload.get("role", Role.USER.value)),
                expires_at=datetime.fromtimestamp(int(payload["exp"]), tz=timezone.utc),
            )
        except (jwt.InvalidTokenError, KeyError, TypeError, ValueError) as exc:
            raise InvalidTokenError() from exc
