from __future__ import annotations

import logging
import secrets
from datetime import datetime, timedelta
from typing import Callable, Optional

from ..common.datetime_utils import now_local
from ..common.validators import normalize_email
from ..core.constants import OTP_MAX, OTP_MIN, OTP_TTL_MINUTES
from ..core.exceptions import InvalidOtpError, NoOtpRequestedError, OtpExpiredError, UserNotFoundError
from ..notifications.mailer import Mailer
from ..notifications.templates import render_otp_email
from ..users.model import User
from ..users.repository import UserRepository

logger = logging.getLogger(__name__)


def generate_otp() -> str:
    """Six-digit numeric code in [100000, 999999]."""
    return str(OTP_MIN + secrets.randbelow(OTP_MAX - OTP_MIN + 1))


def _matches(stored: str, candidate: Optional[str]) -> bool:
    return secrets.compare_digest(stored.encode("utf-8"), str(candidate or "").strip().encode("utf-8"))


class OtpService:
    """Issues, validates and consumes one-time codes stored on the User row."""

    def __init__(
        self,
        users: UserRepository,
        mailer: Mailer,
        *,
        clock: Callable[[], datetime] = now_local,
        ttl_minutes: int = OTP_TTL_MINUTES,
    ):
        self._users = users
        self._mailer = mailer
        self._clock = clock
        self._ttl = timedelta(minutes=ttl_minutes)

    def generate(self) -> str:
        return generate_otp()

    def issue(self, email: str) -> str:
        user = self._users.get_by_email(normalize_email(email))
        if not user:
            raise UserNotFoundError()
        return self.issue_for_user(user)

    def issue_for_user(
        self,
        user: User,
        *,
        greeting_name: Optional[str] = None,
        to_email: Optional[str] = None,
    ) -> str:
        """Store a fresh code on ``user`` and mail it (to ``to_email`` when given).

        The stored code survives a delivery failure; ``DeliveryFailedError``
        still reaches the caller.
        """
        otp = self.generate()
        expiry = self._clock() + self._ttl
        if not self._users.set_otp(user.user_id, otp=otp, otp_expiry=expiry):
            raise UserNotFoundError()
        logger.info("OTP issued for %s (expires %s)", user.email, expiry.isoformat(timespec="seconds"))

        subject, body = render_otp_email(greeting_name or user.first_name, otp)
        self._mailer.send(to_email or user.email, subject, body)
        return otp

    def validate(self, email: str, candidate: str) -> bool:
        user = self._users.get_by_email(normalize_email(email))
        if not user or not user.otp or not user.otp_expiry:
            return False

        now = self._clock()
        if now > user.otp_expiry:
            return False
        if not _matches(user.otp, candidate):
            return False

        return self._users.consume_otp(user.user_id, otp=user.otp, now=now)

    def consume_for_admin(self, user: User, candidate: str) -> None:
        """Same transition as ``validate`` but each failure has its own error."""
        if not user.otp or not user.otp_expiry:
            raise NoOtpRequestedError()

        now = self._clock()
        if now > user.otp_expiry:
            raise OtpExpiredError()
        if not _matches(user.otp, candidate):
            raise InvalidOtpError()

        # Another request consumed the code between our read and this update.
        if not self._users.consume_otp(user.user_id, otp=user.otp, now=now):
            raise InvalidOtpError()
