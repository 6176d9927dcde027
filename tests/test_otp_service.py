from __future__ import annotations

from datetime import timedelta

import pytest
from werkzeug.security import generate_password_hash

from authflow.core.exceptions import (
    DeliveryFailedError,
    InvalidOtpError,
    NoOtpRequestedError,
    OtpExpiredError,
    UserNotFoundError,
)
from authflow.otp.service import OtpService, generate_otp

from conftest import RecordingMailer


def _new_user(users, email="bob@x.com"):
    user_id = users.create_user(
        first_name="Bob",
        last_name="B",
        email=email,
        password_hash=generate_password_hash("secret1"),
    )
    return users.get_by_id(user_id)


def test_generate_otp_is_six_digits():
    for _ in range(200):
        code = generate_otp()
        assert len(code) == 6
        assert code.isdigit()
        assert 100000 <= int(code) <= 999999


def test_issue_sets_code_and_expiry_ten_minutes_ahead(users, mailer, clock):
    _new_user(users)
    svc = OtpService(users, mailer, clock=clock)

    code = svc.issue("bob@x.com")

    user = users.get_by_email("bob@x.com")
    assert user.otp == code
    assert user.otp_expiry == clock.now + timedelta(minutes=10)
    assert mailer.sent[-1][0] == "bob@x.com"
    assert code in mailer.sent[-1][2]


def test_issue_unknown_email_raises(users, mailer, clock):
    svc = OtpService(users, mailer, clock=clock)
    with pytest.raises(UserNotFoundError):
        svc.issue("ghost@x.com")


def test_issue_keeps_stored_code_when_delivery_fails(users, clock):
    _new_user(users)
    svc = OtpService(users, RecordingMailer(fail=True), clock=clock)

    with pytest.raises(DeliveryFailedError):
        svc.issue("bob@x.com")

    user = users.get_by_email("bob@x.com")
    assert user.otp is not None
    assert svc.validate("bob@x.com", user.otp) is True


def test_validate_consumes_code_once(users, mailer, clock):
    _new_user(users)
    svc = OtpService(users, mailer, clock=clock)
    code = svc.issue("bob@x.com")

    assert svc.validate("bob@x.com", code) is True
    user = users.get_by_email("bob@x.com")
    assert user.is_verified is True
    assert user.otp is None and user.otp_expiry is None

    assert svc.validate("bob@x.com", code) is False


@pytest.mark.parametrize("candidate", ["000000", "", "abcdef"])
def test_validate_wrong_code_leaves_state_unchanged(users, mailer, clock, candidate):
    _new_user(users)
    svc = OtpService(users, mailer, clock=clock)
    svc.issue("bob@x.com")
    before = users.get_by_email("bob@x.com")

    assert svc.validate("bob@x.com", candidate) is False
    assert users.get_by_email("bob@x.com") == before


def test_validate_expired_code(users, mailer, clock):
    _new_user(users)
    svc = OtpService(users, mailer, clock=clock)
    code = svc.issue("bob@x.com")

    clock.now = clock.now + timedelta(minutes=10, seconds=1)
    before = users.get_by_email("bob@x.com")

    assert svc.validate("bob@x.com", code) is False
    assert users.get_by_email("bob@x.com") == before


def test_validate_exactly_at_expiry_still_accepted(users, mailer, clock):
    _new_user(users)
    svc = OtpService(users, mailer, clock=clock)
    code = svc.issue("bob@x.com")

    clock.now = clock.now + timedelta(minutes=10)
    assert svc.validate("bob@x.com", code) is True


def test_validate_without_code_or_user(users, mailer, clock):
    _new_user(users)
    svc = OtpService(users, mailer, clock=clock)

    assert svc.validate("bob@x.com", "123456") is False
    assert svc.validate("ghost@x.com", "123456") is False


def test_consume_for_admin_reports_each_failure(users, mailer, clock):
    user = _new_user(users)
    svc = OtpService(users, mailer, clock=clock)

    with pytest.raises(NoOtpRequestedError):
        svc.consume_for_admin(user, "123456")

    code = svc.issue_for_user(user)
    with pytest.raises(InvalidOtpError):
        svc.consume_for_admin(users.get_by_id(user.user_id), "x" + code[1:])

    clock.now = clock.now + timedelta(minutes=11)
    with pytest.raises(OtpExpiredError):
        svc.consume_for_admin(users.get_by_id(user.user_id), code)


def test_consume_for_admin_loses_race_after_other_consumer(users, mailer, clock):
    user = _new_user(users)
    svc = OtpService(users, mailer, clock=clock)
    code = svc.issue_for_user(user)
    stale = users.get_by_id(user.user_id)

    svc.consume_for_admin(stale, code)
    assert users.get_by_id(user.user_id).otp is None

    # Second request still holds the row it read before the first one cleared it.
    with pytest.raises(InvalidOtpError):
        svc.consume_for_admin(stale, code)
