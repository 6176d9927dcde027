import json
from datetime import datetime, timedelta

import pytest

from authflow.attendance.factory import FaceVerificationStrategyFactory
from authflow.attendance.service import AttendanceService
from authflow.attendance.strategies.cloud_vision_strategy import CloudVisionStrategy
from authflow.core.enums import AttendanceType
from authflow.core.exceptions import UploadFailedError, UserNotFoundError, ValidationError


class StubDescriptors:
    def __init__(self, stored):
        self.stored = stored

    def get_for_user(self, user_id):
        return self.stored


@pytest.fixture()
def user_id(users):
    return users.create_user(
        first_name="Alice", last_name="A", email="alice@x.com", password_hash="h", is_verified=True
    )


def _service(attendance_repo, users, storage, clock, descriptors=None):
    return AttendanceService(
        attendance_repo,
        users,
        storage,
        strategy_factory=FaceVerificationStrategyFactory(cloud_vision=CloudVisionStrategy(api_key=None)),
        descriptors=descriptors,
        clock=clock,
    )


@pytest.fixture()
def svc(attendance_repo, users, storage, clock):
    return _service(attendance_repo, users, storage, clock)


def test_mark_in_with_plain_image_uses_basic(svc, user_id, storage, attendance_repo, fixed_now):
    result = svc.mark(user_id, "IN", image=b"12345", filename="me.jpg")

    rec = result.attendance
    assert rec.type == AttendanceType.IN
    assert rec.face_verified is True
    assert rec.timestamp == fixed_now
    assert rec.image_url == "https://blob.test/attendance-photos/1.jpg"
    assert json.loads(rec.face_recognition_data) == {
        "verified": True,
        "confidence": 0.5,
        "method": "basic",
        "error": None,
    }
    assert storage.uploads == [("attendance-photos", b"12345")]
    assert attendance_repo.rows == [rec]


def test_mark_without_image_stores_bare_record(svc, user_id, storage):
    result = svc.mark(user_id, "out")

    assert result.attendance.type == AttendanceType.OUT
    assert result.attendance.image_url is None
    assert result.attendance.face_verified is False
    assert result.attendance.face_recognition_data is None
    assert result.face_recognition is None
    assert storage.uploads == []


def test_mark_with_descriptor_compares_to_baseline(attendance_repo, users, storage, clock, user_id):
    svc = _service(attendance_repo, users, storage, clock, descriptors=StubDescriptors([0.0, 0.0]))

    result = svc.mark(user_id, "IN", image=b"img", descriptor=[0.0, 0.0])

    assert result.face_recognition.method == "face-api.js"
    assert result.face_recognition.confidence == pytest.approx(1.0)


def test_mark_with_cloud_vision_flag_and_no_key(svc, user_id):
    result = svc.mark(user_id, "IN", image=b"img", descriptor=[0.1], use_cloud_vision=True)

    assert result.face_recognition.method == "cloud-vision-fallback"


def test_upload_failure_creates_no_record(svc, storage, attendance_repo, user_id):
    storage.fail = True

    with pytest.raises(UploadFailedError):
        svc.mark(user_id, "IN", image=b"img")
    assert attendance_repo.rows == []


def test_mark_unknown_user(svc):
    with pytest.raises(UserNotFoundError):
        svc.mark(42, "IN")


@pytest.mark.parametrize("value", ["", "BREAK", None])
def test_mark_rejects_invalid_type(svc, user_id, attendance_repo, value):
    with pytest.raises(ValidationError):
        svc.mark(user_id, value)
    assert attendance_repo.rows == []


def test_consecutive_marks_of_same_type_are_accepted(svc, user_id, attendance_repo):
    svc.mark(user_id, "IN")
    svc.mark(user_id, "IN")

    assert [r.type for r in attendance_repo.rows] == [AttendanceType.IN, AttendanceType.IN]


def test_list_is_newest_first_and_range_filtered(svc, user_id, fixed_now):
    for hours in (0, 2, 26):
        svc.mark(user_id, "IN", now=fixed_now - timedelta(hours=hours))

    everything = svc.list_for_user(user_id)
    assert [r.timestamp for r in everything] == sorted((r.timestamp for r in everything), reverse=True)
    assert len(everything) == 3

    recent = svc.list_for_user(user_id, start=fixed_now - timedelta(hours=3), end=fixed_now)
    assert len(recent) == 2


def test_list_rejects_inverted_range(svc, user_id, fixed_now):
    with pytest.raises(ValidationError):
        svc.list_for_user(user_id, start=fixed_now, end=fixed_now - timedelta(days=1))


def test_today_covers_midnight_to_next_midnight_inclusive(svc, user_id, fixed_now):
    svc.mark(user_id, "IN", now=datetime(2026, 2, 10, 0, 0, 0))
    svc.mark(user_id, "OUT", now=fixed_now + timedelta(hours=8))
    svc.mark(user_id, "IN", now=datetime(2026, 2, 11, 0, 0, 0))
    svc.mark(user_id, "OUT", now=datetime(2026, 2, 9, 23, 59, 59))
    svc.mark(user_id, "OUT", now=datetime(2026, 2, 11, 0, 0, 1))

    rows = svc.today(user_id)

    assert [r.timestamp for r in rows] == [
        datetime(2026, 2, 11, 0, 0, 0),
        fixed_now + timedelta(hours=8),
        datetime(2026, 2, 10, 0, 0, 0),
    ]


def test_records_are_scoped_to_their_user(svc, users, user_id):
    other = users.create_user(first_name="Bob", last_name="B", email="bob@x.com", password_hash="h")
    svc.mark(user_id, "IN")

    assert svc.list_for_user(other) == []


def test_mark_with_empty_image_still_runs_verification(svc, user_id, storage):
    result = svc.mark(user_id, "IN", image=b"", filename="empty.jpg")

    assert storage.uploads == [("attendance-photos", b"")]
    assert result.face_recognition.method == "basic"
    assert result.face_recognition.verified is False
    assert result.attendance.face_verified is False
    assert result.attendance.image_url is not None
