from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Optional

import pytest

from authflow.attendance.model import AttendanceRecord
from authflow.container import assemble
from authflow.core.enums import AttendanceType
from authflow.core.exceptions import DeliveryFailedError, DuplicateEmailError, UploadFailedError, UserLinkedToAdminError
from authflow.security.tokens import TokenIssuer
from authflow.users.model import Admin, User

FIXED_NOW = datetime(2026, 2, 10, 8, 30, 0)


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


class InMemoryUsers:
    def __init__(self):
        self.rows: dict[int, User] = {}
        self.linked_user_ids: set[int] = set()
        self._id = 0

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.rows.get(int(user_id))

    def get_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self.rows.values() if u.email == email), None)

    def create_user(self, *, first_name, last_name, email, password_hash, is_verified=False) -> int:
        # Stands in for the UNIQUE key on users.email.
        if self.get_by_email(email):
            raise DuplicateEmailError()
        self._id += 1
        self.rows[self._id] = User(
            user_id=self._id,
            first_name=first_name,
            last_name=last_name,
            email=email,
            password_hash=password_hash,
            is_verified=bool(is_verified),
        )
        return self._id

    def save(self, user: User) -> bool:
        if user.user_id not in self.rows:
            return False
        other = self.get_by_email(user.email)
        if other and other.user_id != user.user_id:
            raise DuplicateEmailError()
        self.rows[user.user_id] = user
        return True

    def set_otp(self, user_id: int, *, otp: str, otp_expiry: datetime) -> bool:
        user = self.rows.get(int(user_id))
        if not user:
            return False
        self.rows[user.user_id] = user.with_otp(otp, otp_expiry)
        return True

    def consume_otp(self, user_id: int, *, otp: str, now: datetime) -> bool:
        user = self.rows.get(int(user_id))
        if not user or user.otp != otp or not user.otp_expiry or user.otp_expiry < now:
            return False
        self.rows[user.user_id] = replace(user.with_otp(None, None), is_verified=True)
        return True

    def set_profile_photo(self, user_id: int, *, url: str) -> bool:
        user = self.rows.get(int(user_id))
        if not user:
            return False
        self.rows[user.user_id] = replace(user, profile_photo_url=url)
        return True

    def delete_by_id(self, user_id: int) -> bool:
        # Stands in for fk_admins_user.
        if int(user_id) in self.linked_user_ids:
            raise UserLinkedToAdminError()
        return self.rows.pop(int(user_id), None) is not None

    def count_all(self) -> int:
        return len(self.rows)


class InMemoryAdmins:
    def __init__(self, users: InMemoryUsers):
        self._users = users
        self.rows: dict[int, Admin] = {}
        self._id = 0

    def get_by_id(self, admin_id: int) -> Optional[Admin]:
        return self.rows.get(int(admin_id))

    def get_by_email(self, email: str) -> Optional[Admin]:
        return next((a for a in self.rows.values() if a.email == email), None)

    def get_by_user_id(self, user_id: int) -> Optional[Admin]:
        return next((a for a in self.rows.values() if a.user_id == int(user_id)), None)

    def create_with_user(self, *, first_name, last_name, email, password_hash) -> Admin:
        if self.get_by_email(email):
            raise DuplicateEmailError()
        user_id = self._users.create_user(
            first_name=first_name,
            last_name=last_name,
            email=email,
            password_hash=password_hash,
            is_verified=True,
        )
        self._users.linked_user_ids.add(user_id)
        self._id += 1
        admin = Admin(
            admin_id=self._id,
            first_name=first_name,
            last_name=last_name,
            email=email,
            password_hash=password_hash,
            user_id=user_id,
        )
        self.rows[self._id] = admin
        return admin


class InMemoryAttendance:
    def __init__(self):
        self.rows: list[AttendanceRecord] = []

    def create(self, *, user_id, type: AttendanceType, timestamp, image_url, face_verified, face_recognition_data):
        rec = AttendanceRecord(
            attendance_id=len(self.rows) + 1,
            user_id=int(user_id),
            type=type,
            timestamp=timestamp,
            image_url=image_url,
            face_verified=bool(face_verified),
            face_recognition_data=face_recognition_data,
        )
        self.rows.append(rec)
        return rec

    def list_for_user(self, user_id, *, start=None, end=None):
        items = [
            r
            for r in self.rows
            if r.user_id == int(user_id)
            and (start is None or r.timestamp >= start)
            and (end is None or r.timestamp <= end)
        ]
        items.sort(key=lambda r: (r.timestamp, r.attendance_id), reverse=True)
        return items


class RecordingMailer:
    def __init__(self, *, fail: bool = False):
        self.sent: list[tuple[str, str, str]] = []
        self.fail = fail

    def send(self, to_email: str, subject: str, body: str) -> None:
        if self.fail:
            raise DeliveryFailedError()
        self.sent.append((to_email, subject, body))


class MemoryStorage:
    def __init__(self, *, fail: bool = False):
        self.uploads: list[tuple[str, bytes]] = []
        self.fail = fail

    def upload(self, data: bytes, *, folder: str, filename: Optional[str] = None) -> str:
        if self.fail:
            raise UploadFailedError()
        self.uploads.append((folder, data))
        return f"https://blob.test/{folder}/{len(self.uploads)}.jpg"


@pytest.fixture()
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(FIXED_NOW)


@pytest.fixture()
def users() -> InMemoryUsers:
    return InMemoryUsers()


@pytest.fixture()
def admins(users) -> InMemoryAdmins:
    return InMemoryAdmins(users)


@pytest.fixture()
def attendance_repo() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture()
def mailer() -> RecordingMailer:
    return RecordingMailer()


@pytest.fixture()
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture()
def tokens() -> TokenIssuer:
    return TokenIssuer("test-jwt-secret-0123456789abcdef", ttl_seconds=3600)


@pytest.fixture()
def container(users, admins, attendance_repo, mailer, storage, tokens):
    return assemble(
        users_repo=users,
        admins_repo=admins,
        attendance_repo=attendance_repo,
        tokens=tokens,
        mailer=mailer,
        storage=storage,
    )


@pytest.fixture()
def client(container, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    from authflow.main import create_app

    app = create_app(container)
    with app.test_client() as c:
        yield c


def last_otp(mailer: RecordingMailer, users: InMemoryUsers, email: str) -> str:
    """Code most recently stored for ``email`` (the mail body carries the same value)."""
    user = users.get_by_email(email)
    assert user is not None and user.otp is not None
    assert user.otp in mailer.sent[-1][2]
    return user.otp
