from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from .model import Admin, User


class UserRepository(Protocol):
    """Repository interface for User.

    Note (DIP): the service layer depends on this interface, not on a concrete DB.
    Writes that would duplicate an email raise ``DuplicateEmailError``.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def create_user(
        self,
        *,
        first_name: str,
        last_name: str,
        email: str,
        password_hash: str,
        is_verified: bool = False,
    ) -> int:
        raise NotImplementedError

    def save(self, user: User) -> bool:
        """Overwrite the mutable columns of an existing user."""

        raise NotImplementedError

    def set_otp(self, user_id: int, *, otp: str, otp_expiry: datetime) -> bool:
        raise NotImplementedError

    def consume_otp(self, user_id: int, *, otp: str, now: datetime) -> bool:
        """Atomically clear a matching unexpired OTP and mark the user verified.

        Returns True only for the caller whose update took effect.
        """

        raise NotImplementedError

    def set_profile_photo(self, user_id: int, *, url: str) -> bool:
        raise NotImplementedError

    def delete_by_id(self, user_id: int) -> bool:
        raise NotImplementedError

    def count_all(self) -> int:
        raise NotImplementedError


class AdminRepository(Protocol):
    def get_by_id(self, admin_id: int) -> Optional[Admin]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Admin]:
        raise NotImplementedError

    def get_by_user_id(self, user_id: int) -> Optional[Admin]:
        raise NotImplementedError

    def create_with_user(
        self,
        *,
        first_name: str,
        last_name: str,
        email: str,
        password_hash: str,
    ) -> Admin:
        """Insert a verified linked user and the admin row in one transaction."""

        raise NotImplementedError
