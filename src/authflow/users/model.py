from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class User:
    """Domain entity: User.

    Note: Plain data object (no DB access code). ``otp`` and ``otp_expiry``
    are either both set or both None.
    """

    user_id: int
    first_name: str
    last_name: str
    email: str
    password_hash: str
    is_verified: bool = False
    otp: Optional[str] = None
    otp_expiry: Optional[datetime] = None
    profile_photo_url: Optional[str] = None

    def with_otp(self, otp: Optional[str], otp_expiry: Optional[datetime]) -> "User":
        return replace(self, otp=otp, otp_expiry=otp_expiry)

    def public(self) -> "PublicUser":
        return PublicUser(
            user_id=self.user_id,
            first_name=self.first_name,
            last_name=self.last_name,
            email=self.email,
            is_verified=self.is_verified,
            profile_photo_url=self.profile_photo_url,
        )


@dataclass(frozen=True)
class Admin:
    """Domain entity: Admin, bound 1:1 to the User that hosts its OTP state."""

    admin_id: int
    first_name: str
    last_name: str
    email: str
    password_hash: str
    user_id: int

    def public(self) -> "PublicAdmin":
        return PublicAdmin(
            admin_id=self.admin_id,
            first_name=self.first_name,
            last_name=self.last_name,
            email=self.email,
            user_id=self.user_id,
        )


@dataclass(frozen=True)
class PublicUser:
    """User as returned to callers (no password hash, no OTP)."""

    user_id: int
    first_name: str
    last_name: str
    email: str
    is_verified: bool
    profile_photo_url: Optional[str]

    def to_dict(self) -> dict:
        return {
            "id": self.user_id,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
            "isVerified": self.is_verified,
            "profilePhotoUrl": self.profile_photo_url,
        }


@dataclass(frozen=True)
class PublicAdmin:
    admin_id: int
    first_name: str
    last_name: str
    email: str
    user_id: int

    def to_dict(self) -> dict:
        return {
            "id": self.admin_id,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
            "userId": self.user_id,
        }


@dataclass(frozen=True)
class UserUpdate:
    """Partial update requested by an admin.

    Each field left as None means "leave unchanged".
    """

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    is_verified: Optional[bool] = None

    def is_empty(self) -> bool:
        return all(
            v is None
            for v in (self.first_name, self.last_name, self.email, self.password, self.is_verified)
        )
