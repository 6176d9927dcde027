from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import normalize_email, require_email, require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH, PROFILE_PHOTO_FOLDER
from ..core.enums import Role
from ..core.exceptions import (
    AdminNotFoundError,
    AlreadyVerifiedError,
    DuplicateEmailError,
    InvalidCredentialsError,
    InvalidOrExpiredOtpError,
    NotVerifiedError,
    UserLinkedToAdminError,
    UserNotFoundError,
    ValidationError,
)
from ..otp.service import OtpService
from ..security.tokens import TokenIssuer
from ..storage.blob import BlobStorage
from .model import PublicAdmin, PublicUser, User, UserUpdate
from .repository import AdminRepository, UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoginResult:
    user: PublicUser
    token: str


@dataclass(frozen=True)
class AdminLoginResult:
    admin: PublicAdmin
    token: str


def _ensure_email_available(users: UserRepository, admins: AdminRepository, email: str) -> None:
    # Advisory only: the unique keys in the store have the final word.
    if users.get_by_email(email) or admins.get_by_email(email):
        raise DuplicateEmailError()


def _check_password(password_hash: str, password: str) -> bool:
    if not isinstance(password, str):
        return False
    try:
        return check_password_hash(password_hash, password)
    except (ValueError, TypeError):
        # e.g. placeholder or corrupted hashes
        return False


class AuthService:
    """Use cases: register, verify email, log in."""

    def __init__(self, users: UserRepository, admins: AdminRepository, otp: OtpService, tokens: TokenIssuer):
        self._users = users
        self._admins = admins
        self._otp = otp
        self._tokens = tokens

    def register(self, *, first_name: str, last_name: str, email: str, password: str) -> PublicUser:
        first_name = require_non_empty(first_name, "First name")
        last_name = require_non_empty(last_name, "Last name")
        email = require_email(email)
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)

        _ensure_email_available(self._users, self._admins, email)

        user_id = self._users.create_user(
            first_name=first_name,
            last_name=last_name,
            email=email,
            password_hash=generate_password_hash(password),
            is_verified=False,
        )
        user = self._users.get_by_id(user_id)
        if not user:
            raise UserNotFoundError()

        self._otp.issue_for_user(user)
        logger.info("Registered user %s (id=%s)", email, user_id)
        return user.public()

    def verify_email(self, *, email: str, otp: str) -> None:
        if not self._otp.validate(email, otp):
            raise InvalidOrExpiredOtpError()

    def resend_otp(self, *, email: str) -> None:
        user = self._users.get_by_email(normalize_email(email))
        if not user:
            raise UserNotFoundError()
        if user.is_verified:
            raise AlreadyVerifiedError()
        self._otp.issue_for_user(user)

    def login(self, *, email: str, password: str) -> LoginResult:
        user = self._users.get_by_email(normalize_email(email))
        # Same error for unknown email and wrong password.
        if not user or not _check_password(user.password_hash, password or ""):
            logger.info("Failed login for %s", normalize_email(email))
            raise InvalidCredentialsError()

        if not user.is_verified:
            raise NotVerifiedError()

        token = self._tokens.issue(user.user_id, user.email, role=Role.USER)
        return LoginResult(user=user.public(), token=token)


class ProfileService:
    def __init__(self, users: UserRepository, storage: BlobStorage):
        self._users = users
        self._storage = storage

    def get_profile(self, user_id: int) -> PublicUser:
        user = self._users.get_by_id(user_id)
        if not user:
            raise UserNotFoundError()
        return user.public()

    def update_profile_photo(self, user_id: int, *, image: Optional[bytes], filename: Optional[str] = None) -> PublicUser:
        if not image:
            raise ValidationError("No file uploaded")

        user = self._users.get_by_id(user_id)
        if not user:
            raise UserNotFoundError()

        url = self._storage.upload(image, folder=PROFILE_PHOTO_FOLDER, filename=filename)
        self._users.set_profile_photo(user.user_id, url=url)
        return replace(user, profile_photo_url=url).public()


class AdminService:
    """Use cases: admin registration, OTP login and user management."""

    def __init__(
        self,
        users: UserRepository,
        admins: AdminRepository,
        otp: OtpService,
        tokens: TokenIssuer,
    ):
        self._users = users
        self._admins = admins
        self._otp = otp
        self._tokens = tokens

    def register_admin(self, *, first_name: str, last_name: str, email: str, password: str) -> PublicAdmin:
        first_name = require_non_empty(first_name, "First name")
        last_name = require_non_empty(last_name, "Last name")
        email = require_email(email)
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)

        _ensure_email_available(self._users, self._admins, email)

        admin = self._admins.create_with_user(
            first_name=first_name,
            last_name=last_name,
            email=email,
            password_hash=generate_password_hash(password),
        )
        logger.info("Registered admin %s (id=%s, user_id=%s)", email, admin.admin_id, admin.user_id)
        return admin.public()

    def _linked_user(self, email: str):
        admin = self._admins.get_by_email(normalize_email(email))
        if not admin:
            raise AdminNotFoundError()
        user = self._users.get_by_id(admin.user_id)
        if not user:
            raise AdminNotFoundError()
        return admin, user

    def request_admin_login(self, *, email: str) -> None:
        admin, user = self._linked_user(email)
        self._otp.issue_for_user(user, greeting_name=admin.first_name, to_email=admin.email)

    def complete_admin_login(self, *, email: str, otp: str) -> AdminLoginResult:
        admin, user = self._linked_user(email)
        self._otp.consume_for_admin(user, otp)

        token = self._tokens.issue(admin.admin_id, admin.email, role=Role.ADMIN)
        logger.info("Admin %s logged in", admin.email)
        return AdminLoginResult(admin=admin.public(), token=token)

    def get_admin_profile(self, admin_id: int) -> PublicAdmin:
        admin = self._admins.get_by_id(admin_id)
        if not admin:
            raise AdminNotFoundError()
        return admin.public()

    def count_users(self) -> int:
        return self._users.count_all()

    def add_user(
        self,
        *,
        first_name: str,
        last_name: str,
        email: str,
        password: str,
        is_verified: bool = False,
    ) -> PublicUser:
        first_name = require_non_empty(first_name, "First name")
        last_name = require_non_empty(last_name, "Last name")
        email = require_email(email)
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)

        _ensure_email_available(self._users, self._admins, email)

        user_id = self._users.create_user(
            first_name=first_name,
            last_name=last_name,
            email=email,
            password_hash=generate_password_hash(password),
            is_verified=bool(is_verified),
        )
        user = self._users.get_by_id(user_id)
        if not user:
            raise UserNotFoundError()

        if not user.is_verified:
            self._otp.issue_for_user(user)
        return user.public()

    def update_user(self, user_id: int, update: UserUpdate) -> PublicUser:
        if update.is_empty():
            raise ValidationError("At least one field must be provided for update")

        user: User | None = self._users.get_by_id(user_id)
        if not user:
            raise UserNotFoundError()

        if update.email is not None:
            email = require_email(update.email)
            if email != user.email:
                # An admin-linked User keeps the admin's address.
                if self._admins.get_by_user_id(user.user_id):
                    raise UserLinkedToAdminError("Cannot change the email of a user linked to an admin account")
                _ensure_email_available(self._users, self._admins, email)
                user = replace(user, email=email)

        if update.first_name is not None:
            user = replace(user, first_name=require_non_empty(update.first_name, "First name"))
        if update.last_name is not None:
            user = replace(user, last_name=require_non_empty(update.last_name, "Last name"))
        if update.password is not None:
            require_min_length(update.password, "Password", MIN_PASSWORD_LENGTH)
            user = replace(user, password_hash=generate_password_hash(update.password))
        if update.is_verified is not None:
            user = replace(user, is_verified=update.is_verified)
            if update.is_verified:
                user = user.with_otp(None, None)

        if not self._users.save(user):
            raise UserNotFoundError()
        return user.public()

    def delete_user(self, user_id: int) -> None:
        user = self._users.get_by_id(user_id)
        if not user:
            raise UserNotFoundError()

        if self._admins.get_by_user_id(user.user_id):
            raise UserLinkedToAdminError()

        if not self._users.delete_by_id(user.user_id):
            raise UserNotFoundError()
        logger.info("Deleted user id=%s", user.user_id)
