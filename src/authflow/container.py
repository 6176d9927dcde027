from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .attendance.factory import FaceVerificationStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .attendance.strategies.cloud_vision_strategy import CloudVisionStrategy
from .database.connection import DatabaseConnection, DBConfig
from .notifications.mailer import LoggingMailer, Mailer, SmtpMailer
from .otp.service import OtpService
from .security.tokens import TokenIssuer, parse_duration
from .storage.blob import BlobStorage, CloudinaryBlobStorage, LocalBlobStorage
from .users.mysql_admin_repository import MySQLAdminRepository
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import AdminRepository, UserRepository
from .users.service import AdminService, AuthService, ProfileService


@dataclass(frozen=True)
class Container:
    """Store handles and services shared by every request, built once at startup."""

    conn: Optional[DatabaseConnection]

    users_repo: UserRepository
    admins_repo: AdminRepository
    attendance_repo: AttendanceRepository

    tokens: TokenIssuer
    mailer: Mailer
    storage: BlobStorage

    otp_service: OtpService
    auth_service: AuthService
    profile_service: ProfileService
    admin_service: AdminService
    attendance_service: AttendanceService


def assemble(
    *,
    users_repo: UserRepository,
    admins_repo: AdminRepository,
    attendance_repo: AttendanceRepository,
    tokens: TokenIssuer,
    mailer: Mailer,
    storage: BlobStorage,
    cloud_vision: Optional[CloudVisionStrategy] = None,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    otp_service = OtpService(users_repo, mailer)
    strategy_factory = FaceVerificationStrategyFactory(cloud_vision=cloud_vision or CloudVisionStrategy(None))

    return Container(
        conn=conn,
        users_repo=users_repo,
        admins_repo=admins_repo,
        attendance_repo=attendance_repo,
        tokens=tokens,
        mailer=mailer,
        storage=storage,
        otp_service=otp_service,
        auth_service=AuthService(users_repo, admins_repo, otp_service, tokens),
        profile_service=ProfileService(users_repo, storage),
        admin_service=AdminService(users_repo, admins_repo, otp_service, tokens),
        attendance_service=AttendanceService(
            attendance_repo,
            users_repo,
            storage,
            strategy_factory=strategy_factory,
        ),
    )


def build_mailer(settings: Any) -> Mailer:
    if getattr(settings, "MAIL_BACKEND", "log") == "smtp":
        return SmtpMailer(
            host=settings.MAIL_HOST,
            port=settings.MAIL_PORT,
            sender=settings.MAIL_SENDER,
            user=settings.MAIL_USER,
            password=settings.MAIL_PASSWORD,
            use_tls=settings.MAIL_USE_TLS,
            timeout=settings.MAIL_TIMEOUT_SECONDS,
        )
    return LoggingMailer()


def build_storage(settings: Any) -> BlobStorage:
    if getattr(settings, "STORAGE_BACKEND", "local") == "cloudinary":
        return CloudinaryBlobStorage(settings.CLOUDINARY_URL, timeout=settings.UPLOAD_TIMEOUT_SECONDS)
    return LocalBlobStorage(settings.UPLOAD_DIR)


def build_container(*, settings: Any) -> Container:
    conn = DatabaseConnection(DBConfig.from_dict(settings.DB_CONFIG))

    return assemble(
        users_repo=MySQLUserRepository(conn),
        admins_repo=MySQLAdminRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        tokens=TokenIssuer(settings.JWT_SECRET, ttl_seconds=parse_duration(settings.JWT_EXPIRES_IN)),
        mailer=build_mailer(settings),
        storage=build_storage(settings),
        cloud_vision=CloudVisionStrategy(getattr(settings, "GOOGLE_CLOUD_VISION_API_KEY", "")),
        conn=conn,
    )
