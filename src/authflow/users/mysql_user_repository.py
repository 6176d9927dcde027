from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

import mysql.connector
from mysql.connector import errorcode

from ..core.exceptions import DuplicateEmailError, UserLinkedToAdminError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, is_duplicate_key
from .model import User
from .repository import UserRepository

_USER_COLUMNS = """
    user_id, first_name, last_name, email, password_hash,
    is_verified, otp, otp_expiry, profile_photo_url
"""


def _to_user(row: Dict[str, Any]) -> User:
    return User(
        user_id=int(row["user_id"]),
        first_name=row["first_name"],
        last_name=row["last_name"],
        email=row["email"],
        password_hash=row["password_hash"],
        is_verified=bool(row.get("is_verified", False)),
        otp=row.get("otp"),
        otp_expiry=row.get("otp_expiry"),
        profile_photo_url=row.get("profile_photo_url"),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE user_id=%s", (int(user_id),))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def get_by_email(self, email: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE email=%s", (email,))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def create_user(
        self,
        *,
        first_name: str,
        last_name: str,
        email: str,
        password_hash: str,
        is_verified: bool = False,
    ) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO users(first_name, last_name, email, password_hash, is_verified)
                    VALUES(%s,%s,%s,%s,%s)
                    """,
                    (first_name, last_name, email, password_hash, int(is_verified)),
                )
                return int(cur.lastrowid)
        except mysql.connector.IntegrityError as exc:
            if is_duplicate_key(exc):
                raise DuplicateEmailError() from exc
            raise

    def save(self, user: User) -> bool:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    UPDATE users
                    SET first_name=%s, last_name=%s, email=%s, password_hash=%s,
                        is_verified=%s, otp=%s, otp_expiry=%s, profile_photo_url=%s
                    WHERE user_id=%s
                    """,
                    (
                        user.first_name,
                        user.last_name,
                        user.email,
                        user.password_hash,
                        int(user.is_verified),
                        user.otp,
                        user.otp_expiry,
                        user.profile_photo_url,
                        user.user_id,
                    ),
                )
                return cur.rowcount > 0
        except mysql.connector.IntegrityError as exc:
            if is_duplicate_key(exc):
                raise DuplicateEmailError() from exc
            raise

    def set_otp(self, user_id: int, *, otp: str, otp_expiry: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE users SET otp=%s, otp_expiry=%s WHERE user_id=%s",
                (otp, otp_expiry, int(user_id)),
            )
            return cur.rowcount > 0

    def consume_otp(self, user_id: int, *, otp: str, now: datetime) -> bool:
        # Single conditional UPDATE so two concurrent callers cannot both win.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE users
                SET otp=NULL, otp_expiry=NULL, is_verified=1
                WHERE user_id=%s AND otp=%s AND otp_expiry >= %s
                """,
                (int(user_id), otp, now),
            )
            return cur.rowcount > 0

    def set_profile_photo(self, user_id: int, *, url: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET profile_photo_url=%s WHERE user_id=%s", (url, int(user_id)))
            return cur.rowcount > 0

    def delete_by_id(self, user_id: int) -> bool:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute("DELETE FROM users WHERE user_id=%s", (int(user_id),))
                return cur.rowcount > 0
        except mysql.connector.IntegrityError as exc:
            # fk_admins_user still references the row.
            if exc.errno == errorcode.ER_ROW_IS_REFERENCED_2:
                raise UserLinkedToAdminError() from exc
            raise

    def count_all(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS total FROM users")
            row = fetchone(cur)
            return int(row["total"]) if row else 0
