from __future__ import annotations

from typing import Any, Dict, Optional

import mysql.connector

from ..core.exceptions import DuplicateEmailError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, is_duplicate_key
from .model import Admin
from .repository import AdminRepository


def _to_admin(row: Dict[str, Any]) -> Admin:
    return Admin(
        admin_id=int(row["admin_id"]),
        first_name=row["first_name"],
        last_name=row["last_name"],
        email=row["email"],
        password_hash=row["password_hash"],
        user_id=int(row["user_id"]),
    )


class MySQLAdminRepository(AdminRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get_one(self, where: str, value) -> Optional[Admin]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT admin_id, first_name, last_name, email, password_hash, user_id
                FROM admins
                WHERE {where}=%s
                """,
                (value,),
            )
            row = fetchone(cur)
            return _to_admin(row) if row else None

    def get_by_id(self, admin_id: int) -> Optional[Admin]:
        return self._get_one("admin_id", int(admin_id))

    def get_by_email(self, email: str) -> Optional[Admin]:
        return self._get_one("email", email)

    def get_by_user_id(self, user_id: int) -> Optional[Admin]:
        return self._get_one("user_id", int(user_id))

    def create_with_user(
        self,
        *,
        first_name: str,
        last_name: str,
        email: str,
        password_hash: str,
    ) -> Admin:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO users(first_name, last_name, email, password_hash, is_verified)
                    VALUES(%s,%s,%s,%s,1)
                    """,
                    (first_name, last_name, email, password_hash),
                )
                user_id = int(cur.lastrowid)
                cur.execute(
                    """
                    INSERT INTO admins(first_name, last_name, email, password_hash, user_id)
                    VALUES(%s,%s,%s,%s,%s)
                    """,
                    (first_name, last_name, email, password_hash, user_id),
                )
                admin_id = int(cur.lastrowid)
        except mysql.connector.IntegrityError as exc:
            if is_duplicate_key(exc):
                raise DuplicateEmailError() from exc
            raise

        return Admin(
            admin_id=admin_id,
            first_name=first_name,
            last_name=last_name,
            email=email,
            password_hash=password_hash,
            user_id=user_id,
        )
