from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from ..core.enums import AttendanceType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import AttendanceRecord
from .repository import AttendanceRepository


def _to_record(r: Dict[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        user_id=int(r["user_id"]),
        type=AttendanceType(r["type"]),
        timestamp=r["timestamp"],
        image_url=r.get("image_url"),
        face_verified=bool(r.get("face_verified", False)),
        face_recognition_data=r.get("face_recognition_data"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        user_id: int,
        type: AttendanceType,
        timestamp: datetime,
        image_url: Optional[str],
        face_verified: bool,
        face_recognition_data: Optional[str],
    ) -> AttendanceRecord:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance(user_id, type, timestamp, image_url, face_verified, face_recognition_data)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (int(user_id), type.value, timestamp, image_url, int(face_verified), face_recognition_data),
            )
            attendance_id = int(cur.lastrowid)

        return AttendanceRecord(
            attendance_id=attendance_id,
            user_id=int(user_id),
            type=type,
            timestamp=timestamp,
            image_url=image_url,
            face_verified=bool(face_verified),
            face_recognition_data=face_recognition_data,
        )

    def list_for_user(
        self,
        user_id: int,
        *,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> Sequence[AttendanceRecord]:
        where = ["user_id=%s"]
        params: list[Any] = [int(user_id)]
        if start is not None:
            where.append("timestamp >= %s")
            params.append(start)
        if end is not None:
            where.append("timestamp <= %s")
            params.append(end)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT attendance_id, user_id, type, timestamp, image_url, face_verified, face_recognition_data
                FROM attendance
                WHERE {' AND '.join(where)}
                ORDER BY timestamp DESC, attendance_id DESC
                """,
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]
