from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceType
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
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
        raise NotImplementedError

    def list_for_user(
        self,
        user_id: int,
        *,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> Sequence[AttendanceRecord]:
        """Rows newest first, bounded by the inclusive [start, end] range."""

        raise NotImplementedError


class StoredDescriptorLookup(Protocol):
    def get_for_user(self, user_id: int) -> Optional[Sequence[float]]:
        raise NotImplementedError


class NoStoredDescriptors(StoredDescriptorLookup):
    """No face baselines are enrolled yet, so every lookup comes back empty."""

    def get_for_user(self, user_id: int) -> Optional[Sequence[float]]:
        return None
