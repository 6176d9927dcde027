from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import day_bounds, now_local
from ..core.constants import ATTENDANCE_PHOTO_FOLDER
from ..core.enums import AttendanceType
from ..core.exceptions import UserNotFoundError, ValidationError
from ..storage.blob import BlobStorage
from ..users.repository import UserRepository
from .factory import FaceVerificationStrategyFactory
from .model import AttendanceRecord, FaceRecognitionResult, MarkResult
from .repository import AttendanceRepository, NoStoredDescriptors, StoredDescriptorLookup

logger = logging.getLogger(__name__)


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        users: UserRepository,
        storage: BlobStorage,
        *,
        strategy_factory: FaceVerificationStrategyFactory,
        descriptors: Optional[StoredDescriptorLookup] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._attendance = attendance
        self._users = users
        self._storage = storage
        self._factory = strategy_factory
        self._descriptors = descriptors or NoStoredDescriptors()
        self._clock = clock

    @staticmethod
    def _parse_type(value) -> AttendanceType:
        if isinstance(value, AttendanceType):
            return value
        try:
            return AttendanceType(str(value or "").strip().upper())
        except ValueError:
            raise ValidationError("Type must be either 'IN' or 'OUT'")

    def mark(
        self,
        user_id: int,
        type: AttendanceType | str,
        *,
        image: Optional[bytes] = None,
        filename: Optional[str] = None,
        descriptor: Optional[Sequence[float]] = None,
        use_cloud_vision: bool = False,
        now: Optional[datetime] = None,
    ) -> MarkResult:
        """Record one IN/OUT event.

        With an image (even an empty one) the upload happens first, and a
        failure aborts before anything is stored. Then exactly one
        verification strategy runs.
        Consecutive INs or an OUT without an IN are accepted as-is.
        """
        attendance_type = self._parse_type(type)

        user = self._users.get_by_id(user_id)
        if not user:
            raise UserNotFoundError()

        image_url: Optional[str] = None
        result: Optional[FaceRecognitionResult] = None
        if image is not None:
            image_url = self._storage.upload(image, folder=ATTENDANCE_PHOTO_FOLDER, filename=filename)

            strategy = self._factory.select(use_cloud_vision=use_cloud_vision, descriptor=descriptor)
            stored = self._descriptors.get_for_user(user.user_id) if descriptor else None
            result = strategy.verify(image=image, descriptor=descriptor, stored_descriptor=stored)

        record = self._attendance.create(
            user_id=user.user_id,
            type=attendance_type,
            timestamp=now or self._clock(),
            image_url=image_url,
            face_verified=bool(result and result.verified),
            face_recognition_data=result.to_json() if result else None,
        )
        logger.info(
            "Attendance %s marked for user=%s (verified=%s, method=%s)",
            attendance_type.value,
            user.user_id,
            record.face_verified,
            result.method if result else None,
        )
        return MarkResult(attendance=record, face_recognition=result)

    def list_for_user(
        self,
        user_id: int,
        *,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> Sequence[AttendanceRecord]:
        if start and end and start > end:
            raise ValidationError("startDate must not be after endDate")
        if not self._users.get_by_id(user_id):
            raise UserNotFoundError()
        return self._attendance.list_for_user(user_id, start=start, end=end)

    def today(self, user_id: int, *, now: Optional[datetime] = None) -> Sequence[AttendanceRecord]:
        start, end = day_bounds((now or self._clock()).date())
        return self.list_for_user(user_id, start=start, end=end)
