from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import AttendanceType


@dataclass(frozen=True)
class FaceRecognitionResult:
    """Outcome of one face verification strategy (not persisted as an entity)."""

    verified: bool
    confidence: float
    method: str
    error: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "verified": self.verified,
            "confidence": self.confidence,
            "method": self.method,
            "error": self.error,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict())


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: an immutable IN/OUT event."""

    attendance_id: int
    user_id: int
    type: AttendanceType
    timestamp: datetime
    image_url: Optional[str] = None
    face_verified: bool = False
    face_recognition_data: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.attendance_id,
            "userId": self.user_id,
            "type": self.type.value,
            "timestamp": self.timestamp.isoformat(timespec="seconds"),
            "imageUrl": self.image_url,
            "faceVerified": self.face_verified,
            "faceRecognitionData": self.face_recognition_data,
        }


@dataclass(frozen=True)
class MarkResult:
    attendance: AttendanceRecord
    face_recognition: Optional[FaceRecognitionResult]
