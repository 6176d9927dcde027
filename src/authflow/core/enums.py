from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Role carried in the bearer token claims."""

    ADMIN = "admin"
    USER = "user"


class AttendanceType(str, Enum):
    """Direction of an attendance event."""

    IN = "IN"
    OUT = "OUT"


class VerificationMethod(str, Enum):
    """Name reported by each face verification strategy."""

    BASIC = "basic"
    DESCRIPTOR = "face-api.js"
    DESCRIPTOR_BASIC = "face-api.js-basic"
    CLOUD_VISION = "cloud-vision"
    CLOUD_VISION_FALLBACK = "cloud-vision-fallback"
