from __future__ import annotations

import math
from typing import Optional, Sequence

from ...core.constants import FACE_MATCH_THRESHOLD, REDUCED_CONFIDENCE
from ...core.enums import VerificationMethod
from ..model import FaceRecognitionResult
from .base import FaceVerificationStrategy


def euclidean_distance(a: Sequence[float], b: Sequence[float]) -> float:
    return math.sqrt(sum((float(x) - float(y)) ** 2 for x, y in zip(a, b)))


class DescriptorStrategy(FaceVerificationStrategy):
    """Compares a client-computed face descriptor with the user's baseline.

    Without a baseline the descriptor's presence is enough, at reduced
    confidence. Lower distance means a closer match.
    """

    def __init__(self, threshold: float = FACE_MATCH_THRESHOLD):
        self._threshold = float(threshold)

    def verify(
        self,
        *,
        image: bytes,
        descriptor: Optional[Sequence[float]] = None,
        stored_descriptor: Optional[Sequence[float]] = None,
    ) -> FaceRecognitionResult:
        descriptor = descriptor or []

        if not stored_descriptor:
            return FaceRecognitionResult(
                verified=len(descriptor) > 0,
                confidence=REDUCED_CONFIDENCE,
                method=VerificationMethod.DESCRIPTOR_BASIC.value,
            )

        if len(descriptor) != len(stored_descriptor):
            return FaceRecognitionResult(
                verified=False,
                confidence=0.0,
                method=VerificationMethod.DESCRIPTOR.value,
                error="dimension mismatch",
            )

        distance = euclidean_distance(descriptor, stored_descriptor)
        verified = distance < self._threshold
        confidence = max(0.0, 1.0 - distance / self._threshold) if verified else 0.0
        return FaceRecognitionResult(
            verified=verified,
            confidence=confidence,
            method=VerificationMethod.DESCRIPTOR.value,
        )
