from __future__ import annotations

from typing import Optional, Sequence

from ...core.constants import REDUCED_CONFIDENCE
from ...core.enums import VerificationMethod
from ..model import FaceRecognitionResult
from .base import FaceVerificationStrategy


class BasicStrategy(FaceVerificationStrategy):
    """Accepts any non-empty image."""

    def verify(
        self,
        *,
        image: bytes,
        descriptor: Optional[Sequence[float]] = None,
        stored_descriptor: Optional[Sequence[float]] = None,
    ) -> FaceRecognitionResult:
        return FaceRecognitionResult(
            verified=bool(image),
            confidence=REDUCED_CONFIDENCE,
            method=VerificationMethod.BASIC.value,
        )
