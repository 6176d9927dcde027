from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from ..model import FaceRecognitionResult


class FaceVerificationStrategy(ABC):
    """Strategy Pattern: encapsulate how an attendance image is verified."""

    @abstractmethod
    def verify(
        self,
        *,
        image: bytes,
        descriptor: Optional[Sequence[float]] = None,
        stored_descriptor: Optional[Sequence[float]] = None,
    ) -> FaceRecognitionResult:
        raise NotImplementedError
