from __future__ import annotations

import logging
from typing import Callable, Optional, Sequence

from google.cloud import vision

from ...core.constants import REDUCED_CONFIDENCE
from ...core.enums import VerificationMethod
from ..model import FaceRecognitionResult
from .base import FaceVerificationStrategy

logger = logging.getLogger(__name__)


def _default_client_factory(api_key: str) -> vision.ImageAnnotatorClient:
    return vision.ImageAnnotatorClient(client_options={"api_key": api_key})


class CloudVisionStrategy(FaceVerificationStrategy):
    """Face detection through Google Cloud Vision.

    Without an API key it degrades to a presence check on the image.
    """

    def __init__(
        self,
        api_key: Optional[str],
        *,
        client_factory: Callable[[str], vision.ImageAnnotatorClient] = _default_client_factory,
    ):
        self._api_key = (api_key or "").strip()
        self._client_factory = client_factory
        self._client: Optional[vision.ImageAnnotatorClient] = None

    def _get_client(self) -> vision.ImageAnnotatorClient:
        if self._client is None:
            self._client = self._client_factory(self._api_key)
        return self._client

    def verify(
        self,
        *,
        image: bytes,
        descriptor: Optional[Sequence[float]] = None,
        stored_descriptor: Optional[Sequence[float]] = None,
    ) -> FaceRecognitionResult:
        if not self._api_key:
            return FaceRecognitionResult(
                verified=bool(image),
                confidence=REDUCED_CONFIDENCE,
                method=VerificationMethod.CLOUD_VISION_FALLBACK.value,
            )

        try:
            response = self._get_client().face_detection(image=vision.Image(content=image))
            if response.error.message:
                raise RuntimeError(response.error.message)
            faces = list(response.face_annotations)
        except Exception as exc:
            logger.warning("Cloud Vision face detection failed: %s", exc)
            return FaceRecognitionResult(
                verified=False,
                confidence=0.0,
                method=VerificationMethod.CLOUD_VISION.value,
                error=str(exc),
            )

        if not faces:
            return FaceRecognitionResult(
                verified=False,
                confidence=0.0,
                method=VerificationMethod.CLOUD_VISION.value,
                error="no face detected",
            )

        confidence = min(1.0, max(0.0, float(faces[0].detection_confidence)))
        return FaceRecognitionResult(
            verified=True,
            confidence=confidence,
            method=VerificationMethod.CLOUD_VISION.value,
        )
