from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence

from .strategies.base import FaceVerificationStrategy
from .strategies.basic_strategy import BasicStrategy
from .strategies.cloud_vision_strategy import CloudVisionStrategy
from .strategies.descriptor_strategy import DescriptorStrategy


@dataclass
class FaceVerificationStrategyFactory:
    """Factory Pattern: choose exactly one verification strategy per mark."""

    cloud_vision: CloudVisionStrategy
    descriptor: DescriptorStrategy = field(default_factory=DescriptorStrategy)
    basic: BasicStrategy = field(default_factory=BasicStrategy)

    def select(self, *, use_cloud_vision: bool, descriptor: Optional[Sequence[float]]) -> FaceVerificationStrategy:
        if use_cloud_vision:
            return self.cloud_vision
        if descriptor:
            return self.descriptor
        return self.basic
