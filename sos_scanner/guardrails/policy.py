"""Guardrails that reduce raw detections to a bounded candidate set."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List

from ..config import ScannerConfig
from ..schemas import Detection


@dataclass
class GuardrailFilter:
    config: ScannerConfig = field(default_factory=ScannerConfig)

    def admits(self, detection: Detection) -> bool:
        if not detection.confidence >= self.config.confidence_threshold:
            return False
        return detection.label.lower() in self.config.allowed_labels

    def apply(self, detections: Iterable[Detection]) -> List[Detection]:
        # Both filters run before ranking so the top slice only holds admissible items.
        admitted = [d for d in detections if self.admits(d)]
        admitted.sort(key=lambda d: d.confidence, reverse=True)
        return admitted[: self.config.max_candidates]
