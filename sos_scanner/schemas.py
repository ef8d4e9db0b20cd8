"""Scanner data models."""

from __future__ import annotations

import base64
from dataclasses import dataclass
from enum import Enum
from typing import Tuple


@dataclass(frozen=True)
class Detection:
    label: str
    confidence: float


@dataclass(frozen=True)
class DetectionResult:
    """Parsed response of one remote detection call."""

    detections: Tuple[Detection, ...] = ()
    recognized_text: Tuple[str, ...] = ()


@dataclass(frozen=True)
class FramePayload:
    """A JPEG-encoded still taken from the capture device."""

    jpeg: bytes
    width: int
    height: int

    def to_base64(self) -> str:
        return base64.b64encode(self.jpeg).decode("ascii")


class SessionPhase(str, Enum):
    INITIALIZING = "initializing"
    CAPTURING = "capturing"
    REVIEWING = "reviewing"
    REJECTED = "rejected"
    CONFIRMED = "confirmed"


@dataclass(frozen=True)
class SessionState:
    """Snapshot of the scanner session as seen by the presentation layer."""

    phase: SessionPhase
    status: str
    candidates: Tuple[Detection, ...] = ()
    recognized_text: Tuple[str, ...] = ()
    confirmed_label: str | None = None
    closed: bool = False
    last_cycle: int = 0

    def to_dict(self) -> dict[str, object]:
        return {
            "phase": self.phase.value,
            "status": self.status,
            "candidates": [
                {"label": d.label, "confidence": d.confidence} for d in self.candidates
            ],
            "recognized_text": list(self.recognized_text),
            "confirmed_label": self.confirmed_label,
            "closed": self.closed,
            "last_cycle": self.last_cycle,
        }


@dataclass(frozen=True)
class DeviceRequest:
    index: int = 0
    facing_mode: str = "environment"
