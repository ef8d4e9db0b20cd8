"""Scanner configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Tuple

from pydantic_settings import BaseSettings, SettingsConfigDict

from .schemas import DeviceRequest

DEFAULT_ENDPOINT = "http://localhost:8000/detect"
DEFAULT_ALLOWED_LABELS: Tuple[str, ...] = (
    "mask",
    "gloves",
    "syringe",
    "bandage",
    "catheter",
    "gown",
)


def _normalise_labels(labels: Iterable[str]) -> FrozenSet[str]:
    return frozenset(label.strip().lower() for label in labels if label and label.strip())


@dataclass(frozen=True)
class ScannerConfig:
    """Immutable settings shared by the guardrails, the detection client and the scheduler."""

    endpoint: str = DEFAULT_ENDPOINT
    confidence_threshold: float = 0.7
    allowed_labels: FrozenSet[str] = field(
        default_factory=lambda: frozenset(DEFAULT_ALLOWED_LABELS)
    )
    max_candidates: int = 3
    capture_interval_s: float = 1.5
    jpeg_quality: int = 70
    default_frame_size: Tuple[int, int] = (640, 480)
    request_timeout_s: float = 10.0
    camera_index: int = 0
    facing_mode: str = "environment"
    restrict_confirmation: bool = True
    discard_stale: bool = True

    def __post_init__(self) -> None:
        if not 0.0 <= self.confidence_threshold <= 1.0:
            raise ValueError("confidence_threshold must be within [0, 1]")
        if self.max_candidates < 1:
            raise ValueError("max_candidates must be at least 1")
        if self.capture_interval_s <= 0:
            raise ValueError("capture_interval_s must be positive")
        if not 1 <= self.jpeg_quality <= 100:
            raise ValueError("jpeg_quality must be within [1, 100]")
        # Frozen dataclass: bypass __setattr__ to store the normalised set.
        object.__setattr__(self, "allowed_labels", _normalise_labels(self.allowed_labels))

    def device_request(self) -> DeviceRequest:
        return DeviceRequest(index=self.camera_index, facing_mode=self.facing_mode)


class Settings(BaseSettings):
    """Environment-driven settings, e.g. ``SOS_SCANNER_ENDPOINT``."""

    model_config = SettingsConfigDict(
        env_prefix="SOS_SCANNER_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    environment: str = "development"
    endpoint: str = DEFAULT_ENDPOINT
    confidence_threshold: float = 0.7
    allowed_labels: list[str] = list(DEFAULT_ALLOWED_LABELS)
    max_candidates: int = 3
    capture_interval_s: float = 1.5
    jpeg_quality: int = 70
    request_timeout_s: float = 10.0
    camera_index: int = 0
    facing_mode: str = "environment"
    restrict_confirmation: bool = True
    discard_stale: bool = True

    def to_config(self) -> ScannerConfig:
        return ScannerConfig(
            endpoint=self.endpoint,
            confidence_threshold=self.confidence_threshold,
            allowed_labels=frozenset(self.allowed_labels),
            max_candidates=self.max_candidates,
            capture_interval_s=self.capture_interval_s,
            jpeg_quality=self.jpeg_quality,
            request_timeout_s=self.request_timeout_s,
            camera_index=self.camera_index,
            facing_mode=self.facing_mode,
            restrict_confirmation=self.restrict_confirmation,
            discard_stale=self.discard_stale,
        )
