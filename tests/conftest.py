from __future__ import annotations

import asyncio

import numpy as np
import pytest

from sos_scanner.schemas import DetectionResult


class FakeCamera:
    def __init__(self, frame: np.ndarray | None = None, size: tuple[int, int] = (64, 48)) -> None:
        self.frame = frame if frame is not None else np.full((48, 64, 3), 127, dtype=np.uint8)
        self.size = size
        self.release_count = 0

    def read(self):
        return self.frame is not None, self.frame

    def frame_size(self):
        return self.size

    def release(self) -> None:
        self.release_count += 1


class FakeClient:
    """Answers every frame with the same result, or raises the configured error."""

    def __init__(self, result: DetectionResult | None = None, error: Exception | None = None) -> None:
        self.result = result or DetectionResult()
        self.error = error
        self.payloads = []
        self.closed = False

    async def detect(self, payload):
        self.payloads.append(payload)
        if self.error is not None:
            raise self.error
        return self.result

    async def aclose(self) -> None:
        self.closed = True


class GatedClient:
    """Holds every call open until the test finishes it explicitly."""

    def __init__(self) -> None:
        self.calls: list[dict[str, object]] = []

    async def detect(self, payload):
        entry: dict[str, object] = {"gate": asyncio.Event(), "result": None, "error": None}
        self.calls.append(entry)
        await entry["gate"].wait()
        if entry["error"] is not None:
            raise entry["error"]
        return entry["result"]

    def finish(self, index: int, result=None, error=None) -> None:
        entry = self.calls[index]
        entry["result"] = result
        entry["error"] = error
        entry["gate"].set()

    async def aclose(self) -> None:
        pass


@pytest.fixture
def camera() -> FakeCamera:
    return FakeCamera()
