"""Camera access through OpenCV."""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional, Protocol, Tuple

import cv2
import numpy as np

from ..errors import DeviceError
from ..schemas import DeviceRequest

logger = logging.getLogger(__name__)


class VideoSurface(Protocol):
    """What the encoder needs from a live video source."""

    def read(self) -> Tuple[bool, Optional[np.ndarray]]:
        ...

    def frame_size(self) -> Tuple[int, int]:
        ...


class CaptureDevice(VideoSurface, Protocol):
    def release(self) -> None:
        ...


class CameraSource:
    """An opened ``cv2.VideoCapture`` plus the request it was opened for."""

    def __init__(self, capture: cv2.VideoCapture, request: DeviceRequest) -> None:
        self._capture = capture
        self.request = request
        self.released = False
        # Reads happen on a worker thread; release must not interleave with one.
        self._lock = threading.Lock()

    def read(self) -> Tuple[bool, Optional[np.ndarray]]:
        with self._lock:
            if self.released:
                return False, None
            return self._capture.read()

    def frame_size(self) -> Tuple[int, int]:
        """Native resolution reported by the driver, (0, 0) if unknown."""
        width = int(self._capture.get(cv2.CAP_PROP_FRAME_WIDTH) or 0)
        height = int(self._capture.get(cv2.CAP_PROP_FRAME_HEIGHT) or 0)
        return width, height

    def release(self) -> None:
        with self._lock:
            if self.released:
                return
            self.released = True
            self._capture.release()
        logger.info(f"Released camera {self.request.index}")


def open_camera(request: DeviceRequest) -> CameraSource:
    """Open the camera described by ``request`` or raise ``DeviceError``."""
    try:
        capture = cv2.VideoCapture(request.index)
        # Keep only the newest frame queued to cut latency.
        capture.set(cv2.CAP_PROP_BUFFERSIZE, 1)
    except cv2.error as exc:
        raise DeviceError(f"Could not open camera {request.index}: {exc}") from exc

    if not capture.isOpened():
        capture.release()
        raise DeviceError(f"Could not open camera {request.index}")

    logger.info(f"Opened camera {request.index} (facing={request.facing_mode})")
    return CameraSource(capture, request)


DeviceOpener = Callable[[DeviceRequest], CaptureDevice]
