"""JPEG encoding of the current camera frame."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

import cv2

from ..schemas import FramePayload
from .source import VideoSurface


@dataclass
class FrameEncoder:
    quality: int = 70
    default_size: Tuple[int, int] = (640, 480)

    def encode(self, surface: VideoSurface) -> Optional[FramePayload]:
        """Encode one frame, or return None when the surface has nothing decoded yet."""
        ok, frame = surface.read()
        if not ok or frame is None or frame.size == 0:
            return None

        width, height = surface.frame_size()
        if width <= 0 or height <= 0:
            width, height = self.default_size
        if frame.shape[1] != width or frame.shape[0] != height:
            frame = cv2.resize(frame, (width, height), interpolation=cv2.INTER_AREA)

        success, buffer = cv2.imencode(".jpg", frame, [cv2.IMWRITE_JPEG_QUALITY, self.quality])
        if not success:
            return None
        return FramePayload(jpeg=buffer.tobytes(), width=width, height=height)
