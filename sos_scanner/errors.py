"""Error taxonomy for the capture pipeline."""

from __future__ import annotations


class ScannerError(Exception):
    """Base class for failures raised by scanner collaborators."""


class DeviceError(ScannerError):
    """Capture device unavailable or access denied."""


class DetectionError(ScannerError):
    """A detection cycle failed; the next cycle is an independent attempt."""


class TransportError(DetectionError):
    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class MalformedResponseError(DetectionError):
    """The service answered, but not with a usable detections body."""
