"""Periodic capture loop: encode -> detect -> guardrails -> session update."""

from __future__ import annotations

import asyncio
import logging
import math
from typing import Optional, Set

from .capture.encoder import FrameEncoder
from .capture.source import CaptureDevice, DeviceOpener, open_camera
from .config import ScannerConfig
from .detector.client import DetectionClient
from .errors import DetectionError, DeviceError
from .guardrails.policy import GuardrailFilter
from .session import SessionStateMachine

logger = logging.getLogger(__name__)


class CaptureScheduler:
    """Owns the capture device and the cadence timer for one session.

    Each timer firing spawns its own cycle task, so a slow remote call only
    delays its own state update. ``stop`` cancels the timer and in-flight
    cycles, releases the device once and closes the session.
    """

    def __init__(
        self,
        session: SessionStateMachine,
        client: DetectionClient,
        config: ScannerConfig | None = None,
        encoder: FrameEncoder | None = None,
        guardrails: GuardrailFilter | None = None,
        open_device: DeviceOpener = open_camera,
    ) -> None:
        self.config = config or session.config
        self.session = session
        self.client = client
        self.encoder = encoder or FrameEncoder(
            quality=self.config.jpeg_quality, default_size=self.config.default_frame_size
        )
        self.guardrails = guardrails or GuardrailFilter(self.config)
        self._open_device = open_device
        self._device: Optional[CaptureDevice] = None
        self._timer: Optional[asyncio.Task] = None
        self._inflight: Set[asyncio.Task] = set()
        self._stopped = False

    @property
    def running(self) -> bool:
        return self._timer is not None and not self._stopped

    @property
    def inflight(self) -> int:
        return len(self._inflight)

    async def start(self) -> bool:
        """Acquire the device and start the timer; False on device failure."""
        if self._stopped or self._timer is not None:
            return self.running
        try:
            self._device = self._open_device(self.config.device_request())
        except DeviceError as exc:
            logger.error(f"Camera error: {exc}")
            self.session.device_failed(exc)
            return False

        self.session.device_ready()
        self._timer = asyncio.create_task(self._tick(), name="capture-timer")
        return True

    async def _tick(self) -> None:
        loop = asyncio.get_running_loop()
        interval = self.config.capture_interval_s
        deadline = loop.time()
        while not self._stopped:
            deadline += interval
            now = loop.time()
            if deadline < now:
                # Skip ticks missed while the loop was blocked instead of replaying them.
                skipped = math.ceil((now - deadline) / interval)
                deadline += skipped * interval
                logger.debug(f"Capture timer fell behind, skipped {skipped} tick(s)")
            await asyncio.sleep(max(0.0, deadline - now))
            self.trigger()

    def trigger(self) -> Optional[asyncio.Task]:
        """Start one cycle now, independent of any cycle still in flight."""
        if self._stopped or self._device is None:
            return None
        cycle_id = self.session.next_cycle_id()
        task = asyncio.create_task(self._run_cycle(cycle_id), name=f"capture-cycle-{cycle_id}")
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)
        return task

    async def _run_cycle(self, cycle_id: int) -> None:
        assert self._device is not None
        # Camera reads and JPEG encoding block, keep them off the event loop.
        payload = await asyncio.to_thread(self.encoder.encode, self._device)
        if self._stopped:
            return
        if payload is None:
            logger.debug(f"Cycle {cycle_id} skipped: no frame ready")
            return

        try:
            result = await self.client.detect(payload)
        except DetectionError as exc:
            if self._stopped:
                return
            logger.warning(f"Detection cycle {cycle_id} failed: {exc}")
            self.session.apply_failure(cycle_id, exc)
            return

        if self._stopped:
            return
        candidates = self.guardrails.apply(result.detections)
        self.session.apply_detections(cycle_id, candidates, result.recognized_text)

    async def stop(self) -> None:
        if self._stopped:
            return
        self._stopped = True

        pending = list(self._inflight)
        if self._timer is not None:
            self._timer.cancel()
            pending.append(self._timer)
        for task in self._inflight:
            task.cancel()

        if self._device is not None:
            self._device.release()
        self.session.close()

        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        logger.info("Capture scheduler stopped")
