"""Scanner service exposing session lifecycle and confirmation actions."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from .bus.bus import EventBus
from .capture.source import DeviceOpener, open_camera
from .config import ScannerConfig
from .detector.client import DetectionClient
from .scheduler import CaptureScheduler
from .schemas import SessionState
from .session import SessionStateMachine

logger = logging.getLogger(__name__)


@dataclass
class ScannerService:
    config: ScannerConfig = field(default_factory=ScannerConfig)
    client: DetectionClient | None = None
    bus: EventBus = field(default_factory=EventBus)
    open_device: DeviceOpener = open_camera
    session: SessionStateMachine | None = None
    scheduler: Optional[CaptureScheduler] = field(default=None, init=False)

    def __post_init__(self) -> None:
        if self.client is None:
            self.client = DetectionClient(self.config)
        if self.session is None:
            self.session = SessionStateMachine(self.config, self.bus)

    @property
    def state(self) -> SessionState:
        assert self.session is not None
        return self.session.state

    @property
    def running(self) -> bool:
        return self.scheduler is not None and self.scheduler.running

    async def start_session(self) -> SessionState:
        if self.running:
            return self.state
        if self.scheduler is not None:
            # Previous session ended or never got its device.
            await self.scheduler.stop()
            self.scheduler = None
        assert self.client is not None and self.session is not None
        if self.session.closed:
            self.session = SessionStateMachine(self.config, self.bus)

        self.scheduler = CaptureScheduler(
            self.session, self.client, self.config, open_device=self.open_device
        )
        logger.info("Starting scanner session")
        await self.scheduler.start()
        return self.state

    async def end_session(self) -> SessionState:
        if self.scheduler is not None:
            await self.scheduler.stop()
        else:
            assert self.session is not None
            self.session.close()
        logger.info("Scanner session ended")
        return self.state

    def confirm(self, label: str) -> bool:
        assert self.session is not None
        return self.session.confirm(label)

    def mark_unknown(self) -> bool:
        assert self.session is not None
        return self.session.mark_unknown()

    def new_item(self) -> bool:
        assert self.session is not None
        return self.session.new_item()

    async def aclose(self) -> None:
        await self.end_session()
        assert self.client is not None
        await self.client.aclose()
