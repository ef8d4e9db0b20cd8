"""Session state machine: status, candidates, recognized text and the confirmed label.

All mutations are expected on the event loop that drives the capture
scheduler, so the machine itself holds no locks. Every accepted change
publishes a fresh snapshot on the bus.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterable, Sequence

from .bus.bus import CONFIRMED_TOPIC, STATE_TOPIC, EventBus
from .config import ScannerConfig
from .errors import DetectionError, DeviceError
from .schemas import Detection, SessionPhase, SessionState

logger = logging.getLogger(__name__)

UNKNOWN_LABEL = "Unknown"

STATUS_STARTING = "Starting capture…"
STATUS_RUNNING = "Camera running"
STATUS_REVIEW = "Review prediction and confirm"
STATUS_REJECTED = "Low confidence or non-medical item detected"
STATUS_CONNECTION_ERROR = "Detection service connection error"
STATUS_STOPPED = "Capture stopped"

_CONFIRMABLE = (SessionPhase.REVIEWING, SessionPhase.REJECTED)
_CYCLE_PHASES = (SessionPhase.CAPTURING, SessionPhase.REVIEWING, SessionPhase.REJECTED)


class SessionStateMachine:
    def __init__(self, config: ScannerConfig | None = None, bus: EventBus | None = None) -> None:
        self.config = config or ScannerConfig()
        self.bus = bus
        self._state = SessionState(phase=SessionPhase.INITIALIZING, status=STATUS_STARTING)
        self._issued = 0
        self._item_floor = 0

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def phase(self) -> SessionPhase:
        return self._state.phase

    @property
    def closed(self) -> bool:
        return self._state.closed

    def _set(self, **changes: object) -> None:
        self._state = replace(self._state, **changes)
        if self.bus is not None:
            self.bus.publish(STATE_TOPIC, self._state.to_dict())

    # Device lifecycle

    def device_ready(self) -> None:
        if self.closed or self.phase is not SessionPhase.INITIALIZING:
            return
        self._set(phase=SessionPhase.CAPTURING, status=STATUS_RUNNING)

    def device_failed(self, error: DeviceError) -> None:
        if self.closed:
            return
        self._set(phase=SessionPhase.INITIALIZING, status=f"Camera error: {error}")

    def close(self) -> None:
        if self.closed:
            return
        self._set(status=STATUS_STOPPED, closed=True)

    # Cycle outcomes

    def next_cycle_id(self) -> int:
        self._issued += 1
        return self._issued

    def _accepts_cycle(self, cycle_id: int) -> bool:
        if self.closed:
            logger.debug(f"Dropping cycle {cycle_id}: session closed")
            return False
        if cycle_id <= self._item_floor:
            logger.debug(f"Dropping cycle {cycle_id}: frame belongs to a previous item")
            return False
        if self.phase not in _CYCLE_PHASES:
            logger.debug(f"Dropping cycle {cycle_id}: session is {self.phase.value}")
            return False
        if self.config.discard_stale and cycle_id < self._state.last_cycle:
            logger.debug(
                f"Dropping stale cycle {cycle_id}, cycle {self._state.last_cycle} already applied"
            )
            return False
        return True

    def apply_detections(
        self,
        cycle_id: int,
        candidates: Sequence[Detection],
        recognized_text: Iterable[str] = (),
    ) -> bool:
        """Apply one filtered cycle result; returns False when it was discarded."""
        if not self._accepts_cycle(cycle_id):
            return False
        if candidates:
            phase, status = SessionPhase.REVIEWING, STATUS_REVIEW
        else:
            phase, status = SessionPhase.REJECTED, STATUS_REJECTED
        self._set(
            phase=phase,
            status=status,
            candidates=tuple(candidates),
            recognized_text=tuple(recognized_text),
            confirmed_label=None,
            last_cycle=max(cycle_id, self._state.last_cycle),
        )
        return True

    def apply_failure(self, cycle_id: int, error: DetectionError) -> bool:
        if not self._accepts_cycle(cycle_id):
            return False
        self._set(
            phase=SessionPhase.CAPTURING,
            status=STATUS_CONNECTION_ERROR,
            candidates=(),
            recognized_text=(),
            last_cycle=max(cycle_id, self._state.last_cycle),
        )
        return True

    # User actions

    def confirm(self, label: str) -> bool:
        if self.closed or self.phase not in _CONFIRMABLE:
            logger.warning(f"Ignoring confirmation of {label!r} while {self.phase.value}")
            return False
        chosen = self._match_candidate(label)
        if chosen is None:
            logger.warning(f"Rejecting confirmation of {label!r}: not a current candidate")
            return False
        self._confirm(chosen)
        return True

    def mark_unknown(self) -> bool:
        if self.closed or self.phase not in _CONFIRMABLE:
            logger.warning(f"Ignoring mark-unknown while {self.phase.value}")
            return False
        self._confirm(UNKNOWN_LABEL)
        return True

    def new_item(self) -> bool:
        if self.closed or self.phase is not SessionPhase.CONFIRMED:
            return False
        # Frames captured before this point show the previous item.
        self._item_floor = max(self._issued, self._state.last_cycle)
        self._set(
            phase=SessionPhase.CAPTURING,
            status=STATUS_RUNNING,
            candidates=(),
            recognized_text=(),
            confirmed_label=None,
        )
        return True

    def _match_candidate(self, label: str) -> str | None:
        label = (label or "").strip()
        if not label:
            return None
        for candidate in self._state.candidates:
            if candidate.label.lower() == label.lower():
                return candidate.label
        if self.config.restrict_confirmation:
            return None
        return label

    def _confirm(self, label: str) -> None:
        self._set(phase=SessionPhase.CONFIRMED, status=f"Confirmed: {label}", confirmed_label=label)
        logger.info(f"Confirmed item: {label}")
        if self.bus is not None:
            self.bus.publish(CONFIRMED_TOPIC, {"label": label})
