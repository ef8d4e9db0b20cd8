"""In-process event bus for scanner notifications."""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Callable, DefaultDict, List

logger = logging.getLogger(__name__)

STATE_TOPIC = "scanner.state"
CONFIRMED_TOPIC = "scanner.confirmed"

Subscriber = Callable[[dict[str, object]], None]


@dataclass
class EventBus:
    subscribers: DefaultDict[str, List[Subscriber]] = field(
        default_factory=lambda: defaultdict(list)
    )

    def publish(self, topic: str, message: dict[str, object]) -> None:
        for callback in list(self.subscribers[topic]):
            try:
                callback(message)
            except Exception:
                # A broken listener must not stall the capture loop.
                logger.exception(f"Subscriber failed for topic {topic}")

    def subscribe(self, topic: str, callback: Subscriber) -> None:
        self.subscribers[topic].append(callback)

    def unsubscribe(self, topic: str, callback: Subscriber) -> None:
        if callback in self.subscribers[topic]:
            self.subscribers[topic].remove(callback)
