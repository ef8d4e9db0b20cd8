"""Run a headless scanner session and print every state change."""

from __future__ import annotations

import argparse
import asyncio
import logging

from sos_scanner.bus.bus import CONFIRMED_TOPIC, STATE_TOPIC
from sos_scanner.config import Settings
from sos_scanner.service import ScannerService


def print_state(message: dict[str, object]) -> None:
    candidates = ", ".join(
        f"{c['label']} ({round(c['confidence'] * 100)}%)" for c in message["candidates"]
    )
    print(f"[{message['phase']}] {message['status']}" + (f" -> {candidates}" if candidates else ""))
    if message["recognized_text"]:
        print("  text: " + " | ".join(message["recognized_text"]))


async def run(args: argparse.Namespace) -> None:
    settings = Settings()
    overrides = {k: v for k, v in vars(args).items() if v is not None}
    config = settings.model_copy(update=overrides).to_config()

    service = ScannerService(config=config)
    service.bus.subscribe(STATE_TOPIC, print_state)
    service.bus.subscribe(CONFIRMED_TOPIC, lambda msg: print(f"Confirmed item: {msg['label']}"))

    state = await service.start_session()
    if not service.running:
        raise SystemExit(state.status)
    try:
        while True:
            await asyncio.sleep(3600)
    finally:
        await service.aclose()


def main() -> None:
    parser = argparse.ArgumentParser(description="Run the capture-and-guardrail loop")
    parser.add_argument("--endpoint", help="Detection service URL")
    parser.add_argument("--camera-index", dest="camera_index", type=int, help="OpenCV camera index")
    parser.add_argument(
        "--interval", dest="capture_interval_s", type=float, help="Seconds between captures"
    )
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO)
    try:
        asyncio.run(run(args))
    except KeyboardInterrupt:
        print("Stopped")


if __name__ == "__main__":
    main()
