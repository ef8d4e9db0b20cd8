"""Simple guardrail filter benchmark."""

from __future__ import annotations

import argparse
import random
import time

from sos_scanner.config import DEFAULT_ALLOWED_LABELS
from sos_scanner.guardrails.policy import GuardrailFilter
from sos_scanner.schemas import Detection

NOISE_LABELS = ("tape", "person", "phone", "cup")


def synthetic_detections(count: int, rng: random.Random) -> list[Detection]:
    labels = DEFAULT_ALLOWED_LABELS + NOISE_LABELS
    return [Detection(label=rng.choice(labels), confidence=rng.random()) for _ in range(count)]


def main() -> None:
    parser = argparse.ArgumentParser(description="Time the guardrail filter")
    parser.add_argument("--size", type=int, default=100, help="Detections per frame")
    parser.add_argument("--frames", type=int, default=1000, help="Number of frames")
    args = parser.parse_args()

    rng = random.Random(0)
    frames = [synthetic_detections(args.size, rng) for _ in range(args.frames)]
    guardrails = GuardrailFilter()

    start = time.perf_counter()
    for detections in frames:
        guardrails.apply(detections)
    duration = time.perf_counter() - start
    print(f"Guardrails took {duration / args.frames * 1000:.3f} ms per frame")


if __name__ == "__main__":
    main()
