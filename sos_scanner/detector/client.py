"""Client for the remote detection/OCR service."""

from __future__ import annotations

import logging
import math
from typing import Any, List, Optional

import httpx

from ..config import ScannerConfig
from ..errors import MalformedResponseError, TransportError
from ..schemas import Detection, DetectionResult, FramePayload

logger = logging.getLogger(__name__)


def _parse_detection(item: Any) -> Optional[Detection]:
    if not isinstance(item, dict):
        return None
    label = item.get("label")
    confidence = item.get("confidence")
    if not isinstance(label, str) or not label:
        return None
    if isinstance(confidence, bool):
        return None
    try:
        value = float(confidence)
    except (TypeError, ValueError):
        return None
    if math.isnan(value):
        return None
    return Detection(label=label, confidence=value)


def _parse_text(raw: Any) -> List[str]:
    if raw is None:
        return []
    if isinstance(raw, str):
        return [raw] if raw else []
    if isinstance(raw, list):
        return [str(fragment) for fragment in raw if fragment is not None and str(fragment)]
    return [str(raw)]


def parse_response(body: Any) -> DetectionResult:
    """Turn a decoded response body into a ``DetectionResult``."""
    if not isinstance(body, dict):
        raise MalformedResponseError("Response body is not an object")
    raw = body.get("detections")
    if not isinstance(raw, list):
        raise MalformedResponseError("Response body has no detections list")

    detections: list[Detection] = []
    for item in raw:
        detection = _parse_detection(item)
        if detection is None:
            logger.debug(f"Dropping malformed detection entry: {item!r}")
            continue
        detections.append(detection)

    return DetectionResult(
        detections=tuple(detections),
        recognized_text=tuple(_parse_text(body.get("ocr_text"))),
    )


class DetectionClient:
    """Posts one frame per call; retries are left to the next scheduled cycle."""

    def __init__(
        self,
        config: ScannerConfig | None = None,
        http: httpx.AsyncClient | None = None,
    ) -> None:
        self.config = config or ScannerConfig()
        self._owns_http = http is None
        self._http = http or httpx.AsyncClient(timeout=self.config.request_timeout_s)

    async def detect(self, payload: FramePayload) -> DetectionResult:
        try:
            response = await self._http.post(
                self.config.endpoint,
                json={"imageBase64": payload.to_base64()},
            )
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise TransportError(f"Detection request failed: {exc}") from exc

        if not response.is_success:
            raise TransportError(
                f"Backend HTTP {response.status_code}", status_code=response.status_code
            )

        try:
            body = response.json()
        except ValueError as exc:
            raise MalformedResponseError(f"Response body is not JSON: {exc}") from exc
        return parse_response(body)

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()
