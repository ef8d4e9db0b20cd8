"""Health router."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from ....service import ScannerService
from ..deps import get_service

router = APIRouter()


@router.get("/health")
async def health(service: ScannerService = Depends(get_service)) -> dict[str, object]:
    return {"status": "ok", "capturing": service.running}
