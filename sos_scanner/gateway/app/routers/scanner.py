"""Scanner session router."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from ....service import ScannerService
from ..deps import get_service
from ..schemas.session import ConfirmRequest, SessionStateModel

router = APIRouter()


@router.get("/state", response_model=SessionStateModel)
async def get_state(service: ScannerService = Depends(get_service)) -> SessionStateModel:
    return SessionStateModel.from_state(service.state)


@router.post("/start", response_model=SessionStateModel)
async def start(service: ScannerService = Depends(get_service)) -> SessionStateModel:
    state = await service.start_session()
    return SessionStateModel.from_state(state)


@router.post("/stop", response_model=SessionStateModel)
async def stop(service: ScannerService = Depends(get_service)) -> SessionStateModel:
    state = await service.end_session()
    return SessionStateModel.from_state(state)


@router.post("/confirm", response_model=SessionStateModel)
async def confirm(
    request: ConfirmRequest, service: ScannerService = Depends(get_service)
) -> SessionStateModel:
    if not service.confirm(request.label):
        raise HTTPException(status_code=409, detail=f"Cannot confirm {request.label!r} now")
    return SessionStateModel.from_state(service.state)


@router.post("/unknown", response_model=SessionStateModel)
async def mark_unknown(service: ScannerService = Depends(get_service)) -> SessionStateModel:
    if not service.mark_unknown():
        raise HTTPException(status_code=409, detail="Nothing to mark as unknown")
    return SessionStateModel.from_state(service.state)


@router.post("/next", response_model=SessionStateModel)
async def next_item(service: ScannerService = Depends(get_service)) -> SessionStateModel:
    if not service.new_item():
        raise HTTPException(status_code=409, detail="No confirmed item to move past")
    return SessionStateModel.from_state(service.state)
