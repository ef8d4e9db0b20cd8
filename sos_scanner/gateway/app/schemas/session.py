"""Session data models returned to the presentation layer."""

from __future__ import annotations

from pydantic import BaseModel, Field

from ....schemas import SessionState


class CandidateModel(BaseModel):
    label: str
    confidence: float


class SessionStateModel(BaseModel):
    phase: str
    status: str
    candidates: list[CandidateModel] = []
    recognized_text: list[str] = []
    confirmed_label: str | None = None
    closed: bool = False

    @classmethod
    def from_state(cls, state: SessionState) -> "SessionStateModel":
        return cls(
            phase=state.phase.value,
            status=state.status,
            candidates=[
                CandidateModel(label=d.label, confidence=d.confidence) for d in state.candidates
            ],
            recognized_text=list(state.recognized_text),
            confirmed_label=state.confirmed_label,
            closed=state.closed,
        )


class ConfirmRequest(BaseModel):
    label: str = Field(..., min_length=1)
