"""Capture endpoints: record raw thoughts and manage capture sessions."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException

from src.api.models import AppDataResponse, CaptureRequest, SessionResponse, VoiceItemResponse
from src.storage.repository import get_store

router = APIRouter()


@router.post("/api/capture", response_model=VoiceItemResponse, status_code=201)
def capture_item(request: CaptureRequest) -> VoiceItemResponse:
    """Store a captured thought in the braindump, opening a session if needed."""
    if not request.text.strip():
        raise HTTPException(status_code=400, detail="Captured text is empty")

    item = get_store().capture(request.text)
    return VoiceItemResponse.model_validate(item.to_dict())


@router.post("/api/sessions/end", response_model=SessionResponse | None)
def end_session() -> SessionResponse | None:
    """Close the open capture session, if any."""
    session = get_store().end_session()
    if session is None:
        return None
    return SessionResponse.model_validate(session.to_dict())


@router.get("/api/sessions", response_model=list[SessionResponse])
def list_sessions() -> list[SessionResponse]:
    """List sessions in creation order."""
    store = get_store()
    with store.lock:
        sessions = [s.to_dict() for s in store.data.sessions]
    return [SessionResponse.model_validate(s) for s in sessions]


@router.get("/api/data", response_model=AppDataResponse)
def get_app_data() -> AppDataResponse:
    """Return every collection of the app aggregate."""
    store = get_store()
    with store.lock:
        snapshot = store.data.to_dict()
    return AppDataResponse.model_validate(snapshot)
