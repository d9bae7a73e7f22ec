"""FastAPI routes for the mock interview action stream and session management."""
from __future__ import annotations

from typing import Iterator

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import StreamingResponse

from api.schemas import (
    ActionRequest,
    CreateSessionRequest,
    DeleteResponse,
    MetricsView,
    PatchSessionRequest,
    SessionDetailResponse,
    SessionListResponse,
    SessionResponse,
    SessionView,
    TurnView,
)
from interview_engine import InterviewEngine, encode_sse
from services.analytics import Analytics, build_analytics
from services.sessions import (
    SessionNotFound,
    SessionStateError,
    abandon_session,
    create_session,
    delete_session,
)
from storage.store import InterviewStore


router = APIRouter()


def get_store(request: Request) -> InterviewStore:
    return request.app.state.store


def get_engine(request: Request) -> InterviewEngine:
    return request.app.state.engine


def _session_view(session) -> SessionView:
    return SessionView.model_validate(session.model_dump())


@router.post("/api/agents/mock-interviewer")
def mock_interviewer(req: ActionRequest, engine: InterviewEngine = Depends(get_engine)) -> StreamingResponse:
    def _stream() -> Iterator[str]:
        for event in engine.run(req.session_id, req.action, req.user_answer):
            yield encode_sse(event)

    return StreamingResponse(
        _stream(),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "Connection": "keep-alive"},
    )


@router.get("/api/mock-interview/sessions", response_model=SessionListResponse)
def list_sessions(
    job_application_id: int = Query(alias="jobApplicationId", gt=0),
    store: InterviewStore = Depends(get_store),
) -> SessionListResponse:
    sessions = [_session_view(s) for s in store.list_sessions(job_application_id)]
    profile = store.get_metrics(job_application_id)
    metrics = MetricsView.model_validate(profile.model_dump()) if profile else None
    return SessionListResponse(sessions=sessions, metrics=metrics)


@router.post("/api/mock-interview/sessions", response_model=SessionResponse, status_code=201)
def post_session(req: CreateSessionRequest, store: InterviewStore = Depends(get_store)) -> SessionResponse:
    try:
        session = create_session(store, **req.model_dump())
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return SessionResponse(session=_session_view(session))


@router.get("/api/mock-interview/sessions/{session_id}", response_model=SessionDetailResponse)
def get_session(session_id: int, store: InterviewStore = Depends(get_store)) -> SessionDetailResponse:
    session = store.get_session(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    turns = [TurnView.model_validate(turn.model_dump()) for turn in store.list_turns(session_id)]
    return SessionDetailResponse(session=_session_view(session), responses=turns)


@router.patch("/api/mock-interview/sessions/{session_id}", response_model=SessionResponse)
def patch_session(
    session_id: int,
    req: PatchSessionRequest,
    store: InterviewStore = Depends(get_store),
) -> SessionResponse:
    try:
        session = abandon_session(store, session_id)
    except SessionNotFound as exc:
        raise HTTPException(status_code=404, detail="Session not found") from exc
    except SessionStateError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return SessionResponse(session=_session_view(session))


@router.delete("/api/mock-interview/sessions/{session_id}", response_model=DeleteResponse)
def remove_session(session_id: int, store: InterviewStore = Depends(get_store)) -> DeleteResponse:
    try:
        delete_session(store, session_id)
    except SessionNotFound as exc:
        raise HTTPException(status_code=404, detail="Session not found") from exc
    return DeleteResponse()


@router.get("/api/mock-interview/analytics", response_model=Analytics)
def analytics(
    job_application_id: int = Query(alias="jobApplicationId", gt=0),
    store: InterviewStore = Depends(get_store),
) -> Analytics:
    return build_analytics(store, job_application_id)


__all__ = ["get_engine", "get_store", "router"]
