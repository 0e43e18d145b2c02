"""
City Lines - Sessions API

A session is one level being played: the server owns the grid, the
client sends rotation events and gets the validation report back.
"""

from fastapi import APIRouter, HTTPException

from ..schemas import (
    HintResponse, RotateRequest, RotateResponse, SessionCreateRequest, SessionResponse,
)
from ..services.level_loader import tile_to_record
from ..services.progression import load_level
from ..services.sessions import Session, sessions


router = APIRouter(prefix="/sessions", tags=["sessions"])


def _get_session(session_id: str) -> Session:
    session = sessions.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


def _session_response(session: Session) -> SessionResponse:
    engine = session.engine
    data = session.record.model_copy(
        update={"tiles": [tile_to_record(tile) for tile in engine.grid.tiles()]}
    )
    return SessionResponse(
        session_id=session.session_id,
        level=session.level,
        data=data,
        report=engine.report,
    )


@router.post("", response_model=SessionResponse)
async def create_session(body: SessionCreateRequest):
    level = load_level(body.level)
    session = sessions.create(body.level, level.data)
    return _session_response(session)


@router.get("/{session_id}", response_model=SessionResponse)
async def get_session(session_id: str):
    return _session_response(_get_session(session_id))


@router.post("/{session_id}/rotate", response_model=RotateResponse)
async def rotate_tile(session_id: str, body: RotateRequest):
    """Rotates one tile 90 degrees clockwise and re-validates."""
    engine = _get_session(session_id).engine
    report = engine.rotate(body.row, body.col)
    return RotateResponse(tile=tile_to_record(engine.grid.get(body.row, body.col)), report=report)


@router.get("/{session_id}/hint", response_model=HintResponse)
async def get_hint(session_id: str):
    tile = _get_session(session_id).engine.hint()
    if tile is None:
        raise HTTPException(status_code=404, detail="Nothing left to fix")
    return HintResponse(row=tile.row, col=tile.col, solution_rotation=tile.solution_rotation)
