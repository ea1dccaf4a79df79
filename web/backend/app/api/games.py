from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from sternhalma.game import IllegalMoveError
from sternhalma.hexgrid import Hex
from sternhalma.state import MatchPhase, MoveInProgressError

from ..schemas.game import (
    CreateGameRequest, MoveRequest, GameStateResponse, MovesResponse,
)
from ..services.session import SessionManager, get_session_manager
from ..services.serializer import session_to_payload, move_to_payload, hex_to_payload

router = APIRouter(prefix="/games")


# ---------------------------------------------------------------------------
# Error helpers (returns the exact contract: {error_code, message, details})
# ---------------------------------------------------------------------------

def _err(status: int, error_code: str, message: str, details: dict | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status,
        content={
            "error_code": error_code,
            "message": message,
            "details": details or {},
        },
    )


def _get_session_or_404(sessions: SessionManager, session_id: str):
    session = sessions.get(session_id)
    if session is None:
        return None, _err(
            404, "SESSION_NOT_FOUND",
            f"Session '{session_id}' not found.",
        )
    return session, None


# ---------------------------------------------------------------------------
# POST /api/games: create a new session
# ---------------------------------------------------------------------------

@router.post("", response_model=GameStateResponse)
def create_game(req: CreateGameRequest, sessions: SessionManager = Depends(get_session_manager)):
    session_id, session = sessions.create(req.player_count)
    return session_to_payload(session_id, session)


# ---------------------------------------------------------------------------
# GET /api/games/{session_id}: fetch current state
# ---------------------------------------------------------------------------

@router.get("/{session_id}", response_model=GameStateResponse)
def get_game(session_id: str, sessions: SessionManager = Depends(get_session_manager)):
    session, err = _get_session_or_404(sessions, session_id)
    if err:
        return err
    return session_to_payload(session_id, session)


# ---------------------------------------------------------------------------
# GET /api/games/{session_id}/moves?q=&r=: legal moves for one piece
# ---------------------------------------------------------------------------

@router.get("/{session_id}/moves", response_model=MovesResponse)
def get_moves(
    session_id: str, q: int, r: int,
    sessions: SessionManager = Depends(get_session_manager),
):
    session, err = _get_session_or_404(sessions, session_id)
    if err:
        return err

    origin = Hex(q, r)
    if not session.game.state.is_on_board(origin):
        return _err(
            422, "INVALID_POSITION",
            f"{origin.key} is not a board cell.",
            {"q": q, "r": r},
        )

    moves = session.game.get_valid_moves(origin)
    return {
        "session_id": session_id,
        "origin": hex_to_payload(origin),
        "moves": [move_to_payload(m) for m in moves],
    }


# ---------------------------------------------------------------------------
# POST /api/games/{session_id}/move: play one move for the current player
# ---------------------------------------------------------------------------

@router.post("/{session_id}/move", response_model=GameStateResponse)
def make_move(
    session_id: str, req: MoveRequest,
    sessions: SessionManager = Depends(get_session_manager),
):
    session, err = _get_session_or_404(sessions, session_id)
    if err:
        return err

    game = session.game
    if game.phase == MatchPhase.GAME_OVER:
        return _err(409, "GAME_ALREADY_OVER", "The game has already ended.")

    from_pos, to_pos = req.from_.to_hex(), req.to.to_hex()
    for pos in (from_pos, to_pos):
        if not game.state.is_on_board(pos):
            return _err(
                422, "INVALID_POSITION",
                f"{pos.key} is not a board cell.",
                {"q": pos.q, "r": pos.r},
            )

    try:
        game.play(from_pos, to_pos)
    except MoveInProgressError as exc:
        return _err(409, "MOVE_IN_PROGRESS", str(exc))
    except IllegalMoveError as exc:
        return _err(
            422, "ILLEGAL_MOVE", str(exc),
            {"from": from_pos.key, "to": to_pos.key},
        )

    return session_to_payload(session_id, session)


# ---------------------------------------------------------------------------
# POST /api/games/{session_id}/reset: restart the session
# ---------------------------------------------------------------------------

@router.post("/{session_id}/reset", response_model=GameStateResponse)
def reset_game(session_id: str, sessions: SessionManager = Depends(get_session_manager)):
    session, err = _get_session_or_404(sessions, session_id)
    if err:
        return err

    session.game.reset_game()
    return session_to_payload(session_id, session)


# ---------------------------------------------------------------------------
# DELETE /api/games/{session_id}: clean up a session
# ---------------------------------------------------------------------------

@router.delete("/{session_id}", status_code=204)
def delete_game(session_id: str, sessions: SessionManager = Depends(get_session_manager)):
    sessions.delete(session_id)
