from __future__ import annotations

from typing import Optional

from sternhalma.encoder import encode_grid
from sternhalma.game import MoveResult
from sternhalma.hexgrid import Hex
from sternhalma.move_gen import Move

from .session import Session


def hex_to_payload(pos: Hex) -> dict:
    return {"q": pos.q, "r": pos.r}


def move_to_payload(move: Move) -> dict:
    return {
        "target": hex_to_payload(move.target),
        "kind":   move.kind,
        "path":   [hex_to_payload(p) for p in move.path],
    }


def last_move_to_payload(result: Optional[MoveResult]) -> Optional[dict]:
    if result is None:
        return None
    return {
        "player": result.player,
        "origin": hex_to_payload(result.from_pos),
        "target": hex_to_payload(result.to_pos),
        "kind":   result.move.kind,
        "path":   [hex_to_payload(p) for p in result.move.path],
    }


def session_to_payload(session_id: str, session: Session) -> dict:
    """Convert a Session into the standard API response payload."""
    game = session.game
    state = game.state
    cells = [
        {
            "key":        cell.position.key,
            "q":          cell.position.q,
            "r":          cell.position.r,
            "home_index": cell.home_index,
            "owner":      cell.piece.owner if cell.piece is not None else None,
        }
        for cell in sorted(state, key=lambda c: (c.position.r, c.position.q))
    ]
    players = [
        {
            "player_index":        p.player_index,
            "home_triangle_index": p.home_triangle_index,
            "goal_triangle_index": p.goal_triangle_index,
            "name":                p.name,
            "piece_positions":     sorted(p.piece_positions),
        }
        for p in game.players
    ]
    return {
        "session_id":     session_id,
        "phase":          game.phase.value,
        "player_count":   game.player_count,
        "current_player": game.current_player_index,   # home-triangle index
        "turn_order":     list(state.turn_order),
        "players":        players,
        "cells":          cells,
        "grid":           encode_grid(state).tolist(),
        "winner":         game.winner.home_triangle_index if game.winner is not None else None,
        "move_count":     game.move_count,
        "last_move":      last_move_to_payload(game.last_move),
    }
