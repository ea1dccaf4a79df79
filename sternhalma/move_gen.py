"""
Sternhalma move generator.

Enumerates every destination a piece can reach in one turn: single steps
into an adjacent empty hole, and chains of long-range ("flying") jumps over
a single occupied cell to the mirror-image hole on the far side.

Each destination is reported exactly once.  Jump chains are explored
depth-first from every landing spot as if the piece already stood there;
a visited set of landing spots stops the search from looping and from
reporting a destination twice.  Ties between chains reaching the same hole
go to whichever is found first in ``HEX_DIRECTIONS`` order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Protocol, Set, Tuple

from sternhalma.hexgrid import HEX_DIRECTIONS, Hex

logger = logging.getLogger(__name__)

STEP: str = "step"
JUMP: str = "jump"


class Occupancy(Protocol):
    """What the generator needs from a board."""

    def is_on_board(self, pos: Hex) -> bool: ...

    def is_occupied(self, pos: Hex) -> bool: ...


@dataclass(frozen=True)
class Move:
    """A legal destination.

    ``path`` lists every landing spot of a jump chain in order, ending with
    ``target``.  It is empty for a step.
    """

    target: Hex
    kind: str = STEP
    path: Tuple[Hex, ...] = ()

    @property
    def is_jump(self) -> bool:
        return self.kind == JUMP

    @property
    def hops(self) -> int:
        return len(self.path)

    def waypoints(self, origin: Hex) -> List[Hex]:
        """Origin followed by every position the piece passes through."""
        if self.is_jump:
            return [origin, *self.path]
        return [origin, self.target]


def step_move(target: Hex) -> Move:
    return Move(target, STEP, ())


def jump_move(target: Hex, path: Tuple[Hex, ...]) -> Move:
    return Move(target, JUMP, path)


# ---------------------------------------------------------------------------
# Jump scanning
# ---------------------------------------------------------------------------

def find_jump_landing(
    board: Occupancy,
    origin: Hex,
    pos: Hex,
    direction: Hex,
) -> Optional[Hex]:
    """
    Return the landing hole for a jump from *pos* along *direction*, if any.

    Scans outward until the board edge.  The first occupied cell, at
    distance ``d``, is the pivot; the landing is the cell at ``2d``, which
    must be on the board and empty, with every cell strictly between pivot
    and landing empty too.

    *origin* is where the moving piece started this turn.  It stays marked
    occupied during the search, so it can never serve as a pivot: meeting
    it first abandons the direction.
    """
    distance = 1
    pivot_distance = 0

    while True:
        check = pos + direction.scale(distance)
        if not board.is_on_board(check):
            return None

        occupied = board.is_occupied(check)

        if pivot_distance == 0:
            if occupied:
                if check == origin:
                    return None
                pivot_distance = distance
        else:
            if occupied:
                # Something sits between pivot and landing (or on it).
                return None
            if distance == 2 * pivot_distance:
                return check

        distance += 1


# ---------------------------------------------------------------------------
# Depth-first search
# ---------------------------------------------------------------------------

def _explore(
    board: Occupancy,
    origin: Hex,
    pos: Hex,
    has_jumped: bool,
    path: Tuple[Hex, ...],
    visited: Set[Hex],
    moves: Dict[Hex, Move],
) -> None:
    """
    Collect steps (only from the origin) and jump chains from *pos*.

    Parameters
    ----------
    board     : occupancy view (not mutated).
    origin    : square the piece occupies at the start of the turn.
    pos       : current landing spot (``origin`` on the first call).
    has_jumped: True once at least one hop has been made; no more steps.
    path      : landing spots so far in this chain.
    visited   : landing spots already expanded (shared across the search).
    moves     : discovered moves keyed by target, in discovery order.
    """
    if pos in visited:
        return
    visited.add(pos)

    if not has_jumped:
        # Steps first, so a hole next to the origin is always a step even
        # when some jump chain also passes through it.
        for direction in HEX_DIRECTIONS:
            adjacent = pos + direction
            if board.is_on_board(adjacent) and not board.is_occupied(adjacent):
                moves.setdefault(adjacent, step_move(adjacent))

    for direction in HEX_DIRECTIONS:
        landing = find_jump_landing(board, origin, pos, direction)
        if landing is None or landing in visited:
            continue

        new_path = path + (landing,)
        moves.setdefault(landing, jump_move(landing, new_path))
        _explore(board, origin, landing, True, new_path, visited, moves)


def find_valid_moves(board: Occupancy, start: Hex) -> List[Move]:
    """
    Return every legal move for the piece at *start*, one per destination.

    An off-board *start* yields an empty list.  So does a piece with no
    legal moves; neither is an error.
    """
    if not board.is_on_board(start):
        return []

    visited: Set[Hex] = set()
    moves: Dict[Hex, Move] = {}
    _explore(board, start, start, False, (), visited, moves)

    logger.debug("find_valid_moves(%s): %d move(s)", start.key, len(moves))
    return list(moves.values())


def is_valid_move(board: Occupancy, from_pos: Hex, to_pos: Hex) -> Optional[Move]:
    """Return the move from *from_pos* to *to_pos* if it is legal, else None."""
    for move in find_valid_moves(board, from_pos):
        if move.target == to_pos:
            return move
    return None


def get_player_moves(board, owner: int) -> Dict[Hex, List[Move]]:
    """Map each of *owner*'s piece positions to its (non-empty) move list.

    *board* must be a ``BoardState`` (needs ``get_player_pieces``).
    """
    result: Dict[Hex, List[Move]] = {}
    for piece in board.get_player_pieces(owner):
        moves = find_valid_moves(board, piece.position)
        if moves:
            result[piece.position] = moves
    return result
