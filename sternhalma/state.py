"""
Mutable Sternhalma board state.

Owns the 121 cells and the pieces sitting in them, the per-player
position-key index, turn bookkeeping, the match phase and the single
"piece in motion" slot used while a front-end plays back a jump chain.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, List, Optional, Set

from sternhalma.board import CELL_HOMES, CENTER, HOME_TRIANGLES
from sternhalma.events import PIECE_MOVED, STATE_RESET, TURN_CHANGED, EventEmitter
from sternhalma.hexgrid import Hex
from sternhalma.layout import get_goal_triangle_index, triangle_name

logger = logging.getLogger(__name__)


class MatchPhase(str, Enum):
    WAITING_TO_START = "waiting_to_start"
    IN_PROGRESS = "in_progress"
    GAME_OVER = "game_over"


class MoveInProgressError(RuntimeError):
    """Raised when the board is mutated while a piece is lifted for playback."""


# ---------------------------------------------------------------------------
# Pieces and cells
# ---------------------------------------------------------------------------

@dataclass(eq=False)
class Piece:
    """A marble.  ``owner`` is the home-triangle index of its player."""

    position: Hex
    owner: int
    selected: bool = False

    def belongs_to(self, owner: int) -> bool:
        return self.owner == owner

    def select(self) -> None:
        self.selected = True

    def deselect(self) -> None:
        self.selected = False


@dataclass(eq=False)
class Cell:
    """A hole on the board.  ``home_index`` is ``CENTER`` (-1) or 0..5."""

    position: Hex
    home_index: int = CENTER
    piece: Optional[Piece] = None

    def has_piece(self) -> bool:
        return self.piece is not None

    def is_home_cell(self) -> bool:
        return self.home_index != CENTER

    def set_piece(self, piece: Optional[Piece]) -> None:
        self.piece = piece
        if piece is not None:
            piece.position = self.position

    def remove_piece(self) -> Optional[Piece]:
        piece = self.piece
        self.piece = None
        return piece


# ---------------------------------------------------------------------------
# Players
# ---------------------------------------------------------------------------

class PlayerState:
    """Per-player seat data plus the set of position keys its pieces occupy.

    ``piece_positions`` is an index derived from the board; ``BoardState``
    keeps it in step on every relocation.
    """

    def __init__(self, player_index: int, home_triangle_index: int) -> None:
        self.player_index = player_index
        self.home_triangle_index = home_triangle_index
        self.goal_triangle_index = get_goal_triangle_index(home_triangle_index)
        self.piece_positions: Set[str] = set()

    @property
    def name(self) -> str:
        return triangle_name(self.home_triangle_index)

    @property
    def piece_count(self) -> int:
        return len(self.piece_positions)

    def add_piece_position(self, key: str) -> None:
        self.piece_positions.add(key)

    def remove_piece_position(self, key: str) -> None:
        self.piece_positions.discard(key)

    def update_piece_position(self, from_key: str, to_key: str) -> None:
        self.piece_positions.discard(from_key)
        self.piece_positions.add(to_key)

    def has_won(self, state: BoardState) -> bool:
        """True iff all ten goal cells hold this player's own pieces."""
        for pos in state.get_triangle_positions(self.goal_triangle_index):
            piece = state.get_piece_at(pos)
            if piece is None or not piece.belongs_to(self.home_triangle_index):
                return False
        return True

    def __repr__(self) -> str:
        return (
            f"PlayerState({self.name}, seat={self.player_index}, "
            f"home={self.home_triangle_index}, goal={self.goal_triangle_index})"
        )


# ---------------------------------------------------------------------------
# BoardState
# ---------------------------------------------------------------------------

class BoardState:
    """All mutable game data.  Cells are keyed by ``Hex`` value."""

    def __init__(self) -> None:
        self.cells: Dict[Hex, Cell] = {}
        self.players: List[PlayerState] = []
        self.turn_index: int = 0
        self.turn_order: List[int] = []
        self.match_phase: MatchPhase = MatchPhase.WAITING_TO_START
        self.events = EventEmitter()

        # Origin of the piece lifted for jump playback, and the piece itself.
        self.in_motion: Optional[Hex] = None
        self._lifted: Optional[Piece] = None

        self.initialize_board()

    # ------------------------------------------------------------------
    # Setup / reset
    # ------------------------------------------------------------------

    def initialize_board(self) -> None:
        """(Re)build the 121 empty cells."""
        self.cells.clear()
        for pos, home in CELL_HOMES.items():
            self.cells[pos] = Cell(pos, home)

    def reset(self) -> None:
        """Clear players, turns and pieces for a new game."""
        self.turn_index = 0
        self.turn_order = []
        self.players = []
        self.match_phase = MatchPhase.WAITING_TO_START
        self.in_motion = None
        self._lifted = None
        for cell in self.cells.values():
            cell.remove_piece()
        self.events.emit(STATE_RESET, {})

    # ------------------------------------------------------------------
    # Turns
    # ------------------------------------------------------------------

    @property
    def current_player_index(self) -> Optional[int]:
        """Home-triangle index of the player to move, or None before setup."""
        if not self.turn_order:
            return None
        return self.turn_order[self.turn_index]

    def get_current_player(self) -> Optional[PlayerState]:
        index = self.current_player_index
        if index is None:
            return None
        return self.get_player(index)

    def get_player(self, home_index: int) -> Optional[PlayerState]:
        for player in self.players:
            if player.home_triangle_index == home_index:
                return player
        return None

    def next_turn(self) -> None:
        if not self.turn_order:
            return
        self.turn_index = (self.turn_index + 1) % len(self.turn_order)
        self.events.emit(TURN_CHANGED, {"player_index": self.current_player_index})

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_cell(self, pos: Hex) -> Optional[Cell]:
        return self.cells.get(pos)

    def get_piece_at(self, pos: Hex) -> Optional[Piece]:
        cell = self.cells.get(pos)
        return cell.piece if cell is not None else None

    def is_on_board(self, pos: Hex) -> bool:
        return pos in self.cells

    def is_occupied(self, pos: Hex) -> bool:
        cell = self.cells.get(pos)
        return cell.has_piece() if cell is not None else False

    def get_home_index(self, pos: Hex) -> int:
        cell = self.cells.get(pos)
        return cell.home_index if cell is not None else CENTER

    def get_triangle_positions(self, triangle_index: int) -> tuple:
        return HOME_TRIANGLES[triangle_index]

    def get_player_pieces(self, owner: int) -> List[Piece]:
        return [
            cell.piece
            for cell in self.cells.values()
            if cell.piece is not None and cell.piece.belongs_to(owner)
        ]

    def occupants(self) -> Dict[Hex, Optional[int]]:
        """Map every position to its occupant's owner index (or None)."""
        return {
            pos: (cell.piece.owner if cell.piece is not None else None)
            for pos, cell in self.cells.items()
        }

    def __iter__(self) -> Iterator[Cell]:
        return iter(self.cells.values())

    def __len__(self) -> int:
        return len(self.cells)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def place(self, pos: Hex, piece: Piece) -> None:
        """Unconditionally put *piece* at *pos* (setup only; off-board is ignored)."""
        cell = self.cells.get(pos)
        if cell is not None:
            cell.set_piece(piece)

    def remove_at(self, pos: Hex) -> Optional[Piece]:
        """Take the piece at *pos* out of the map and return it."""
        cell = self.cells.get(pos)
        return cell.remove_piece() if cell is not None else None

    def move(self, from_pos: Hex, to_pos: Hex) -> bool:
        """Relocate a piece.  Returns False unless *from_pos* is occupied,
        *to_pos* is an empty board cell, and no piece is in motion."""
        if self.in_motion is not None:
            logger.debug("move %s->%s refused: piece in motion", from_pos, to_pos)
            return False

        from_cell = self.cells.get(from_pos)
        to_cell = self.cells.get(to_pos)
        if (
            from_cell is None
            or to_cell is None
            or not from_cell.has_piece()
            or to_cell.has_piece()
        ):
            return False

        piece = from_cell.remove_piece()
        to_cell.set_piece(piece)
        self._relocated(from_pos, to_pos, piece)
        return True

    def _relocated(self, from_pos: Hex, to_pos: Hex, piece: Piece) -> None:
        player = self.get_player(piece.owner)
        if player is not None:
            player.update_piece_position(from_pos.key, to_pos.key)
        self.events.emit(PIECE_MOVED, {"from": from_pos, "to": to_pos, "piece": piece})

    # ------------------------------------------------------------------
    # Motion lock (jump-chain playback)
    # ------------------------------------------------------------------

    def begin_motion(self, pos: Hex) -> Piece:
        """Lift the piece at *pos* off the board for playback.

        At most one piece may be in motion.  The origin cell reads as empty
        until :meth:`end_motion` or :meth:`cancel_motion`.
        """
        if self.in_motion is not None:
            raise MoveInProgressError(
                f"Piece from {self.in_motion.key} is still in motion."
            )
        piece = self.remove_at(pos)
        if piece is None:
            raise ValueError(f"No piece at {pos.key} to lift.")
        self.in_motion = pos
        self._lifted = piece
        return piece

    def end_motion(self, to_pos: Hex) -> Piece:
        """Land the lifted piece on *to_pos* and record the relocation."""
        if self.in_motion is None or self._lifted is None:
            raise RuntimeError("No piece is in motion.")
        if not self.is_on_board(to_pos) or self.is_occupied(to_pos):
            raise ValueError(f"Cannot land on {to_pos.key}.")

        from_pos, piece = self.in_motion, self._lifted
        self.in_motion = None
        self._lifted = None
        self.place(to_pos, piece)
        self._relocated(from_pos, to_pos, piece)
        return piece

    def cancel_motion(self) -> None:
        """Put a lifted piece back where it came from."""
        if self.in_motion is None or self._lifted is None:
            return
        self.place(self.in_motion, self._lifted)
        self.in_motion = None
        self._lifted = None
