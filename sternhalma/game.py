"""
Sternhalma game flow.

Implements the rules layer on top of ``BoardState``:
- Game setup for 2-6 players (seating, turn order, spawning pieces)
- Turn sequencing clockwise from 6 o'clock
- Win detection (all ten goal-triangle holes filled with own pieces)
- A checked ``play`` entry point that returns an explicit change record
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from sternhalma.hexgrid import Hex
from sternhalma.layout import (
    MIN_PLAYERS,
    get_player_triangle_indices,
    get_turn_order,
)
from sternhalma.move_gen import Move, find_valid_moves, is_valid_move
from sternhalma.state import (
    BoardState,
    MatchPhase,
    MoveInProgressError,
    Piece,
    PlayerState,
)

logger = logging.getLogger(__name__)


class IllegalMoveError(ValueError):
    """A requested move breaks the rules (wrong turn, wrong piece, bad target)."""


@dataclass(frozen=True)
class MoveResult:
    """What one completed move changed."""

    player: int             # home-triangle index of the mover
    from_pos: Hex
    to_pos: Hex
    move: Move
    next_player: Optional[int]
    winner: Optional[int]   # home-triangle index, or None


# ---------------------------------------------------------------------------
# Game
# ---------------------------------------------------------------------------

class Game:
    """Rules and flow for one table.

    The board state is exposed as ``self.state`` for read-only use by
    renderers; all mutation goes through this class (or the controller).
    """

    def __init__(self, player_count: Optional[int] = MIN_PLAYERS) -> None:
        self.state = BoardState()
        self.player_count: int = 0
        self.winner: Optional[PlayerState] = None
        self.move_count: int = 0
        self.last_move: Optional[MoveResult] = None
        if player_count is not None:
            self.init_game(player_count)

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    def init_game(self, player_count: int) -> None:
        """Start a fresh match.  Counts outside 2..6 seat all six triangles."""
        self.state.reset()
        self.state.initialize_board()

        triangle_indices = get_player_triangle_indices(player_count)
        for player_index, triangle_index in enumerate(triangle_indices):
            self.state.players.append(PlayerState(player_index, triangle_index))

        self.state.turn_order = get_turn_order(triangle_indices)

        for player in self.state.players:
            self.spawn_pieces_for_player(player)

        self.player_count = len(triangle_indices)
        self.winner = None
        self.move_count = 0
        self.last_move = None
        self.state.match_phase = MatchPhase.IN_PROGRESS

        logger.info(
            "New game: %d players, triangles %s, turn order %s",
            self.player_count, triangle_indices, self.state.turn_order,
        )

    def spawn_pieces_for_player(self, player: PlayerState) -> None:
        for pos in self.state.get_triangle_positions(player.home_triangle_index):
            self.state.place(pos, Piece(pos, player.home_triangle_index))
            player.add_piece_position(pos.key)

    def reset_game(self) -> None:
        """Restart with the same number of players (two if none yet)."""
        self.init_game(self.player_count if self.player_count > 0 else MIN_PLAYERS)

    def set_player_count(self, count: int) -> None:
        self.init_game(count)

    # ------------------------------------------------------------------
    # Turns
    # ------------------------------------------------------------------

    @property
    def current_player(self) -> Optional[PlayerState]:
        return self.state.get_current_player()

    @property
    def current_player_index(self) -> Optional[int]:
        return self.state.current_player_index

    @property
    def players(self) -> List[PlayerState]:
        return self.state.players

    @property
    def phase(self) -> MatchPhase:
        return self.state.match_phase

    def advance_turn(self) -> None:
        self.state.next_turn()

    # ------------------------------------------------------------------
    # Rules
    # ------------------------------------------------------------------

    def check_win_condition(self) -> Optional[PlayerState]:
        """First player (in seat order) whose goal triangle is full of their own pieces."""
        for player in self.state.players:
            if player.has_won(self.state):
                return player
        return None

    def end_match(self, winner: PlayerState) -> None:
        self.winner = winner
        self.state.match_phase = MatchPhase.GAME_OVER
        logger.info("%s player wins after %d moves", winner.name, self.move_count)

    def get_valid_moves(self, pos: Hex) -> List[Move]:
        """Legal moves for the piece at *pos*; empty while a piece is in motion."""
        if self.state.in_motion is not None:
            return []
        if not self.state.is_occupied(pos):
            return []
        return find_valid_moves(self.state, pos)

    def validate_move(self, from_pos: Hex, to_pos: Hex) -> Optional[Move]:
        if self.state.in_motion is not None:
            return None
        return is_valid_move(self.state, from_pos, to_pos)

    def execute_move(self, from_pos: Hex, to_pos: Hex) -> bool:
        """Relocate without rule checks.  False if the board refuses."""
        if self.state.in_motion is not None:
            raise MoveInProgressError("Cannot move while a piece is in motion.")
        return self.state.move(from_pos, to_pos)

    # ------------------------------------------------------------------
    # Checked play
    # ------------------------------------------------------------------

    def check_move(self, from_pos: Hex, to_pos: Hex) -> Move:
        """Return the legal move or raise ``IllegalMoveError`` explaining why not."""
        if self.state.in_motion is not None:
            raise MoveInProgressError("Cannot move while a piece is in motion.")
        if self.state.match_phase != MatchPhase.IN_PROGRESS:
            raise IllegalMoveError(f"Match is not in progress ({self.state.match_phase.value}).")

        piece = self.state.get_piece_at(from_pos)
        if piece is None:
            raise IllegalMoveError(f"No piece at {from_pos.key}.")
        if not piece.belongs_to(self.current_player_index):
            raise IllegalMoveError(
                f"Piece at {from_pos.key} belongs to triangle {piece.owner}, "
                f"but it is triangle {self.current_player_index}'s turn."
            )

        move = is_valid_move(self.state, from_pos, to_pos)
        if move is None:
            raise IllegalMoveError(f"{from_pos.key} -> {to_pos.key} is not a legal move.")
        return move

    def play(self, from_pos: Hex, to_pos: Hex) -> MoveResult:
        """Validate, apply, pass the turn and check for a winner."""
        move = self.check_move(from_pos, to_pos)
        mover = self.current_player_index
        self.state.move(from_pos, to_pos)
        return self.finish_move(mover, from_pos, to_pos, move)

    def finish_move(
        self, mover: int, from_pos: Hex, to_pos: Hex, move: Move
    ) -> MoveResult:
        """Post-move bookkeeping shared by ``play`` and jump playback."""
        self.move_count += 1
        self.advance_turn()

        winner = self.check_win_condition()
        if winner is not None:
            self.end_match(winner)

        result = MoveResult(
            player=mover,
            from_pos=from_pos,
            to_pos=to_pos,
            move=move,
            next_player=self.current_player_index,
            winner=winner.home_triangle_index if winner is not None else None,
        )
        self.last_move = result
        logger.debug("move %d: %s -> %s (%s)", self.move_count, from_pos.key, to_pos.key, move.kind)
        return result

    def __repr__(self) -> str:
        status = self.state.match_phase.value
        player = self.current_player.name if self.current_player else "-"
        return f"Game({status}, {self.player_count} players, {player} to move, move={self.move_count})"
