"""
Input-side controller: turns clicks into selections and move requests.

Steps are applied at once.  Jumps lift the piece off its origin and hand a
``JumpAnimation`` (the ordered waypoints) to the front-end; the move is only
committed when the front-end calls :meth:`PlayerController.complete_animation`.
Until then every other move request is refused, so moves stay strictly
serial.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from sternhalma.events import STATE_RESET
from sternhalma.game import Game, MoveResult
from sternhalma.hexgrid import Hex, HexLayout
from sternhalma.move_gen import Move
from sternhalma.state import MatchPhase, MoveInProgressError, Piece

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class JumpAnimation:
    """A jump chain awaiting playback.  ``waypoints[0]`` is the origin."""

    piece: Piece
    owner: int
    waypoints: Tuple[Hex, ...]
    move: Move

    @property
    def origin(self) -> Hex:
        return self.waypoints[0]

    @property
    def target(self) -> Hex:
        return self.waypoints[-1]

    def segments(self) -> List[Tuple[Hex, Hex]]:
        """Consecutive (from, to) hops for per-hop interpolation."""
        return list(zip(self.waypoints, self.waypoints[1:]))


class PlayerController:
    """Selection state and move requests for one local table."""

    def __init__(self, game: Game) -> None:
        self.game = game
        self.selected_piece: Optional[Piece] = None
        self.valid_moves: List[Move] = []
        self.pending: Optional[JumpAnimation] = None
        self.last_result: Optional[MoveResult] = None
        game.state.events.subscribe(STATE_RESET, self._on_state_reset)

    @property
    def is_animating(self) -> bool:
        return self.pending is not None

    # ------------------------------------------------------------------
    # Clicks
    # ------------------------------------------------------------------

    def handle_pixel_click(
        self, x: float, y: float, layout: HexLayout
    ) -> Optional[JumpAnimation]:
        return self.handle_click(layout.pixel_to_axial(x, y))

    def handle_click(self, pos: Hex) -> Optional[JumpAnimation]:
        """React to a click on *pos*.

        Returns the pending ``JumpAnimation`` if the click started a jump,
        otherwise None.  Clicks are ignored while a jump is playing back,
        off the board, and after the match is over.
        """
        state = self.game.state
        if self.is_animating or not state.is_on_board(pos):
            return None
        if self.game.phase != MatchPhase.IN_PROGRESS:
            return None

        clicked = state.get_piece_at(pos)

        if self.selected_piece is not None:
            move = self._find_move(pos)
            if move is not None:
                return self.request_move(move)
            if self.can_select_piece(clicked):
                self.select_piece(clicked)
            else:
                self.deselect_piece()
        elif self.can_select_piece(clicked):
            self.select_piece(clicked)
        return None

    def _find_move(self, target: Hex) -> Optional[Move]:
        for move in self.valid_moves:
            if move.target == target:
                return move
        return None

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def can_select_piece(self, piece: Optional[Piece]) -> bool:
        if piece is None:
            return False
        return piece.belongs_to(self.game.current_player_index)

    def select_piece(self, piece: Piece) -> None:
        if self.selected_piece is not None:
            self.selected_piece.deselect()
        self.selected_piece = piece
        piece.select()
        self.valid_moves = self.game.get_valid_moves(piece.position)

    def deselect_piece(self) -> None:
        if self.selected_piece is not None:
            self.selected_piece.deselect()
            self.selected_piece = None
        self.valid_moves = []

    # ------------------------------------------------------------------
    # Moves
    # ------------------------------------------------------------------

    def request_move(self, move: Move) -> Optional[JumpAnimation]:
        """Carry out *move* for the selected piece.

        Steps complete immediately.  Jumps return a ``JumpAnimation`` and
        leave the piece lifted until :meth:`complete_animation`.
        """
        if self.is_animating:
            raise MoveInProgressError("A jump is still being played back.")
        if self.selected_piece is None:
            raise ValueError("No piece selected.")

        piece = self.selected_piece
        from_pos = piece.position
        self.game.check_move(from_pos, move.target)

        piece.deselect()
        self.selected_piece = None
        self.valid_moves = []

        if move.is_jump and move.path:
            self.game.state.begin_motion(from_pos)
            self.pending = JumpAnimation(
                piece=piece,
                owner=piece.owner,
                waypoints=tuple(move.waypoints(from_pos)),
                move=move,
            )
            logger.debug("jump playback started: %s", [p.key for p in self.pending.waypoints])
            return self.pending

        self.last_result = self.game.play(from_pos, move.target)
        return None

    def complete_animation(self) -> MoveResult:
        """Land the lifted piece and finish the turn."""
        if self.pending is None:
            raise RuntimeError("No jump is being played back.")
        animation = self.pending
        self.pending = None
        try:
            self.game.state.end_motion(animation.target)
        except (RuntimeError, ValueError):
            self.game.state.cancel_motion()
            raise
        self.last_result = self.game.finish_move(
            animation.owner, animation.origin, animation.target, animation.move
        )
        return self.last_result

    def reset(self) -> None:
        if self.selected_piece is not None:
            self.selected_piece.deselect()
        self.selected_piece = None
        self.valid_moves = []
        if self.pending is not None:
            self.game.state.cancel_motion()
        self.pending = None
        self.last_result = None

    def _on_state_reset(self, _data) -> None:
        # The board already dropped the lifted piece; forget playback and selection.
        self.selected_piece = None
        self.valid_moves = []
        self.pending = None
