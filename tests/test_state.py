"""
Tests for sternhalma.state -- cells, pieces, the position index, turns and
the motion lock.
"""

from __future__ import annotations

import pytest

from sternhalma.board import CENTER
from sternhalma.events import PIECE_MOVED, STATE_RESET, TURN_CHANGED
from sternhalma.hexgrid import ORIGIN, Hex
from sternhalma.state import (
    BoardState,
    MatchPhase,
    MoveInProgressError,
    Piece,
    PlayerState,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _state_with(pieces):
    """BoardState with players for every owner in *pieces* ({Hex: owner})."""
    state = BoardState()
    owners = sorted(set(pieces.values()))
    for seat, owner in enumerate(owners):
        state.players.append(PlayerState(seat, owner))
    state.turn_order = list(owners)
    for pos, owner in pieces.items():
        state.place(pos, Piece(pos, owner))
        state.get_player(owner).add_piece_position(pos.key)
    return state


def _record(state, event):
    received = []
    state.events.subscribe(event, received.append)
    return received


# ===================================================================
# Fresh board
# ===================================================================

class TestFreshBoard:

    def test_121_empty_cells(self):
        state = BoardState()
        assert len(state) == 121
        assert not any(cell.has_piece() for cell in state)

    def test_waiting_with_no_players(self):
        state = BoardState()
        assert state.match_phase == MatchPhase.WAITING_TO_START
        assert state.current_player_index is None
        assert state.get_current_player() is None
        assert state.in_motion is None

    def test_home_index(self):
        state = BoardState()
        assert state.get_home_index(ORIGIN) == CENTER
        assert state.get_home_index(Hex(4, -8)) == 0
        assert state.get_cell(Hex(-4, 8)).is_home_cell()
        assert not state.get_cell(ORIGIN).is_home_cell()


# ===================================================================
# Queries
# ===================================================================

class TestQueries:

    def test_off_board_reads_unoccupied(self):
        state = BoardState()
        off = Hex(9, 9)
        assert not state.is_on_board(off)
        assert not state.is_occupied(off)
        assert state.get_cell(off) is None
        assert state.get_piece_at(off) is None
        assert state.get_home_index(off) == CENTER

    def test_place_and_read_back(self):
        state = BoardState()
        piece = Piece(ORIGIN, 2)
        state.place(Hex(1, 1), piece)
        assert state.get_piece_at(Hex(1, 1)) is piece
        assert piece.position == Hex(1, 1)
        assert state.is_occupied(Hex(1, 1))

    def test_place_off_board_ignored(self):
        state = BoardState()
        state.place(Hex(9, 9), Piece(Hex(9, 9), 0))
        assert not any(cell.has_piece() for cell in state)

    def test_occupants(self):
        state = _state_with({ORIGIN: 4})
        occupants = state.occupants()
        assert len(occupants) == 121
        assert occupants[ORIGIN] == 4
        assert occupants[Hex(1, 0)] is None

    def test_get_player_pieces(self):
        state = _state_with({ORIGIN: 0, Hex(1, 0): 0, Hex(2, 0): 3})
        assert {p.position for p in state.get_player_pieces(0)} == {ORIGIN, Hex(1, 0)}
        assert [p.position for p in state.get_player_pieces(3)] == [Hex(2, 0)]
        assert state.get_player_pieces(5) == []

    def test_remove_at(self):
        state = _state_with({ORIGIN: 0})
        piece = state.remove_at(ORIGIN)
        assert piece is not None and piece.owner == 0
        assert not state.is_occupied(ORIGIN)
        assert state.remove_at(ORIGIN) is None


# ===================================================================
# move()
# ===================================================================

class TestMove:

    def test_successful_move(self):
        state = _state_with({ORIGIN: 0})
        piece = state.get_piece_at(ORIGIN)
        assert state.move(ORIGIN, Hex(1, 0)) is True
        assert not state.is_occupied(ORIGIN)
        assert state.get_piece_at(Hex(1, 0)) is piece
        assert piece.position == Hex(1, 0)

    def test_move_updates_player_index(self):
        state = _state_with({ORIGIN: 0})
        state.move(ORIGIN, Hex(1, 0))
        assert state.get_player(0).piece_positions == {"1,0"}

    def test_move_emits_piece_moved(self):
        state = _state_with({ORIGIN: 0})
        received = _record(state, PIECE_MOVED)
        state.move(ORIGIN, Hex(1, 0))
        assert len(received) == 1
        assert received[0]["from"] == ORIGIN
        assert received[0]["to"] == Hex(1, 0)
        assert received[0]["piece"].owner == 0

    @pytest.mark.parametrize("from_pos, to_pos", [
        (Hex(2, 2), Hex(2, 3)),   # empty source
        (ORIGIN, Hex(1, 0)),      # occupied destination
        (ORIGIN, Hex(9, 9)),      # off-board destination
        (Hex(9, 9), Hex(0, 1)),   # off-board source
    ])
    def test_refused_moves(self, from_pos, to_pos):
        state = _state_with({ORIGIN: 0, Hex(1, 0): 3})
        received = _record(state, PIECE_MOVED)
        before = state.occupants()
        assert state.move(from_pos, to_pos) is False
        assert state.occupants() == before
        assert received == []

    def test_move_does_not_check_rules(self):
        """Any empty cell is reachable through the raw board API."""
        state = _state_with({Hex(4, -8): 0})
        assert state.move(Hex(4, -8), Hex(-4, 8))


# ===================================================================
# Turns and reset
# ===================================================================

class TestTurns:

    def test_next_turn_wraps(self):
        state = _state_with({ORIGIN: 1, Hex(1, 0): 3, Hex(2, 0): 5})
        state.turn_order = [3, 5, 1]
        seen = []
        for _ in range(4):
            seen.append(state.current_player_index)
            state.next_turn()
        assert seen == [3, 5, 1, 3]

    def test_next_turn_emits(self):
        state = _state_with({ORIGIN: 0, Hex(1, 0): 3})
        received = _record(state, TURN_CHANGED)
        state.next_turn()
        assert received == [{"player_index": 3}]

    def test_next_turn_without_players(self):
        state = BoardState()
        state.next_turn()
        assert state.current_player_index is None

    def test_reset(self):
        state = _state_with({ORIGIN: 0, Hex(1, 0): 3})
        state.match_phase = MatchPhase.IN_PROGRESS
        received = _record(state, STATE_RESET)
        state.reset()
        assert received == [{}]
        assert state.players == []
        assert state.turn_order == []
        assert state.match_phase == MatchPhase.WAITING_TO_START
        assert not any(cell.has_piece() for cell in state)
        assert len(state) == 121


# ===================================================================
# Players
# ===================================================================

class TestPlayerState:

    def test_goal_and_name(self):
        player = PlayerState(1, 3)
        assert player.goal_triangle_index == 0
        assert player.name == "Blue"
        assert "Blue" in repr(player)

    def test_position_keys(self):
        player = PlayerState(0, 0)
        player.add_piece_position("1,2")
        player.update_piece_position("1,2", "3,4")
        assert player.piece_positions == {"3,4"}
        player.remove_piece_position("3,4")
        player.remove_piece_position("3,4")
        assert player.piece_count == 0


# ===================================================================
# Motion lock
# ===================================================================

class TestMotion:

    def test_begin_motion_lifts_piece(self):
        state = _state_with({ORIGIN: 0})
        piece = state.begin_motion(ORIGIN)
        assert piece.owner == 0
        assert state.in_motion == ORIGIN
        assert not state.is_occupied(ORIGIN)

    def test_begin_motion_on_empty_cell(self):
        state = BoardState()
        with pytest.raises(ValueError):
            state.begin_motion(ORIGIN)
        assert state.in_motion is None

    def test_only_one_piece_in_motion(self):
        state = _state_with({ORIGIN: 0, Hex(1, 0): 0})
        state.begin_motion(ORIGIN)
        with pytest.raises(MoveInProgressError):
            state.begin_motion(Hex(1, 0))

    def test_move_refused_while_in_motion(self):
        state = _state_with({ORIGIN: 0, Hex(1, 0): 3})
        state.begin_motion(ORIGIN)
        assert state.move(Hex(1, 0), Hex(2, 0)) is False
        assert state.is_occupied(Hex(1, 0))

    def test_end_motion(self):
        state = _state_with({ORIGIN: 0})
        received = _record(state, PIECE_MOVED)
        state.begin_motion(ORIGIN)
        assert received == []
        piece = state.end_motion(Hex(0, 3))
        assert state.in_motion is None
        assert state.get_piece_at(Hex(0, 3)) is piece
        assert state.get_player(0).piece_positions == {"0,3"}
        assert received[0]["from"] == ORIGIN
        assert received[0]["to"] == Hex(0, 3)

    def test_end_motion_without_lift(self):
        with pytest.raises(RuntimeError):
            BoardState().end_motion(ORIGIN)

    def test_end_motion_on_occupied_cell(self):
        state = _state_with({ORIGIN: 0, Hex(1, 0): 3})
        state.begin_motion(ORIGIN)
        with pytest.raises(ValueError):
            state.end_motion(Hex(1, 0))
        assert state.in_motion == ORIGIN

    def test_cancel_motion_restores(self):
        state = _state_with({ORIGIN: 0})
        piece = state.begin_motion(ORIGIN)
        state.cancel_motion()
        assert state.in_motion is None
        assert state.get_piece_at(ORIGIN) is piece
        assert state.get_player(0).piece_positions == {"0,0"}

    def test_reset_clears_motion(self):
        state = _state_with({ORIGIN: 0})
        state.begin_motion(ORIGIN)
        state.reset()
        assert state.in_motion is None
