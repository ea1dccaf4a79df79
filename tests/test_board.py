"""
Tests for sternhalma.board -- star topology, triangle generation and the
text display.
"""

from __future__ import annotations

from collections import Counter

import pytest

from sternhalma.board import (
    BASE_TRIANGLE,
    BOARD_EXTENT,
    CELL_HOMES,
    CENTER,
    CENTER_RADIUS,
    HOME_TRIANGLES,
    NUM_CELLS,
    NUM_TRIANGLES,
    TRIANGLE_SIZE,
    center_positions,
    display_board,
    generate_all_triangles,
    generate_triangle,
    is_board_position,
)
from sternhalma.hexgrid import ORIGIN, Hex, neighbors


# ===================================================================
# Cell counts
# ===================================================================

class TestCellCounts:

    def test_total_cells(self):
        assert NUM_CELLS == 121
        assert len(CELL_HOMES) == 121

    def test_center_hexagon(self):
        center = center_positions()
        assert len(center) == 61
        assert len(set(center)) == 61
        for pos in center:
            assert pos.distance(ORIGIN) <= CENTER_RADIUS

    def test_six_triangles_of_ten(self):
        assert len(HOME_TRIANGLES) == NUM_TRIANGLES
        for triangle in HOME_TRIANGLES:
            assert len(triangle) == TRIANGLE_SIZE
            assert len(set(triangle)) == TRIANGLE_SIZE

    def test_home_index_counts(self):
        counts = Counter(CELL_HOMES.values())
        assert counts[CENTER] == 61
        for index in range(NUM_TRIANGLES):
            assert counts[index] == 10

    def test_row_lengths(self):
        """Rows from the top tip down: 1,2,3,4,13,12,11,10,9,10,...,1."""
        lengths = [
            sum(1 for pos in CELL_HOMES if pos.r == r)
            for r in range(-BOARD_EXTENT, BOARD_EXTENT + 1)
        ]
        assert lengths == [1, 2, 3, 4, 13, 12, 11, 10, 9, 10, 11, 12, 13, 4, 3, 2, 1]


# ===================================================================
# Triangle generation
# ===================================================================

class TestTriangles:

    def test_triangle_zero_is_base(self):
        assert HOME_TRIANGLES[0] == BASE_TRIANGLE

    def test_triangles_disjoint_from_each_other_and_center(self):
        center = set(center_positions())
        seen = set()
        for triangle in HOME_TRIANGLES:
            cells = set(triangle)
            assert not cells & seen
            assert not cells & center
            seen |= cells

    def test_triangle_cells_outside_center(self):
        for triangle in HOME_TRIANGLES:
            for pos in triangle:
                assert CENTER_RADIUS < pos.distance(ORIGIN) <= BOARD_EXTENT

    def test_opposite_triangle_is_point_reflection(self):
        for index in range(NUM_TRIANGLES):
            opposite = HOME_TRIANGLES[(index + 3) % NUM_TRIANGLES]
            assert set(opposite) == {ORIGIN - p for p in HOME_TRIANGLES[index]}

    def test_six_oclock_triangle(self):
        assert set(HOME_TRIANGLES[3]) == {
            Hex(-4, 8),
            Hex(-3, 7), Hex(-4, 7),
            Hex(-2, 6), Hex(-3, 6), Hex(-4, 6),
            Hex(-1, 5), Hex(-2, 5), Hex(-3, 5), Hex(-4, 5),
        }

    def test_consecutive_triangles_one_clockwise_turn_apart(self):
        for index in range(NUM_TRIANGLES):
            turned = {p.rotate_cw() for p in HOME_TRIANGLES[index]}
            assert turned == set(HOME_TRIANGLES[(index + 1) % NUM_TRIANGLES])

    def test_generate_triangle_zero_rotation(self):
        assert generate_triangle(0) == list(BASE_TRIANGLE)

    def test_generation_is_deterministic(self):
        assert generate_all_triangles() == generate_all_triangles()
        assert tuple(tuple(t) for t in generate_all_triangles()) == HOME_TRIANGLES

    def test_tip_first(self):
        for triangle in HOME_TRIANGLES:
            assert triangle[0].distance(ORIGIN) == BOARD_EXTENT

    def test_base_row_touches_center(self):
        center = set(center_positions())
        for triangle in HOME_TRIANGLES:
            for pos in triangle[6:]:
                assert any(n in center for n in neighbors(pos))


# ===================================================================
# Lookup
# ===================================================================

class TestLookup:

    @pytest.mark.parametrize("pos, home", [
        (Hex(0, 0), CENTER),
        (Hex(4, -4), CENTER),
        (Hex(4, -8), 0),
        (Hex(-4, 8), 3),
        (Hex(1, -5), 0),
    ])
    def test_cell_homes(self, pos, home):
        assert CELL_HOMES[pos] == home

    def test_is_board_position(self):
        assert is_board_position(ORIGIN)
        assert is_board_position(Hex(4, -8))
        assert not is_board_position(Hex(5, -9))
        assert not is_board_position(Hex(5, 0))
        assert not is_board_position(Hex(8, 8))


# ===================================================================
# Display
# ===================================================================

class TestDisplayBoard:

    def test_empty_board(self, capsys):
        text = display_board({})
        lines = text.split("\n")
        assert len(lines) == 2 * BOARD_EXTENT + 1
        assert text.count(".") == 121
        assert capsys.readouterr().out.strip() == text.strip()

    def test_occupants_drawn_by_owner(self, capsys):
        text = display_board({Hex(4, -8): 0, Hex(-4, 8): 3, ORIGIN: None})
        lines = text.split("\n")
        assert lines[0].strip() == "0"
        assert lines[-1].strip() == "3"
        assert text.count(".") == 119

    def test_rows_interleave(self, capsys):
        lines = display_board({}).split("\n")
        # Tip sits above the middle of the row below it.
        assert lines[0].index(".") == lines[1].index(".") + 1
