"""
Read-only NumPy snapshots of a Sternhalma board.

Positions are laid out on a square ``(17, 17)`` grid indexed ``[r + 8, q + 8]``
so that every axial coordinate of the star fits; grid slots that are not
board cells are marked ``OFF_BOARD``.
"""

from __future__ import annotations

import numpy as np

from sternhalma.board import BOARD_EXTENT, CELL_HOMES

GRID_SIZE: int = 2 * BOARD_EXTENT + 1  # 17

OFF_BOARD: int = -2
EMPTY: int = -1

# Grid (row, col) of every board cell, in a fixed order, plus the home index
# of each.  Used to vectorise the board -> grid mapping.
_CELL_POSITIONS = sorted(CELL_HOMES, key=lambda p: (p.r, p.q))
_CELL_RC = np.array(
    [(p.r + BOARD_EXTENT, p.q + BOARD_EXTENT) for p in _CELL_POSITIONS],
    dtype=np.intp,
)
_CELL_HOME = np.array([CELL_HOMES[p] for p in _CELL_POSITIONS], dtype=np.int8)


def board_mask() -> np.ndarray:
    """``(17, 17)`` bool array, True on the 121 board cells."""
    mask = np.zeros((GRID_SIZE, GRID_SIZE), dtype=bool)
    mask[_CELL_RC[:, 0], _CELL_RC[:, 1]] = True
    return mask


def home_grid() -> np.ndarray:
    """``(17, 17)`` int8 array of home indices (-1 centre, ``OFF_BOARD`` elsewhere)."""
    grid = np.full((GRID_SIZE, GRID_SIZE), OFF_BOARD, dtype=np.int8)
    grid[_CELL_RC[:, 0], _CELL_RC[:, 1]] = _CELL_HOME
    return grid


def encode_grid(state) -> np.ndarray:
    """Encode occupancy as a ``(17, 17)`` int8 array.

    Parameters
    ----------
    state : BoardState
        Board to read.  Not mutated.

    Returns
    -------
    np.ndarray
        ``OFF_BOARD`` (-2) outside the star, ``EMPTY`` (-1) for an empty
        hole, otherwise the owning player's home-triangle index (0..5).
    """
    occupants = state.occupants()
    owners = np.array(
        [EMPTY if occupants.get(p) is None else occupants[p] for p in _CELL_POSITIONS],
        dtype=np.int8,
    )
    grid = np.full((GRID_SIZE, GRID_SIZE), OFF_BOARD, dtype=np.int8)
    grid[_CELL_RC[:, 0], _CELL_RC[:, 1]] = owners
    return grid


def grid_index(q: int, r: int) -> tuple:
    """Grid ``(row, col)`` for axial ``(q, r)``."""
    return r + BOARD_EXTENT, q + BOARD_EXTENT
