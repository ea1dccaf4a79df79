"""
Sternhalma (Chinese Checkers) board topology.

Defines the fixed 121-cell star: a central hexagon of cube radius 4 plus six
10-cell home triangles, one per side, generated by rotating a single base
wedge.  Also provides the text display used by the terminal client.
"""

from __future__ import annotations

from typing import Dict, List, Mapping, Optional, Tuple

from sternhalma.hexgrid import ORIGIN, Hex

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

CENTER_RADIUS: int = 4
NUM_TRIANGLES: int = 6
TRIANGLE_SIZE: int = 10
NUM_CELLS: int = 61 + NUM_TRIANGLES * TRIANGLE_SIZE  # 121

# Home index of a neutral centre cell
CENTER: int = -1

# Largest |q| or |r| of any cell (the triangle tips)
BOARD_EXTENT: int = 2 * CENTER_RADIUS

# Base wedge for triangle 0 (12 o'clock), stacked 1-2-3-4 from the tip in.
BASE_TRIANGLE: Tuple[Hex, ...] = (
    Hex(4, -8),                                      # tip
    Hex(3, -7), Hex(4, -7),
    Hex(2, -6), Hex(3, -6), Hex(4, -6),
    Hex(1, -5), Hex(2, -5), Hex(3, -5), Hex(4, -5),  # base row, touching the centre
)

# ---------------------------------------------------------------------------
# Generators
# ---------------------------------------------------------------------------

def center_positions() -> List[Hex]:
    """Every cell within cube distance ``CENTER_RADIUS`` of the origin."""
    cells: List[Hex] = []
    for q in range(-CENTER_RADIUS, CENTER_RADIUS + 1):
        for r in range(-CENTER_RADIUS, CENTER_RADIUS + 1):
            pos = Hex(q, r)
            if pos.distance(ORIGIN) <= CENTER_RADIUS:
                cells.append(pos)
    return cells


def generate_triangle(rotation: int) -> List[Hex]:
    """Return the base wedge rotated ``rotation * 60`` degrees clockwise.

    ``Hex.rotate_n`` turns counter-clockwise, so a clockwise turn by N is
    realised as ``(6 - N) % 6`` counter-clockwise steps.
    """
    ccw_steps = (NUM_TRIANGLES - rotation) % NUM_TRIANGLES
    return [pos.rotate_n(ccw_steps) for pos in BASE_TRIANGLE]


def generate_all_triangles() -> List[List[Hex]]:
    """All six home triangles; index 0 is 12 o'clock, indices run clockwise."""
    return [generate_triangle(rot) for rot in range(NUM_TRIANGLES)]


def build_cell_homes() -> Dict[Hex, int]:
    """Map every board position to its home index (``CENTER`` or 0..5)."""
    homes: Dict[Hex, int] = {pos: CENTER for pos in center_positions()}
    for index, triangle in enumerate(generate_all_triangles()):
        for pos in triangle:
            homes[pos] = index
    return homes


# Precomputed at import time; the topology never changes.
HOME_TRIANGLES: Tuple[Tuple[Hex, ...], ...] = tuple(
    tuple(t) for t in generate_all_triangles()
)
CELL_HOMES: Dict[Hex, int] = build_cell_homes()


def is_board_position(pos: Hex) -> bool:
    """Return True if *pos* is one of the 121 star cells."""
    return pos in CELL_HOMES


# ---------------------------------------------------------------------------
# Display
# ---------------------------------------------------------------------------

_EMPTY_CHAR = "."


def display_board(occupants: Mapping[Hex, Optional[int]]) -> str:
    """
    Return (and print) a text picture of the star.

    *occupants* maps board positions to the owner's home-triangle index, or
    ``None`` for an empty hole.  Positions missing from the mapping are drawn
    as empty.  Rows run from ``r = -8`` (top tip) to ``r = 8``; each row is
    indented by ``|r|`` so neighbouring rows interleave like the real board.

    Example (start of a two-player game, top of the star)::

                        0
                       0 0
                      0 0 0
                     0 0 0 0
            . . . . . . . . . . . . .
    """
    lines: List[str] = []
    for r in range(-BOARD_EXTENT, BOARD_EXTENT + 1):
        row = sorted(
            (pos for pos in CELL_HOMES if pos.r == r), key=lambda p: p.q
        )
        if not row:
            continue
        # Column of a cell in doubled coordinates is 2q + r.
        offset = 2 * row[0].q + r + 2 * BOARD_EXTENT
        chars: List[str] = []
        for pos in row:
            owner = occupants.get(pos)
            chars.append(_EMPTY_CHAR if owner is None else str(owner))
        lines.append(" " * offset + " ".join(chars))
    text = "\n".join(lines)
    print(text)
    return text
