"""
Axial hex coordinates for the Sternhalma (Chinese Checkers) star board.

Defines the ``Hex`` value type with its arithmetic and rotations, the six
unit directions, cube rounding, and the pointy-top pixel layout used by
front-ends to translate clicks into board positions.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Tuple

# ---------------------------------------------------------------------------
# Hex value type
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Hex:
    """An axial ``(q, r)`` position.  The cube coordinate ``s = -q - r``."""

    q: int
    r: int

    @property
    def s(self) -> int:
        return -self.q - self.r

    @property
    def key(self) -> str:
        """Canonical ``"q,r"`` string, lossless through :meth:`from_key`."""
        return f"{self.q},{self.r}"

    @classmethod
    def from_key(cls, key: str) -> Hex:
        """Parse a ``"q,r"`` key.  Raises ``ValueError`` on malformed input."""
        parts = key.split(",")
        if len(parts) != 2:
            raise ValueError(f"Malformed hex key {key!r}; expected 'q,r'.")
        return cls(int(parts[0]), int(parts[1]))

    # -- arithmetic -------------------------------------------------------

    def __add__(self, other: Hex) -> Hex:
        return Hex(self.q + other.q, self.r + other.r)

    def __sub__(self, other: Hex) -> Hex:
        return Hex(self.q - other.q, self.r - other.r)

    def scale(self, factor: int) -> Hex:
        return Hex(self.q * factor, self.r * factor)

    def distance(self, other: Hex) -> int:
        """Cube distance (number of single steps) between two cells."""
        d = self - other
        return max(abs(d.q), abs(d.r), abs(d.s))

    # -- rotation about the origin ----------------------------------------

    def rotate_ccw(self) -> Hex:
        """Rotate 60 degrees counter-clockwise."""
        return Hex(-self.r, self.q + self.r)

    def rotate_cw(self) -> Hex:
        """Rotate 60 degrees clockwise."""
        return Hex(self.q + self.r, -self.q)

    def rotate_n(self, n: int) -> Hex:
        """Rotate by ``n * 60`` degrees counter-clockwise."""
        result = self
        for _ in range(n % 6):
            result = result.rotate_ccw()
        return result

    def __repr__(self) -> str:
        return f"Hex({self.q}, {self.r})"


ORIGIN = Hex(0, 0)

# ---------------------------------------------------------------------------
# Directions
# ---------------------------------------------------------------------------

EAST = Hex(1, 0)
NORTHEAST = Hex(1, -1)
NORTHWEST = Hex(0, -1)
WEST = Hex(-1, 0)
SOUTHWEST = Hex(-1, 1)
SOUTHEAST = Hex(0, 1)

# Iteration order is fixed so that move generation breaks ties the same
# way on every call.
HEX_DIRECTIONS: Tuple[Hex, ...] = (
    EAST,
    NORTHEAST,
    NORTHWEST,
    WEST,
    SOUTHWEST,
    SOUTHEAST,
)


def neighbors(pos: Hex) -> List[Hex]:
    """Return the six positions adjacent to *pos* (on or off the board)."""
    return [pos + d for d in HEX_DIRECTIONS]


# ---------------------------------------------------------------------------
# Rounding and pixel layout
# ---------------------------------------------------------------------------

def hex_round(q: float, r: float) -> Hex:
    """Snap fractional axial coordinates to the nearest cell.

    Each cube component is rounded independently; the one with the largest
    rounding error is then recomputed from the other two so that
    ``q + r + s == 0`` holds again.
    """
    s = -q - r
    rq = round(q)
    rr = round(r)
    rs = round(s)

    q_diff = abs(rq - q)
    r_diff = abs(rr - r)
    s_diff = abs(rs - s)

    if q_diff > r_diff and q_diff > s_diff:
        rq = -rr - rs
    elif r_diff > s_diff:
        rr = -rq - rs

    return Hex(int(rq), int(rr))


_SQRT3 = math.sqrt(3.0)


@dataclass(frozen=True)
class HexLayout:
    """Pointy-top pixel layout: cell radius plus the pixel of the origin."""

    radius: float
    center_x: float = 0.0
    center_y: float = 0.0

    @classmethod
    def fit(cls, width: float, height: float) -> HexLayout:
        """Size the star to a ``width`` x ``height`` viewport, centred."""
        return cls(min(width, height) / 28.0, width / 2.0, height / 2.0)

    def axial_to_pixel(self, pos: Hex) -> Tuple[float, float]:
        x = self.radius * (_SQRT3 * pos.q + _SQRT3 / 2.0 * pos.r) + self.center_x
        y = self.radius * (1.5 * pos.r) + self.center_y
        return x, y

    def pixel_to_axial(self, x: float, y: float) -> Hex:
        x -= self.center_x
        y -= self.center_y
        q = (_SQRT3 / 3.0 * x - 1.0 / 3.0 * y) / self.radius
        r = (2.0 / 3.0 * y) / self.radius
        return hex_round(q, r)
