"""
Seating for 2-6 players: which home triangles are active, who plays whom,
and in what order turns go round the table.

Triangles are numbered clockwise from 12 o'clock: 0=12, 1=2, 2=4, 3=6,
4=8, 5=10 o'clock.  Opposite pairs are 0/3, 1/4 and 2/5.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Tuple

from sternhalma.board import NUM_TRIANGLES

MIN_PLAYERS: int = 2
MAX_PLAYERS: int = 6

# Active triangles per player count, chosen for maximal separation.
_TRIANGLES_BY_COUNT: Dict[int, Tuple[int, ...]] = {
    2: (0, 3),           # opposite pair
    3: (1, 3, 5),        # every other triangle, 120 degrees apart
    4: (0, 1, 3, 4),     # two opposite pairs
    5: (0, 1, 2, 3, 4),  # everyone but 10 o'clock
    6: (0, 1, 2, 3, 4, 5),
}

# Seating order: clockwise starting from 6 o'clock.
CLOCKWISE_FROM_SIX: Tuple[int, ...] = (3, 4, 5, 0, 1, 2)

TRIANGLE_NAMES: Tuple[str, ...] = (
    "Red",     # 0: 12 o'clock
    "Cream",   # 1: 2 o'clock
    "Green",   # 2: 4 o'clock
    "Blue",    # 3: 6 o'clock
    "Yellow",  # 4: 8 o'clock
    "Orange",  # 5: 10 o'clock
)


def get_player_triangle_indices(player_count: int) -> List[int]:
    """Active home triangles for *player_count*; unknown counts seat six."""
    return list(_TRIANGLES_BY_COUNT.get(player_count, _TRIANGLES_BY_COUNT[MAX_PLAYERS]))


def get_goal_triangle_index(home_index: int) -> int:
    """The triangle geometrically opposite *home_index*."""
    return (home_index + 3) % NUM_TRIANGLES


def get_turn_order(triangle_indices: Iterable[int]) -> List[int]:
    """Filter the clockwise-from-6 seating down to the active triangles."""
    active = set(triangle_indices)
    return [idx for idx in CLOCKWISE_FROM_SIX if idx in active]


def triangle_name(index: int) -> str:
    return TRIANGLE_NAMES[index]
