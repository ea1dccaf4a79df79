from __future__ import annotations

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from sternhalma.hexgrid import Hex


class HexModel(BaseModel):
    q: int
    r: int

    def to_hex(self) -> Hex:
        return Hex(self.q, self.r)

    @classmethod
    def from_hex(cls, pos: Hex) -> "HexModel":
        return cls(q=pos.q, r=pos.r)


class CreateGameRequest(BaseModel):
    player_count: Optional[int] = Field(None, ge=2, le=6)   # None -> settings default


class MoveRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_: HexModel = Field(alias="from")
    to: HexModel


class MoveInfo(BaseModel):
    target: HexModel
    kind: str                      # 'step' | 'jump'
    path: list[HexModel]


class MovesResponse(BaseModel):
    session_id: str
    origin: HexModel
    moves: list[MoveInfo]


class CellInfo(BaseModel):
    key: str
    q: int
    r: int
    home_index: int                # -1 = centre
    owner: Optional[int]           # home index of occupant, None = empty


class PlayerInfo(BaseModel):
    player_index: int
    home_triangle_index: int
    goal_triangle_index: int
    name: str
    piece_positions: list[str]


class LastMoveInfo(BaseModel):
    player: int
    origin: HexModel
    target: HexModel
    kind: str
    path: list[HexModel]


class GameStateResponse(BaseModel):
    session_id: str
    phase: str
    player_count: int
    current_player: Optional[int]
    turn_order: list[int]
    players: list[PlayerInfo]
    cells: list[CellInfo]
    grid: list[list[int]]
    winner: Optional[int]
    move_count: int
    last_move: Optional[LastMoveInfo]
