from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple


class Terrain(str, Enum):
    WOOD = "wood"
    BRICK = "brick"
    SHEEP = "sheep"
    WHEAT = "wheat"
    ORE = "ore"
    DESERT = "desert"


RESOURCE_TYPES: Tuple[Terrain, ...] = (
    Terrain.WOOD,
    Terrain.BRICK,
    Terrain.SHEEP,
    Terrain.WHEAT,
    Terrain.ORE,
)

ResourceBank = Dict[Terrain, int]


class ActionType(str, Enum):
    START_GAME = "start_game"
    ROLL_FOR_ORDER = "roll_for_order"
    ROLL_DICE = "roll_dice"
    BUILD_SETTLEMENT = "build_settlement"
    BUILD_ROAD = "build_road"
    BUILD_CITY = "build_city"
    MOVE_ROBBER = "move_robber"
    STEAL = "steal"
    SKIP_STEAL = "skip_steal"
    TRADE_BANK = "trade_bank"
    DRAW_OMEN = "draw_omen"
    PLAY_OMEN = "play_omen"
    END_TURN = "end_turn"


class BuildingType(str, Enum):
    SETTLEMENT = "settlement"
    CITY = "city"


class BuildKind(str, Enum):
    ROAD = "road"
    SETTLEMENT = "settlement"
    CITY = "city"


@dataclass(frozen=True)
class Action:
    action_type: ActionType
    player_id: int
    payload: Dict[str, object] = field(default_factory=dict)


@dataclass(frozen=True)
class Structure:
    owner_id: int
    kind: BuildingType


@dataclass(frozen=True)
class HexTile:
    hex_id: int
    axial: Tuple[int, int]
    terrain: Terrain
    number: Optional[int]


@dataclass(frozen=True)
class Vertex:
    vertex_id: int
    coord: Tuple[int, int]
    hex_ids: Tuple[int, ...]
    edge_ids: Tuple[int, ...] = ()
    structure: Optional[Structure] = None


@dataclass(frozen=True)
class Edge:
    edge_id: int
    vertex_a: int
    vertex_b: int
    hex_ids: Tuple[int, ...] = ()
    owner_id: Optional[int] = None

    @property
    def vertex_ids(self) -> Tuple[int, int]:
        return (self.vertex_a, self.vertex_b)

    def other(self, vertex_id: int) -> int:
        return self.vertex_b if vertex_id == self.vertex_a else self.vertex_a


@dataclass(frozen=True)
class Harbor:
    """A coastal trade post. ``resource`` is None for a generic 3:1 harbor."""

    harbor_id: int
    edge_id: int
    vertex_ids: Tuple[int, int]
    resource: Optional[Terrain] = None

    @property
    def rate(self) -> int:
        return 3 if self.resource is None else 2
