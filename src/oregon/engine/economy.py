from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from .game_state import GameState, PlayerState, grant_resource, remove_resource
from .types import RESOURCE_TYPES, BuildKind, Harbor, ResourceBank, Terrain

COSTS: Dict[BuildKind, ResourceBank] = {
    BuildKind.ROAD: {
        Terrain.WOOD: 1,
        Terrain.BRICK: 1,
    },
    BuildKind.SETTLEMENT: {
        Terrain.WOOD: 1,
        Terrain.BRICK: 1,
        Terrain.SHEEP: 1,
        Terrain.WHEAT: 1,
    },
    BuildKind.CITY: {
        Terrain.WHEAT: 2,
        Terrain.ORE: 3,
    },
}

OMEN_DRAW_COST: ResourceBank = {
    Terrain.WHEAT: 1,
    Terrain.SHEEP: 1,
    Terrain.ORE: 1,
}

BANK_TRADE_RATE = 4
GENERIC_HARBOR_RATE = 3
SPECIFIC_HARBOR_RATE = 2


def get_build_cost(kind: BuildKind) -> ResourceBank:
    return dict(COSTS[kind])


def can_afford_with_cost(player: PlayerState, cost: ResourceBank) -> bool:
    return all(player.resources.get(key, 0) >= amount for key, amount in cost.items())


def can_afford(player: PlayerState, kind: BuildKind) -> bool:
    return can_afford_with_cost(player, COSTS[kind])


def get_missing_resources_with_cost(
    player: PlayerState, cost: ResourceBank
) -> List[Tuple[Terrain, int]]:
    missing: List[Tuple[Terrain, int]] = []
    for resource in RESOURCE_TYPES:
        need = cost.get(resource, 0) - player.resources.get(resource, 0)
        if need > 0:
            missing.append((resource, need))
    return missing


def get_missing_resources(player: PlayerState, kind: BuildKind) -> List[Tuple[Terrain, int]]:
    return get_missing_resources_with_cost(player, COSTS[kind])


def pay_resources(state: GameState, player: PlayerState, cost: ResourceBank) -> None:
    for resource, amount in cost.items():
        remove_resource(state, player, resource, amount)


def get_player_harbors(state: GameState, player_id: int) -> List[Harbor]:
    harbors: List[Harbor] = []
    for harbor in state.harbors:
        for vertex_id in harbor.vertex_ids:
            structure = state.vertices[vertex_id].structure
            if structure is not None and structure.owner_id == player_id:
                harbors.append(harbor)
                break
    return harbors


def get_player_harbor_types(state: GameState, player_id: int) -> List[Optional[Terrain]]:
    """Harbor kinds the player can use; None stands for the generic 3:1 harbor."""
    kinds: List[Optional[Terrain]] = []
    for harbor in get_player_harbors(state, player_id):
        if harbor.resource not in kinds:
            kinds.append(harbor.resource)
    return kinds


def get_trade_rate(state: GameState, player_id: int, give: Terrain) -> int:
    kinds = get_player_harbor_types(state, player_id)
    if give in kinds:
        return SPECIFIC_HARBOR_RATE
    if None in kinds:
        return GENERIC_HARBOR_RATE
    return BANK_TRADE_RATE


def bank_can_supply(state: GameState, resource: Terrain, amount: int = 1) -> bool:
    return state.bank is None or state.bank[resource] >= amount


def execute_bank_trade(
    state: GameState, player: PlayerState, give: Terrain, receive: Terrain, rate: int
) -> bool:
    """Debit ``rate`` of ``give`` and credit one ``receive``; mutates ``state``.

    Either both legs happen or neither does.
    """
    if give == receive or player.resources[give] < rate or not bank_can_supply(state, receive):
        return False
    remove_resource(state, player, give, rate)
    grant_resource(state, player, receive, 1)
    return True
