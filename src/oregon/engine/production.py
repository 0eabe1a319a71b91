"""Dice production, robber blocking and theft."""

from __future__ import annotations

import logging
import random
from typing import Dict, List, Optional

from .game_state import GameState, grant_resource
from .types import RESOURCE_TYPES, BuildingType, Terrain

logger = logging.getLogger(__name__)


def _entitlements(state: GameState, dice_sum: int) -> Dict[int, Dict[int, int]]:
    """Units owed per producing hex, keyed by hex id then player index."""
    owed: Dict[int, Dict[int, int]] = {}
    for tile in state.hexes.values():
        if tile.number != dice_sum or tile.hex_id == state.robber_hex_id:
            continue
        if tile.terrain == Terrain.DESERT:
            continue
        for vertex in state.vertices.values():
            if vertex.structure is None or tile.hex_id not in vertex.hex_ids:
                continue
            index = state.player_index(vertex.structure.owner_id)
            if index is None:
                continue
            amount = 2 if vertex.structure.kind == BuildingType.CITY else 1
            per_player = owed.setdefault(tile.hex_id, {})
            per_player[index] = per_player.get(index, 0) + amount
    return owed


def _short_resources(state: GameState, owed: Dict[int, Dict[int, int]]) -> List[Terrain]:
    # Bank cannot cover every claim for a resource: nobody receives it.
    if state.bank is None:
        return []
    needed = {resource: 0 for resource in RESOURCE_TYPES}
    for hex_id, per_player in owed.items():
        needed[state.hexes[hex_id].terrain] += sum(per_player.values())
    return [resource for resource in RESOURCE_TYPES if needed[resource] > state.bank[resource]]


def distribute_resources(state: GameState, dice_sum: int) -> Dict[int, List[Terrain]]:
    """Pay out production for ``dice_sum``; mutates ``state``.

    Returns the granted terrains per player index, one entry per unit.
    """
    owed = _entitlements(state, dice_sum)
    short = _short_resources(state, owed)
    granted: Dict[int, List[Terrain]] = {index: [] for index in range(len(state.players))}
    for hex_id, per_player in owed.items():
        terrain = state.hexes[hex_id].terrain
        if terrain in short:
            continue
        for index, amount in per_player.items():
            moved = grant_resource(state, state.players[index], terrain, amount)
            granted[index].extend([terrain] * moved)
    return granted


def get_hex_ids_that_produced_resources(state: GameState, dice_sum: int) -> List[int]:
    """Hexes that pay out for ``dice_sum``, judged on the pre-distribution state."""
    owed = _entitlements(state, dice_sum)
    short = _short_resources(state, owed)
    return sorted(hex_id for hex_id in owed if state.hexes[hex_id].terrain not in short)


def get_hex_ids_blocked_by_robber(state: GameState, dice_sum: int) -> List[int]:
    tile = state.hexes.get(state.robber_hex_id)
    if tile is None or tile.number != dice_sum:
        return []
    return [tile.hex_id]


def get_players_on_hex(state: GameState, hex_id: int) -> List[int]:
    owners = {
        vertex.structure.owner_id
        for vertex in state.vertices.values()
        if vertex.structure is not None and hex_id in vertex.hex_ids
    }
    return sorted(owners)


def get_robber_victims(state: GameState, hex_id: int, actor_id: int) -> List[int]:
    # Players without resources stay selectable; stealing from them does nothing.
    return [pid for pid in get_players_on_hex(state, hex_id) if pid != actor_id]


def random_held_resource(resources: Dict[Terrain, int], rng: random.Random) -> Optional[Terrain]:
    held = [resource for resource in RESOURCE_TYPES if resources.get(resource, 0) > 0]
    if not held:
        return None
    return rng.choice(held)


def steal_resource(
    state: GameState, thief_id: int, victim_id: int, rng: random.Random
) -> Optional[Terrain]:
    """Move one unit of a random held kind from victim to thief; mutates ``state``."""
    thief = state.player_by_id(thief_id)
    victim = state.player_by_id(victim_id)
    if thief is None or victim is None or thief_id == victim_id:
        return None
    resource = random_held_resource(victim.resources, rng)
    if resource is None:
        logger.debug("player %s has nothing for player %s to steal", victim_id, thief_id)
        return None
    victim.resources[resource] -= 1
    thief.resources[resource] += 1
    return resource


def give_initial_resources(state: GameState, player_id: int, vertex_id: int) -> List[Terrain]:
    """One unit of every producing terrain around ``vertex_id``; mutates ``state``."""
    player = state.player_by_id(player_id)
    if player is None:
        return []
    received: List[Terrain] = []
    for hex_id in state.vertices[vertex_id].hex_ids:
        terrain = state.hexes[hex_id].terrain
        if terrain == Terrain.DESERT:
            continue
        if grant_resource(state, player, terrain, 1):
            received.append(terrain)
    return received
