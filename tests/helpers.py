from __future__ import annotations

from dataclasses import replace
from typing import List, Optional, Set

from oregon.engine.game_state import GamePhase, GameState, new_game
from oregon.engine.topology import vertex_neighbors
from oregon.engine.types import BuildingType, Structure, Terrain


def playing_state(num_players: int = 2, seed: int = 1, omens: bool = False, **overrides: object) -> GameState:
    state = new_game(
        num_players=num_players, seed=seed, omens_enabled=omens, roll_for_order=False, **overrides
    )
    state.phase = GamePhase.PLAYING
    state.turn_number = 1
    return state


def put_structure(
    state: GameState, vertex_id: int, player_id: int, kind: BuildingType = BuildingType.SETTLEMENT
) -> None:
    state.vertices[vertex_id] = replace(state.vertices[vertex_id], structure=Structure(player_id, kind))


def put_road(state: GameState, edge_id: int, player_id: int) -> None:
    state.edges[edge_id] = replace(state.edges[edge_id], owner_id=player_id)


def give(state: GameState, player_index: int, **amounts: int) -> None:
    for name, amount in amounts.items():
        state.players[player_index].resources[Terrain(name)] = amount


def edge_between(state: GameState, a: int, b: int) -> int:
    for edge_id in state.vertices[a].edge_ids:
        if state.edges[edge_id].other(a) == b:
            return edge_id
    raise AssertionError(f"vertices {a} and {b} are not adjacent")


def simple_path(
    state: GameState, length: int, start: Optional[int] = None, blocked: Optional[Set[int]] = None
) -> List[int]:
    """Edge ids of a path visiting ``length + 1`` distinct vertices."""
    blocked = set(blocked or ())
    starts = [start] if start is not None else [v for v in state.vertices if v not in blocked]

    def extend(path: List[int]) -> Optional[List[int]]:
        if len(path) == length + 1:
            return path
        for neighbor in sorted(vertex_neighbors(state.vertices, state.edges, path[-1])):
            if neighbor in path or neighbor in blocked:
                continue
            found = extend(path + [neighbor])
            if found is not None:
                return found
        return None

    for origin in starts:
        vertices = extend([origin])
        if vertices is not None:
            return [edge_between(state, a, b) for a, b in zip(vertices, vertices[1:])]
    raise AssertionError("no path of that length")


def path_vertices(state: GameState, edge_ids: List[int]) -> Set[int]:
    found: Set[int] = set()
    for edge_id in edge_ids:
        found.update(state.edges[edge_id].vertex_ids)
    return found
