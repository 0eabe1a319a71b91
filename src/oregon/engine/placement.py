"""Settlement, road and city legality plus the matching enumerations."""

from __future__ import annotations

from typing import List, Optional

from .game_state import GamePhase, GameState
from .topology import vertex_neighbors
from .types import BuildingType


def _is_active(state: GameState, player_id: int) -> bool:
    if state.phase not in (GamePhase.SETUP, GamePhase.PLAYING):
        return False
    if state.pending_robber is not None:
        return False
    return state.current_player.player_id == player_id


def settlement_distance_ok(state: GameState, vertex_id: int) -> bool:
    vertex = state.vertices.get(vertex_id)
    if vertex is None or vertex.structure is not None:
        return False
    for neighbor in vertex_neighbors(state.vertices, state.edges, vertex_id):
        if state.vertices[neighbor].structure is not None:
            return False
    return True


def player_has_road_touching(state: GameState, player_id: int, vertex_id: int) -> bool:
    return any(
        state.edges[edge_id].owner_id == player_id
        for edge_id in state.vertices[vertex_id].edge_ids
    )


def _owns_structure(state: GameState, player_id: int, vertex_id: int) -> bool:
    structure = state.vertices[vertex_id].structure
    return structure is not None and structure.owner_id == player_id


def edge_touches_player(state: GameState, player_id: int, edge_id: int) -> bool:
    edge = state.edges[edge_id]
    for vertex_id in edge.vertex_ids:
        if _owns_structure(state, player_id, vertex_id):
            return True
        for other_id in state.vertices[vertex_id].edge_ids:
            if other_id != edge_id and state.edges[other_id].owner_id == player_id:
                return True
    return False


def can_place_settlement(state: GameState, vertex_id: int, player_id: int) -> bool:
    """Distance rule everywhere; outside setup the player also needs a road there."""
    if not _is_active(state, player_id):
        return False
    if state.phase == GamePhase.SETUP and state.setup_pending_vertex_id is not None:
        return False
    if not settlement_distance_ok(state, vertex_id):
        return False
    if state.phase == GamePhase.PLAYING:
        return player_has_road_touching(state, player_id, vertex_id)
    return True


def can_place_road(
    state: GameState, edge_id: int, player_id: int, ignore_adjacency: bool = False
) -> bool:
    if state.phase != GamePhase.PLAYING or not _is_active(state, player_id):
        return False
    edge = state.edges.get(edge_id)
    if edge is None or edge.owner_id is not None:
        return False
    return ignore_adjacency or edge_touches_player(state, player_id, edge_id)


def can_place_road_in_setup(
    state: GameState, edge_id: int, player_id: int, settlement_vertex_id: Optional[int] = None
) -> bool:
    if state.phase != GamePhase.SETUP or not _is_active(state, player_id):
        return False
    if settlement_vertex_id is None:
        settlement_vertex_id = state.setup_pending_vertex_id
    if settlement_vertex_id is None:
        return False
    edge = state.edges.get(edge_id)
    if edge is None or edge.owner_id is not None:
        return False
    return settlement_vertex_id in edge.vertex_ids


def can_build_city(state: GameState, vertex_id: int, player_id: int) -> bool:
    if state.phase != GamePhase.PLAYING or not _is_active(state, player_id):
        return False
    vertex = state.vertices.get(vertex_id)
    if vertex is None or vertex.structure is None:
        return False
    return vertex.structure.owner_id == player_id and vertex.structure.kind == BuildingType.SETTLEMENT


def get_placeable_vertices(state: GameState, player_id: int) -> List[int]:
    return [vid for vid in state.vertices if can_place_settlement(state, vid, player_id)]


def get_placeable_roads(state: GameState, player_id: int, ignore_adjacency: bool = False) -> List[int]:
    return [
        eid for eid in state.edges if can_place_road(state, eid, player_id, ignore_adjacency)
    ]


def get_placeable_roads_for_vertex(state: GameState, player_id: int, vertex_id: int) -> List[int]:
    if vertex_id not in state.vertices:
        return []
    return [
        eid
        for eid in state.vertices[vertex_id].edge_ids
        if can_place_road_in_setup(state, eid, player_id, vertex_id)
    ]


def get_upgradeable_settlements(state: GameState, player_id: int) -> List[int]:
    return [vid for vid in state.vertices if can_build_city(state, vid, player_id)]
