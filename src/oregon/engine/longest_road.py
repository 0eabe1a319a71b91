from __future__ import annotations

import logging
from typing import Dict, Optional, Set

import networkx as nx

from .game_state import GameState, append_log

logger = logging.getLogger(__name__)


def road_graph(state: GameState, player_id: int) -> nx.Graph:
    graph = nx.Graph()
    for edge in state.edges.values():
        if edge.owner_id == player_id:
            graph.add_edge(edge.vertex_a, edge.vertex_b, edge_id=edge.edge_id)
    return graph


def _longest_from(graph: nx.Graph, vertex: int, visited: Set[int]) -> int:
    best = 0
    for neighbor in graph.neighbors(vertex):
        edge_id = graph.edges[vertex, neighbor]["edge_id"]
        if edge_id in visited:
            continue
        visited.add(edge_id)
        best = max(best, 1 + _longest_from(graph, neighbor, visited))
        visited.discard(edge_id)
    return best


def calculate_longest_road(state: GameState, player_id: int) -> int:
    """Length of the longest simple path (no edge reused) through the player's roads."""
    graph = road_graph(state, player_id)
    longest = 0
    for component in nx.connected_components(graph):
        if graph.subgraph(component).number_of_edges() <= longest:
            continue
        for vertex in component:
            longest = max(longest, _longest_from(graph, vertex, set()))
    return longest


def update_longest_road(state: GameState) -> Optional[int]:
    """Recompute the Longest Road holder in place and return it.

    The holder keeps the award on ties; only a strictly longer road moves it.
    Victory points follow from ``refresh_victory_points``.
    """
    minimum = state.config.longest_road_min
    lengths: Dict[int, int] = {
        player.player_id: calculate_longest_road(state, player.player_id)
        for player in state.players
    }
    holder = state.longest_road_player_id
    best = max(lengths.values(), default=0)

    if holder is not None and lengths.get(holder, 0) >= minimum and lengths[holder] >= best:
        return holder
    if best < minimum:
        if holder is not None:
            logger.debug("longest road award withdrawn from player %s", holder)
        state.longest_road_player_id = None
        return None

    new_holder = next(pid for pid, length in lengths.items() if length == best)
    if new_holder != holder:
        state.longest_road_player_id = new_holder
        player = state.player_by_id(new_holder)
        append_log(
            state,
            "longest_road",
            f"{player.name} takes Longest Road with {best} roads",
            new_holder,
        )
    return new_holder
