from collections import Counter

from oregon.engine.board import standard_board
from oregon.engine.topology import build_topology, vertex_neighbors
from oregon.engine.types import Terrain


def test_topology_is_deterministic():
    board = standard_board(seed=21)
    hexes = list(board.hexes.values())
    first = build_topology(hexes)
    second = build_topology(hexes)
    assert first.vertices == second.vertices
    assert first.edges == second.edges
    assert first.hex_neighbors == second.hex_neighbors


def test_vertices_border_one_to_three_hexes():
    topology = standard_board(seed=2).topology
    per_vertex = Counter(len(vertex.hex_ids) for vertex in topology.vertices.values())
    assert set(per_vertex) == {1, 2, 3}
    assert per_vertex[3] == 24


def test_every_hex_has_six_corners_and_edges_join_corners():
    topology = standard_board(seed=2).topology
    for corners in topology.hex_vertices.values():
        assert len(set(corners)) == 6
    for edge in topology.edges.values():
        assert edge.edge_id in topology.vertices[edge.vertex_a].edge_ids
        assert edge.edge_id in topology.vertices[edge.vertex_b].edge_ids
        assert 1 <= len(edge.hex_ids) <= 2


def test_vertex_degree_and_neighbors():
    topology = standard_board(seed=4).topology
    for vertex_id, vertex in topology.vertices.items():
        neighbors = vertex_neighbors(topology.vertices, topology.edges, vertex_id)
        assert len(neighbors) == len(vertex.edge_ids)
        assert len(neighbors) in (2, 3)
        for neighbor in neighbors:
            assert vertex_id in vertex_neighbors(topology.vertices, topology.edges, neighbor)


def test_hex_adjacency_is_symmetric():
    topology = standard_board(seed=4).topology
    for hex_id, neighbors in topology.hex_neighbors.items():
        for neighbor in neighbors:
            assert hex_id in topology.hex_neighbors[neighbor]
    assert len(topology.coastal_edges()) == 30


def test_harbors_sit_on_distinct_coastal_edges():
    board = standard_board(seed=8)
    coastal = {edge.edge_id for edge in board.topology.coastal_edges()}
    assert len(board.harbors) == 9

    used = set()
    for harbor in board.harbors:
        assert harbor.edge_id in coastal
        assert not used & set(harbor.vertex_ids)
        used.update(harbor.vertex_ids)

    kinds = Counter(harbor.resource for harbor in board.harbors)
    assert kinds[None] == 4
    for terrain in (Terrain.WOOD, Terrain.BRICK, Terrain.SHEEP, Terrain.WHEAT, Terrain.ORE):
        assert kinds[terrain] == 1
    assert {harbor.rate for harbor in board.harbors} == {2, 3}
