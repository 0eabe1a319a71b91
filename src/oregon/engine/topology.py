"""Vertex/edge graph derivation and harbor placement for a hex layout."""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .types import Edge, Harbor, HexTile, Terrain, Vertex

# Corner offsets on the integer lattice used by ``axial_center``. Corners of
# neighbouring hexes land on identical lattice points, so shared corners and
# sides are found by exact coordinate lookup.
CORNER_OFFSETS = [
    (0, 4),
    (2, 2),
    (2, -2),
    (0, -4),
    (-2, -2),
    (-2, 2),
]

AXIAL_DIRECTIONS = [
    (1, 0),
    (1, -1),
    (0, -1),
    (-1, 0),
    (-1, 1),
    (0, 1),
]

HARBOR_RESOURCES: List[Optional[Terrain]] = [
    None,
    None,
    None,
    None,
    Terrain.WOOD,
    Terrain.BRICK,
    Terrain.SHEEP,
    Terrain.WHEAT,
    Terrain.ORE,
]


@dataclass(frozen=True)
class Topology:
    vertices: Dict[int, Vertex]
    edges: Dict[int, Edge]
    hex_vertices: Dict[int, List[int]]
    hex_neighbors: Dict[int, List[int]]

    def vertex_ids(self) -> Iterable[int]:
        return self.vertices.keys()

    def edge_ids(self) -> Iterable[int]:
        return self.edges.keys()

    def coastal_edges(self) -> List[Edge]:
        return [edge for edge in self.edges.values() if len(edge.hex_ids) == 1]


def axial_center(q: int, r: int) -> Tuple[int, int]:
    size = 2
    return (size * (2 * q + r), size * (3 * r))


def build_hex_neighbors(coords: Sequence[Tuple[int, int]]) -> Dict[int, List[int]]:
    """Index-based hex adjacency for an ordered list of axial coordinates."""
    coord_to_index = {coord: index for index, coord in enumerate(coords)}
    neighbors: Dict[int, List[int]] = {}
    for index, (q, r) in enumerate(coords):
        found: List[int] = []
        for dq, dr in AXIAL_DIRECTIONS:
            neighbor_coord = (q + dq, r + dr)
            if neighbor_coord in coord_to_index:
                found.append(coord_to_index[neighbor_coord])
        neighbors[index] = found
    return neighbors


def build_topology(hexes: Sequence[HexTile]) -> Topology:
    """Derive the shared vertex/edge graph from an ordered hex list.

    Ids are assigned in discovery order (hex order, then corner order), so the
    same hex list always produces the same ids.
    """
    vertex_by_coord: Dict[Tuple[int, int], int] = {}
    vertex_hexes: Dict[int, List[int]] = {}
    vertex_coords: Dict[int, Tuple[int, int]] = {}
    edge_by_key: Dict[Tuple[int, int], int] = {}
    edge_hexes: Dict[int, List[int]] = {}
    hex_vertices: Dict[int, List[int]] = {}

    def vertex_id_for(coord: Tuple[int, int]) -> int:
        if coord in vertex_by_coord:
            return vertex_by_coord[coord]
        vid = len(vertex_by_coord)
        vertex_by_coord[coord] = vid
        vertex_coords[vid] = coord
        vertex_hexes[vid] = []
        return vid

    for tile in hexes:
        cx, cy = axial_center(*tile.axial)
        corner_ids: List[int] = []
        for ox, oy in CORNER_OFFSETS:
            vid = vertex_id_for((cx + ox, cy + oy))
            if tile.hex_id not in vertex_hexes[vid]:
                vertex_hexes[vid].append(tile.hex_id)
            corner_ids.append(vid)
        hex_vertices[tile.hex_id] = corner_ids

        for i in range(6):
            a = corner_ids[i]
            b = corner_ids[(i + 1) % 6]
            key = (min(a, b), max(a, b))
            if key not in edge_by_key:
                edge_by_key[key] = len(edge_by_key)
                edge_hexes[edge_by_key[key]] = []
            edge_hexes[edge_by_key[key]].append(tile.hex_id)

    vertex_edges: Dict[int, List[int]] = {vid: [] for vid in vertex_coords}
    edges: Dict[int, Edge] = {}
    for (a, b), eid in edge_by_key.items():
        edges[eid] = Edge(edge_id=eid, vertex_a=a, vertex_b=b, hex_ids=tuple(edge_hexes[eid]))
        vertex_edges[a].append(eid)
        vertex_edges[b].append(eid)

    vertices: Dict[int, Vertex] = {
        vid: Vertex(
            vertex_id=vid,
            coord=coord,
            hex_ids=tuple(vertex_hexes[vid][:3]),
            edge_ids=tuple(vertex_edges[vid]),
        )
        for vid, coord in vertex_coords.items()
    }

    index_neighbors = build_hex_neighbors([tile.axial for tile in hexes])
    hex_neighbors = {
        hexes[index].hex_id: [hexes[n].hex_id for n in found]
        for index, found in index_neighbors.items()
    }

    return Topology(
        vertices=vertices,
        edges=edges,
        hex_vertices=hex_vertices,
        hex_neighbors=hex_neighbors,
    )


def vertex_neighbors(vertices: Dict[int, Vertex], edges: Dict[int, Edge], vertex_id: int) -> List[int]:
    return [edges[eid].other(vertex_id) for eid in vertices[vertex_id].edge_ids]


def _edge_angle(topology: Topology, edge: Edge) -> float:
    ax, ay = topology.vertices[edge.vertex_a].coord
    bx, by = topology.vertices[edge.vertex_b].coord
    return math.atan2((ay + by) / 2.0, (ax + bx) / 2.0)


def build_harbors(
    topology: Topology,
    rng: random.Random,
    resources: Optional[Sequence[Optional[Terrain]]] = None,
) -> Tuple[Harbor, ...]:
    """Spread harbors evenly around the coast.

    Coastal edges are ordered by angle around the board centre and every
    ``len(coast) / count``-th edge receives a harbor, starting from a random
    offset. Harbor kinds are shuffled with ``rng``.
    """
    kinds = list(HARBOR_RESOURCES if resources is None else resources)
    rng.shuffle(kinds)
    coast = sorted(topology.coastal_edges(), key=lambda edge: _edge_angle(topology, edge))
    if not kinds or not coast:
        return ()

    step = len(coast) / len(kinds)
    offset = rng.randrange(len(coast))
    harbors: List[Harbor] = []
    used_vertices: set = set()
    for index, kind in enumerate(kinds):
        position = (offset + int(round(index * step))) % len(coast)
        for shift in range(len(coast)):
            edge = coast[(position + shift) % len(coast)]
            if edge.vertex_a in used_vertices or edge.vertex_b in used_vertices:
                continue
            used_vertices.update(edge.vertex_ids)
            harbors.append(
                Harbor(
                    harbor_id=index,
                    edge_id=edge.edge_id,
                    vertex_ids=edge.vertex_ids,
                    resource=kind,
                )
            )
            break
    return tuple(harbors)
