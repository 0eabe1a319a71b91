"""The standard Oregon layout: 19 land hexes in a radius-2 spiral."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from .topology import AXIAL_DIRECTIONS, Topology, build_harbors, build_hex_neighbors, build_topology
from .types import Harbor, HexTile, Terrain

BOARD_RADIUS = 2

TERRAIN_COUNTS: Dict[Terrain, int] = {
    Terrain.WOOD: 4,
    Terrain.BRICK: 4,
    Terrain.WHEAT: 4,
    Terrain.SHEEP: 3,
    Terrain.ORE: 3,
    Terrain.DESERT: 1,
}

NUMBER_TOKENS: Tuple[int, ...] = (2, 3, 3, 4, 4, 5, 5, 6, 6, 8, 8, 9, 9, 10, 10, 11, 11, 12)


@dataclass(frozen=True)
class NumberPlacement:
    """Token shuffling rule: tokens in ``hot_numbers`` never sit on touching hexes."""

    hot_numbers: Tuple[int, ...] = (6, 8)
    max_attempts: int = 5000

    def allows(self, numbers: Dict[int, int], neighbors: Dict[int, List[int]]) -> bool:
        hot = {hex_id for hex_id, value in numbers.items() if value in self.hot_numbers}
        return not any(other in hot for hex_id in hot for other in neighbors[hex_id])

    def place(
        self, hex_ids: Sequence[int], neighbors: Dict[int, List[int]], rng: random.Random
    ) -> Dict[int, int]:
        tokens = list(NUMBER_TOKENS)
        for _ in range(self.max_attempts):
            rng.shuffle(tokens)
            numbers = dict(zip(hex_ids, tokens))
            if self.allows(numbers, neighbors):
                return numbers
        raise RuntimeError(f"no token layout keeps {self.hot_numbers} apart")


@dataclass(frozen=True)
class Board:
    hexes: Dict[int, HexTile]
    topology: Topology
    harbors: Tuple[Harbor, ...]

    def desert_hex_id(self) -> int:
        return next(tile.hex_id for tile in self.hexes.values() if tile.terrain == Terrain.DESERT)


def spiral_coords(radius: int = BOARD_RADIUS) -> List[Tuple[int, int]]:
    """Axial coordinates from the centre outwards, one ring at a time."""
    coords = [(0, 0)]
    start_q, start_r = AXIAL_DIRECTIONS[4]
    for ring in range(1, radius + 1):
        q, r = start_q * ring, start_r * ring
        for dq, dr in AXIAL_DIRECTIONS:
            for _ in range(ring):
                coords.append((q, r))
                q, r = q + dq, r + dr
    return coords


def generate_hexes(rng: random.Random, placement: Optional[NumberPlacement] = None) -> List[HexTile]:
    coords = spiral_coords()
    terrains = [terrain for terrain, count in TERRAIN_COUNTS.items() for _ in range(count)]
    rng.shuffle(terrains)

    producing = [hex_id for hex_id, terrain in enumerate(terrains) if terrain != Terrain.DESERT]
    numbers = (placement or NumberPlacement()).place(producing, build_hex_neighbors(coords), rng)
    return [
        HexTile(hex_id=hex_id, axial=coord, terrain=terrains[hex_id], number=numbers.get(hex_id))
        for hex_id, coord in enumerate(coords)
    ]


def board_from_hexes(hexes: List[HexTile], rng: random.Random) -> Board:
    topology = build_topology(hexes)
    return Board(
        hexes={tile.hex_id: tile for tile in hexes},
        topology=topology,
        harbors=build_harbors(topology, rng),
    )


def standard_board(seed: int | None = None, placement: Optional[NumberPlacement] = None) -> Board:
    rng = random.Random(seed)
    return board_from_hexes(generate_hexes(rng, placement), rng)
