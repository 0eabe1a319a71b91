import random
from dataclasses import replace

from oregon.engine.game_state import DEFAULT_BANK_COUNT
from oregon.engine.production import (
    distribute_resources,
    get_hex_ids_blocked_by_robber,
    get_hex_ids_that_produced_resources,
    get_players_on_hex,
    get_robber_victims,
    give_initial_resources,
    steal_resource,
)
from oregon.engine.types import Action, ActionType, BuildingType, Terrain

from helpers import give, playing_state, put_structure


def _ore_eight_state(**overrides):
    state = playing_state(num_players=3, seed=6, **overrides)
    tile = next(
        t for t in state.hexes.values() if t.terrain != Terrain.DESERT and t.hex_id != state.robber_hex_id
    )
    state.hexes = dict(state.hexes)
    for other in list(state.hexes.values()):
        if other.number == 8:
            state.hexes[other.hex_id] = replace(other, number=9)
    state.hexes[tile.hex_id] = replace(tile, terrain=Terrain.ORE, number=8)
    vertex_id = next(v.vertex_id for v in state.vertices.values() if tile.hex_id in v.hex_ids)
    return state, tile.hex_id, vertex_id


def test_city_on_ore_eight_gets_two_ore():
    state, hex_id, vertex_id = _ore_eight_state()
    put_structure(state, vertex_id, 2, BuildingType.CITY)

    granted = distribute_resources(state, 8)
    assert state.players[1].resources[Terrain.ORE] == 2
    assert state.players[0].resources[Terrain.ORE] == 0
    assert state.players[2].resources[Terrain.ORE] == 0
    assert granted[1] == [Terrain.ORE, Terrain.ORE]
    assert granted[0] == [] and granted[2] == []


def test_produced_hexes_agree_with_distribution():
    state, hex_id, vertex_id = _ore_eight_state()
    put_structure(state, vertex_id, 1)
    produced = get_hex_ids_that_produced_resources(state, 8)
    before = sum(p.total_resources() for p in state.players)
    granted = distribute_resources(state, 8)
    after = sum(p.total_resources() for p in state.players)

    assert produced == [hex_id]
    assert after - before == sum(len(units) for units in granted.values()) == 1


def test_robber_blocks_production():
    state, hex_id, vertex_id = _ore_eight_state()
    put_structure(state, vertex_id, 1)
    state.robber_hex_id = hex_id

    assert get_hex_ids_blocked_by_robber(state, 8) == [hex_id]
    assert get_hex_ids_that_produced_resources(state, 8) == []
    granted = distribute_resources(state, 8)
    assert all(not units for units in granted.values())
    assert get_hex_ids_blocked_by_robber(state, 9) == []


def test_finite_bank_short_of_a_resource_pays_nobody():
    state, hex_id, vertex_id = _ore_eight_state(bank_supply=DEFAULT_BANK_COUNT)
    put_structure(state, vertex_id, 1, BuildingType.CITY)
    state.bank[Terrain.ORE] = 1

    assert get_hex_ids_that_produced_resources(state, 8) == []
    distribute_resources(state, 8)
    assert state.players[0].resources[Terrain.ORE] == 0
    assert state.bank[Terrain.ORE] == 1


def test_default_bank_pays_every_claim_in_full():
    state, hex_id, vertex_id = _ore_eight_state()
    assert state.bank is None
    put_structure(state, vertex_id, 1, BuildingType.CITY)

    assert get_hex_ids_that_produced_resources(state, 8) == [hex_id]
    distribute_resources(state, 8)
    assert state.players[0].resources[Terrain.ORE] == 2


def test_city_collects_two_on_a_roll_with_the_default_bank():
    state, hex_id, vertex_id = _ore_eight_state()
    put_structure(state, vertex_id, 1, BuildingType.CITY)
    state.last_dice = None
    after = state.apply(Action(ActionType.ROLL_DICE, 1, {"dice": [4, 4]}))
    assert after.players[0].resources[Terrain.ORE] == 2
    assert hex_id in after.last_resource_hex_ids


def test_players_on_hex_and_victims():
    state, hex_id, vertex_id = _ore_eight_state()
    corners = [v.vertex_id for v in state.vertices.values() if hex_id in v.hex_ids]
    put_structure(state, corners[0], 1)
    put_structure(state, corners[3], 2)

    assert get_players_on_hex(state, hex_id) == [1, 2]
    assert get_robber_victims(state, hex_id, 1) == [2]


def test_steal_moves_exactly_one_unit():
    state = playing_state()
    give(state, 1, wood=2, ore=1)
    before_thief = state.players[0].total_resources()

    stolen = steal_resource(state, 1, 2, random.Random(3))
    assert stolen in (Terrain.WOOD, Terrain.ORE)
    assert state.players[1].total_resources() == 2
    assert state.players[0].total_resources() == before_thief + 1
    assert state.players[0].resources[stolen] == 1


def test_steal_from_empty_hand_is_noop():
    state = playing_state()
    assert steal_resource(state, 1, 2, random.Random(0)) is None
    assert state.players[0].total_resources() == 0


def test_initial_resources_from_second_settlement():
    state = playing_state()
    vertex_id = next(
        v.vertex_id
        for v in state.vertices.values()
        if len(v.hex_ids) == 3 and all(state.hexes[h].terrain != Terrain.DESERT for h in v.hex_ids)
    )
    received = give_initial_resources(state, 1, vertex_id)
    assert len(received) == 3
    assert sorted(received) == sorted(state.hexes[h].terrain for h in state.vertices[vertex_id].hex_ids)
    assert state.players[0].total_resources() == 3
