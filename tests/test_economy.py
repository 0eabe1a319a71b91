from oregon.engine.economy import (
    BANK_TRADE_RATE,
    can_afford,
    can_afford_with_cost,
    execute_bank_trade,
    get_build_cost,
    get_missing_resources,
    get_missing_resources_with_cost,
    get_player_harbor_types,
    get_trade_rate,
)
from oregon.engine.game_state import DEFAULT_BANK_COUNT
from oregon.engine.types import BuildKind, Terrain

from helpers import give, playing_state, put_structure


def test_base_costs():
    assert get_build_cost(BuildKind.ROAD) == {Terrain.WOOD: 1, Terrain.BRICK: 1}
    assert get_build_cost(BuildKind.SETTLEMENT) == {
        Terrain.WOOD: 1,
        Terrain.BRICK: 1,
        Terrain.SHEEP: 1,
        Terrain.WHEAT: 1,
    }
    assert get_build_cost(BuildKind.CITY) == {Terrain.WHEAT: 2, Terrain.ORE: 3}


def test_settlement_shortfall_is_reported():
    state = playing_state()
    give(state, 0, wood=1, brick=1)
    player = state.players[0]

    assert not can_afford(player, BuildKind.SETTLEMENT)
    assert get_missing_resources(player, BuildKind.SETTLEMENT) == [
        (Terrain.SHEEP, 1),
        (Terrain.WHEAT, 1),
    ]


def test_afford_agrees_with_missing():
    state = playing_state()
    player = state.players[0]
    bundles = [
        {},
        {"wood": 1, "brick": 1},
        {"wheat": 2, "ore": 2},
        {"wheat": 2, "ore": 3},
        {"wood": 5, "sheep": 1, "wheat": 1, "brick": 1},
    ]
    costs = [get_build_cost(kind) for kind in BuildKind] + [{Terrain.ORE: 4}]
    for bundle in bundles:
        give(state, 0, wood=0, brick=0, sheep=0, wheat=0, ore=0)
        give(state, 0, **bundle)
        for cost in costs:
            assert can_afford_with_cost(player, cost) == (get_missing_resources_with_cost(player, cost) == [])


def test_trade_rate_defaults_to_four():
    state = playing_state()
    assert get_trade_rate(state, 1, Terrain.WOOD) == BANK_TRADE_RATE
    assert get_player_harbor_types(state, 1) == []


def test_harbor_rates():
    state = playing_state()
    generic = next(h for h in state.harbors if h.resource is None)
    specific = next(h for h in state.harbors if h.resource is not None)

    put_structure(state, generic.vertex_ids[0], 1)
    assert get_trade_rate(state, 1, Terrain.WOOD) == 3

    put_structure(state, specific.vertex_ids[1], 1)
    assert get_trade_rate(state, 1, specific.resource) == 2
    assert set(get_player_harbor_types(state, 1)) == {None, specific.resource}
    assert get_trade_rate(state, 2, specific.resource) == 4


def test_bank_trade_is_atomic():
    state = playing_state(bank_supply=DEFAULT_BANK_COUNT)
    player = state.players[0]
    give(state, 0, brick=3)
    assert not execute_bank_trade(state, player, Terrain.BRICK, Terrain.WHEAT, 4)
    assert player.resources[Terrain.BRICK] == 3

    give(state, 0, brick=4)
    bank_brick = state.bank[Terrain.BRICK]
    assert execute_bank_trade(state, player, Terrain.BRICK, Terrain.WHEAT, 4)
    assert player.resources[Terrain.BRICK] == 0
    assert player.resources[Terrain.WHEAT] == 1
    assert state.bank[Terrain.BRICK] == bank_brick + 4

    give(state, 0, ore=4)
    state.bank[Terrain.SHEEP] = 0
    assert not execute_bank_trade(state, player, Terrain.ORE, Terrain.SHEEP, 4)
    assert player.resources[Terrain.ORE] == 4


def test_unlimited_bank_always_supplies_trades():
    state = playing_state()
    player = state.players[0]
    assert state.bank is None
    give(state, 0, ore=4)
    assert execute_bank_trade(state, player, Terrain.ORE, Terrain.SHEEP, 4)
    assert player.resources[Terrain.SHEEP] == 1
    assert state.bank is None
