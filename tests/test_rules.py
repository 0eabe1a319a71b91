import random

import pytest

from oregon.engine.game_state import GamePhase, RobberSource, RobberStep, add_player, new_game
from oregon.engine.rules import (
    apply_action,
    get_setup_order_sequence,
    legal_actions,
    validate_action,
)
from oregon.engine.types import Action, ActionType, Terrain

from helpers import give, playing_state, put_road, put_structure


def _reasons(state, action):
    return [violation.reason for violation in validate_action(state, action)]


def _roll(player_id, first, second):
    return Action(ActionType.ROLL_DICE, player_id, {"dice": [first, second]})


def _order_roll(player_id, first, second):
    return Action(ActionType.ROLL_FOR_ORDER, player_id, {"dice": [first, second]})


def _opponent_tile(state, owner_id=2):
    tile = next(
        t for t in state.hexes.values() if t.terrain != Terrain.DESERT and t.hex_id != state.robber_hex_id
    )
    vertex_id = next(v.vertex_id for v in state.vertices.values() if tile.hex_id in v.hex_ids)
    put_structure(state, vertex_id, owner_id)
    return tile


def test_lobby_only_accepts_start_game():
    state = new_game(num_players=2, seed=4)
    assert state.phase == GamePhase.LOBBY
    assert _reasons(state, _roll(1, 2, 3)) == ["wrong_phase"]
    assert [a.action_type for a in legal_actions(state)] == [ActionType.START_GAME]

    state = state.apply(Action(ActionType.START_GAME, 1))
    assert state.phase == GamePhase.ROLL_ORDER
    assert state.current_player.player_id == 1


def test_roll_for_order_rerolls_ties_and_sorts_descending():
    state = new_game(num_players=2, seed=4).apply(Action(ActionType.START_GAME, 1))
    assert _reasons(state, _order_roll(1, 0, 7)) == ["invalid_dice"]

    state = state.apply(_order_roll(1, 3, 3))
    assert state.current_player.player_id == 2
    state = state.apply(_order_roll(2, 2, 4))
    assert state.phase == GamePhase.ROLL_ORDER
    assert state.current_player.player_id == 1
    assert state.log[-1].entry_type == "roll_order"

    state = state.apply(_order_roll(1, 1, 1))
    state = state.apply(_order_roll(2, 6, 5))
    assert state.phase == GamePhase.SETUP
    assert state.turn_order == [1, 0]
    assert state.current_player.player_id == 2
    assert get_setup_order_sequence(state) == [1, 0, 0, 1]


def test_setup_follows_snake_order_and_starts_play():
    state = new_game(num_players=3, seed=9, roll_for_order=False)
    state = state.apply(Action(ActionType.START_GAME, 1))
    assert state.phase == GamePhase.SETUP

    seen = []
    while state.phase == GamePhase.SETUP:
        seen.append(state.current_player_index)
        settlement = legal_actions(state)[0]
        state = state.apply(settlement)
        assert state.setup_pending_vertex_id == settlement.payload["vertex_id"]
        road = legal_actions(state)[0]
        assert road.action_type == ActionType.BUILD_ROAD
        state = state.apply(road)
        assert state.setup_pending_vertex_id is None

    assert seen == [0, 1, 2, 2, 1, 0]
    assert state.phase == GamePhase.PLAYING
    assert state.current_player_index == 0
    assert state.turn_number == 1
    for player in state.players:
        assert player.settlements_left == 3
        assert player.roads_left == 13
        assert player.victory_points == 2


def test_first_placement_then_road_advances_the_counter():
    state = new_game(num_players=2, seed=2, roll_for_order=False).apply(Action(ActionType.START_GAME, 1))
    settlement = legal_actions(state)[0]
    state = state.apply(settlement)
    assert _reasons(state, settlement) == ["must_place_road"]
    assert state.players[0].total_resources() == 0

    state = state.apply(legal_actions(state)[0])
    assert state.setup_placements == 1
    assert state.setup_pending_vertex_id is None
    assert state.current_player.player_id == 2


def test_second_setup_settlement_collects_adjacent_resources():
    state = new_game(num_players=2, seed=2, roll_for_order=False).apply(Action(ActionType.START_GAME, 1))
    for _ in range(2):
        state = state.apply(legal_actions(state)[0])
        state = state.apply(legal_actions(state)[0])
    assert state.setup_placements == 2

    index = state.current_player_index
    settlement = legal_actions(state)[0]
    vertex = state.vertices[settlement.payload["vertex_id"]]
    expected = [h for h in vertex.hex_ids if state.hexes[h].terrain != Terrain.DESERT]
    after = state.apply(settlement)
    assert after.players[index].total_resources() == len(expected)


def test_setup_road_must_touch_the_new_settlement():
    state = new_game(num_players=2, seed=2, roll_for_order=False).apply(Action(ActionType.START_GAME, 1))
    settlement = legal_actions(state)[0]
    vertex_id = settlement.payload["vertex_id"]
    state = state.apply(settlement)
    far = next(e for e in state.edges.values() if vertex_id not in e.vertex_ids)
    assert _reasons(state, Action(ActionType.BUILD_ROAD, 1, {"edge_id": far.edge_id})) == [
        "invalid_road_location"
    ]


def test_must_roll_before_building_or_ending():
    state = playing_state()
    assert _reasons(state, Action(ActionType.END_TURN, 1)) == ["must_roll_first"]
    assert _reasons(state, Action(ActionType.BUILD_ROAD, 1, {"edge_id": 0})) == ["must_roll_first"]
    assert [a.action_type for a in legal_actions(state)] == [ActionType.ROLL_DICE]

    state = state.apply(_roll(1, 1, 2))
    assert state.last_dice == (1, 2)
    assert _reasons(state, _roll(1, 1, 2)) == ["already_rolled"]
    assert ActionType.END_TURN in {a.action_type for a in legal_actions(state)}


def test_roll_records_production():
    state = playing_state()
    tile = _opponent_tile(state, owner_id=1)
    first = max(1, tile.number - 6)
    state = state.apply(_roll(1, first, tile.number - first))
    assert tile.hex_id in state.last_resource_hex_ids
    assert tile.terrain in state.last_resource_flash[0]
    assert 1 not in state.last_resource_flash


def test_seven_starts_dice_robber_and_forces_a_steal():
    state = playing_state()
    tile = _opponent_tile(state)
    give(state, 1, wheat=2)

    state = state.apply(_roll(1, 3, 4))
    assert state.pending_robber.source == RobberSource.DICE
    assert state.last_resource_flash == {}
    moves = [a for a in legal_actions(state) if a.action_type == ActionType.MOVE_ROBBER]
    assert len(moves) == len(state.hexes) - 1
    same_hex = Action(ActionType.MOVE_ROBBER, 1, {"hex_id": state.robber_hex_id})
    assert _reasons(state, same_hex) == ["invalid_robber_hex"]
    assert _reasons(state, Action(ActionType.END_TURN, 1)) == ["robber_pending"]

    state = state.apply(Action(ActionType.MOVE_ROBBER, 1, {"hex_id": tile.hex_id}))
    assert state.pending_robber.step == RobberStep.CHOOSE_VICTIM
    assert state.pending_robber.candidates == (2,)
    assert _reasons(state, Action(ActionType.SKIP_STEAL, 1)) == ["must_steal"]

    state = state.apply(Action(ActionType.STEAL, 1, {"target_player_id": 2}), rng=random.Random(0))
    assert state.pending_robber is None
    assert state.players[0].resources[Terrain.WHEAT] == 1
    assert state.players[1].resources[Terrain.WHEAT] == 1


def test_robber_on_empty_hex_finishes_immediately():
    state = playing_state()
    state = state.apply(_roll(1, 3, 4))
    target = next(h for h in state.hexes if h != state.robber_hex_id)
    state = state.apply(Action(ActionType.MOVE_ROBBER, 1, {"hex_id": target}))
    assert state.robber_hex_id == target
    assert state.pending_robber is None


def test_end_turn_passes_to_next_player():
    state = playing_state()
    state = state.apply(_roll(1, 1, 2))
    state = state.apply(Action(ActionType.END_TURN, 1))
    assert state.current_player.player_id == 2
    assert state.last_dice is None
    assert state.turn_number == 2
    assert _reasons(state, _roll(1, 1, 2)) == ["not_your_turn"]


def test_illegal_action_returns_the_same_state():
    state = playing_state()
    action = Action(ActionType.BUILD_CITY, 1, {"vertex_id": 0})
    assert apply_action(state, action) is state
    assert _reasons(state, Action(ActionType.ROLL_DICE, 9)) == ["unknown_player"]


def test_build_settlement_pays_and_scores():
    state = playing_state()
    put_structure(state, 0, 1)
    neighbor = state.edges[state.vertices[0].edge_ids[0]].other(0)
    onward = next(e for e in state.vertices[neighbor].edge_ids if state.edges[e].other(neighbor) != 0)
    target = state.edges[onward].other(neighbor)
    put_road(state, state.vertices[0].edge_ids[0], 1)
    put_road(state, onward, 1)
    give(state, 0, wood=1, brick=1, sheep=1, wheat=1)
    state.last_dice = (1, 2)

    bad = Action(ActionType.BUILD_SETTLEMENT, 1, {"vertex_id": neighbor})
    assert _reasons(state, bad) == ["invalid_settlement_location"]
    after = state.apply(Action(ActionType.BUILD_SETTLEMENT, 1, {"vertex_id": target}))
    assert after.players[0].total_resources() == 0
    assert after.players[0].victory_points == 2
    assert after.players[0].settlements_left == state.players[0].settlements_left - 1


def test_bank_trade_at_four_to_one():
    state = playing_state()
    give(state, 0, ore=4)
    state.last_dice = (1, 2)
    action = Action(ActionType.TRADE_BANK, 1, {"give": "ore", "receive": "wheat"})
    after = state.apply(action)
    assert after.players[0].resources[Terrain.ORE] == 0
    assert after.players[0].resources[Terrain.WHEAT] == 1
    assert _reasons(after, action) == ["insufficient_resources"]
    assert _reasons(after, Action(ActionType.TRADE_BANK, 1, {"give": "ore", "receive": "ore"})) == [
        "trade_same_resource"
    ]


def test_reaching_the_target_ends_the_game():
    state = playing_state()
    put_structure(state, 0, 1)
    state.players[0].bonus_points = 9
    after = state.apply(_roll(1, 1, 1))
    assert after.phase == GamePhase.ENDED
    assert after.winner == 1
    assert legal_actions(after) == []
    assert _reasons(after, Action(ActionType.END_TURN, 1)) == ["game_over"]


def test_players_can_join_in_the_lobby_only():
    state = new_game(num_players=2, seed=1)
    state = add_player(state, "Sacagawea")
    assert [p.player_id for p in state.players] == [1, 2, 3]
    assert state.players[2].name == "Sacagawea"
    assert state.config.num_players == 3

    full = add_player(state)
    assert len(full.players) == 4
    assert add_player(full) is full

    started = state.apply(Action(ActionType.START_GAME, 1))
    assert add_player(started) is started


@pytest.mark.parametrize("num_players", [0, 1, 5])
def test_new_game_rejects_unsupported_player_counts(num_players):
    with pytest.raises(ValueError):
        new_game(num_players=num_players, seed=1)
