import json

import pytest

from oregon.engine.game_state import GamePhase
from oregon.engine.omens import CostOverride, FreeBuild, ProductionBlock
from oregon.engine.rules import legal_actions
from oregon.engine.serialization import StateLoadError, deserialize_game_state, serialize_game_state
from oregon.engine.types import Action, ActionType, BuildKind, Terrain

from helpers import give, playing_state, put_road, put_structure


def _busy_state():
    state = playing_state(omens=True)
    put_structure(state, 0, 1)
    put_road(state, state.vertices[0].edge_ids[0], 1)
    give(state, 0, wood=2, ore=1)
    state.players[0].omens_hand = ["gold_rush"]
    state.active_effects += [
        CostOverride("strategic_settlement_spot", 1, BuildKind.SETTLEMENT, {Terrain.WOOD: 1, Terrain.BRICK: 1}),
        FreeBuild("boomtown_growth", 1, cities=1),
        ProductionBlock("famine_pestilence", 2, None, rolls_remaining=1),
    ]
    return state.apply(Action(ActionType.ROLL_DICE, 1, {"dice": [3, 4]}))


def test_snapshot_survives_json_round_trip():
    state = _busy_state()
    data = json.loads(json.dumps(serialize_game_state(state)))
    restored = deserialize_game_state(data)

    assert serialize_game_state(restored) == serialize_game_state(state)
    assert restored.active_effects == state.active_effects
    assert restored.pending_robber == state.pending_robber
    assert restored.vertices == state.vertices
    assert restored.config == state.config


def test_restored_state_keeps_playing():
    state = _busy_state()
    restored = deserialize_game_state(serialize_game_state(state))
    assert legal_actions(restored) == legal_actions(state)

    move = legal_actions(restored)[0]
    assert serialize_game_state(restored.apply(move)) == serialize_game_state(state.apply(move))


def test_missing_parts_raise_load_error():
    with pytest.raises(StateLoadError):
        deserialize_game_state({})

    data = serialize_game_state(playing_state())
    data["players"] = []
    with pytest.raises(StateLoadError):
        deserialize_game_state(data)


def test_unknown_values_raise_load_error():
    data = serialize_game_state(playing_state())
    data["phase"] = "halftime"
    with pytest.raises(StateLoadError):
        deserialize_game_state(data)

    data = serialize_game_state(playing_state())
    data["hexes"][0]["terrain"] = "gold"
    with pytest.raises(StateLoadError):
        deserialize_game_state(data)


def test_lobby_state_round_trip_keeps_phase():
    data = serialize_game_state(playing_state())
    data["phase"] = GamePhase.LOBBY.value
    assert deserialize_game_state(data).phase == GamePhase.LOBBY
