"""Phase and turn orchestration: validation, enumeration and application of actions.

``apply_action`` never raises for an illegal move. It returns the input state
untouched and the reasons are available from ``validate_action``.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Tuple

from . import omens
from .economy import (
    bank_can_supply,
    can_afford_with_cost,
    execute_bank_trade,
    get_trade_rate,
    pay_resources,
)
from .game_state import (
    MIN_PLAYERS,
    GamePhase,
    GameState,
    PendingRobber,
    RobberSource,
    RobberStep,
    append_log,
    clone_state,
    refresh_victory_points,
)
from .longest_road import update_longest_road
from .placement import (
    can_build_city,
    can_place_road,
    can_place_road_in_setup,
    can_place_settlement,
    get_placeable_roads,
    get_placeable_roads_for_vertex,
    get_placeable_vertices,
    get_upgradeable_settlements,
)
from .production import (
    distribute_resources,
    get_hex_ids_that_produced_resources,
    get_robber_victims,
    give_initial_resources,
    steal_resource,
)
from .types import RESOURCE_TYPES, Action, ActionType, BuildingType, BuildKind, Structure, Terrain

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RuleViolation:
    reason: str


def _payload_int(action: Action, key: str) -> int:
    try:
        return int(action.payload.get(key, -1))  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return -1


def _payload_terrain(action: Action, key: str) -> Optional[Terrain]:
    try:
        terrain = Terrain(action.payload.get(key))
    except ValueError:
        return None
    return terrain if terrain in RESOURCE_TYPES else None


def _roll_two_dice(action: Action, rng: random.Random) -> Tuple[int, int]:
    dice = action.payload.get("dice")
    if dice is not None:
        first, second = dice  # type: ignore[misc]
        return (int(first), int(second))
    return (rng.randint(1, 6), rng.randint(1, 6))


def _dice_payload_ok(action: Action) -> bool:
    dice = action.payload.get("dice")
    if dice is None:
        return True
    try:
        first, second = dice  # type: ignore[misc]
    except (TypeError, ValueError):
        return False
    return all(isinstance(value, int) and 1 <= value <= 6 for value in (first, second))


# Turn order


def get_setup_order_sequence(state: GameState) -> List[int]:
    """Snake order of player indices, seeded from the roll-order result."""
    order = list(state.turn_order)
    return order + list(reversed(order))


def get_next_player_index(state: GameState) -> int:
    position = state.turn_order.index(state.current_player_index)
    return state.turn_order[(position + 1) % len(state.turn_order)]


def _first_unresolved_group(state: GameState) -> Optional[List[int]]:
    return next((group for group in state.roll_order_groups if len(group) > 1), None)


def _resolve_roll_order_group(state: GameState, group: List[int]) -> None:
    by_roll: Dict[int, List[int]] = {}
    for index in group:
        by_roll.setdefault(state.roll_order_rolls[index], []).append(index)
    split = [by_roll[value] for value in sorted(by_roll, reverse=True)]
    position = state.roll_order_groups.index(group)
    state.roll_order_groups[position : position + 1] = split
    state.roll_order_rolls = {}
    ties = [subgroup for subgroup in split if len(subgroup) > 1]
    for subgroup in ties:
        names = ", ".join(state.players[index].name for index in subgroup)
        append_log(state, "roll_order", f"Tie between {names}: roll again")


def _enter_setup(state: GameState) -> None:
    state.phase = GamePhase.SETUP
    state.roll_order_groups = []
    state.roll_order_rolls = {}
    state.setup_placements = 0
    state.current_player_index = get_setup_order_sequence(state)[0]
    order = ", ".join(state.players[index].name for index in state.turn_order)
    append_log(state, "setup", f"Turn order: {order}")


def _enter_playing(state: GameState) -> None:
    state.phase = GamePhase.PLAYING
    state.current_player_index = state.turn_order[0]
    state.turn_number = 1
    omens.reset_player_omens_flags_for_new_turn(state, state.current_player_index)
    append_log(state, "turn", f"{state.current_player.name}'s turn", state.current_player.player_id)


# Validation


def _validate_setup(state: GameState, action: Action) -> List[RuleViolation]:
    pid = action.player_id
    if action.action_type == ActionType.BUILD_SETTLEMENT:
        if state.setup_pending_vertex_id is not None:
            return [RuleViolation("must_place_road")]
        if not can_place_settlement(state, _payload_int(action, "vertex_id"), pid):
            return [RuleViolation("invalid_settlement_location")]
        return []
    if action.action_type == ActionType.BUILD_ROAD:
        if state.setup_pending_vertex_id is None:
            return [RuleViolation("must_place_settlement")]
        if not can_place_road_in_setup(state, _payload_int(action, "edge_id"), pid):
            return [RuleViolation("invalid_road_location")]
        return []
    return [RuleViolation("wrong_phase")]


def _validate_robber(state: GameState, action: Action) -> List[RuleViolation]:
    pending = state.pending_robber
    if action.action_type == ActionType.MOVE_ROBBER:
        if pending.step != RobberStep.CHOOSE_HEX:
            return [RuleViolation("must_choose_victim")]
        hex_id = _payload_int(action, "hex_id")
        if hex_id not in state.hexes:
            return [RuleViolation("invalid_robber_hex")]
        if pending.source == RobberSource.DICE and hex_id == state.robber_hex_id:
            return [RuleViolation("invalid_robber_hex")]
        return []
    if action.action_type == ActionType.STEAL:
        if pending.step != RobberStep.CHOOSE_VICTIM:
            return [RuleViolation("must_move_robber")]
        if _payload_int(action, "target_player_id") not in pending.candidates:
            return [RuleViolation("invalid_steal_target")]
        return []
    if action.action_type == ActionType.SKIP_STEAL:
        if pending.step != RobberStep.CHOOSE_VICTIM or pending.source != RobberSource.OMEN:
            return [RuleViolation("must_steal")]
        return []
    return [RuleViolation("robber_pending")]


def _validate_build(state: GameState, action: Action, kind: BuildKind) -> List[RuleViolation]:
    pid = action.player_id
    player = state.current_player
    violations: List[RuleViolation] = []
    if not omens.can_build_this_turn(state, pid):
        return [RuleViolation("build_blocked")]

    if kind == BuildKind.ROAD:
        if player.roads_left <= 0:
            violations.append(RuleViolation("no_pieces_left"))
        ignore = omens.road_ignores_adjacency(state, pid)
        edge_id = _payload_int(action, "edge_id")
        if edge_id not in state.edges or state.edges[edge_id].owner_id is not None:
            violations.append(RuleViolation("edge_occupied"))
        elif not can_place_road(state, edge_id, pid, ignore):
            violations.append(RuleViolation("not_connected"))
    elif kind == BuildKind.SETTLEMENT:
        if player.settlements_left <= 0:
            violations.append(RuleViolation("no_pieces_left"))
        vertex_id = _payload_int(action, "vertex_id")
        vertex = state.vertices.get(vertex_id)
        if vertex is None or vertex.structure is not None:
            violations.append(RuleViolation("vertex_occupied"))
        elif not can_place_settlement(state, vertex_id, pid):
            violations.append(RuleViolation("invalid_settlement_location"))
    else:
        if player.cities_left <= 0:
            violations.append(RuleViolation("no_pieces_left"))
        if not can_build_city(state, _payload_int(action, "vertex_id"), pid):
            violations.append(RuleViolation("invalid_city_location"))

    cost = omens.get_effective_build_cost(state, pid, kind)
    if not can_afford_with_cost(player, cost):
        violations.append(RuleViolation("insufficient_resources"))
    return violations


def _validate_trade(state: GameState, action: Action) -> List[RuleViolation]:
    give = _payload_terrain(action, "give")
    receive = _payload_terrain(action, "receive")
    if give is None or receive is None:
        return [RuleViolation("invalid_resource")]
    if give == receive:
        return [RuleViolation("trade_same_resource")]
    rate = omens.preview_trade_rate(state, action.player_id, get_trade_rate(state, action.player_id, give))
    return _trade_violations(state, give, receive, rate)


def _trade_violations(state: GameState, give: Terrain, receive: Terrain, rate: int) -> List[RuleViolation]:
    violations: List[RuleViolation] = []
    if state.current_player.resources[give] < rate:
        violations.append(RuleViolation("insufficient_resources"))
    if not bank_can_supply(state, receive):
        violations.append(RuleViolation("bank_empty"))
    return violations


def validate_action(state: GameState, action: Action) -> List[RuleViolation]:
    if state.phase == GamePhase.ENDED:
        return [RuleViolation("game_over")]
    if state.player_index(action.player_id) is None:
        return [RuleViolation("unknown_player")]

    if state.phase == GamePhase.LOBBY:
        if action.action_type != ActionType.START_GAME:
            return [RuleViolation("wrong_phase")]
        if len(state.players) < MIN_PLAYERS:
            return [RuleViolation("not_enough_players")]
        return []

    if state.current_player.player_id != action.player_id:
        return [RuleViolation("not_your_turn")]

    if state.phase == GamePhase.ROLL_ORDER:
        if action.action_type != ActionType.ROLL_FOR_ORDER:
            return [RuleViolation("wrong_phase")]
        if not _dice_payload_ok(action):
            return [RuleViolation("invalid_dice")]
        return []

    if state.phase == GamePhase.SETUP:
        return _validate_setup(state, action)

    if state.pending_robber is not None:
        return _validate_robber(state, action)

    action_type = action.action_type
    rolled = state.last_dice is not None
    if action_type == ActionType.ROLL_DICE:
        if rolled:
            return [RuleViolation("already_rolled")]
        if not _dice_payload_ok(action):
            return [RuleViolation("invalid_dice")]
        return []
    if action_type == ActionType.DRAW_OMEN:
        return [RuleViolation(reason) for reason in omens.draw_violations(state, action.player_id)]
    if action_type == ActionType.PLAY_OMEN:
        card_id = str(action.payload.get("card_id", ""))
        targets = action.payload.get("targets") or {}
        return [
            RuleViolation(reason)
            for reason in omens.play_violations(state, action.player_id, card_id, targets)  # type: ignore[arg-type]
        ]
    if action_type in (ActionType.MOVE_ROBBER, ActionType.STEAL, ActionType.SKIP_STEAL):
        return [RuleViolation("no_robber_pending")]
    if action_type not in (
        ActionType.BUILD_ROAD,
        ActionType.BUILD_SETTLEMENT,
        ActionType.BUILD_CITY,
        ActionType.TRADE_BANK,
        ActionType.END_TURN,
    ):
        return [RuleViolation("wrong_phase")]
    if not rolled:
        return [RuleViolation("must_roll_first")]
    if action_type == ActionType.BUILD_ROAD:
        return _validate_build(state, action, BuildKind.ROAD)
    if action_type == ActionType.BUILD_SETTLEMENT:
        return _validate_build(state, action, BuildKind.SETTLEMENT)
    if action_type == ActionType.BUILD_CITY:
        return _validate_build(state, action, BuildKind.CITY)
    if action_type == ActionType.TRADE_BANK:
        return _validate_trade(state, action)
    return []


# Enumeration


def _omen_play_actions(state: GameState, player_id: int) -> List[Action]:
    actions: List[Action] = []
    player = state.current_player
    structure_hexes = sorted(
        {
            hex_id
            for vertex in state.vertices.values()
            if vertex.structure is not None and vertex.structure.owner_id == player_id
            for hex_id in vertex.hex_ids
            if state.hexes[hex_id].terrain != Terrain.DESERT
        }
    )
    for card_id in sorted(set(player.omens_hand)):
        if card_id == "reliable_harvest":
            options = [{"hex_id": hex_id} for hex_id in structure_hexes]
        elif card_id == "skilled_prospector":
            options = [{"pair": pair} for pair in omens.PROSPECTOR_PAIRS]
        elif card_id == "foragers_bounty":
            options = [{"resource": terrain.value} for terrain in omens.FORAGER_CHOICES]
        elif card_id == "sturdy_wagon_wheel":
            options = [{"resource": terrain.value} for terrain in omens.WAGON_WHEEL_CHOICES]
        elif card_id == "gold_rush":
            options = [{"resource": terrain.value} for terrain in RESOURCE_TYPES]
        else:
            options = [{}]
        for targets in options:
            if omens.can_play_omen_card(state, player_id, card_id, targets):
                actions.append(
                    Action(ActionType.PLAY_OMEN, player_id, {"card_id": card_id, "targets": targets})
                )
    return actions


def legal_actions(state: GameState) -> List[Action]:
    if state.phase == GamePhase.ENDED:
        return []

    player = state.current_player
    pid = player.player_id

    if state.phase == GamePhase.LOBBY:
        if len(state.players) >= MIN_PLAYERS:
            return [Action(ActionType.START_GAME, pid)]
        return []

    if state.phase == GamePhase.ROLL_ORDER:
        return [Action(ActionType.ROLL_FOR_ORDER, pid)]

    if state.phase == GamePhase.SETUP:
        if state.setup_pending_vertex_id is None:
            return [
                Action(ActionType.BUILD_SETTLEMENT, pid, {"vertex_id": vertex_id})
                for vertex_id in get_placeable_vertices(state, pid)
            ]
        return [
            Action(ActionType.BUILD_ROAD, pid, {"edge_id": edge_id})
            for edge_id in get_placeable_roads_for_vertex(state, pid, state.setup_pending_vertex_id)
        ]

    pending = state.pending_robber
    if pending is not None:
        if pending.step == RobberStep.CHOOSE_HEX:
            return [
                Action(ActionType.MOVE_ROBBER, pid, {"hex_id": hex_id})
                for hex_id in state.hexes
                if pending.source == RobberSource.OMEN or hex_id != state.robber_hex_id
            ]
        actions = [
            Action(ActionType.STEAL, pid, {"target_player_id": target})
            for target in pending.candidates
        ]
        if pending.source == RobberSource.OMEN:
            actions.append(Action(ActionType.SKIP_STEAL, pid))
        return actions

    actions: List[Action] = []
    if state.omens_enabled:
        actions.extend(_omen_play_actions(state, pid))
    if state.last_dice is None:
        actions.append(Action(ActionType.ROLL_DICE, pid))
        return actions

    actions.append(Action(ActionType.END_TURN, pid))
    if state.omens_enabled and omens.can_draw_omen_card(state, pid):
        actions.append(Action(ActionType.DRAW_OMEN, pid))

    if omens.can_build_this_turn(state, pid):
        road_cost = omens.get_effective_build_cost(state, pid, BuildKind.ROAD)
        if player.roads_left > 0 and can_afford_with_cost(player, road_cost):
            ignore = omens.road_ignores_adjacency(state, pid)
            for edge_id in get_placeable_roads(state, pid, ignore):
                actions.append(Action(ActionType.BUILD_ROAD, pid, {"edge_id": edge_id}))
        settlement_cost = omens.get_effective_build_cost(state, pid, BuildKind.SETTLEMENT)
        if player.settlements_left > 0 and can_afford_with_cost(player, settlement_cost):
            for vertex_id in get_placeable_vertices(state, pid):
                actions.append(Action(ActionType.BUILD_SETTLEMENT, pid, {"vertex_id": vertex_id}))
        city_cost = omens.get_effective_build_cost(state, pid, BuildKind.CITY)
        if player.cities_left > 0 and can_afford_with_cost(player, city_cost):
            for vertex_id in get_upgradeable_settlements(state, pid):
                actions.append(Action(ActionType.BUILD_CITY, pid, {"vertex_id": vertex_id}))

    for give in RESOURCE_TYPES:
        rate = omens.preview_trade_rate(state, pid, get_trade_rate(state, pid, give))
        for receive in RESOURCE_TYPES:
            if receive != give and not _trade_violations(state, give, receive, rate):
                payload = {"give": give.value, "receive": receive.value}
                actions.append(Action(ActionType.TRADE_BANK, pid, payload))
    return actions


# Application


def _place_settlement(state: GameState, vertex_id: int) -> None:
    player = state.current_player
    vertex = state.vertices[vertex_id]
    state.vertices[vertex_id] = replace(
        vertex, structure=Structure(player.player_id, BuildingType.SETTLEMENT)
    )
    player.settlements_left -= 1


def _place_road(state: GameState, edge_id: int) -> None:
    player = state.current_player
    state.edges[edge_id] = replace(state.edges[edge_id], owner_id=player.player_id)
    player.roads_left -= 1


def _handle_start_game(state: GameState) -> None:
    state.turn_order = list(range(len(state.players)))
    if state.config.roll_for_order:
        state.phase = GamePhase.ROLL_ORDER
        state.roll_order_groups = [list(state.turn_order)]
        state.roll_order_rolls = {}
        state.current_player_index = state.turn_order[0]
        append_log(state, "roll_order", "Roll for turn order")
    else:
        _enter_setup(state)


def _handle_roll_for_order(state: GameState, action: Action, rng: random.Random) -> None:
    dice = _roll_two_dice(action, rng)
    index = state.current_player_index
    state.roll_order_rolls[index] = sum(dice)
    append_log(
        state,
        "roll_order",
        f"{state.current_player.name} rolled {sum(dice)} for order",
        action.player_id,
    )
    group = _first_unresolved_group(state)
    waiting = [member for member in group if member not in state.roll_order_rolls]
    if waiting:
        state.current_player_index = waiting[0]
        return
    _resolve_roll_order_group(state, group)
    group = _first_unresolved_group(state)
    if group is not None:
        state.current_player_index = group[0]
        return
    state.turn_order = [members[0] for members in state.roll_order_groups]
    _enter_setup(state)


def _handle_setup_settlement(state: GameState, action: Action) -> None:
    vertex_id = _payload_int(action, "vertex_id")
    _place_settlement(state, vertex_id)
    state.setup_pending_vertex_id = vertex_id
    player = state.current_player
    message = f"{player.name} placed a settlement"
    if state.setup_placements >= len(state.players):
        received = give_initial_resources(state, player.player_id, vertex_id)
        if received:
            message += " and received " + ", ".join(terrain.value for terrain in received)
    append_log(state, "setup", message, player.player_id)


def _handle_setup_road(state: GameState, action: Action) -> None:
    _place_road(state, _payload_int(action, "edge_id"))
    state.setup_pending_vertex_id = None
    state.setup_placements += 1
    update_longest_road(state)
    sequence = get_setup_order_sequence(state)
    if state.setup_placements >= len(sequence):
        _enter_playing(state)
    else:
        state.current_player_index = sequence[state.setup_placements]


def _handle_roll_dice(state: GameState, action: Action, rng: random.Random) -> None:
    dice = _roll_two_dice(action, rng)
    total = sum(dice)
    player = state.current_player
    state.last_dice = dice
    state.last_resource_flash = {}
    state.last_resource_hex_ids = []
    append_log(state, "roll", f"{player.name} rolled {total}", player.player_id)

    if total == 7:
        granted: Dict[int, List[Terrain]] = {}
        state.pending_robber = PendingRobber(source=RobberSource.DICE)
    else:
        state.last_resource_hex_ids = get_hex_ids_that_produced_resources(state, total)
        granted = distribute_resources(state, total)
    omens.apply_production_modifiers_after_roll(state, total, granted)
    state.last_resource_flash = {index: terrains for index, terrains in granted.items() if terrains}


def _handle_move_robber(state: GameState, action: Action) -> None:
    hex_id = _payload_int(action, "hex_id")
    state.robber_hex_id = hex_id
    pending = state.pending_robber
    victims = get_robber_victims(state, hex_id, action.player_id)
    logger.debug("robber moved to hex %s by player %s", hex_id, action.player_id)
    append_log(state, "robber", f"{state.current_player.name} moved the robber", action.player_id)
    if victims:
        state.pending_robber = replace(
            pending, step=RobberStep.CHOOSE_VICTIM, hex_id=hex_id, candidates=tuple(victims)
        )
    else:
        state.pending_robber = None


def _handle_steal(state: GameState, action: Action, rng: random.Random) -> None:
    target = _payload_int(action, "target_player_id")
    stolen = steal_resource(state, action.player_id, target, rng)
    victim = state.player_by_id(target)
    if stolen is None:
        message = f"{state.current_player.name} found nothing to steal from {victim.name}"
    else:
        message = f"{state.current_player.name} stole a resource from {victim.name}"
    append_log(state, "steal", message, action.player_id)
    state.pending_robber = None


def _handle_build(state: GameState, action: Action, kind: BuildKind) -> None:
    pid = action.player_id
    player = state.current_player
    cost = omens.get_effective_build_cost(state, pid, kind)
    pay_resources(state, player, cost)
    if state.omens_enabled:
        omens.consume_cost_effects_after_build(state, pid, kind)

    if kind == BuildKind.ROAD:
        _place_road(state, _payload_int(action, "edge_id"))
        if omens.road_ignores_adjacency(state, pid):
            omens.consume_pathfinder_effect(state, pid)
        update_longest_road(state)
    elif kind == BuildKind.SETTLEMENT:
        _place_settlement(state, _payload_int(action, "vertex_id"))
    else:
        vertex_id = _payload_int(action, "vertex_id")
        vertex = state.vertices[vertex_id]
        state.vertices[vertex_id] = replace(vertex, structure=Structure(pid, BuildingType.CITY))
        player.settlements_left += 1
        player.cities_left -= 1
    append_log(state, "build", f"{player.name} built a {kind.value}", pid)


def _handle_trade(state: GameState, action: Action) -> GameState:
    pid = action.player_id
    give = _payload_terrain(action, "give")
    receive = _payload_terrain(action, "receive")
    base = get_trade_rate(state, pid, give)
    rate, state = omens.get_effective_trade_rate(state, pid, give, base)
    player = state.current_player
    execute_bank_trade(state, player, give, receive, rate)
    append_log(
        state,
        "trade",
        f"{player.name} traded {rate} {give.value} for 1 {receive.value}",
        pid,
    )
    return state


def _handle_end_turn(state: GameState) -> None:
    state.last_dice = None
    state.last_resource_flash = {}
    state.last_resource_hex_ids = []
    state.current_player_index = get_next_player_index(state)
    state.turn_number += 1
    omens.reset_player_omens_flags_for_new_turn(state, state.current_player_index)
    append_log(state, "turn", f"{state.current_player.name}'s turn", state.current_player.player_id)


def _check_winner(state: GameState) -> None:
    target = state.config.victory_points_to_win
    contenders = [player for player in state.players if player.victory_points >= target]
    if not contenders:
        return
    current = state.current_player
    winner = current if current.victory_points >= target else contenders[0]
    state.winner = winner.player_id
    state.phase = GamePhase.ENDED
    state.pending_robber = None
    append_log(state, "win", f"{winner.name} wins with {winner.victory_points} points", winner.player_id)


def apply_action(state: GameState, action: Action, rng: random.Random | None = None) -> GameState:
    violations = validate_action(state, action)
    if violations:
        logger.debug(
            "rejected %s by player %s: %s",
            action.action_type.value,
            action.player_id,
            ", ".join(violation.reason for violation in violations),
        )
        return state

    rng = rng or random.Random()
    next_state = clone_state(state)
    action_type = action.action_type

    if action_type == ActionType.START_GAME:
        _handle_start_game(next_state)
    elif action_type == ActionType.ROLL_FOR_ORDER:
        _handle_roll_for_order(next_state, action, rng)
    elif next_state.phase == GamePhase.SETUP:
        if action_type == ActionType.BUILD_SETTLEMENT:
            _handle_setup_settlement(next_state, action)
        else:
            _handle_setup_road(next_state, action)
    elif action_type == ActionType.ROLL_DICE:
        _handle_roll_dice(next_state, action, rng)
    elif action_type == ActionType.MOVE_ROBBER:
        _handle_move_robber(next_state, action)
    elif action_type == ActionType.STEAL:
        _handle_steal(next_state, action, rng)
    elif action_type == ActionType.SKIP_STEAL:
        next_state.pending_robber = None
    elif action_type == ActionType.BUILD_ROAD:
        _handle_build(next_state, action, BuildKind.ROAD)
    elif action_type == ActionType.BUILD_SETTLEMENT:
        _handle_build(next_state, action, BuildKind.SETTLEMENT)
    elif action_type == ActionType.BUILD_CITY:
        _handle_build(next_state, action, BuildKind.CITY)
    elif action_type == ActionType.TRADE_BANK:
        next_state = _handle_trade(next_state, action)
    elif action_type == ActionType.DRAW_OMEN:
        omens.draw_omen_card(next_state, action.player_id, rng)
    elif action_type == ActionType.PLAY_OMEN:
        omens.play_omen_card(
            next_state,
            action.player_id,
            str(action.payload.get("card_id")),
            action.payload.get("targets") or {},  # type: ignore[arg-type]
            rng,
        )
    elif action_type == ActionType.END_TURN:
        _handle_end_turn(next_state)

    refresh_victory_points(next_state)
    _check_winner(next_state)
    return next_state
