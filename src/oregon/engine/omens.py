"""Oregon's Omens: the optional card deck and the effects it leaves in play.

Cards are either buffs, which go to the drawer's hand and are played later,
or debuffs, which resolve the moment they are drawn. Lasting results are kept
in ``GameState.active_effects`` as one small frozen dataclass per effect kind.
Cost, production and trade-rate code asks the effects for their contribution
instead of special-casing card ids.

Functions that take a ``GameState`` and return nothing mutate it in place and
expect the caller to hand them a clone.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, List, Optional, Tuple

from .economy import COSTS, OMEN_DRAW_COST, can_afford_with_cost, pay_resources
from .game_state import (
    GamePhase,
    GameState,
    PendingRobber,
    PlayerState,
    RobberSource,
    append_log,
    clone_state,
    grant_resource,
    remove_resource,
)
from .production import random_held_resource, steal_resource
from .types import RESOURCE_TYPES, BuildingType, BuildKind, ResourceBank, Terrain

logger = logging.getLogger(__name__)


class OmenKind(str, Enum):
    BUFF = "buff"
    DEBUFF = "debuff"


@dataclass(frozen=True)
class OmenCard:
    card_id: str
    name: str
    kind: OmenKind
    text: str


_BUFFS = [
    OmenCard("foragers_bounty", "Forager's Bounty", OmenKind.BUFF, "Gain 1 wood or 1 wheat."),
    OmenCard("sturdy_wagon_wheel", "Sturdy Wagon Wheel", OmenKind.BUFF, "Your next road costs 1 less wood or brick."),
    OmenCard("well_stocked_pantry", "Well-Stocked Pantry", OmenKind.BUFF, "Negate the next debuff you draw."),
    OmenCard("friendly_trade_caravan", "Friendly Trade Caravan", OmenKind.BUFF, "Your next bank trade is 2:1."),
    OmenCard("pathfinders_insight", "Pathfinder's Insight", OmenKind.BUFF, "Your next road this turn ignores adjacency."),
    OmenCard("skilled_prospector", "Skilled Prospector", OmenKind.BUFF, "Gain 1 ore and 1 wood, or 1 brick and 1 wheat."),
    OmenCard("reliable_harvest", "Reliable Harvest", OmenKind.BUFF, "Next roll: +1 resource per structure on a chosen producing hex."),
    OmenCard("strategic_settlement_spot", "Strategic Settlement Spot", OmenKind.BUFF, "Your next settlement costs 1 wood and 1 brick."),
    OmenCard("bountiful_pastures", "Bountiful Pastures", OmenKind.BUFF, "For 2 rolls, +1 sheep per structure on producing sheep hexes."),
    OmenCard("hidden_cache", "Hidden Cache", OmenKind.BUFF, "Gain 2 random resources."),
    OmenCard("master_builders_plan", "Master Builder's Plan", OmenKind.BUFF, "Your next road and next settlement are free."),
    OmenCard("boomtown_growth", "Boomtown Growth", OmenKind.BUFF, "Your next city is free."),
    OmenCard("gold_rush", "Gold Rush", OmenKind.BUFF, "Gain 3 ore and 1 resource of your choice."),
    OmenCard("robbers_regret", "Robber's Regret", OmenKind.BUFF, "Move the robber and optionally steal 1 resource."),
    OmenCard("manifest_destiny", "Manifest Destiny", OmenKind.BUFF, "Gain 2 victory points."),
]

_DEBUFFS = [
    OmenCard("dust_storm", "Dust Storm", OmenKind.DEBUFF, "Lose 1 random resource."),
    OmenCard("worn_out_tool", "Worn-Out Tool", OmenKind.DEBUFF, "Your next settlement costs 1 extra sheep."),
    OmenCard("confusing_tracks", "Confusing Tracks", OmenKind.DEBUFF, "Lose 1 wood after the next roll."),
    OmenCard("smallpox_scare", "Smallpox Scare", OmenKind.DEBUFF, "Lose 1 victory point."),
    OmenCard("lost_supplies", "Lost Supplies", OmenKind.DEBUFF, "Lose 2 random resources."),
    OmenCard("broken_wagon_axle", "Broken Wagon Axle", OmenKind.DEBUFF, "Your next road costs 1 extra wood."),
    OmenCard("resource_theft", "Resource Theft", OmenKind.DEBUFF, "The robber moves; the next player steals 1 resource from you."),
    OmenCard("drought", "Drought", OmenKind.DEBUFF, "Lose 1 wheat after each of the next 2 rolls."),
    OmenCard("bandit_ransom", "Bandit Ransom", OmenKind.DEBUFF, "Lose 2 random resources."),
    OmenCard("poor_trade_season", "Poor Trade Season", OmenKind.DEBUFF, "Your next 2 bank trades are one rate worse."),
    OmenCard("dysentery_outbreak", "Dysentery Outbreak", OmenKind.DEBUFF, "Lose 1 wheat; no wheat production for 2 rolls."),
    OmenCard("mass_exodus", "Mass Exodus", OmenKind.DEBUFF, "One of your settlements is abandoned."),
    OmenCard("wagon_overturned", "Wagon Overturned", OmenKind.DEBUFF, "Lose 1 random resource; you cannot build next turn."),
    OmenCard("robber_barons_demand", "Robber Baron's Demand", OmenKind.DEBUFF, "The robber moves; the next player steals 1 resource from you."),
    OmenCard("famine_pestilence", "Famine & Pestilence", OmenKind.DEBUFF, "You produce nothing on the next roll."),
]

OMEN_CARDS: Dict[str, OmenCard] = {card.card_id: card for card in _BUFFS + _DEBUFFS}
BUFF_COPIES = 2
DEBUFF_COPIES = 1


def is_debuff(card_id: str) -> bool:
    card = OMEN_CARDS.get(card_id)
    return card is not None and card.kind == OmenKind.DEBUFF


def create_omens_deck(rng: random.Random) -> List[str]:
    deck = [card.card_id for card in _BUFFS for _ in range(BUFF_COPIES)]
    deck += [card.card_id for card in _DEBUFFS for _ in range(DEBUFF_COPIES)]
    rng.shuffle(deck)
    return deck


# Effects


@dataclass(frozen=True)
class OmenEffect:
    card_id: str
    player_id: int


@dataclass(frozen=True)
class CostOverride(OmenEffect):
    kind: BuildKind
    cost: Dict[Terrain, int]


@dataclass(frozen=True)
class CostSurcharge(OmenEffect):
    kind: BuildKind
    resource: Terrain
    amount: int = 1


@dataclass(frozen=True)
class CostDiscount(OmenEffect):
    kind: BuildKind
    resource: Terrain
    amount: int = 1


@dataclass(frozen=True)
class FreeBuild(OmenEffect):
    roads: int = 0
    settlements: int = 0
    cities: int = 0

    def remaining(self, kind: BuildKind) -> int:
        return {
            BuildKind.ROAD: self.roads,
            BuildKind.SETTLEMENT: self.settlements,
            BuildKind.CITY: self.cities,
        }[kind]


@dataclass(frozen=True)
class BuildBlock(OmenEffect):
    turns_remaining: int


@dataclass(frozen=True)
class RoadAdjacencyWaiver(OmenEffect):
    turns_remaining: int


@dataclass(frozen=True)
class ProductionBonus(OmenEffect):
    hex_id: int
    rolls_remaining: int


@dataclass(frozen=True)
class ProductionBoost(OmenEffect):
    resource: Terrain
    rolls_remaining: int


@dataclass(frozen=True)
class ProductionPenalty(OmenEffect):
    resource: Terrain
    rolls_remaining: int
    amount: int = 1


@dataclass(frozen=True)
class ProductionBlock(OmenEffect):
    resource: Optional[Terrain]
    rolls_remaining: int


@dataclass(frozen=True)
class TradeRateOverride(OmenEffect):
    rate: int = 2


@dataclass(frozen=True)
class TradePenalty(OmenEffect):
    trades_left: int


@dataclass(frozen=True)
class DebuffShield(OmenEffect):
    pass


COST_EFFECT_ORDER = (CostOverride, CostSurcharge, CostDiscount)
PRODUCTION_EFFECT_ORDER = (ProductionBonus, ProductionBoost, ProductionPenalty, ProductionBlock)
ROLL_COUNTED = PRODUCTION_EFFECT_ORDER
TURN_COUNTED = (BuildBlock, RoadAdjacencyWaiver)


def apply_effect_to_cost(effect: OmenEffect, kind: BuildKind, cost: ResourceBank) -> ResourceBank:
    if isinstance(effect, CostOverride) and effect.kind == kind:
        return dict(effect.cost)
    if isinstance(effect, CostSurcharge) and effect.kind == kind:
        adjusted = dict(cost)
        adjusted[effect.resource] = adjusted.get(effect.resource, 0) + effect.amount
        return adjusted
    if isinstance(effect, CostDiscount) and effect.kind == kind:
        adjusted = dict(cost)
        adjusted[effect.resource] = max(0, adjusted.get(effect.resource, 0) - effect.amount)
        return {key: value for key, value in adjusted.items() if value > 0}
    return cost


def apply_effect_to_trade_rate(effect: OmenEffect, rate: int) -> int:
    if isinstance(effect, TradeRateOverride):
        return min(rate, effect.rate)
    if isinstance(effect, TradePenalty) and effect.trades_left > 0:
        return min(4, rate + 1)
    return rate


def describe_effect(effect: OmenEffect) -> str:
    name = OMEN_CARDS[effect.card_id].name if effect.card_id in OMEN_CARDS else effect.card_id
    if isinstance(effect, ROLL_COUNTED):
        count = effect.rolls_remaining
        return f"{name} ({count} roll{'s' if count != 1 else ''} left)"
    if isinstance(effect, TURN_COUNTED):
        count = effect.turns_remaining
        return f"{name} ({count} turn{'s' if count != 1 else ''} left)"
    if isinstance(effect, TradePenalty):
        return f"{name} ({effect.trades_left} trade{'s' if effect.trades_left != 1 else ''} left)"
    return f"{name} (next use)"


def get_active_effects_for_player(state: GameState, player_id: int) -> List[OmenEffect]:
    return [effect for effect in state.active_effects if effect.player_id == player_id]


def _remove_effect(state: GameState, effect: OmenEffect) -> None:
    for index, existing in enumerate(state.active_effects):
        if existing is effect:
            del state.active_effects[index]
            return


def _replace_effect(state: GameState, effect: OmenEffect, updated: OmenEffect) -> None:
    for index, existing in enumerate(state.active_effects):
        if existing is effect:
            state.active_effects[index] = updated
            return


# Cost, build and road queries


def _free_build_for(state: GameState, player_id: int, kind: BuildKind) -> Optional[FreeBuild]:
    for effect in get_active_effects_for_player(state, player_id):
        if isinstance(effect, FreeBuild) and effect.remaining(kind) > 0:
            return effect
    return None


def get_effective_build_cost(state: GameState, player_id: int, kind: BuildKind) -> ResourceBank:
    """Base cost with the player's cost effects applied in ``COST_EFFECT_ORDER``.

    A pending free build of ``kind`` wins outright and yields an empty cost.
    """
    cost = dict(COSTS[kind])
    if not state.omens_enabled:
        return cost
    if _free_build_for(state, player_id, kind) is not None:
        return {}
    effects = get_active_effects_for_player(state, player_id)
    for effect_type in COST_EFFECT_ORDER:
        for effect in effects:
            if isinstance(effect, effect_type):
                cost = apply_effect_to_cost(effect, kind, cost)
    return cost


def get_build_cost_debuff_sources(state: GameState, player_id: int, kind: BuildKind) -> List[str]:
    return [
        effect.card_id
        for effect in get_active_effects_for_player(state, player_id)
        if isinstance(effect, CostSurcharge) and effect.kind == kind
    ]


def consume_free_build_effect(state: GameState, player_id: int, kind: BuildKind) -> bool:
    effect = _free_build_for(state, player_id, kind)
    if effect is None:
        return False
    field_name = {BuildKind.ROAD: "roads", BuildKind.SETTLEMENT: "settlements", BuildKind.CITY: "cities"}[kind]
    updated = replace(effect, **{field_name: effect.remaining(kind) - 1})
    if updated.roads <= 0 and updated.settlements <= 0 and updated.cities <= 0:
        _remove_effect(state, effect)
    else:
        _replace_effect(state, effect, updated)
    return True


def consume_cost_effects_after_build(state: GameState, player_id: int, kind: BuildKind) -> None:
    """Spend whatever shaped the cost just paid for ``kind``."""
    if consume_free_build_effect(state, player_id, kind):
        return
    for effect in list(get_active_effects_for_player(state, player_id)):
        if isinstance(effect, COST_EFFECT_ORDER) and effect.kind == kind:
            _remove_effect(state, effect)


def can_build_this_turn(state: GameState, player_id: int) -> bool:
    return not any(
        isinstance(effect, BuildBlock) and effect.turns_remaining > 0
        for effect in get_active_effects_for_player(state, player_id)
    )


def road_ignores_adjacency(state: GameState, player_id: int) -> bool:
    return any(
        isinstance(effect, RoadAdjacencyWaiver) and effect.turns_remaining > 0
        for effect in get_active_effects_for_player(state, player_id)
    )


def consume_pathfinder_effect(state: GameState, player_id: int) -> None:
    for effect in get_active_effects_for_player(state, player_id):
        if isinstance(effect, RoadAdjacencyWaiver):
            _remove_effect(state, effect)
            return


# Trade


def _next_trade_effect(state: GameState, player_id: int) -> Optional[OmenEffect]:
    """The trade modifier the next bank trade would spend: the 2:1 override first."""
    if not state.omens_enabled:
        return None
    effects = get_active_effects_for_player(state, player_id)
    override = next((e for e in effects if isinstance(e, TradeRateOverride)), None)
    if override is not None:
        return override
    return next((e for e in effects if isinstance(e, TradePenalty) and e.trades_left > 0), None)


def preview_trade_rate(state: GameState, player_id: int, base_rate: int) -> int:
    """Rate the next trade would use, without spending anything."""
    effect = _next_trade_effect(state, player_id)
    return base_rate if effect is None else apply_effect_to_trade_rate(effect, base_rate)


def get_effective_trade_rate(
    state: GameState, player_id: int, give: Terrain, base_rate: int
) -> Tuple[int, GameState]:
    """Resolve the rate for one trade and the state with any one-shot modifier spent.

    The returned state must be committed together with the trade itself.
    """
    effect = _next_trade_effect(state, player_id)
    if isinstance(effect, TradeRateOverride):
        next_state = clone_state(state)
        _remove_effect(next_state, effect)
        return apply_effect_to_trade_rate(effect, base_rate), next_state
    if isinstance(effect, TradePenalty):
        next_state = clone_state(state)
        if effect.trades_left <= 1:
            _remove_effect(next_state, effect)
        else:
            _replace_effect(next_state, effect, replace(effect, trades_left=effect.trades_left - 1))
        return apply_effect_to_trade_rate(effect, base_rate), next_state
    return base_rate, state


# Duration bookkeeping


def tick_active_effects(state: GameState, trigger: str, player_id: int | None = None) -> None:
    """Count down effects: ``"roll"`` ticks every roll counter, ``"turn_start"``
    ticks the turn counters owned by ``player_id``. Spent effects are dropped."""
    remaining: List[OmenEffect] = []
    for effect in state.active_effects:
        if trigger == "roll" and isinstance(effect, ROLL_COUNTED):
            effect = replace(effect, rolls_remaining=effect.rolls_remaining - 1)
            if effect.rolls_remaining <= 0:
                continue
        elif (
            trigger == "turn_start"
            and isinstance(effect, TURN_COUNTED)
            and effect.player_id == player_id
        ):
            effect = replace(effect, turns_remaining=effect.turns_remaining - 1)
            if effect.turns_remaining <= 0:
                continue
        remaining.append(effect)
    state.active_effects = remaining


def reset_player_omens_flags_for_new_turn(state: GameState, player_index: int) -> None:
    player = state.players[player_index]
    tick_active_effects(state, "turn_start", player.player_id)
    player.has_drawn_omen_this_turn = False
    player.has_played_omen_this_turn = False


def _structures_on_hex(state: GameState, hex_id: int, player_id: int) -> int:
    count = 0
    for vertex in state.vertices.values():
        if vertex.structure is None or vertex.structure.owner_id != player_id:
            continue
        if hex_id in vertex.hex_ids:
            count += 1
    return count


def _apply_production_effect(
    state: GameState, effect: OmenEffect, dice_sum: int, granted: Dict[int, List[Terrain]]
) -> None:
    index = state.player_index(effect.player_id)
    if index is None:
        return
    player = state.players[index]
    flash = granted.setdefault(index, [])

    if isinstance(effect, ProductionBonus):
        tile = state.hexes.get(effect.hex_id)
        if tile is None or tile.terrain == Terrain.DESERT or tile.number != dice_sum:
            return
        amount = _structures_on_hex(state, tile.hex_id, player.player_id)
        flash.extend([tile.terrain] * grant_resource(state, player, tile.terrain, amount))
    elif isinstance(effect, ProductionBoost):
        for tile in state.hexes.values():
            if tile.terrain != effect.resource or tile.number != dice_sum:
                continue
            if tile.hex_id == state.robber_hex_id:
                continue
            amount = _structures_on_hex(state, tile.hex_id, player.player_id)
            flash.extend([tile.terrain] * grant_resource(state, player, tile.terrain, amount))
    elif isinstance(effect, ProductionPenalty):
        remove_resource(state, player, effect.resource, effect.amount)
    elif isinstance(effect, ProductionBlock):
        blocked = [t for t in flash if effect.resource is None or t == effect.resource]
        for terrain in blocked:
            if remove_resource(state, player, terrain, 1):
                flash.remove(terrain)


def apply_production_modifiers_after_roll(
    state: GameState, dice_sum: int, granted: Dict[int, List[Terrain]]
) -> None:
    """Layer production effects over a finished distribution, then tick roll counters.

    ``granted`` is the distribution result and is updated to the net outcome.
    """
    if not state.omens_enabled:
        return
    effects = list(state.active_effects)
    for effect_type in PRODUCTION_EFFECT_ORDER:
        for effect in effects:
            if isinstance(effect, effect_type):
                _apply_production_effect(state, effect, dice_sum, granted)
    tick_active_effects(state, "roll")


# Drawing


def draw_violations(state: GameState, player_id: int) -> List[str]:
    if not state.omens_enabled:
        return ["omens_disabled"]
    if state.phase != GamePhase.PLAYING:
        return ["wrong_phase"]
    if state.current_player.player_id != player_id:
        return ["not_your_turn"]
    if state.pending_robber is not None:
        return ["robber_pending"]
    player = state.current_player
    reasons: List[str] = []
    if len(player.omens_hand) >= state.config.max_omens_hand:
        reasons.append("hand_full")
    if player.has_drawn_omen_this_turn:
        reasons.append("already_drawn")
    if not can_afford_with_cost(player, OMEN_DRAW_COST):
        reasons.append("insufficient_resources")
    if not state.omens_deck and not state.omens_discard:
        reasons.append("deck_empty")
    return reasons


def can_draw_omen_card(state: GameState, player_id: int) -> bool:
    return not draw_violations(state, player_id)


def draw_omen_card(state: GameState, player_id: int, rng: random.Random) -> Optional[str]:
    """Pay for and draw one card. Debuffs resolve at once; buffs go to hand."""
    if not can_draw_omen_card(state, player_id):
        return None
    player = state.current_player
    pay_resources(state, player, OMEN_DRAW_COST)
    if not state.omens_deck:
        refill = list(state.omens_discard)
        rng.shuffle(refill)
        state.omens_deck = refill
        state.omens_discard = []
    card_id = state.omens_deck.pop()
    player.omens_purchased += 1
    player.has_drawn_omen_this_turn = True
    card = OMEN_CARDS[card_id]
    logger.debug("player %s drew omen %s", player_id, card_id)

    if card.kind == OmenKind.DEBUFF:
        shield = next(
            (e for e in get_active_effects_for_player(state, player_id) if isinstance(e, DebuffShield)),
            None,
        )
        if shield is not None:
            _remove_effect(state, shield)
            append_log(state, "pantry_negate", f"{player.name}'s pantry negated {card.name}", player_id)
        else:
            append_log(state, "omen_draw_debuff", f"{player.name} drew {card.name}: {card.text}", player_id)
            _apply_debuff(state, player, card_id, rng)
        state.omens_discard.append(card_id)
    else:
        player.omens_hand.append(card_id)
        append_log(state, "omen_buff", f"{player.name} drew {card.name}", player_id)

    update_omen_hand_award(state, player_id)
    return card_id


def _lose_random_resources(state: GameState, player: PlayerState, count: int, rng: random.Random) -> List[Terrain]:
    lost: List[Terrain] = []
    for _ in range(count):
        resource = random_held_resource(player.resources, rng)
        if resource is None:
            break
        remove_resource(state, player, resource, 1)
        lost.append(resource)
    return lost


def _next_player_id(state: GameState, player_id: int) -> int:
    index = state.player_index(player_id)
    position = state.turn_order.index(index)
    return state.players[state.turn_order[(position + 1) % len(state.turn_order)]].player_id


def _apply_debuff(state: GameState, player: PlayerState, card_id: str, rng: random.Random) -> None:
    pid = player.player_id
    if card_id == "dust_storm":
        _lose_random_resources(state, player, 1, rng)
    elif card_id in ("lost_supplies", "bandit_ransom"):
        _lose_random_resources(state, player, 2, rng)
    elif card_id == "smallpox_scare":
        player.bonus_points -= 1
    elif card_id == "wagon_overturned":
        _lose_random_resources(state, player, 1, rng)
        # Counts the rest of this turn plus the owner's next turn.
        state.active_effects.append(BuildBlock(card_id, pid, turns_remaining=2))
    elif card_id == "dysentery_outbreak":
        remove_resource(state, player, Terrain.WHEAT, 1)
        state.active_effects.append(ProductionBlock(card_id, pid, Terrain.WHEAT, rolls_remaining=2))
    elif card_id in ("resource_theft", "robber_barons_demand"):
        candidates = [tile.hex_id for tile in state.hexes.values() if tile.terrain != Terrain.DESERT]
        if candidates:
            state.robber_hex_id = rng.choice(candidates)
        thief_id = _next_player_id(state, pid)
        if thief_id != pid:
            steal_resource(state, thief_id, pid, rng)
    elif card_id == "confusing_tracks":
        state.active_effects.append(ProductionPenalty(card_id, pid, Terrain.WOOD, rolls_remaining=1))
    elif card_id == "drought":
        state.active_effects.append(ProductionPenalty(card_id, pid, Terrain.WHEAT, rolls_remaining=2))
    elif card_id == "famine_pestilence":
        state.active_effects.append(ProductionBlock(card_id, pid, None, rolls_remaining=1))
    elif card_id == "worn_out_tool":
        state.active_effects.append(CostSurcharge(card_id, pid, BuildKind.SETTLEMENT, Terrain.SHEEP))
    elif card_id == "broken_wagon_axle":
        state.active_effects.append(CostSurcharge(card_id, pid, BuildKind.ROAD, Terrain.WOOD))
    elif card_id == "poor_trade_season":
        state.active_effects.append(TradePenalty(card_id, pid, trades_left=2))
    elif card_id == "mass_exodus":
        settlements = [
            vertex.vertex_id
            for vertex in state.vertices.values()
            if vertex.structure is not None
            and vertex.structure.owner_id == pid
            and vertex.structure.kind == BuildingType.SETTLEMENT
        ]
        if settlements:
            vertex_id = rng.choice(settlements)
            state.vertices[vertex_id] = replace(state.vertices[vertex_id], structure=None)
            player.settlements_left += 1
        else:
            player.bonus_points -= 1


def update_omen_hand_award(state: GameState, player_id: int) -> None:
    if not state.config.omen_hand_award or state.omen_hand_player_id is not None:
        return
    player = state.player_by_id(player_id)
    if player is not None and player.omens_purchased >= state.config.omen_hand_award_threshold:
        state.omen_hand_player_id = player_id
        append_log(state, "omen_hand", f"{player.name} earned the Omen Hand award", player_id)


# Playing

FORAGER_CHOICES = (Terrain.WOOD, Terrain.WHEAT)
WAGON_WHEEL_CHOICES = (Terrain.WOOD, Terrain.BRICK)
PROSPECTOR_PAIRS: Dict[str, Tuple[Terrain, Terrain]] = {
    "ore_wood": (Terrain.ORE, Terrain.WOOD),
    "brick_wheat": (Terrain.BRICK, Terrain.WHEAT),
}


def _target_resource(targets: Dict[str, object], default: Terrain) -> Optional[Terrain]:
    raw = targets.get("resource", default)
    try:
        return Terrain(raw)
    except ValueError:
        return None


def play_violations(
    state: GameState, player_id: int, card_id: str, targets: Dict[str, object] | None = None
) -> List[str]:
    targets = targets or {}
    if not state.omens_enabled:
        return ["omens_disabled"]
    if state.phase != GamePhase.PLAYING:
        return ["wrong_phase"]
    if state.current_player.player_id != player_id:
        return ["not_your_turn"]
    if state.pending_robber is not None:
        return ["robber_pending"]
    player = state.current_player
    if card_id not in player.omens_hand:
        return ["card_not_in_hand"]
    if is_debuff(card_id):
        return ["cannot_play_debuff"]
    if player.has_played_omen_this_turn:
        return ["already_played"]
    if not isinstance(targets, dict):
        return ["invalid_omen_target"]

    if card_id == "strategic_settlement_spot" and player.settlements_left <= 0:
        return ["omen_precondition_failed"]
    if card_id == "master_builders_plan" and (player.settlements_left <= 0 or player.roads_left <= 0):
        return ["omen_precondition_failed"]
    if card_id == "boomtown_growth":
        has_settlement = any(
            vertex.structure is not None
            and vertex.structure.owner_id == player_id
            and vertex.structure.kind == BuildingType.SETTLEMENT
            for vertex in state.vertices.values()
        )
        if not has_settlement or player.cities_left <= 0:
            return ["omen_precondition_failed"]
    if card_id == "foragers_bounty" and _target_resource(targets, Terrain.WOOD) not in FORAGER_CHOICES:
        return ["invalid_omen_target"]
    if card_id == "sturdy_wagon_wheel" and _target_resource(targets, Terrain.WOOD) not in WAGON_WHEEL_CHOICES:
        return ["invalid_omen_target"]
    if card_id == "gold_rush" and _target_resource(targets, Terrain.ORE) not in RESOURCE_TYPES:
        return ["invalid_omen_target"]
    if card_id == "skilled_prospector":
        pair = targets.get("pair", "ore_wood")
        if not isinstance(pair, str) or pair not in PROSPECTOR_PAIRS:
            return ["invalid_omen_target"]
    if card_id == "reliable_harvest":
        hex_id = targets.get("hex_id")
        if isinstance(hex_id, bool) or not isinstance(hex_id, int):
            return ["invalid_omen_target"]
        tile = state.hexes.get(hex_id)
        if tile is None or tile.terrain == Terrain.DESERT:
            return ["invalid_omen_target"]
    return []


def can_play_omen_card(
    state: GameState, player_id: int, card_id: str, targets: Dict[str, object] | None = None
) -> bool:
    return not play_violations(state, player_id, card_id, targets)


def play_omen_card(
    state: GameState,
    player_id: int,
    card_id: str,
    targets: Dict[str, object] | None,
    rng: random.Random,
) -> bool:
    """Play a buff from hand onto ``state``; False when the play is not legal."""
    targets = targets or {}
    if not can_play_omen_card(state, player_id, card_id, targets):
        return False
    player = state.current_player
    player.omens_hand.remove(card_id)
    player.has_played_omen_this_turn = True
    state.omens_discard.append(card_id)
    append_log(state, "omen_play", f"{player.name} played {OMEN_CARDS[card_id].name}", player_id)
    _apply_buff(state, player, card_id, targets, rng)
    return True


def _apply_buff(
    state: GameState,
    player: PlayerState,
    card_id: str,
    targets: Dict[str, object],
    rng: random.Random,
) -> None:
    pid = player.player_id
    if card_id == "foragers_bounty":
        grant_resource(state, player, _target_resource(targets, Terrain.WOOD), 1)
    elif card_id == "skilled_prospector":
        for resource in PROSPECTOR_PAIRS[str(targets.get("pair", "ore_wood"))]:
            grant_resource(state, player, resource, 1)
    elif card_id == "hidden_cache":
        for _ in range(2):
            grant_resource(state, player, rng.choice(RESOURCE_TYPES), 1)
    elif card_id == "gold_rush":
        grant_resource(state, player, Terrain.ORE, 3)
        grant_resource(state, player, _target_resource(targets, Terrain.ORE), 1)
    elif card_id == "manifest_destiny":
        player.bonus_points += 2
    elif card_id == "sturdy_wagon_wheel":
        resource = _target_resource(targets, Terrain.WOOD)
        state.active_effects.append(CostDiscount(card_id, pid, BuildKind.ROAD, resource))
    elif card_id == "well_stocked_pantry":
        state.active_effects.append(DebuffShield(card_id, pid))
    elif card_id == "friendly_trade_caravan":
        state.active_effects.append(TradeRateOverride(card_id, pid))
    elif card_id == "pathfinders_insight":
        state.active_effects.append(RoadAdjacencyWaiver(card_id, pid, turns_remaining=1))
    elif card_id == "reliable_harvest":
        state.active_effects.append(
            ProductionBonus(card_id, pid, int(targets["hex_id"]), rolls_remaining=1)  # type: ignore[arg-type]
        )
    elif card_id == "strategic_settlement_spot":
        state.active_effects.append(
            CostOverride(card_id, pid, BuildKind.SETTLEMENT, {Terrain.WOOD: 1, Terrain.BRICK: 1})
        )
    elif card_id == "bountiful_pastures":
        state.active_effects.append(ProductionBoost(card_id, pid, Terrain.SHEEP, rolls_remaining=2))
    elif card_id == "master_builders_plan":
        state.active_effects.append(FreeBuild(card_id, pid, roads=1, settlements=1))
    elif card_id == "boomtown_growth":
        state.active_effects.append(FreeBuild(card_id, pid, cities=1))
    elif card_id == "robbers_regret":
        state.pending_robber = PendingRobber(source=RobberSource.OMEN)
