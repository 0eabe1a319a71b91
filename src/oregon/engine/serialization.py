"""
Snapshot serialization: GameState to plain JSON-compatible data and back.
"""
from __future__ import annotations

from dataclasses import fields
from typing import Any, Dict, List

from . import omens
from .game_state import (
    GameConfig,
    GamePhase,
    GameState,
    LogEntry,
    PendingRobber,
    PlayerState,
    RobberSource,
    RobberStep,
)
from .types import BuildingType, BuildKind, Edge, Harbor, HexTile, Structure, Terrain, Vertex

EFFECT_TYPES = {
    cls.__name__: cls
    for cls in (
        omens.CostOverride,
        omens.CostSurcharge,
        omens.CostDiscount,
        omens.FreeBuild,
        omens.BuildBlock,
        omens.RoadAdjacencyWaiver,
        omens.ProductionBonus,
        omens.ProductionBoost,
        omens.ProductionPenalty,
        omens.ProductionBlock,
        omens.TradeRateOverride,
        omens.TradePenalty,
        omens.DebuffShield,
    )
}


class StateLoadError(ValueError):
    """Raised when a stored snapshot cannot be turned back into a GameState."""


def _resources_out(resources: Dict[Terrain, int]) -> Dict[str, int]:
    return {terrain.value: count for terrain, count in resources.items()}


def _resources_in(data: Dict[str, int]) -> Dict[Terrain, int]:
    return {Terrain(key): int(count) for key, count in data.items()}


def serialize_hex(tile: HexTile) -> Dict[str, Any]:
    return {
        "hex_id": tile.hex_id,
        "axial": list(tile.axial),
        "terrain": tile.terrain.value,
        "number": tile.number,
    }


def serialize_vertex(vertex: Vertex) -> Dict[str, Any]:
    structure = None
    if vertex.structure is not None:
        structure = {"owner_id": vertex.structure.owner_id, "kind": vertex.structure.kind.value}
    return {
        "vertex_id": vertex.vertex_id,
        "coord": list(vertex.coord),
        "hex_ids": list(vertex.hex_ids),
        "edge_ids": list(vertex.edge_ids),
        "structure": structure,
    }


def serialize_edge(edge: Edge) -> Dict[str, Any]:
    return {
        "edge_id": edge.edge_id,
        "vertex_a": edge.vertex_a,
        "vertex_b": edge.vertex_b,
        "hex_ids": list(edge.hex_ids),
        "owner_id": edge.owner_id,
    }


def serialize_player(player: PlayerState) -> Dict[str, Any]:
    return {
        "player_id": player.player_id,
        "name": player.name,
        "color": player.color,
        "resources": _resources_out(player.resources),
        "settlements_left": player.settlements_left,
        "cities_left": player.cities_left,
        "roads_left": player.roads_left,
        "victory_points": player.victory_points,
        "bonus_points": player.bonus_points,
        "omens_hand": list(player.omens_hand),
        "omens_purchased": player.omens_purchased,
        "has_drawn_omen_this_turn": player.has_drawn_omen_this_turn,
        "has_played_omen_this_turn": player.has_played_omen_this_turn,
    }


def serialize_effect(effect: omens.OmenEffect) -> Dict[str, Any]:
    result: Dict[str, Any] = {"type": type(effect).__name__}
    for item in fields(effect):
        value = getattr(effect, item.name)
        if isinstance(value, (Terrain, BuildKind)):
            value = value.value
        elif isinstance(value, dict):
            value = _resources_out(value)
        result[item.name] = value
    return result


def serialize_game_state(state: GameState) -> Dict[str, Any]:
    pending = None
    if state.pending_robber is not None:
        pending = {
            "source": state.pending_robber.source.value,
            "step": state.pending_robber.step.value,
            "hex_id": state.pending_robber.hex_id,
            "candidates": list(state.pending_robber.candidates),
        }
    return {
        "config": state.config.to_dict(),
        "phase": state.phase.value,
        "hexes": [serialize_hex(tile) for tile in state.hexes.values()],
        "vertices": [serialize_vertex(vertex) for vertex in state.vertices.values()],
        "edges": [serialize_edge(edge) for edge in state.edges.values()],
        "harbors": [
            {
                "harbor_id": harbor.harbor_id,
                "edge_id": harbor.edge_id,
                "vertex_ids": list(harbor.vertex_ids),
                "resource": None if harbor.resource is None else harbor.resource.value,
            }
            for harbor in state.harbors
        ],
        "players": [serialize_player(player) for player in state.players],
        "bank": None if state.bank is None else _resources_out(state.bank),
        "robber_hex_id": state.robber_hex_id,
        "current_player_index": state.current_player_index,
        "turn_order": list(state.turn_order),
        "turn_number": state.turn_number,
        "setup_placements": state.setup_placements,
        "setup_pending_vertex_id": state.setup_pending_vertex_id,
        "roll_order_groups": [list(group) for group in state.roll_order_groups],
        "roll_order_rolls": {str(k): v for k, v in state.roll_order_rolls.items()},
        "last_dice": None if state.last_dice is None else list(state.last_dice),
        "last_resource_flash": {
            str(index): [terrain.value for terrain in terrains]
            for index, terrains in state.last_resource_flash.items()
        },
        "last_resource_hex_ids": list(state.last_resource_hex_ids),
        "pending_robber": pending,
        "longest_road_player_id": state.longest_road_player_id,
        "omen_hand_player_id": state.omen_hand_player_id,
        "omens_deck": None if state.omens_deck is None else list(state.omens_deck),
        "omens_discard": list(state.omens_discard),
        "active_effects": [serialize_effect(effect) for effect in state.active_effects],
        "winner": state.winner,
        "log": [
            {
                "entry_id": entry.entry_id,
                "entry_type": entry.entry_type,
                "message": entry.message,
                "player_id": entry.player_id,
            }
            for entry in state.log
        ],
    }


def deserialize_vertex(data: Dict[str, Any]) -> Vertex:
    structure = data.get("structure")
    return Vertex(
        vertex_id=int(data["vertex_id"]),
        coord=tuple(data["coord"]),
        hex_ids=tuple(data.get("hex_ids", [])),
        edge_ids=tuple(data.get("edge_ids", [])),
        structure=None
        if structure is None
        else Structure(int(structure["owner_id"]), BuildingType(structure["kind"])),
    )


def deserialize_edge(data: Dict[str, Any]) -> Edge:
    return Edge(
        edge_id=int(data["edge_id"]),
        vertex_a=int(data["vertex_a"]),
        vertex_b=int(data["vertex_b"]),
        hex_ids=tuple(data.get("hex_ids", [])),
        owner_id=data.get("owner_id"),
    )


def deserialize_player(data: Dict[str, Any]) -> PlayerState:
    return PlayerState(
        player_id=int(data["player_id"]),
        name=data["name"],
        color=data["color"],
        resources=_resources_in(data["resources"]),
        settlements_left=data.get("settlements_left", 5),
        cities_left=data.get("cities_left", 4),
        roads_left=data.get("roads_left", 15),
        victory_points=data.get("victory_points", 0),
        bonus_points=data.get("bonus_points", 0),
        omens_hand=list(data.get("omens_hand", [])),
        omens_purchased=data.get("omens_purchased", 0),
        has_drawn_omen_this_turn=data.get("has_drawn_omen_this_turn", False),
        has_played_omen_this_turn=data.get("has_played_omen_this_turn", False),
    )


def deserialize_effect(data: Dict[str, Any]) -> omens.OmenEffect:
    values = dict(data)
    cls = EFFECT_TYPES[values.pop("type")]
    for key in ("resource",):
        if values.get(key) is not None:
            values[key] = Terrain(values[key])
    if "kind" in values:
        values["kind"] = BuildKind(values["kind"])
    if "cost" in values:
        values["cost"] = _resources_in(values["cost"])
    return cls(**values)


def _deserialize(data: Dict[str, Any]) -> GameState:
    hexes: List[HexTile] = [
        HexTile(
            hex_id=int(item["hex_id"]),
            axial=tuple(item["axial"]),
            terrain=Terrain(item["terrain"]),
            number=item.get("number"),
        )
        for item in data["hexes"]
    ]
    players = [deserialize_player(item) for item in data["players"]]
    if not hexes or not players:
        raise StateLoadError("snapshot has no hexes or no players")

    pending_data = data.get("pending_robber")
    pending = None
    if pending_data is not None:
        pending = PendingRobber(
            source=RobberSource(pending_data["source"]),
            step=RobberStep(pending_data["step"]),
            hex_id=pending_data.get("hex_id"),
            candidates=tuple(pending_data.get("candidates", [])),
        )
    last_dice = data.get("last_dice")
    bank = data.get("bank")
    deck = data.get("omens_deck")

    return GameState(
        config=GameConfig(**data.get("config", {})),
        phase=GamePhase(data["phase"]),
        hexes={tile.hex_id: tile for tile in hexes},
        vertices={v.vertex_id: v for v in (deserialize_vertex(item) for item in data["vertices"])},
        edges={e.edge_id: e for e in (deserialize_edge(item) for item in data["edges"])},
        harbors=tuple(
            Harbor(
                harbor_id=int(item["harbor_id"]),
                edge_id=int(item["edge_id"]),
                vertex_ids=tuple(item["vertex_ids"]),
                resource=None if item.get("resource") is None else Terrain(item["resource"]),
            )
            for item in data.get("harbors", [])
        ),
        players=players,
        bank=None if bank is None else _resources_in(bank),
        robber_hex_id=int(data["robber_hex_id"]),
        current_player_index=data.get("current_player_index", 0),
        turn_order=list(data.get("turn_order", range(len(players)))),
        turn_number=data.get("turn_number", 0),
        setup_placements=data.get("setup_placements", 0),
        setup_pending_vertex_id=data.get("setup_pending_vertex_id"),
        roll_order_groups=[list(group) for group in data.get("roll_order_groups", [])],
        roll_order_rolls={int(k): v for k, v in data.get("roll_order_rolls", {}).items()},
        last_dice=None if last_dice is None else (int(last_dice[0]), int(last_dice[1])),
        last_resource_flash={
            int(index): [Terrain(value) for value in terrains]
            for index, terrains in data.get("last_resource_flash", {}).items()
        },
        last_resource_hex_ids=list(data.get("last_resource_hex_ids", [])),
        pending_robber=pending,
        longest_road_player_id=data.get("longest_road_player_id"),
        omen_hand_player_id=data.get("omen_hand_player_id"),
        omens_deck=None if deck is None else list(deck),
        omens_discard=list(data.get("omens_discard", [])),
        active_effects=[deserialize_effect(item) for item in data.get("active_effects", [])],
        winner=data.get("winner"),
        log=tuple(
            LogEntry(item["entry_id"], item["entry_type"], item["message"], item.get("player_id"))
            for item in data.get("log", [])
        ),
    )


def deserialize_game_state(data: Dict[str, Any]) -> GameState:
    """
    Rebuild a GameState from ``serialize_game_state`` output.

    Raises StateLoadError if the snapshot is missing required parts or
    carries values the engine does not know.
    """
    try:
        return _deserialize(data)
    except StateLoadError:
        raise
    except (KeyError, TypeError, ValueError) as exc:
        raise StateLoadError(f"malformed game snapshot: {exc}") from exc
