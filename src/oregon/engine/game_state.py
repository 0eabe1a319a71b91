from __future__ import annotations

import random
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Dict, List, Optional, Sequence, Tuple

from .board import Board, standard_board
from .types import (
    RESOURCE_TYPES,
    Action,
    BuildingType,
    Edge,
    Harbor,
    HexTile,
    ResourceBank,
    Terrain,
    Vertex,
)

if TYPE_CHECKING:
    from .omens import OmenEffect


class GamePhase(str, Enum):
    LOBBY = "lobby"
    ROLL_ORDER = "roll_order"
    SETUP = "setup"
    PLAYING = "playing"
    ENDED = "ended"


class RobberSource(str, Enum):
    DICE = "dice"
    OMEN = "omen"


class RobberStep(str, Enum):
    CHOOSE_HEX = "choose_hex"
    CHOOSE_VICTIM = "choose_victim"


MAX_PLAYERS = 4
MIN_PLAYERS = 2
DEFAULT_BANK_COUNT = 19
SETTLEMENT_PIECES = 5
CITY_PIECES = 4
ROAD_PIECES = 15

PLAYER_COLORS: Dict[int, str] = {
    1: "#e53935",
    2: "#1e88e5",
    3: "#43a047",
    4: "#fb8c00",
}


@dataclass(frozen=True)
class GameConfig:
    num_players: int = 4
    victory_points_to_win: int = 10
    longest_road_min: int = 6
    omens_enabled: bool = False
    omen_hand_award: bool = True
    omen_hand_award_threshold: int = 5
    max_omens_hand: int = 5
    roll_for_order: bool = True
    # None pays every claim in full. A count (e.g. DEFAULT_BANK_COUNT) caps each resource
    # and turns on the shortage rule: a short resource pays nobody on that roll.
    bank_supply: Optional[int] = None

    def __post_init__(self) -> None:
        if not MIN_PLAYERS <= self.num_players <= MAX_PLAYERS:
            raise ValueError(
                f"num_players must be between {MIN_PLAYERS} and {MAX_PLAYERS}, got {self.num_players}"
            )

    def to_dict(self) -> Dict[str, object]:
        return {
            "num_players": self.num_players,
            "victory_points_to_win": self.victory_points_to_win,
            "longest_road_min": self.longest_road_min,
            "omens_enabled": self.omens_enabled,
            "omen_hand_award": self.omen_hand_award,
            "omen_hand_award_threshold": self.omen_hand_award_threshold,
            "max_omens_hand": self.max_omens_hand,
            "roll_for_order": self.roll_for_order,
            "bank_supply": self.bank_supply,
        }


@dataclass(frozen=True)
class LogEntry:
    entry_id: int
    entry_type: str
    message: str
    player_id: Optional[int] = None


@dataclass(frozen=True)
class PendingRobber:
    """Robber sub-state: pick a hex, then (maybe) a victim on it."""

    source: RobberSource
    step: RobberStep = RobberStep.CHOOSE_HEX
    hex_id: Optional[int] = None
    candidates: Tuple[int, ...] = ()


@dataclass
class PlayerState:
    player_id: int
    name: str
    color: str
    resources: ResourceBank
    settlements_left: int = SETTLEMENT_PIECES
    cities_left: int = CITY_PIECES
    roads_left: int = ROAD_PIECES
    victory_points: int = 0
    bonus_points: int = 0
    omens_hand: List[str] = field(default_factory=list)
    omens_purchased: int = 0
    has_drawn_omen_this_turn: bool = False
    has_played_omen_this_turn: bool = False

    def total_resources(self) -> int:
        return sum(self.resources.values())


@dataclass
class GameState:
    config: GameConfig
    phase: GamePhase
    hexes: Dict[int, HexTile]
    vertices: Dict[int, Vertex]
    edges: Dict[int, Edge]
    harbors: Tuple[Harbor, ...]
    players: List[PlayerState]
    bank: Optional[ResourceBank]
    robber_hex_id: int
    current_player_index: int = 0
    turn_order: List[int] = field(default_factory=list)
    turn_number: int = 0
    setup_placements: int = 0
    setup_pending_vertex_id: Optional[int] = None
    roll_order_groups: List[List[int]] = field(default_factory=list)
    roll_order_rolls: Dict[int, int] = field(default_factory=dict)
    last_dice: Optional[Tuple[int, int]] = None
    last_resource_flash: Dict[int, List[Terrain]] = field(default_factory=dict)
    last_resource_hex_ids: List[int] = field(default_factory=list)
    pending_robber: Optional[PendingRobber] = None
    longest_road_player_id: Optional[int] = None
    omen_hand_player_id: Optional[int] = None
    omens_deck: Optional[List[str]] = None
    omens_discard: List[str] = field(default_factory=list)
    active_effects: List["OmenEffect"] = field(default_factory=list)
    winner: Optional[int] = None
    log: Tuple[LogEntry, ...] = ()

    @property
    def current_player(self) -> PlayerState:
        return self.players[self.current_player_index]

    @property
    def omens_enabled(self) -> bool:
        return self.omens_deck is not None

    def player_index(self, player_id: int) -> Optional[int]:
        for index, player in enumerate(self.players):
            if player.player_id == player_id:
                return index
        return None

    def player_by_id(self, player_id: int) -> Optional[PlayerState]:
        index = self.player_index(player_id)
        return None if index is None else self.players[index]

    def legal_actions(self) -> List[Action]:
        from .rules import legal_actions

        return legal_actions(self)

    def apply(self, action: Action, rng: random.Random | None = None) -> "GameState":
        from .rules import apply_action

        return apply_action(self, action, rng=rng)


def _empty_resources() -> ResourceBank:
    return {resource: 0 for resource in RESOURCE_TYPES}


def _full_bank(count: Optional[int]) -> Optional[ResourceBank]:
    if count is None:
        return None
    return {resource: count for resource in RESOURCE_TYPES}


def _clone_resources(resources: ResourceBank) -> ResourceBank:
    return {key: int(value) for key, value in resources.items()}


def make_player(player_id: int, name: str | None = None) -> PlayerState:
    return PlayerState(
        player_id=player_id,
        name=name or f"Player {player_id}",
        color=PLAYER_COLORS[player_id],
        resources=_empty_resources(),
    )


def initial_game_state(
    board: Board,
    config: GameConfig | None = None,
    player_names: Sequence[str] | None = None,
    rng: random.Random | None = None,
) -> GameState:
    """Create a lobby-phase game on ``board``.

    The omens deck is shuffled with ``rng`` when the variant is enabled.
    """
    if config is None:
        config = GameConfig()
    names = list(player_names or [])
    players = [
        make_player(pid, names[pid - 1] if pid - 1 < len(names) else None)
        for pid in range(1, config.num_players + 1)
    ]

    omens_deck = None
    if config.omens_enabled:
        from .omens import create_omens_deck

        omens_deck = create_omens_deck(rng or random.Random())

    return GameState(
        config=config,
        phase=GamePhase.LOBBY,
        hexes=dict(board.hexes),
        vertices=dict(board.topology.vertices),
        edges=dict(board.topology.edges),
        harbors=board.harbors,
        players=players,
        bank=_full_bank(config.bank_supply),
        robber_hex_id=board.desert_hex_id(),
        turn_order=list(range(len(players))),
        omens_deck=omens_deck,
    )


def new_game(
    num_players: int = 4,
    seed: int | None = None,
    omens_enabled: bool = False,
    **config_overrides: object,
) -> GameState:
    rng = random.Random(seed)
    config = GameConfig(num_players=num_players, omens_enabled=omens_enabled, **config_overrides)
    return initial_game_state(standard_board(seed=seed), config=config, rng=rng)


def add_player(state: GameState, name: str | None = None) -> GameState:
    if state.phase != GamePhase.LOBBY or len(state.players) >= MAX_PLAYERS:
        return state
    next_state = clone_state(state)
    player = make_player(len(next_state.players) + 1, name)
    next_state.players.append(player)
    next_state.turn_order = list(range(len(next_state.players)))
    next_state.config = GameConfig(**{**state.config.to_dict(), "num_players": len(next_state.players)})
    return next_state


def clone_player(player: PlayerState) -> PlayerState:
    return PlayerState(
        player_id=player.player_id,
        name=player.name,
        color=player.color,
        resources=_clone_resources(player.resources),
        settlements_left=player.settlements_left,
        cities_left=player.cities_left,
        roads_left=player.roads_left,
        victory_points=player.victory_points,
        bonus_points=player.bonus_points,
        omens_hand=list(player.omens_hand),
        omens_purchased=player.omens_purchased,
        has_drawn_omen_this_turn=player.has_drawn_omen_this_turn,
        has_played_omen_this_turn=player.has_played_omen_this_turn,
    )


def clone_state(state: GameState) -> GameState:
    """Copy-on-write clone: containers are copied, frozen values are shared."""
    return GameState(
        config=state.config,
        phase=state.phase,
        hexes=state.hexes,
        vertices=dict(state.vertices),
        edges=dict(state.edges),
        harbors=state.harbors,
        players=[clone_player(player) for player in state.players],
        bank=None if state.bank is None else _clone_resources(state.bank),
        robber_hex_id=state.robber_hex_id,
        current_player_index=state.current_player_index,
        turn_order=list(state.turn_order),
        turn_number=state.turn_number,
        setup_placements=state.setup_placements,
        setup_pending_vertex_id=state.setup_pending_vertex_id,
        roll_order_groups=[list(group) for group in state.roll_order_groups],
        roll_order_rolls=dict(state.roll_order_rolls),
        last_dice=state.last_dice,
        last_resource_flash={k: list(v) for k, v in state.last_resource_flash.items()},
        last_resource_hex_ids=list(state.last_resource_hex_ids),
        pending_robber=state.pending_robber,
        longest_road_player_id=state.longest_road_player_id,
        omen_hand_player_id=state.omen_hand_player_id,
        omens_deck=None if state.omens_deck is None else list(state.omens_deck),
        omens_discard=list(state.omens_discard),
        active_effects=list(state.active_effects),
        winner=state.winner,
        log=state.log,
    )


def grant_resource(state: GameState, player: PlayerState, resource: Terrain, amount: int) -> int:
    """Move up to ``amount`` units from the bank to ``player``; returns units moved."""
    if amount <= 0:
        return 0
    if state.bank is not None:
        amount = min(amount, state.bank[resource])
        state.bank[resource] -= amount
    player.resources[resource] += amount
    return amount


def remove_resource(state: GameState, player: PlayerState, resource: Terrain, amount: int) -> int:
    """Return up to ``amount`` units from ``player`` to the bank; returns units moved."""
    amount = min(amount, player.resources[resource])
    if amount <= 0:
        return 0
    player.resources[resource] -= amount
    if state.bank is not None:
        state.bank[resource] += amount
    return amount


def structure_points(state: GameState, player_id: int) -> int:
    points = 0
    for vertex in state.vertices.values():
        if vertex.structure is None or vertex.structure.owner_id != player_id:
            continue
        points += 2 if vertex.structure.kind == BuildingType.CITY else 1
    return points


def refresh_victory_points(state: GameState) -> None:
    for player in state.players:
        points = structure_points(state, player.player_id) + player.bonus_points
        if state.longest_road_player_id == player.player_id:
            points += 2
        if state.omen_hand_player_id == player.player_id:
            points += 2
        player.victory_points = max(0, points)


def append_log(state: GameState, entry_type: str, message: str, player_id: int | None = None) -> None:
    state.log = state.log + (LogEntry(len(state.log), entry_type, message, player_id),)
