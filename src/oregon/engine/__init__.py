"""Core rules engine for Settlers of Oregon."""

from .board import Board, standard_board
from .game_state import GameConfig, GamePhase, GameState, initial_game_state, new_game
from .rules import RuleViolation, apply_action, legal_actions, validate_action
from .serialization import StateLoadError, deserialize_game_state, serialize_game_state
from .types import Action, ActionType, BuildingType, BuildKind, Terrain

__all__ = [
    "Board",
    "GameConfig",
    "GamePhase",
    "GameState",
    "RuleViolation",
    "StateLoadError",
    "Action",
    "ActionType",
    "BuildingType",
    "BuildKind",
    "Terrain",
    "apply_action",
    "deserialize_game_state",
    "initial_game_state",
    "legal_actions",
    "new_game",
    "serialize_game_state",
    "standard_board",
    "validate_action",
]
