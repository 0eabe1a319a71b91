from __future__ import annotations

from typing import Callable, List, Protocol

from oregon.engine.game_state import GameState
from oregon.engine.types import Action


class Policy(Protocol):
    player_id: int

    def select_action(self, state: GameState, legal_actions: List[Action]) -> Action:
        ...

    def reset(self) -> None:
        ...


class CallablePolicy:
    """Wraps a plain ``(state, player_id) -> Action`` function as a Policy."""

    def __init__(self, player_id: int, fn: Callable[[GameState, int], Action]):
        self.player_id = player_id
        self.fn = fn

    def select_action(self, state: GameState, legal_actions: List[Action]) -> Action:
        return self.fn(state, self.player_id)

    def reset(self) -> None:
        pass
