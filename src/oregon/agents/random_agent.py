"""Random agent for baseline comparison."""

from __future__ import annotations

import random
from typing import List

from oregon.engine.game_state import GameState
from oregon.engine.types import Action, ActionType


class RandomAgent:
    """A random agent that selects random legal actions.

    Bank trades are only picked when nothing else but ending the turn is
    available, which keeps self-play games from stalling in trade loops.
    """

    def __init__(self, player_id: int, seed: int | None = None):
        self.player_id = player_id
        self.rng = random.Random(seed)

    def select_action(self, state: GameState, legal_actions: List[Action]) -> Action:
        """Select a random legal action."""
        if not legal_actions:
            raise ValueError("No legal actions available")

        preferred = [
            action
            for action in legal_actions
            if action.action_type not in (ActionType.TRADE_BANK, ActionType.END_TURN)
        ]
        if preferred:
            return self.rng.choice(preferred)
        trades = [a for a in legal_actions if a.action_type == ActionType.TRADE_BANK]
        if trades and self.rng.random() < 0.5:
            return self.rng.choice(trades)
        return self.rng.choice(legal_actions)

    def reset(self) -> None:
        """Reset agent state for new episode."""
        pass
