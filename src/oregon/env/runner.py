from __future__ import annotations

import logging
import random
from typing import Dict, Sequence

from oregon.agents.base import Policy
from oregon.engine.game_state import GamePhase, GameState, new_game
from oregon.engine.rules import apply_action, legal_actions, validate_action
from oregon.engine.serialization import serialize_game_state
from oregon.engine.types import Action

from .specs import MatchResult, MatchSpec, StepOutput

logger = logging.getLogger(__name__)


class GameRunner:
    """Gym-style driver around the rules engine."""

    def __init__(self, spec: MatchSpec | None = None):
        self.spec = spec or MatchSpec()
        self._state: GameState | None = None
        self._rng = random.Random(self.spec.seed)
        self._steps = 0

    @property
    def state(self) -> GameState:
        if self._state is None:
            raise RuntimeError("Runner not reset")
        return self._state

    @property
    def steps(self) -> int:
        return self._steps

    def reset(self, seed: int | None = None) -> Dict[str, object]:
        if seed is not None:
            self.spec = MatchSpec(
                num_players=self.spec.num_players,
                max_steps=self.spec.max_steps,
                seed=seed,
                omens_enabled=self.spec.omens_enabled,
            )
        self._rng = random.Random(self.spec.seed)
        self._state = new_game(
            num_players=self.spec.num_players,
            seed=self.spec.seed,
            omens_enabled=self.spec.omens_enabled,
        )
        self._steps = 0
        return serialize_game_state(self._state)

    def step(self, action: Action) -> StepOutput:
        state = self.state
        violations = validate_action(state, action)
        next_state = apply_action(state, action, rng=self._rng)
        self._steps += 1
        self._state = next_state

        terminated = next_state.phase == GamePhase.ENDED
        reward = 0.0
        if terminated:
            reward = 1.0 if next_state.winner == action.player_id else -1.0
        return StepOutput(
            observation=serialize_game_state(next_state),
            reward=reward,
            terminated=terminated,
            truncated=self._steps >= self.spec.max_steps,
            info={"violations": [violation.reason for violation in violations]},
        )


def play_game(policies: Sequence[Policy], spec: MatchSpec | None = None) -> MatchResult:
    """Let ``policies`` (one per seat, ordered by player id) play a full game."""
    spec = spec or MatchSpec(num_players=len(policies))
    runner = GameRunner(spec)
    runner.reset()
    by_player = {policy.player_id: policy for policy in policies}
    for policy in policies:
        policy.reset()

    rejected = []
    while True:
        state = runner.state
        candidates = legal_actions(state)
        if not candidates:
            break
        acting = state.current_player.player_id
        action = by_player[acting].select_action(state, candidates)
        output = runner.step(action)
        if output.info["violations"]:
            rejected.extend(output.info["violations"])  # type: ignore[arg-type]
        if output.terminated or output.truncated:
            break

    final = runner.state
    if final.winner is None:
        logger.info("game stopped after %d steps without a winner", runner.steps)
    else:
        logger.info("player %s won after %d steps", final.winner, runner.steps)
    return MatchResult(
        winner=final.winner,
        steps=runner.steps,
        turns=final.turn_number,
        victory_points={player.player_id: player.victory_points for player in final.players},
        log_size=len(final.log),
        rejected_actions=rejected,
    )
