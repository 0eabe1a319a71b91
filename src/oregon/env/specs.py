from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass(frozen=True)
class MatchSpec:
    num_players: int = 4
    max_steps: int = 3000
    seed: int | None = None
    omens_enabled: bool = False

    def to_dict(self) -> Dict[str, object]:
        return {
            "num_players": self.num_players,
            "max_steps": self.max_steps,
            "seed": self.seed,
            "omens_enabled": self.omens_enabled,
        }


@dataclass(frozen=True)
class StepOutput:
    observation: Dict[str, object]
    reward: float
    terminated: bool
    truncated: bool
    info: Dict[str, object]


@dataclass
class MatchResult:
    winner: Optional[int]
    steps: int
    turns: int
    victory_points: Dict[int, int] = field(default_factory=dict)
    log_size: int = 0
    rejected_actions: List[str] = field(default_factory=list)
