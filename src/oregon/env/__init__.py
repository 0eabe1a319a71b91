from .runner import GameRunner, play_game
from .specs import MatchResult, MatchSpec, StepOutput

__all__ = ["GameRunner", "MatchResult", "MatchSpec", "StepOutput", "play_game"]
