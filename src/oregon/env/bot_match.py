"""Batch self-play between random bots, with a short summary at the end."""

from __future__ import annotations

import argparse
import logging
from typing import Dict, List

import numpy as np
from tqdm import tqdm

from oregon.agents.random_agent import RandomAgent
from oregon.utils.repro import seed_everything, spawn_seeds

from .runner import play_game
from .specs import MatchResult, MatchSpec


def run_matches(
    num_matches: int,
    num_players: int = 4,
    seed: int = 0,
    omens_enabled: bool = False,
    max_steps: int = 3000,
    progress: bool = True,
) -> List[MatchResult]:
    seed_everything(seed)
    results: List[MatchResult] = []
    for game_seed in tqdm(spawn_seeds(seed, num_matches), desc="matches", disable=not progress):
        agents = [RandomAgent(player_id=pid, seed=game_seed + pid) for pid in range(1, num_players + 1)]
        spec = MatchSpec(
            num_players=num_players,
            max_steps=max_steps,
            seed=game_seed,
            omens_enabled=omens_enabled,
        )
        results.append(play_game(agents, spec))
    return results


def summarize(results: List[MatchResult], num_players: int) -> Dict[str, object]:
    wins = {pid: 0 for pid in range(1, num_players + 1)}
    for result in results:
        if result.winner is not None:
            wins[result.winner] += 1
    steps = np.array([result.steps for result in results], dtype=float)
    turns = np.array([result.turns for result in results], dtype=float)
    return {
        "matches": len(results),
        "wins": wins,
        "unfinished": sum(1 for result in results if result.winner is None),
        "rejected": sum(len(result.rejected_actions) for result in results),
        "mean_steps": float(steps.mean()) if len(steps) else 0.0,
        "mean_turns": float(turns.mean()) if len(turns) else 0.0,
    }


def main() -> None:
    parser = argparse.ArgumentParser(description="Random bot matches for Settlers of Oregon")
    parser.add_argument("--matches", type=int, default=5, help="Number of games to play")
    parser.add_argument("--players", type=int, default=4, choices=[2, 3, 4])
    parser.add_argument("--seed", type=int, default=0)
    parser.add_argument("--omens", action="store_true", help="Play with Oregon's Omens")
    parser.add_argument("--max-steps", type=int, default=3000)
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)
    results = run_matches(
        args.matches,
        num_players=args.players,
        seed=args.seed,
        omens_enabled=args.omens,
        max_steps=args.max_steps,
    )
    summary = summarize(results, args.players)

    print("=" * 50)
    print(f"Matches played: {summary['matches']} (unfinished: {summary['unfinished']})")
    print(f"Average length: {summary['mean_steps']:.0f} steps, {summary['mean_turns']:.0f} turns")
    for pid, count in summary["wins"].items():  # type: ignore[union-attr]
        rate = count / max(1, summary["matches"]) * 100  # type: ignore[operator]
        print(f"  Player {pid}: {count} wins ({rate:.1f}%)")


if __name__ == "__main__":
    main()
