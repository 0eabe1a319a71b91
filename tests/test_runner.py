from oregon.agents import CallablePolicy, RandomAgent
from oregon.engine.game_state import GamePhase
from oregon.engine.rules import legal_actions
from oregon.engine.types import Action, ActionType
from oregon.env import GameRunner, MatchSpec, play_game
from oregon.env.bot_match import run_matches, summarize


def test_random_agents_only_make_legal_moves():
    spec = MatchSpec(num_players=2, max_steps=400, seed=5)
    result = play_game([RandomAgent(1, seed=1), RandomAgent(2, seed=2)], spec)
    assert result.rejected_actions == []
    assert 0 < result.steps <= 400
    assert set(result.victory_points) == {1, 2}


def test_random_agents_with_omens():
    spec = MatchSpec(num_players=3, max_steps=400, seed=8, omens_enabled=True)
    agents = [RandomAgent(pid, seed=pid) for pid in (1, 2, 3)]
    result = play_game(agents, spec)
    assert result.rejected_actions == []


def test_runner_reports_violations_in_info():
    runner = GameRunner(MatchSpec(num_players=2, seed=3))
    observation = runner.reset()
    assert observation["phase"] == GamePhase.LOBBY.value

    output = runner.step(Action(ActionType.ROLL_DICE, 1))
    assert output.info["violations"] == ["wrong_phase"]
    assert not output.terminated
    assert runner.steps == 1

    output = runner.step(Action(ActionType.START_GAME, 1))
    assert output.info["violations"] == []
    assert output.observation["phase"] == GamePhase.ROLL_ORDER.value


def test_callable_policy_picks_first_action():
    picks = []

    def first(state, player_id):
        action = legal_actions(state)[0]
        picks.append(action.action_type)
        return action

    spec = MatchSpec(num_players=2, max_steps=3, seed=1)
    result = play_game([CallablePolicy(1, first), CallablePolicy(2, first)], spec)
    assert result.steps == 3
    assert picks[0] == ActionType.START_GAME


def test_bot_match_summary():
    results = run_matches(2, num_players=2, max_steps=200, seed=11, progress=False)
    summary = summarize(results, 2)
    assert len(results) == 2
    assert summary["matches"] == 2
    assert summary["rejected"] == 0
    assert sum(summary["wins"].values()) + summary["unfinished"] == 2
