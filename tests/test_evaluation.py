"""
Tests for the evaluation harness and bundled agents.
"""

import json
from pathlib import Path

import pytest

from catch_zone.catch_core.env_gym import CatchZoneEnv
from catch_zone.evaluation.run_eval import (
    EvalResult,
    evaluate_agent,
    evaluate_single_seed,
    load_agent,
    load_seed_bank,
    save_results,
    summarize,
)

CONTESTANTS = Path(__file__).resolve().parent.parent / "contestants"


@pytest.fixture
def short_env(config_factory):
    """Environment capped at 30 simulated seconds per episode."""
    env = CatchZoneEnv(config=config_factory({"caps": {"max_episode_seconds": 30}}))
    yield env
    env.close()


@pytest.fixture
def tracker():
    return load_agent(str(CONTESTANTS / "baseline_tracker"))


class TestSeedBank:

    def test_default_seed_bank(self):
        seeds = load_seed_bank()
        assert len(seeds) > 0
        assert len(set(seeds)) == len(seeds)
        assert all(isinstance(s, int) for s in seeds)

    def test_custom_seed_bank(self, tmp_path):
        path = tmp_path / "seeds.json"
        path.write_text(json.dumps({"seeds": [1, 2, 3]}))
        assert load_seed_bank(str(path)) == [1, 2, 3]


class TestLoadAgent:

    def test_load_from_directory(self, tracker):
        assert callable(tracker)
        assert tracker.name == "baseline_tracker"
        assert tracker.reset is not None

    def test_load_from_file(self):
        act = load_agent(str(CONTESTANTS / "team_template" / "agent.py"))
        assert callable(act)

    def test_missing_agent(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_agent(str(tmp_path / "nowhere"))

    def test_module_without_entry_point(self, tmp_path):
        (tmp_path / "agent.py").write_text("VALUE = 1\n")
        with pytest.raises(AttributeError):
            load_agent(str(tmp_path))

    def test_act_function_module(self, tmp_path):
        (tmp_path / "agent.py").write_text("def act(obs):\n    return 0\n")
        act = load_agent(str(tmp_path))
        assert act({}) == 0


class TestEvaluate:

    def test_single_seed(self, tracker, short_env):
        result = evaluate_single_seed(tracker, seed=42, record_actions=True, env=short_env)

        assert result.seed == 42
        assert result.steps > 0
        assert len(result.actions) == result.steps
        assert all(a in (0, 1, 2) for a in result.actions)
        assert result.final_level >= 1
        assert result.termination_reason in ("hazard_caught", "miss_limit", "truncated")

    def test_deterministic_per_seed(self, tracker, short_env):
        first = evaluate_single_seed(tracker, seed=7, record_actions=True, env=short_env)
        second = evaluate_single_seed(tracker, seed=7, record_actions=True, env=short_env)

        assert first.final_score == second.final_score
        assert first.actions == second.actions

    def test_tracker_scores(self, tracker, short_env):
        result = evaluate_single_seed(tracker, seed=2024, env=short_env)
        assert result.final_score > 0

    def test_summary(self, tracker, short_env):
        summary = evaluate_agent(tracker, seeds=[7, 42], verbose=False, env=short_env)

        scores = [r.final_score for r in summary.results]
        assert len(summary.results) == 2
        assert summary.min_score == min(scores)
        assert summary.max_score == max(scores)
        assert summary.mean_score == pytest.approx(sum(scores) / 2)

    def test_save_results(self, tracker, short_env, tmp_path):
        summary = evaluate_agent(tracker, seeds=[42], verbose=False, env=short_env)
        output = tmp_path / "results.json"
        save_results(summary, "baseline_tracker", str(output))

        data = json.loads(output.read_text())
        assert data["agent"] == "baseline_tracker"
        assert data["results"][0]["seed"] == 42
        assert "actions" not in data["results"][0]

    def test_episode_stats(self, tracker, short_env):
        result = evaluate_single_seed(tracker, seed=123, env=short_env)
        points = {"apple": 100, "pear": 150, "orange": 200}

        assert result.catches * min(points.values()) <= result.final_score
        assert result.final_score <= result.catches * max(points.values())
        assert result.sim_seconds <= 30.0 + 0.2


def make_result(seed, score, level, reason):
    return EvalResult(
        seed=seed, final_score=score, final_level=level, catches=score // 100,
        misses=0, steps=10, sim_seconds=1.0, termination_reason=reason, elapsed_time=0.0,
    )


class TestSummarize:

    def test_statistics(self):
        summary = summarize([
            make_result(1, 100, 1, "miss_limit"),
            make_result(2, 300, 3, "hazard_caught"),
            make_result(3, 200, 2, "miss_limit"),
        ])

        assert summary.mean_score == pytest.approx(200.0)
        assert summary.median_score == pytest.approx(200.0)
        assert summary.min_score == 100
        assert summary.max_score == 300
        assert summary.mean_level == pytest.approx(2.0)
        assert summary.max_level == 3
        assert summary.mean_catches == pytest.approx(2.0)
        assert summary.endings == {"miss_limit": 2, "hazard_caught": 1}
