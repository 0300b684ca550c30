"""
Evaluation Harness
==================

Plays a basket agent through every seed of the seed bank and reports how
far it got: final score and level, catches, misses and what ended each run.

Usage:
    python -m catch_zone.evaluation.run_eval --agent contestants/baseline_tracker
"""

from __future__ import annotations

import argparse
import importlib.util
import json
import os
import sys
import time
from collections import Counter
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional
import numpy as np

from catch_zone.catch_core.env_gym import CatchZoneEnv

TRUNCATED = "truncated"


@dataclass
class EvalResult:
    """One episode on one seed."""
    seed: int
    final_score: int
    final_level: int
    catches: int
    misses: int
    steps: int
    sim_seconds: float
    termination_reason: str
    elapsed_time: float
    actions: Optional[List[int]] = None


@dataclass
class EvalSummary:
    """Aggregate over the seed bank."""
    mean_score: float
    std_score: float
    min_score: int
    max_score: int
    median_score: float
    mean_level: float
    max_level: int
    mean_catches: float
    endings: Dict[str, int]
    total_time: float
    results: List[EvalResult] = field(default_factory=list)


@dataclass
class LoadedAgent:
    """
    An agent module resolved to its entry points.

    Callable like the underlying ``act`` so it can be handed straight to
    the evaluation functions.
    """
    name: str
    act: Callable[[Dict[str, np.ndarray]], int]
    reset: Optional[Callable[[], None]] = None

    def __call__(self, obs: Dict[str, np.ndarray]) -> int:
        return self.act(obs)


def load_seed_bank(path: Optional[str] = None) -> List[int]:
    """
    Load the evaluation seed bank.

    Args:
        path: Path to a JSON file with a "seeds" list. Uses the bundled
            seed_bank.json if None.

    Returns:
        List of seeds.
    """
    if path is None:
        path = os.path.join(os.path.dirname(__file__), "seed_bank.json")

    with open(path, "r", encoding="utf-8") as f:
        return [int(seed) for seed in json.load(f)["seeds"]]


def load_agent(agent_path: str) -> LoadedAgent:
    """
    Import an agent from a directory (containing agent.py) or a file.

    The module is searched, in order, for a ``create_agent`` factory, a
    ``CatchAgent`` class and a module-level ``act`` function.

    Raises:
        FileNotFoundError: If no agent file exists at the path.
        ImportError: If the file cannot be imported.
        AttributeError: If the module has none of the entry points.
    """
    agent_path = Path(agent_path)
    agent_file = agent_path / "agent.py" if agent_path.is_dir() else agent_path
    if not agent_file.exists():
        raise FileNotFoundError(f"Agent file not found: {agent_file}")

    name = agent_file.parent.name if agent_file.name == "agent.py" else agent_file.stem
    module_name = f"catch_agent_{name}"
    spec = importlib.util.spec_from_file_location(module_name, agent_file)
    if spec is None or spec.loader is None:
        raise ImportError(f"Failed to load agent module from {agent_file}")

    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    spec.loader.exec_module(module)

    if hasattr(module, "create_agent"):
        instance = module.create_agent()
    elif hasattr(module, "CatchAgent"):
        instance = module.CatchAgent()
    elif hasattr(module, "act"):
        return LoadedAgent(name=name, act=module.act)
    else:
        raise AttributeError(
            "Agent module must define 'create_agent', a 'CatchAgent' class "
            "or a standalone 'act' function"
        )

    if not hasattr(instance, "act"):
        raise AttributeError(f"{type(instance).__name__} must have an 'act' method")
    return LoadedAgent(name=name, act=instance.act, reset=getattr(instance, "reset", None))


def evaluate_single_seed(
    agent_fn: Callable,
    seed: int,
    record_actions: bool = False,
    verbose: bool = False,
    env: Optional[CatchZoneEnv] = None
) -> EvalResult:
    """
    Play one episode.

    Args:
        agent_fn: Callable (obs) -> lane index. A ``reset`` attribute, if
            present, is called before the episode.
        seed: Random seed for the episode.
        record_actions: If True, keep every action in the result.
        verbose: If True, print a one-line result.
        env: Environment to reuse. A fresh one is created and closed if None.

    Returns:
        EvalResult for this seed.
    """
    owns_env = env is None
    if env is None:
        env = CatchZoneEnv()

    reset = getattr(agent_fn, "reset", None)
    if callable(reset):
        reset()

    actions: Optional[List[int]] = [] if record_actions else None
    steps = 0
    started = time.time()

    try:
        obs, info = env.reset(seed=seed)
        terminated = truncated = False
        while not (terminated or truncated):
            action = int(agent_fn(obs))
            if actions is not None:
                actions.append(action)
            obs, _, terminated, truncated, info = env.step(action)
            steps += 1
    finally:
        if owns_env:
            env.close()

    result = EvalResult(
        seed=seed,
        final_score=int(info["score"]),
        final_level=int(info["level"]),
        catches=int(info["catches"]),
        misses=int(info["miss_count"]),
        steps=steps,
        sim_seconds=float(info["sim_time"]),
        termination_reason=info["terminated_reason"] or TRUNCATED,
        elapsed_time=time.time() - started,
        actions=actions
    )

    if verbose:
        print(f"  Seed {seed}: score={result.final_score} level={result.final_level} "
              f"catches={result.catches} misses={result.misses} "
              f"ended={result.termination_reason} ({result.sim_seconds:.1f}s simulated)")

    return result


def summarize(results: List[EvalResult], total_time: float = 0.0) -> EvalSummary:
    """Aggregate per-seed results."""
    scores = np.array([r.final_score for r in results], dtype=np.int64)
    levels = np.array([r.final_level for r in results], dtype=np.int64)

    return EvalSummary(
        mean_score=float(scores.mean()),
        std_score=float(scores.std()),
        min_score=int(scores.min()),
        max_score=int(scores.max()),
        median_score=float(np.median(scores)),
        mean_level=float(levels.mean()),
        max_level=int(levels.max()),
        mean_catches=float(np.mean([r.catches for r in results])),
        endings=dict(Counter(r.termination_reason for r in results)),
        total_time=total_time,
        results=results
    )


def print_summary(summary: EvalSummary) -> None:
    print()
    print("=" * 50)
    print("EVALUATION SUMMARY")
    print("=" * 50)
    print(f"Seeds evaluated: {len(summary.results)}")
    print(f"Score:           {summary.mean_score:.1f} +/- {summary.std_score:.1f} "
          f"(min {summary.min_score}, median {summary.median_score:.0f}, max {summary.max_score})")
    print(f"Level:           mean {summary.mean_level:.2f}, best {summary.max_level}")
    print(f"Catches/run:     {summary.mean_catches:.1f}")
    for reason, count in sorted(summary.endings.items()):
        print(f"  ended by {reason:<14} {count}")
    print(f"Total time:      {summary.total_time:.2f}s")
    print("=" * 50)


def evaluate_agent(
    agent_fn: Callable,
    seeds: Optional[List[int]] = None,
    record_actions: bool = False,
    verbose: bool = True,
    env: Optional[CatchZoneEnv] = None
) -> EvalSummary:
    """
    Evaluate an agent on every seed.

    Args:
        agent_fn: Callable (obs) -> lane index, e.g. from load_agent().
        seeds: Seeds to play. Uses the bundled seed bank if None.
        record_actions: If True, keep actions in each result.
        verbose: If True, print progress and the summary.
        env: Environment reused across seeds.

    Returns:
        EvalSummary with aggregate statistics.
    """
    if seeds is None:
        seeds = load_seed_bank()

    if verbose:
        print(f"Evaluating on {len(seeds)} seeds...")

    started = time.time()
    results = [
        evaluate_single_seed(agent_fn, seed, record_actions=record_actions, verbose=verbose, env=env)
        for seed in seeds
    ]
    summary = summarize(results, total_time=time.time() - started)

    if verbose:
        print_summary(summary)

    return summary


def save_results(summary: EvalSummary, agent_name: str, output_path: str) -> None:
    """Write the summary and per-seed results (without actions) to JSON."""
    data: Dict[str, Any] = {
        "agent": agent_name,
        "timestamp": time.strftime("%Y-%m-%d %H:%M:%S"),
    }
    data.update({key: value for key, value in asdict(summary).items() if key != "results"})
    data["results"] = [
        {key: value for key, value in asdict(r).items() if key != "actions"}
        for r in summary.results
    ]

    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)

    print(f"Results saved to {output_path}")


def main():
    parser = argparse.ArgumentParser(description="Evaluate a Catch Zone agent")
    parser.add_argument("--agent", type=str, required=True,
                        help="Path to agent directory or agent.py file")
    parser.add_argument("--seeds", type=str, default=None,
                        help="Path to seed bank JSON (uses default if not specified)")
    parser.add_argument("--config", type=str, default=None,
                        help="Path to an alternative game_config.yaml")
    parser.add_argument("--output", type=str, default=None,
                        help="Path to save results JSON")
    parser.add_argument("--record", action="store_true",
                        help="Record actions per seed")
    parser.add_argument("--quiet", action="store_true",
                        help="Reduce output verbosity")

    args = parser.parse_args()

    print(f"Loading agent from {args.agent}...")
    try:
        agent = load_agent(args.agent)
    except (FileNotFoundError, ImportError, AttributeError) as e:
        print(f"Error loading agent: {e}")
        return 1

    seeds = load_seed_bank(args.seeds) if args.seeds else None
    env = CatchZoneEnv(config_path=args.config)
    try:
        summary = evaluate_agent(
            agent,
            seeds=seeds,
            record_actions=args.record,
            verbose=not args.quiet,
            env=env
        )
    finally:
        env.close()

    if args.output:
        save_results(summary, agent.name, args.output)

    return 0


if __name__ == "__main__":
    sys.exit(main())
