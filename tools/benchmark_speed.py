"""
Performance Benchmark
=====================

Measures engine tick and environment step throughput for performance tuning.

Usage:
    python -m tools.benchmark_speed [--steps S] [--quick]
"""

from __future__ import annotations

import argparse
import sys
import time
import numpy as np

from catch_zone.catch_core.config_loader import load_config
from catch_zone.catch_core.game import CatchGame
from catch_zone.catch_core.env_gym import CatchZoneEnv


def benchmark_single_env(
    num_steps: int = 1000,
    seed: int = 42
) -> dict:
    """
    Benchmark single environment performance.

    Args:
        num_steps: Number of steps to run.
        seed: Random seed.

    Returns:
        Dict with timing results.
    """
    env = CatchZoneEnv()
    rng = np.random.default_rng(seed)

    # Warmup
    obs, _ = env.reset(seed=seed)
    for _ in range(10):
        obs, _, terminated, truncated, _ = env.step(int(rng.integers(0, 3)))
        if terminated or truncated:
            obs, _ = env.reset()

    # Benchmark
    obs, _ = env.reset(seed=seed)
    start = time.perf_counter()

    for _ in range(num_steps):
        obs, _, terminated, truncated, _ = env.step(int(rng.integers(0, 3)))
        if terminated or truncated:
            obs, _ = env.reset()

    elapsed = time.perf_counter() - start
    env.close()

    return {
        "mode": "single_env",
        "num_steps": num_steps,
        "elapsed_seconds": elapsed,
        "steps_per_second": num_steps / elapsed,
        "ms_per_step": (elapsed * 1000) / num_steps
    }


def benchmark_core_game(
    num_ticks: int = 10000,
    seed: int = 42
) -> dict:
    """
    Benchmark raw CatchGame physics ticks without Gym overhead.

    The basket hops lanes at random every 6 ticks.

    Args:
        num_ticks: Number of physics ticks.
        seed: Random seed.

    Returns:
        Dict with timing results.
    """
    config = load_config()
    game = CatchGame(config=config, seed=seed)
    rng = np.random.default_rng(seed)
    dt = config.timing.physics_dt

    game.start(seed=seed)
    start = time.perf_counter()

    for tick in range(num_ticks):
        if tick % 6 == 0:
            game.move_basket(int(rng.integers(0, 3)))
        game.advance(dt)
        if not game.active:
            game.start()

    elapsed = time.perf_counter() - start

    return {
        "mode": "core_game",
        "num_steps": num_ticks,
        "elapsed_seconds": elapsed,
        "steps_per_second": num_ticks / elapsed,
        "ms_per_step": (elapsed * 1000) / num_ticks
    }


def run_all_benchmarks(steps: int = 500) -> list:
    """Run comprehensive benchmarks."""
    results = []

    print("=" * 60)
    print("CATCH ZONE PERFORMANCE BENCHMARK")
    print("=" * 60)
    print()

    print("Benchmarking CatchGame (raw ticks)...")
    result = benchmark_core_game(num_ticks=steps * 6)
    results.append(result)
    print(f"  Ticks/sec: {result['steps_per_second']:.1f}")
    print(f"  ms/tick:   {result['ms_per_step']:.3f}")
    print()

    print("Benchmarking CatchZoneEnv (single)...")
    result = benchmark_single_env(num_steps=steps)
    results.append(result)
    print(f"  Steps/sec: {result['steps_per_second']:.1f}")
    print(f"  ms/step:   {result['ms_per_step']:.3f}")
    print()

    print("=" * 60)
    print("SUMMARY")
    print("=" * 60)
    print()
    print(f"{'Mode':<20} {'Steps/s':>12} {'ms/step':>10}")
    print("-" * 44)

    for r in results:
        print(f"{r['mode']:<20} {r['steps_per_second']:>12.1f} {r['ms_per_step']:>10.3f}")

    return results


def main():
    parser = argparse.ArgumentParser(description="Benchmark Catch Zone engine performance")
    parser.add_argument("--steps", type=int, default=500, help="Env steps per benchmark")
    parser.add_argument("--quick", action="store_true", help="Quick benchmark (fewer steps)")

    args = parser.parse_args()

    steps = 100 if args.quick else args.steps

    run_all_benchmarks(steps=steps)

    return 0


if __name__ == "__main__":
    sys.exit(main())
