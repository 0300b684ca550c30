"""
Watch Agent
===========

Runs the engine against the wall clock and prints the board, so a basket
agent can be watched in real time from a terminal.

Usage:
    python -m tools.watch_agent [--agent PATH] [--seed SEED] [--speed X]
"""

from __future__ import annotations

import argparse
import logging
import sys
import time

from catch_zone.catch_core.env_gym import CatchZoneEnv
from catch_zone.catch_core.events import Feedback, GameEnded, GameEvent, LevelChanged
from catch_zone.evaluation.run_eval import load_agent


def _print_event(event: GameEvent) -> None:
    if isinstance(event, Feedback):
        where = f" ({event.zone.name})" if event.zone is not None else ""
        print(f"  >> {event.message}{where}")
    elif isinstance(event, LevelChanged):
        print(f"  >> Level {event.level}!")
    elif isinstance(event, GameEnded):
        print(f"  >> {event.message} Final score {event.final_score}, level {event.final_level}")


def main():
    parser = argparse.ArgumentParser(description="Watch an agent play Catch Zone")
    parser.add_argument("--agent", type=str, default="contestants/baseline_tracker",
                        help="Path to agent directory or agent.py file")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--speed", type=float, default=1.0, help="Playback speed multiplier")
    parser.add_argument("--verbose", action="store_true", help="Show engine log output")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s"
    )

    agent = load_agent(args.agent)
    if agent.reset is not None:
        agent.reset()
    env = CatchZoneEnv(render_mode="ansi")
    env.game.subscribe(_print_event)

    obs, _ = env.reset(seed=args.seed)
    frame_time = env.config.caps.decision_interval / max(args.speed, 1e-3)

    done = False
    try:
        while not done:
            started = time.perf_counter()
            obs, _, terminated, truncated, _ = env.step(agent(obs))
            done = terminated or truncated
            print(env.render())
            print()
            remaining = frame_time - (time.perf_counter() - started)
            if remaining > 0:
                time.sleep(remaining)
    except KeyboardInterrupt:
        print("Interrupted")
    finally:
        env.close()

    return 0


if __name__ == "__main__":
    sys.exit(main())
