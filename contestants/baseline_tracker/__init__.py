"""
Baseline Tracker Agent Package

A simple heuristic agent that follows the fruit closest to landing and
steps out of lanes with an incoming bomb. Serves as a benchmark and example.
"""

from .agent import CatchAgent, create_agent

__all__ = ["CatchAgent", "create_agent"]
