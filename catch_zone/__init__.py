"""
Catch Zone Package
==================

Rule engine for a three-lane "catch falling items" arcade game driven by
body-pose commands. This package owns all game logic:

- Item spawning and the difficulty curve
- Falling-item progress and catch detection
- Scoring, miss counting and termination
- The leveling state machine

Rendering, camera capture and pose classification live outside the package
and talk to the engine through basket commands and events.

All tunable parameters are in game_config.yaml.
"""
