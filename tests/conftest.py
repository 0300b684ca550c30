"""
Shared fixtures: config variants written to temporary YAML files.
"""

import copy
import os

import pytest
import yaml

import catch_zone
from catch_zone.catch_core.config_loader import load_config


DEFAULT_CONFIG_PATH = os.path.join(os.path.dirname(catch_zone.__file__), "game_config.yaml")


def _merge(base: dict, overrides: dict) -> dict:
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _merge(base[key], value)
        else:
            base[key] = value
    return base


@pytest.fixture
def raw_config():
    """The default config as a plain dict."""
    with open(DEFAULT_CONFIG_PATH, "r", encoding="utf-8") as f:
        return yaml.safe_load(f)


@pytest.fixture
def config_factory(tmp_path, raw_config):
    """Build a GameConfig from the default YAML with nested overrides applied."""
    counter = {"n": 0}

    def make(overrides: dict):
        data = _merge(copy.deepcopy(raw_config), overrides)
        counter["n"] += 1
        path = tmp_path / f"game_config_{counter['n']}.yaml"
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(data, f, allow_unicode=True)
        return load_config(str(path))

    return make
