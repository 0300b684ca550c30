"""
Tests for the difficulty curve and spawn RNG.
"""

import pytest
from collections import Counter

from catch_zone.catch_core.config_loader import load_config
from catch_zone.catch_core.item_catalog import ZONES
from catch_zone.catch_core.rng import SpawnRng
from catch_zone.catch_core.rules import DifficultyRules


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def difficulty(config):
    return DifficultyRules(config)


class TestDropTime:
    """drop_time(level) = max(2.0 - 0.2 * (level - 1), 0.6)"""

    @pytest.mark.parametrize("level, expected", [
        (1, 2.0),
        (2, 1.8),
        (7, 0.8),
        (8, 0.6),
        (20, 0.6),
        (100, 0.6),
    ])
    def test_known_levels(self, difficulty, level, expected):
        assert difficulty.drop_time(level) == pytest.approx(expected)

    def test_formula_all_levels(self, difficulty):
        for level in range(1, 51):
            expected = max(2.0 - 0.2 * (level - 1), 0.6)
            assert difficulty.drop_time(level) == pytest.approx(expected)

    def test_never_increases(self, difficulty):
        times = [difficulty.drop_time(level) for level in range(1, 30)]
        assert all(a >= b for a, b in zip(times, times[1:]))


class TestSpawnInterval:
    """Spawn cadence scales with the drop time."""

    def test_range_bounds(self, difficulty):
        low, high = difficulty.spawn_interval_range(1)
        assert low == pytest.approx(1.2)
        assert high == pytest.approx(1.6)

    @pytest.mark.parametrize("level", [1, 2, 5, 7, 10, 20])
    def test_samples_within_range(self, config, difficulty, level):
        rng = SpawnRng(config, seed=level)
        drop_time = difficulty.drop_time(level)
        for _ in range(1000):
            interval = rng.spawn_interval(difficulty.spawn_interval_range(level))
            assert 0.6 * drop_time - 1e-9 <= interval <= 0.8 * drop_time + 1e-9

    def test_samples_cover_range(self, config, difficulty):
        """Draws are spread over the range, not stuck at one value."""
        rng = SpawnRng(config, seed=1)
        low, high = difficulty.spawn_interval_range(1)
        samples = [rng.spawn_interval((low, high)) for _ in range(2000)]
        assert min(samples) < low + 0.05 * (high - low)
        assert max(samples) > high - 0.05 * (high - low)


class TestSpawnRng:
    """Zone and kind draws."""

    def test_deterministic_with_seed(self, config):
        """Same seed should produce same sequence."""
        r1 = SpawnRng(config, seed=42)
        r2 = SpawnRng(config, seed=42)

        seq1 = [(r1.choose_zone(), r1.choose_kind().name) for _ in range(50)]
        seq2 = [(r2.choose_zone(), r2.choose_kind().name) for _ in range(50)]

        assert seq1 == seq2

    def test_different_seeds_differ(self, config):
        r1 = SpawnRng(config, seed=42)
        r2 = SpawnRng(config, seed=123)

        seq1 = [r1.choose_kind().name for _ in range(50)]
        seq2 = [r2.choose_kind().name for _ in range(50)]

        assert seq1 != seq2

    def test_reset_restores_sequence(self, config):
        rng = SpawnRng(config, seed=7)
        initial = [rng.choose_zone() for _ in range(20)]

        rng.reset()
        assert [rng.choose_zone() for _ in range(20)] == initial

    def test_zone_distribution_uniform(self, config):
        rng = SpawnRng(config, seed=42)
        counts = Counter(rng.choose_zone() for _ in range(9000))

        assert set(counts) == set(ZONES)
        for zone in ZONES:
            assert counts[zone] == pytest.approx(3000, rel=0.1)

    def test_hazard_probability(self, config):
        """About 20% bombs, fruits split evenly over the rest."""
        rng = SpawnRng(config, seed=42)
        counts = Counter(rng.choose_kind().name for _ in range(10000))

        assert counts["bomb"] / 10000 == pytest.approx(0.2, abs=0.02)
        for fruit in ("apple", "pear", "orange"):
            assert counts[fruit] / 10000 == pytest.approx(0.8 / 3, abs=0.02)

    def test_no_hazards_when_probability_zero(self, config_factory):
        config = config_factory({"spawn": {"hazard_probability": 0.0}})
        rng = SpawnRng(config, seed=3)
        assert not any(rng.choose_kind().is_hazard for _ in range(500))
