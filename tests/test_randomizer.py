"""Tests for random configurations and presets."""

import pytest

from py_bulge.config.presets import CONTROL_RANGES, PRESETS, get_preset, list_presets
from py_bulge.core.grid_renderer import PatternConfig
from py_bulge.core.randomizer import default_config, make_rng, random_config


class TestRandomConfig:
    """Test the configuration randomizer."""

    def test_ranges(self):
        rng = make_rng(11)
        for _ in range(200):
            config = random_config(rng)
            assert 30 <= config.grid_size < 60
            assert 40 <= config.bulge_strength < 120
            assert config.bulge_count in (2, 3, 4, 5)
            assert isinstance(config.bulge_count, int)
            assert 0 <= config.seed < 1000
            assert 0.1 <= config.line_opacity < 0.3
            assert 0 <= config.rotation < 360
            config.validate()

    def test_reproducible(self):
        first = [random_config(make_rng(5)) for _ in range(3)]
        second = [random_config(make_rng(5)) for _ in range(3)]
        assert first == second

    def test_sequence_varies(self):
        rng = make_rng(5)
        assert random_config(rng) != random_config(rng)


class TestDefaultConfig:
    """Test the initial configuration."""

    def test_explicit_seed(self):
        assert default_config(12.5) == PatternConfig(seed=12.5)

    def test_random_seed(self):
        config = default_config(rng=make_rng(3))
        assert 0 <= config.seed < 1000
        assert config.grid_size == 40.0
        assert config.bulge_count == 3


class TestPresets:
    """Test named presets."""

    def test_list(self):
        names = list_presets()
        assert "default" in names
        assert names == sorted(PRESETS)

    def test_get(self):
        assert get_preset("default") == PatternConfig()
        assert get_preset("tilted").rotation == 30.0

    def test_unknown(self):
        with pytest.raises(KeyError):
            get_preset("does-not-exist")

    def test_presets_are_valid(self):
        for config in PRESETS.values():
            config.validate()

    def test_control_ranges(self):
        assert set(CONTROL_RANGES) == {"grid_size", "bulge_strength", "bulge_count", "line_opacity", "rotation"}
        for low, high in CONTROL_RANGES.values():
            assert low < high
