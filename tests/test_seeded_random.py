"""Tests for the seeded sin-hash random function."""

import math

import pytest

from py_bulge.core.seeded_random import frac, rand


class TestRand:
    """Test the deterministic scalar PRNG."""

    def test_zero_seed(self):
        """sin(0) is 0, so rand(0) is exactly 0."""
        assert rand(0) == 0.0

    @pytest.mark.parametrize(
        "x, expected",
        [
            (1, 0.709848078965),
            (25, 0.4824990222696215),
            (50, 0.25146296071216056),
            (75, 0.1836459056953572),
            (5, 0.7572533686153),
        ],
    )
    def test_known_values(self, x, expected):
        """Fixed outputs, including sin(5) < 0 wrapping up into [0, 1)."""
        assert rand(x) == pytest.approx(expected, abs=1e-9)

    def test_matches_formula(self):
        """rand(x) is the fractional part of sin(x) * 10000."""
        for x in [1, 25, 50, 75, 123.456, -7.5]:
            value = math.sin(x) * 10000
            assert rand(x) == value - math.floor(value)

    @pytest.mark.parametrize("x", [0.5, 1, 2, 3, 50, 99.9, 1000, -1, -50, -0.25])
    def test_range(self, x):
        """Values stay in [0, 1), including for negative sin values."""
        assert 0.0 <= rand(x) < 1.0

    def test_repeatable(self):
        """Same input gives the same output."""
        assert [rand(x) for x in range(100)] == [rand(x) for x in range(100)]


class TestFrac:
    """Test the floor-based fractional part."""

    def test_positive(self):
        assert frac(3.25) == 0.25

    def test_negative(self):
        """Negative values wrap into [0, 1) rather than keeping the sign."""
        assert frac(-3.25) == 0.75

    def test_integer(self):
        assert frac(5.0) == 0.0
