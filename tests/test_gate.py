"""Tests for the probabilistic trigger gate."""

import pytest

from conftest import FixedRandom
from ruleengine.core.gate import clamp_threshold, make_random_source, passes_threshold


class TestClampThreshold:
    def test_above_max_is_capped(self):
        assert clamp_threshold(3.5, 1.0) == 1.0

    def test_negative_is_floored(self):
        assert clamp_threshold(-0.2, 1.0) == 0.0

    def test_in_range_unchanged(self):
        assert clamp_threshold(0.4, 1.0) == 0.4


class TestPassesThreshold:
    def test_draw_below_threshold_passes(self):
        assert passes_threshold(0.5, 1.0, FixedRandom(0.49)) is True

    def test_draw_equal_to_threshold_fails(self):
        assert passes_threshold(0.5, 1.0, FixedRandom(0.5)) is False

    def test_zero_threshold_never_passes(self):
        assert passes_threshold(0.0, 1.0, FixedRandom(0.0)) is False

    def test_negative_threshold_treated_as_zero(self):
        assert passes_threshold(-1.0, 1.0, FixedRandom(0.0)) is False

    def test_threshold_above_max_treated_as_max(self):
        assert passes_threshold(7.0, 1.0, FixedRandom(0.999999)) is True

    def test_max_threshold_always_passes_with_uniform_source(self):
        rng = make_random_source(1234)
        assert all(passes_threshold(1.0, 1.0, rng) for _ in range(2000))

    def test_zero_threshold_never_passes_with_uniform_source(self):
        rng = make_random_source(1234)
        assert not any(passes_threshold(0.0, 1.0, rng) for _ in range(2000))

    def test_seeded_sources_agree(self):
        a, b = make_random_source(7), make_random_source(7)
        assert [passes_threshold(0.5, 1.0, a) for _ in range(50)] == \
               [passes_threshold(0.5, 1.0, b) for _ in range(50)]

    def test_half_threshold_roughly_half(self):
        rng = make_random_source(42)
        hits = sum(passes_threshold(0.5, 1.0, rng) for _ in range(4000))
        assert 1800 < hits < 2200

    @pytest.mark.parametrize("draw", [0.0, 0.25, 0.5, 0.99])
    def test_draw_requested_over_zero_to_max(self, draw):
        class Spy(FixedRandom):
            def uniform(self, low, high):
                self.bounds = (low, high)
                return super().uniform(low, high)

        spy = Spy(draw)
        passes_threshold(0.5, 1.0, spy)
        assert spy.bounds == (0.0, 1.0)
