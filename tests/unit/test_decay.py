"""
Unit tests for the skill decay model.

Tests:
- Exponential retention curve and floor
- Whole-day elapsed time (UTC, naive timestamps)
- Never-practiced skills
"""

import math
from datetime import UTC, datetime, timedelta

import pytest

from adaptive_practice.core.decay import decay_factor, days_since, effective_mastery, skill_decay

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=UTC)


class TestDecayFactor:
    """Tests for the retention curve."""

    @pytest.mark.parametrize(
        "days,expected",
        [(0, 1.0), (7, 0.7047), (14, 0.4966), (30, 0.2231)],
    )
    def test_reference_points(self, days, expected):
        assert decay_factor(days) == pytest.approx(expected, abs=1e-4)

    def test_floor_applies_after_long_gap(self):
        """e^(-0.05 * 60) is about 0.05, below the 0.1 floor."""
        assert decay_factor(60) == 0.1
        assert decay_factor(365) == 0.1

    def test_negative_days_count_as_zero(self):
        assert decay_factor(-3) == 1.0

    def test_custom_rate_and_floor(self):
        assert decay_factor(10, rate=0.1, floor=0.0) == pytest.approx(math.exp(-1))
        assert decay_factor(100, rate=0.1, floor=0.25) == 0.25

    def test_monotonically_non_increasing(self):
        values = [decay_factor(d) for d in range(0, 90)]
        assert all(a >= b for a, b in zip(values, values[1:]))


class TestDaysSince:
    """Tests for elapsed whole days."""

    def test_never_practiced(self):
        assert days_since(None, NOW) is None

    def test_partial_days_are_floored(self):
        assert days_since(NOW - timedelta(days=6, hours=23), NOW) == 6

    def test_naive_timestamp_treated_as_utc(self):
        naive = (NOW - timedelta(days=2)).replace(tzinfo=None)
        assert days_since(naive, NOW) == 2

    def test_future_timestamp_is_zero(self):
        assert days_since(NOW + timedelta(days=1), NOW) == 0


class TestSkillDecay:
    """Tests for decay applied to a skill's last practice time."""

    def test_never_practiced_keeps_full_retention(self):
        assert skill_decay(None, NOW) == 1.0

    def test_week_old_practice(self):
        assert skill_decay(NOW - timedelta(days=7), NOW) == pytest.approx(0.7047, abs=1e-4)

    def test_effective_mastery_scales_by_factor(self):
        assert effective_mastery(0.8, 0.5) == pytest.approx(0.4)
