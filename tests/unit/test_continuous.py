"""
Unit tests for continuous difficulty adaptation.

Tests:
- Trailing-window accuracy bands
- Minimum history before adjusting
- Skill state update after an attempt
"""

from datetime import timedelta

import pytest
from conftest import NOW, make_state

from adaptive_practice.adaptive.continuous import apply_attempt, continuous_adjustment


class TestContinuousAdjustment:
    """Tests for the accuracy -> delta table."""

    @pytest.mark.parametrize(
        "outcomes,expected",
        [
            ([1, 1, 1, 1, 1], 2),
            ([0, 1, 1, 1, 1], 1),
            ([0, 0, 1, 1, 1], 0),
            ([0, 0, 0, 1, 1], -1),
            ([0, 0, 0, 0, 1], -2),
            ([0, 0, 0, 0, 0], -2),
            ([1, 1, 1], 2),
            ([0, 1, 1], 0),
            ([0, 0, 1], -2),
        ],
    )
    def test_bands(self, outcomes, expected):
        assert continuous_adjustment(outcomes) == expected

    def test_needs_three_outcomes(self):
        assert continuous_adjustment([]) == 0
        assert continuous_adjustment([1]) == 0
        assert continuous_adjustment([1, 1]) == 0
        assert continuous_adjustment([0, 0]) == 0

    def test_only_last_five_count(self):
        assert continuous_adjustment([0, 0, 0, 1, 1, 1, 1, 1]) == 2


class TestApplyAttempt:
    """Tests for folding one attempt into a skill state."""

    def test_first_attempt_sets_mastery_without_moving_difficulty(self):
        state = make_state(mastery=0.0, difficulty=3, days_ago=None)

        update = apply_attempt(state, is_correct=True, now=NOW)

        assert update.state.attempts == 1
        assert update.state.correct == 1
        assert update.state.mastery_level == 1.0
        assert update.state.last_5_outcomes == (1,)
        assert update.new_difficulty == 3
        assert update.difficulty_adjustment == 0

    def test_third_straight_correct_raises_difficulty(self):
        state = make_state(difficulty=3, attempts=2, correct=2, last_5_outcomes=(1, 1))

        update = apply_attempt(state, is_correct=True, now=NOW)

        assert update.previous_difficulty == 3
        assert update.new_difficulty == 5
        assert update.difficulty_adjustment == 2

    def test_struggle_lowers_difficulty(self):
        state = make_state(difficulty=4, attempts=4, correct=1, last_5_outcomes=(0, 1, 0, 0))

        update = apply_attempt(state, is_correct=False, now=NOW)

        assert update.state.last_5_outcomes == (0, 1, 0, 0, 0)
        assert update.new_difficulty == 2

    def test_difficulty_is_clamped(self):
        top = make_state(difficulty=10, attempts=4, correct=4, last_5_outcomes=(1, 1, 1, 1))
        bottom = make_state(difficulty=1, attempts=4, correct=0, last_5_outcomes=(0, 0, 0, 0))

        assert apply_attempt(top, True, now=NOW).new_difficulty == 10
        assert apply_attempt(bottom, False, now=NOW).new_difficulty == 1

    def test_outcome_window_stays_at_five(self):
        state = make_state(attempts=5, correct=5, last_5_outcomes=(1, 1, 1, 1, 1))

        update = apply_attempt(state, is_correct=False, now=NOW)

        assert update.state.last_5_outcomes == (1, 1, 1, 1, 0)

    def test_mastery_is_cumulative_accuracy(self):
        state = make_state(attempts=9, correct=6, mastery=6 / 9)

        update = apply_attempt(state, is_correct=True, now=NOW)

        assert update.state.mastery_level == pytest.approx(0.7)

    def test_practice_resets_decay_and_timestamp(self):
        state = make_state(days_ago=30, decay_factor=0.22)
        later = NOW + timedelta(hours=1)

        update = apply_attempt(state, is_correct=True, now=later)

        assert update.state.last_practiced == later
        assert update.state.decay_factor == 1.0

    def test_running_means(self):
        state = make_state(
            attempts=1, correct=1, avg_time_seconds=40.0, hints_usage_rate=1.0, avg_confidence=0.9
        )

        update = apply_attempt(
            state, is_correct=False, time_taken_seconds=80.0, hints_used=0,
            confidence_score=0.3, now=NOW,
        )

        assert update.state.avg_time_seconds == pytest.approx(60.0)
        assert update.state.hints_usage_rate == pytest.approx(0.5)
        assert update.state.avg_confidence == pytest.approx(0.6)

    def test_input_state_is_not_modified(self):
        state = make_state(attempts=2, correct=1, last_5_outcomes=(1, 0))

        apply_attempt(state, is_correct=True, now=NOW)

        assert state.attempts == 2
        assert state.last_5_outcomes == (1, 0)
