"""
Continuous Difficulty Adaptation.

Used in regular practice after every graded attempt:
- Mastery is recomputed as cumulative correct / attempted
- The outcome joins a trailing window of the last 5 results
- Difficulty moves by the accuracy of that window (needs 3+ outcomes)

    >= 95%  -> +2
    85-94%  -> +1
    75-84%  -> +1
    60-74%  ->  0
    40-59%  -> -1
    < 40%   -> -2

Difficulty stays within 1-10.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, replace
from datetime import UTC, datetime

from adaptive_practice.core.models import OUTCOME_WINDOW, SkillState, clamp_difficulty

MIN_OUTCOMES_FOR_ADJUSTMENT = 3


@dataclass(frozen=True)
class AttemptUpdate:
    """Result of applying one attempt to a skill state."""

    state: SkillState
    previous_difficulty: int
    difficulty_adjustment: int

    @property
    def new_difficulty(self) -> int:
        return self.state.current_difficulty


def continuous_adjustment(outcomes: Sequence[int]) -> int:
    """
    Difficulty delta for a trailing outcome window.

    Args:
        outcomes: Recent binary outcomes (1 = correct)

    Returns:
        Delta in [-2, +2]; 0 when fewer than 3 outcomes are known
    """
    window = list(outcomes)[-OUTCOME_WINDOW:]
    if len(window) < MIN_OUTCOMES_FOR_ADJUSTMENT:
        return 0

    accuracy = sum(window) / len(window)
    if accuracy >= 0.95:
        return 2
    if accuracy >= 0.85:
        return 1
    if accuracy >= 0.75:
        return 1
    if accuracy >= 0.60:
        return 0
    if accuracy >= 0.40:
        return -1
    return -2


def _running_mean(previous: float, value: float, count: int) -> float:
    return (previous * (count - 1) + value) / count


def apply_attempt(
    state: SkillState,
    is_correct: bool,
    time_taken_seconds: float = 0.0,
    hints_used: int = 0,
    confidence_score: float | None = None,
    now: datetime | None = None,
) -> AttemptUpdate:
    """
    Fold one graded attempt into a skill state.

    The input state is not modified; a new state is returned.

    Args:
        state: Current skill state
        is_correct: Whether the answer was correct
        time_taken_seconds: Time spent on the question
        hints_used: Hints revealed
        confidence_score: Scorer output to fold into avg_confidence
        now: Attempt time (defaults to UTC now)

    Returns:
        AttemptUpdate with the new state and the difficulty delta applied
    """
    attempts = state.attempts + 1
    correct = state.correct + (1 if is_correct else 0)
    outcomes = (state.last_5_outcomes + (1 if is_correct else 0,))[-OUTCOME_WINDOW:]

    adjustment = continuous_adjustment(outcomes)
    updated = replace(
        state,
        attempts=attempts,
        correct=correct,
        mastery_level=correct / attempts,
        last_5_outcomes=outcomes,
        current_difficulty=clamp_difficulty(state.current_difficulty + adjustment),
        last_practiced=now or datetime.now(UTC),
        decay_factor=1.0,
        avg_time_seconds=_running_mean(state.avg_time_seconds, max(0.0, time_taken_seconds), attempts),
        hints_usage_rate=_running_mean(state.hints_usage_rate, max(0, hints_used), attempts),
        avg_confidence=(
            _running_mean(state.avg_confidence, confidence_score, attempts)
            if confidence_score is not None
            else state.avg_confidence
        ),
    )

    return AttemptUpdate(
        state=updated,
        previous_difficulty=state.current_difficulty,
        difficulty_adjustment=updated.current_difficulty - state.current_difficulty,
    )
