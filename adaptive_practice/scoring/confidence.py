"""
Confidence Scorer.

Estimates how confidently an answer was produced, not only whether it was
right. Four weighted factors:

    Confidence = Correctness x 0.40
               + Time        x 0.35   (Gaussian around expected time)
               + Hints       x 0.15   (linear penalty, floor 0.75)
               + Difficulty  x 0.10   (bonus for correct answers on hard items)

The scorer is total: malformed inputs are clamped instead of rejected, so
it always returns a score in [0, 1]. `validate_confidence_input` exists for
callers that want to reject bad payloads before scoring.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Any

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from adaptive_practice.core.models import MAX_DIFFICULTY, MIN_DIFFICULTY

# ============================================================================
# Algorithm Weights
# ============================================================================

WEIGHT_CORRECTNESS = 0.40
WEIGHT_TIME = 0.35
WEIGHT_HINTS = 0.15
WEIGHT_DIFFICULTY = 0.10

DEFAULT_EXPECTED_TIME = 60.0
TIME_SIGMA_RATIO = 0.5
HINT_PENALTY = 0.25
HINTS_FLOOR = 0.75


@dataclass(frozen=True)
class ConfidenceInput:
    """Raw attempt telemetry fed to the scorer."""

    is_correct: bool
    time_taken_seconds: float
    expected_time_seconds: float
    hints_used: int = 0
    max_hints: int = 2
    difficulty_level: int = 1  # 1-10


@dataclass(frozen=True)
class ConfidenceFactors:
    """Individual factor values (each 0-1) before weighting."""

    correctness_factor: float
    time_factor: float
    hints_factor: float
    difficulty_factor: float


@dataclass(frozen=True)
class ConfidenceResult:
    """Final score, a human-readable reading of it, and the factors."""

    confidence_score: float
    interpretation: str
    factors: ConfidenceFactors

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


# ============================================================================
# Factors
# ============================================================================


def time_factor(time_taken: float, expected_time: float) -> float:
    """
    Gaussian time efficiency, peaking at 1.0 when time == expected.

    Formula: e^(-((time - expected)^2 / (2 x sigma^2))), sigma = 0.5 x expected

    Examples (expected 60s): 30s -> 0.61, 60s -> 1.00, 90s -> 0.61, 120s -> 0.14
    """
    if not math.isfinite(expected_time) or expected_time <= 0:
        logger.warning(f"Invalid expected_time {expected_time}, using default {DEFAULT_EXPECTED_TIME:.0f}s")
        expected_time = DEFAULT_EXPECTED_TIME

    if not math.isfinite(time_taken) or time_taken < 0:
        logger.warning(f"Invalid time_taken {time_taken}, using 0")
        time_taken = 0.0

    sigma = expected_time * TIME_SIGMA_RATIO
    factor = math.exp(-((time_taken - expected_time) ** 2) / (2 * sigma**2))
    return max(0.0, min(1.0, factor))


def hints_factor(hints_used: int, max_hints: int) -> float:
    """
    Linear hint penalty: 1 hint of 2 -> 0.875, 2 of 2 -> 0.75.

    No penalty is possible when the item offers no hints.
    """
    if max_hints <= 0:
        return 1.0

    if hints_used < 0:
        logger.warning(f"Negative hints_used {hints_used}, using 0")
        hints_used = 0

    hints_used = min(hints_used, max_hints)
    factor = 1.0 - (hints_used / max_hints) * HINT_PENALTY
    return max(HINTS_FLOOR, min(1.0, factor))


def difficulty_factor(is_correct: bool, difficulty_level: float) -> float:
    """0.55 (difficulty 1) to 1.0 (difficulty 10) when correct; 0.5 otherwise."""
    if not math.isfinite(difficulty_level):
        logger.warning(f"Invalid difficulty_level {difficulty_level}, using {MIN_DIFFICULTY}")
        difficulty_level = MIN_DIFFICULTY
    difficulty_level = max(MIN_DIFFICULTY, min(MAX_DIFFICULTY, difficulty_level))
    if is_correct:
        return 0.5 + (difficulty_level / 10) * 0.5
    return 0.5


def interpret(score: float, is_correct: bool) -> str:
    """Translate a score into a short explanation."""
    if is_correct:
        if score >= 0.8:
            return "High confidence - Strong understanding demonstrated"
        if score >= 0.6:
            return "Good confidence - Answer correct but could be faster or needed hints"
        if score >= 0.4:
            return "Moderate confidence - Correct answer but took extra time or multiple hints"
        return "Low confidence - Answer correct but struggled significantly"

    if score >= 0.4:
        return "Attempted confidently but incorrect - May have conceptual misunderstanding"
    if score >= 0.2:
        return "Low confidence attempt - Answer incorrect with hints or extra time"
    return "Very low confidence - Struggled and answered incorrectly"


# ============================================================================
# Main Function
# ============================================================================


def calculate_confidence_score(data: ConfidenceInput) -> ConfidenceResult:
    """
    Combine correctness, pacing, hint reliance and difficulty into one score.

    Args:
        data: Attempt telemetry (out-of-range values are clamped)

    Returns:
        ConfidenceResult with the score and factors rounded to 3 decimals

    Example:
        >>> calculate_confidence_score(ConfidenceInput(
        ...     is_correct=True, time_taken_seconds=60, expected_time_seconds=60,
        ...     hints_used=0, max_hints=2, difficulty_level=10,
        ... )).confidence_score
        1.0
    """
    correctness = 1.0 if data.is_correct else 0.0
    timing = time_factor(data.time_taken_seconds, data.expected_time_seconds)
    hints = hints_factor(data.hints_used, data.max_hints)
    difficulty = difficulty_factor(data.is_correct, data.difficulty_level)

    score = (
        correctness * WEIGHT_CORRECTNESS
        + timing * WEIGHT_TIME
        + hints * WEIGHT_HINTS
        + difficulty * WEIGHT_DIFFICULTY
    )
    score = max(0.0, min(1.0, score))

    result = ConfidenceResult(
        confidence_score=round(score, 3),
        interpretation=interpret(score, data.is_correct),
        factors=ConfidenceFactors(
            correctness_factor=round(correctness, 3),
            time_factor=round(timing, 3),
            hints_factor=round(hints, 3),
            difficulty_factor=round(difficulty, 3),
        ),
    )
    logger.debug(f"Confidence score {result.confidence_score} ({result.interpretation})")
    return result


# ============================================================================
# Validation
# ============================================================================


class ConfidenceRequest(BaseModel):
    """Strict request model for callers that reject malformed telemetry."""

    model_config = ConfigDict(allow_inf_nan=False)

    is_correct: bool = Field(..., strict=True)
    time_taken_seconds: float = Field(..., ge=0)
    expected_time_seconds: float = Field(..., gt=0)
    hints_used: int = Field(..., ge=0)
    max_hints: int = Field(..., ge=0)
    difficulty_level: float = Field(..., ge=MIN_DIFFICULTY, le=MAX_DIFFICULTY)

    def to_input(self) -> ConfidenceInput:
        return ConfidenceInput(
            is_correct=self.is_correct,
            time_taken_seconds=self.time_taken_seconds,
            expected_time_seconds=self.expected_time_seconds,
            hints_used=self.hints_used,
            max_hints=self.max_hints,
            difficulty_level=self.difficulty_level,
        )


@dataclass(frozen=True)
class ValidationReport:
    valid: bool
    errors: list[str]


def validate_confidence_input(payload: dict[str, Any]) -> ValidationReport:
    """
    Check a raw payload before scoring.

    Args:
        payload: Mapping with the six scorer fields

    Returns:
        ValidationReport listing one message per invalid field
    """
    try:
        ConfidenceRequest.model_validate(payload)
    except ValidationError as exc:
        errors = [
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
        ]
        return ValidationReport(valid=False, errors=errors)
    return ValidationReport(valid=True, errors=[])
