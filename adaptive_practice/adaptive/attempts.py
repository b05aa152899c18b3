"""
Attempt Recorder.

Write-back path run by the caller after grading an answer: scores
confidence, folds the attempt into the skill state (continuous adaptation)
and persists it. Selection itself never writes state.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from loguru import logger

from adaptive_practice.adaptive.continuous import AttemptUpdate, apply_attempt
from adaptive_practice.core.exceptions import dependency_call
from adaptive_practice.core.models import QuestionItem, SkillState
from adaptive_practice.scoring.confidence import (
    ConfidenceInput,
    ConfidenceResult,
    calculate_confidence_score,
)
from adaptive_practice.stores.interfaces import SkillStateStore


@dataclass(frozen=True)
class AttemptOutcome:
    """Everything produced by recording one attempt."""

    update: AttemptUpdate
    confidence: ConfidenceResult
    created: bool

    @property
    def state(self) -> SkillState:
        return self.update.state


class AttemptRecorder:
    """Grade-time write-back into the SkillStateStore."""

    def __init__(self, skill_states: SkillStateStore):
        """
        Args:
            skill_states: Store the updated state is upserted into
        """
        self.skill_states = skill_states

    def record_attempt(
        self,
        user_id: str,
        question: QuestionItem,
        is_correct: bool,
        time_taken_seconds: float,
        hints_used: int = 0,
        now: datetime | None = None,
    ) -> AttemptOutcome:
        """
        Record a graded attempt for the question's skill.

        A missing state is created at the question's difficulty.

        Args:
            user_id: Learner
            question: Question that was answered
            is_correct: Grading result
            time_taken_seconds: Time spent answering
            hints_used: Hints revealed
            now: Attempt time (defaults to UTC now)

        Returns:
            AttemptOutcome with the persisted state and confidence result
        """
        with dependency_call("SkillStateStore", "get"):
            state = self.skill_states.get(user_id, question.module_id, question.skill_id)

        created = state is None
        if state is None:
            state = SkillState(
                user_id=user_id,
                module_id=question.module_id,
                skill_id=question.skill_id,
                current_difficulty=question.difficulty,
            )

        confidence = calculate_confidence_score(
            ConfidenceInput(
                is_correct=is_correct,
                time_taken_seconds=time_taken_seconds,
                expected_time_seconds=question.expected_time_seconds,
                hints_used=hints_used,
                max_hints=question.max_hints,
                difficulty_level=question.difficulty,
            )
        )

        update = apply_attempt(
            state,
            is_correct=is_correct,
            time_taken_seconds=time_taken_seconds,
            hints_used=hints_used,
            confidence_score=confidence.confidence_score,
            now=now,
        )

        with dependency_call("SkillStateStore", "upsert"):
            self.skill_states.upsert(update.state)

        logger.info(
            f"Recorded attempt for user {user_id} skill {question.skill_id}: "
            f"{'correct' if is_correct else 'incorrect'}, mastery {update.state.mastery_level:.0%}, "
            f"difficulty {update.previous_difficulty} -> {update.new_difficulty}"
        )
        return AttemptOutcome(update=update, confidence=confidence, created=created)
