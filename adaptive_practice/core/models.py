"""
Core Practice Models.

Canonical dataclasses shared by every part of the practice engine:
- SkillState: per user x module x skill learning state
- QuestionItem: read-only practice item metadata
- SelectionResult: a chosen question plus why it was chosen
- DrillHistory: answers recorded for one completed adaptive drill
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

MIN_DIFFICULTY = 1
MAX_DIFFICULTY = 10
OUTCOME_WINDOW = 5
DECAY_FLOOR = 0.1


class SkillCategory(str, Enum):
    """
    Need-tier of a skill at selection time.

    WEAK/MODERATE/STRONG come from decayed mastery, UNSTARTED marks
    beginner and back-fill picks, ADAPTIVE marks drill picks.
    """

    WEAK = "weak"
    MODERATE = "moderate"
    STRONG = "strong"
    UNSTARTED = "unstarted"
    ADAPTIVE = "adaptive"

    @property
    def color(self) -> str:
        """Rich color for CLI display."""
        return {
            SkillCategory.WEAK: "red",
            SkillCategory.MODERATE: "yellow",
            SkillCategory.STRONG: "green",
            SkillCategory.UNSTARTED: "dim",
            SkillCategory.ADAPTIVE: "cyan",
        }[self]


def clamp_difficulty(value: float) -> int:
    """Clamp a difficulty to the 1-10 scale."""
    return int(max(MIN_DIFFICULTY, min(MAX_DIFFICULTY, value)))


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (round() is banker's rounding)."""
    return math.floor(value + 0.5)


@dataclass
class SkillState:
    """
    Learning state for one skill of one user.

    Created lazily on the first attempt and never deleted. Out-of-range
    values are clamped on construction so the invariants always hold.
    """

    user_id: str
    module_id: int
    skill_id: int
    current_difficulty: int = 1
    mastery_level: float = 0.0  # 0-1 scale
    attempts: int = 0
    correct: int = 0
    last_5_outcomes: tuple[int, ...] = ()  # most recent last
    decay_factor: float = 1.0
    last_practiced: datetime | None = None
    hints_usage_rate: float = 0.0
    avg_confidence: float = 0.5
    avg_time_seconds: float = 0.0

    def __post_init__(self):
        self.current_difficulty = clamp_difficulty(self.current_difficulty)
        self.mastery_level = max(0.0, min(1.0, float(self.mastery_level)))
        self.attempts = max(0, int(self.attempts))
        self.correct = max(0, min(int(self.correct), self.attempts))
        self.last_5_outcomes = tuple(1 if o else 0 for o in self.last_5_outcomes)[-OUTCOME_WINDOW:]
        self.decay_factor = max(DECAY_FLOOR, min(1.0, float(self.decay_factor)))
        self.avg_confidence = max(0.0, min(1.0, float(self.avg_confidence)))

    @property
    def key(self) -> tuple[str, int, int]:
        """Identity of the state record."""
        return (self.user_id, self.module_id, self.skill_id)


@dataclass(frozen=True)
class QuestionItem:
    """A practice question as seen by the engine (read-only)."""

    id: str
    module_id: int
    skill_id: int
    difficulty: int
    expected_time_seconds: float = 60.0
    max_hints: int = 2


@dataclass(frozen=True)
class TargetSkill:
    """Snapshot of the skill a question was chosen for."""

    skill_id: int
    module_id: int
    category: SkillCategory
    mastery: float = 0.0


@dataclass(frozen=True)
class SelectionResult:
    """A selected question with the rationale behind the choice."""

    question: QuestionItem
    reason: str
    target_skill: TargetSkill

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "question_id": self.question.id,
            "module_id": self.question.module_id,
            "skill_id": self.question.skill_id,
            "difficulty": self.question.difficulty,
            "reason": self.reason,
            "category": self.target_skill.category.value,
            "mastery": round(self.target_skill.mastery, 3),
        }


@dataclass(frozen=True)
class DrillAnswer:
    """One answered question inside a completed drill."""

    question_id: str
    skill_id: int
    difficulty: int
    is_correct: bool


@dataclass
class DrillHistory:
    """A completed adaptive drill and its answers, in answer order."""

    drill_id: str
    user_id: str
    module_id: int
    completed_at: datetime
    answers: tuple[DrillAnswer, ...] = field(default_factory=tuple)

    def answers_for_skill(self, skill_id: int) -> list[DrillAnswer]:
        """Answers given for a single skill."""
        return [a for a in self.answers if a.skill_id == skill_id]

    def skill_accuracy(self, skill_id: int) -> float | None:
        """Accuracy for a skill in this drill, or None if it was not drilled."""
        answers = self.answers_for_skill(skill_id)
        if not answers:
            return None
        return sum(1 for a in answers if a.is_correct) / len(answers)

    @property
    def question_ids(self) -> list[str]:
        return [a.question_id for a in self.answers]
