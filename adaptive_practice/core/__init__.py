"""
Core Module - Shared domain models, decay math and errors.

Components:
- models: SkillState, QuestionItem, SelectionResult, DrillHistory
- decay: Forgetting model applied to mastery before classification
- exceptions: DependencyUnavailable and the error base class

All other packages (selection/, adaptive/, scoring/, stores/) import
from adaptive_practice.core rather than redefining these concepts.
"""

from adaptive_practice.core.decay import decay_factor, days_since, effective_mastery, skill_decay
from adaptive_practice.core.exceptions import (
    DependencyUnavailable,
    PracticeEngineError,
    dependency_call,
)
from adaptive_practice.core.models import (
    DrillAnswer,
    DrillHistory,
    QuestionItem,
    SelectionResult,
    SkillCategory,
    SkillState,
    TargetSkill,
)

__all__ = [
    # Models
    "DrillAnswer",
    "DrillHistory",
    "QuestionItem",
    "SelectionResult",
    "SkillCategory",
    "SkillState",
    "TargetSkill",
    # Decay
    "decay_factor",
    "days_since",
    "effective_mastery",
    "skill_decay",
    # Errors
    "DependencyUnavailable",
    "PracticeEngineError",
    "dependency_call",
]
