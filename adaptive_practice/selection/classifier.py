"""
Skill Classifier.

Buckets each practiced skill by decayed ("effective") mastery:
- Weak: below 0.50
- Moderate: 0.50 to 0.75
- Strong: 0.75 and above

Mastery is a 0-1 fraction throughout. Skills without a state record are
unstarted and never reach the classifier; new learners take the beginner
path instead.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime

from adaptive_practice.core.decay import DECAY_RATE, effective_mastery, skill_decay
from adaptive_practice.core.models import DECAY_FLOOR, SkillCategory, SkillState

WEAK_THRESHOLD = 0.50
STRONG_THRESHOLD = 0.75


@dataclass(frozen=True)
class ClassifiedSkill:
    """A skill state with its decay-adjusted mastery and need-tier."""

    state: SkillState
    decay_factor: float
    effective_mastery: float
    category: SkillCategory

    @property
    def module_id(self) -> int:
        return self.state.module_id

    @property
    def skill_id(self) -> int:
        return self.state.skill_id

    @property
    def current_difficulty(self) -> int:
        return self.state.current_difficulty


def categorize(mastery: float) -> SkillCategory:
    """Map an effective mastery (0-1) to a need-tier."""
    if mastery < WEAK_THRESHOLD:
        return SkillCategory.WEAK
    if mastery < STRONG_THRESHOLD:
        return SkillCategory.MODERATE
    return SkillCategory.STRONG


def classify_skill(
    state: SkillState,
    now: datetime | None = None,
    decay_rate: float = DECAY_RATE,
    decay_floor: float = DECAY_FLOOR,
) -> ClassifiedSkill:
    """Apply decay to one skill and classify it."""
    factor = skill_decay(state.last_practiced, now, rate=decay_rate, floor=decay_floor)
    mastery = effective_mastery(state.mastery_level, factor)
    return ClassifiedSkill(
        state=state,
        decay_factor=factor,
        effective_mastery=mastery,
        category=categorize(mastery),
    )


def classify_skills(
    states: Iterable[SkillState],
    now: datetime | None = None,
    decay_rate: float = DECAY_RATE,
    decay_floor: float = DECAY_FLOOR,
) -> list[ClassifiedSkill]:
    """
    Classify every skill state of a learner.

    Duplicate (module, skill) records keep the last one seen.

    Args:
        states: Skill states of one user
        now: Reference time for decay (defaults to UTC now)
        decay_rate: Forgetting rate per day
        decay_floor: Minimum retention

    Returns:
        Classified skills in input order
    """
    by_key: dict[tuple[int, int], ClassifiedSkill] = {}
    for state in states:
        by_key[(state.module_id, state.skill_id)] = classify_skill(
            state, now, decay_rate=decay_rate, decay_floor=decay_floor
        )
    return list(by_key.values())


def group_by_category(
    skills: Iterable[ClassifiedSkill],
) -> dict[SkillCategory, list[ClassifiedSkill]]:
    """Split classified skills into weak, moderate and strong lists."""
    groups: dict[SkillCategory, list[ClassifiedSkill]] = {
        SkillCategory.WEAK: [],
        SkillCategory.MODERATE: [],
        SkillCategory.STRONG: [],
    }
    for skill in skills:
        groups[skill.category].append(skill)
    return groups
