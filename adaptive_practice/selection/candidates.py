"""
Candidate Selector.

Picks concrete questions for a need-tier:
1. Order skills worst-first by effective mastery (optionally only focus modules)
2. Shift the skill's difficulty: weak -1 (floor 1), strong +1 (while below 5)
3. Take up to 2 questions within +/-1 of that target for each skill
4. Stop when the tier quota is met

The set of excluded question ids is passed in and handed back as a new
frozenset so each step is a pure function of its inputs. Back-fill and the
final shuffle live here as well.
"""

from __future__ import annotations

import random
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from loguru import logger

from adaptive_practice.core.exceptions import dependency_call
from adaptive_practice.core.models import (
    MIN_DIFFICULTY,
    QuestionItem,
    SelectionResult,
    SkillCategory,
    TargetSkill,
)
from adaptive_practice.selection.classifier import ClassifiedSkill
from adaptive_practice.stores.interfaces import QuestionRepository

# Regular sessions bias toward a 1-5 band; drills and continuous
# adaptation own the full 1-10 range.
SESSION_DIFFICULTY_CAP = 5
DIFFICULTY_TOLERANCE = 1
QUESTIONS_PER_SKILL = 2


@dataclass(frozen=True)
class SelectionStep:
    """Output of one selection step: picks plus the grown exclusion set."""

    results: tuple[SelectionResult, ...] = ()
    excluded: frozenset[str] = field(default_factory=frozenset)


def target_difficulty(current_difficulty: int, category: SkillCategory) -> int:
    """
    Difficulty to aim for in a regular session.

    Args:
        current_difficulty: Skill's adapted difficulty
        category: Need-tier of the skill

    Returns:
        Weak skills step down one level, strong skills step up one level
        while below the session cap; moderate skills keep their level.
    """
    if category == SkillCategory.WEAK and current_difficulty > MIN_DIFFICULTY:
        return max(MIN_DIFFICULTY, current_difficulty - 1)
    if category == SkillCategory.STRONG and current_difficulty < SESSION_DIFFICULTY_CAP:
        return min(SESSION_DIFFICULTY_CAP, current_difficulty + 1)
    return current_difficulty


def _reason(skill: ClassifiedSkill, category: SkillCategory) -> str:
    return (
        f"{category.value} area - mastery: {skill.effective_mastery * 100:.1f}%, "
        f"decay: {skill.decay_factor * 100:.0f}%"
    )


def select_from_category(
    skills: Sequence[ClassifiedSkill],
    quota: int,
    category: SkillCategory,
    repository: QuestionRepository,
    excluded: frozenset[str],
    focus_modules: Sequence[int] = (),
) -> SelectionStep:
    """
    Select up to `quota` questions for one need-tier.

    Args:
        skills: Classified skills of this tier
        quota: Questions wanted for the tier
        category: The tier being filled
        repository: Question source
        excluded: Ids that must not be picked
        focus_modules: Restrict to these modules when non-empty

    Returns:
        SelectionStep with the picks and `excluded` plus their ids
    """
    if quota <= 0 or not skills:
        return SelectionStep(excluded=excluded)

    ordered = sorted(skills, key=lambda s: s.effective_mastery)
    if focus_modules:
        ordered = [s for s in ordered if s.module_id in focus_modules]

    selected: list[SelectionResult] = []
    for skill in ordered:
        if len(selected) >= quota:
            break

        target = target_difficulty(skill.current_difficulty, category)
        with dependency_call("QuestionRepository", "find"):
            questions = repository.find(
                module_id=skill.module_id,
                skill_id=skill.skill_id,
                difficulty_min=target - DIFFICULTY_TOLERANCE,
                difficulty_max=target + DIFFICULTY_TOLERANCE,
                excluding=excluded,
                limit=QUESTIONS_PER_SKILL,
            )

        if not questions:
            logger.debug(
                f"No {category.value} questions near difficulty {target} for "
                f"module {skill.module_id} skill {skill.skill_id}"
            )
            continue

        for question in questions:
            if len(selected) >= quota:
                break
            selected.append(
                SelectionResult(
                    question=question,
                    reason=_reason(skill, category),
                    target_skill=TargetSkill(
                        skill_id=skill.skill_id,
                        module_id=skill.module_id,
                        category=category,
                        mastery=skill.effective_mastery,
                    ),
                )
            )
            excluded = excluded | {question.id}

    return SelectionStep(results=tuple(selected), excluded=excluded)


def _unstarted(question: QuestionItem, reason: str) -> SelectionResult:
    return SelectionResult(
        question=question,
        reason=reason,
        target_skill=TargetSkill(
            skill_id=question.skill_id,
            module_id=question.module_id,
            category=SkillCategory.UNSTARTED,
            mastery=0.0,
        ),
    )


def select_beginner_questions(
    repository: QuestionRepository,
    count: int,
    excluded: frozenset[str],
    modules: Sequence[int],
    max_difficulty: int = 2,
) -> SelectionStep:
    """
    Easy questions from foundational (or focus) modules for new learners.

    Args:
        repository: Question source
        count: Questions wanted
        excluded: Ids that must not be picked
        modules: Modules to draw from
        max_difficulty: Highest difficulty allowed

    Returns:
        SelectionStep with up to `count` beginner picks
    """
    if count <= 0:
        return SelectionStep(excluded=excluded)

    with dependency_call("QuestionRepository", "find"):
        questions = repository.find(
            module_ids=list(modules),
            difficulty_min=MIN_DIFFICULTY,
            difficulty_max=max_difficulty,
            excluding=excluded,
            limit=count,
        )

    results = tuple(
        _unstarted(q, "Beginner-friendly question for new user") for q in questions
    )
    return SelectionStep(results=results, excluded=excluded | {q.id for q in questions})


def fill_remaining_slots(
    repository: QuestionRepository,
    count: int,
    excluded: frozenset[str],
    focus_modules: Sequence[int] = (),
) -> SelectionStep:
    """
    Top up a short selection with any non-excluded questions.

    Skill and tier targeting are ignored; only the focus-module filter applies.
    """
    if count <= 0:
        return SelectionStep(excluded=excluded)

    with dependency_call("QuestionRepository", "find"):
        questions = repository.find(
            excluding=excluded,
            limit=count,
            module_ids=list(focus_modules) if focus_modules else None,
        )

    results = tuple(
        _unstarted(q, "Fill question - maintaining session size") for q in questions
    )
    return SelectionStep(results=results, excluded=excluded | {q.id for q in questions})


def shuffle_results(
    results: Iterable[SelectionResult], rng: random.Random | None = None
) -> list[SelectionResult]:
    """Return a uniformly shuffled copy (Fisher-Yates via Random.shuffle)."""
    shuffled = list(results)
    (rng or random.Random()).shuffle(shuffled)
    return shuffled
