"""
Adaptive Drill Planning.

Drills are fixed-size, module-scoped sessions. Difficulty is adapted only
between drills, from the most recent completed drill:

    no prior drill / skill absent -> difficulty 1 (cold start)
    accuracy < 40%                -> difficulty 1 (hard reset)
    accuracy = 100%               -> base + 3
    85-99%                        -> base + 2
    75-84%                        -> base + 1
    60-74%                        -> base
    40-59%                        -> base - 1

where base is the rounded mean difficulty attempted for the skill.

Slot allocation looks at up to 3 recent drills: mastered skills
(mean >= 90%, min >= 85%) get weight 0.3, struggling skills (mean < 50%)
get 1.5, everything else 1.0.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from loguru import logger

from adaptive_practice.core.exceptions import dependency_call
from adaptive_practice.core.models import (
    DrillHistory,
    SelectionResult,
    SkillCategory,
    TargetSkill,
    clamp_difficulty,
    round_half_up,
)
from adaptive_practice.stores.interfaces import QuestionRepository

COLD_START_DIFFICULTY = 1
RESET_ACCURACY = 0.40
ALLOCATION_WINDOW = 3
MIN_ALLOCATION_POINTS = 2

WEIGHT_MASTERED = 0.3
WEIGHT_STANDARD = 1.0
WEIGHT_STRUGGLING = 1.0 * 1.5

MASTERED_MEAN = 0.90
MASTERED_MIN = 0.85
STRUGGLING_MEAN = 0.50


@dataclass(frozen=True)
class SkillDrillPlan:
    """Difficulty, weight and slot count for one skill in the next drill."""

    skill_id: int
    difficulty: int
    weight: float
    slots: int


def drill_adjustment(accuracy: float) -> int:
    """Difficulty delta for accuracy of 40% or more."""
    if accuracy >= 1.0:
        return 3
    if accuracy >= 0.85:
        return 2
    if accuracy >= 0.75:
        return 1
    if accuracy >= 0.60:
        return 0
    return -1


def next_drill_difficulty(last_drill: DrillHistory | None, skill_id: int) -> int:
    """
    Difficulty for a skill in the next drill.

    Args:
        last_drill: Most recent completed drill for the module, if any
        skill_id: Skill being planned

    Returns:
        Difficulty in 1-10
    """
    if last_drill is None:
        logger.info(f"Skill {skill_id}: First drill -> Start at difficulty {COLD_START_DIFFICULTY}")
        return COLD_START_DIFFICULTY

    answers = last_drill.answers_for_skill(skill_id)
    if not answers:
        logger.info(f"Skill {skill_id}: Not in last drill -> Start at difficulty {COLD_START_DIFFICULTY}")
        return COLD_START_DIFFICULTY

    correct = sum(1 for a in answers if a.is_correct)
    accuracy = correct / len(answers)
    base = round_half_up(sum(a.difficulty for a in answers) / len(answers))

    if accuracy < RESET_ACCURACY:
        difficulty = COLD_START_DIFFICULTY
        logger.info(f"Skill {skill_id}: Poor ({accuracy:.0%}) -> RESET to difficulty 1")
    else:
        difficulty = clamp_difficulty(base + drill_adjustment(accuracy))

    logger.info(
        f"Skill {skill_id} result: {correct}/{len(answers)} ({accuracy:.0%}) | "
        f"Base: {base} -> New: {difficulty}"
    )
    return difficulty


def allocation_weight(
    recent_drills: Sequence[DrillHistory],
    skill_id: int,
    window: int = ALLOCATION_WINDOW,
) -> float:
    """
    Share of drill slots a skill should receive relative to its peers.

    Args:
        recent_drills: Completed drills, most recent first
        skill_id: Skill being weighted
        window: How many recent drills to inspect

    Returns:
        0.3 (mastered), 1.5 (struggling) or 1.0
    """
    accuracies = [
        acc
        for acc in (d.skill_accuracy(skill_id) for d in recent_drills[:window])
        if acc is not None
    ]
    if len(accuracies) < MIN_ALLOCATION_POINTS:
        return WEIGHT_STANDARD

    mean = sum(accuracies) / len(accuracies)
    if mean >= MASTERED_MEAN and min(accuracies) >= MASTERED_MIN:
        logger.info(f"Skill {skill_id}: MASTERED ({mean:.0%} avg) -> {WEIGHT_MASTERED}x allocation")
        return WEIGHT_MASTERED
    if mean < STRUGGLING_MEAN:
        logger.info(f"Skill {skill_id}: STRUGGLING ({mean:.0%} avg) -> {WEIGHT_STRUGGLING}x allocation")
        return WEIGHT_STRUGGLING
    return WEIGHT_STANDARD


def allocate_slots(weights: dict[int, float], session_size: int) -> dict[int, int]:
    """
    Turn allocation weights into per-skill question counts.

    Every skill gets at least one slot. Rounding drift is settled on the
    highest-weight skill (the last one on ties).

    Args:
        weights: Allocation weight per skill id, in drill order
        session_size: Total questions in the drill

    Returns:
        Slot count per skill id
    """
    if not weights:
        return {}

    total_weight = sum(weights.values())
    slots = {
        skill_id: max(1, round_half_up(session_size * weight / total_weight))
        for skill_id, weight in weights.items()
    }

    drift = sum(slots.values()) - session_size
    if drift:
        heaviest = None
        for skill_id, weight in weights.items():
            if heaviest is None or weight >= weights[heaviest]:
                heaviest = skill_id
        slots[heaviest] = max(1, slots[heaviest] - drift)

    return slots


def plan_drill(
    skill_ids: Sequence[int],
    completed_drills: Sequence[DrillHistory],
    session_size: int = 10,
    window: int = ALLOCATION_WINDOW,
) -> list[SkillDrillPlan]:
    """
    Plan difficulty and slots for every skill of a module.

    Args:
        skill_ids: Skills present in the module
        completed_drills: Completed drills for (user, module), most recent first
        session_size: Questions in the drill
        window: Drills inspected for allocation weighting

    Returns:
        One SkillDrillPlan per skill, in `skill_ids` order
    """
    last_drill = completed_drills[0] if completed_drills else None
    difficulties = {sid: next_drill_difficulty(last_drill, sid) for sid in skill_ids}
    weights = {sid: allocation_weight(completed_drills, sid, window) for sid in skill_ids}
    slots = allocate_slots(weights, session_size)

    logger.info(f"Question allocation for {len(skill_ids)} skills: {slots}")
    return [
        SkillDrillPlan(
            skill_id=sid,
            difficulty=difficulties[sid],
            weight=weights[sid],
            slots=slots[sid],
        )
        for sid in skill_ids
    ]


def select_for_plan(
    plan: SkillDrillPlan,
    module_id: int,
    repository: QuestionRepository,
    excluded: frozenset[str],
    mastery: float = 0.0,
) -> tuple[list[SelectionResult], frozenset[str]]:
    """
    Fill one skill's slots.

    Each slot first tries the exact planned difficulty, then the lowest
    difficulty still available for the skill. A skill with no questions
    left is under-filled.

    Args:
        plan: Planned difficulty and slot count for the skill
        module_id: Drill module
        repository: Question source
        excluded: Ids from all previous drills plus this drill's picks
        mastery: Current mastery snapshot for the result metadata

    Returns:
        (picks, grown exclusion set)
    """
    picks: list[SelectionResult] = []
    target = TargetSkill(
        skill_id=plan.skill_id,
        module_id=module_id,
        category=SkillCategory.ADAPTIVE,
        mastery=mastery,
    )

    while len(picks) < plan.slots:
        with dependency_call("QuestionRepository", "find"):
            exact = repository.find(
                module_id=module_id,
                skill_id=plan.skill_id,
                difficulty_min=plan.difficulty,
                difficulty_max=plan.difficulty,
                excluding=excluded,
                limit=1,
            )

        if exact:
            question = exact[0]
            reason = f"Adaptive Drill - Skill {plan.skill_id} Level {plan.difficulty}"
        else:
            logger.warning(
                f"No difficulty {plan.difficulty} questions for skill {plan.skill_id}, "
                "finding lowest available difficulty"
            )
            with dependency_call("QuestionRepository", "lowest_difficulty_available"):
                question = repository.lowest_difficulty_available(
                    module_id, plan.skill_id, excluding=excluded
                )
            if question is None:
                logger.error(f"No questions available for skill {plan.skill_id} in module {module_id}")
                break
            reason = (
                f"Adaptive Drill - Skill {plan.skill_id} Level {question.difficulty} "
                "(lowest available)"
            )

        picks.append(SelectionResult(question=question, reason=reason, target_skill=target))
        excluded = excluded | {question.id}

    logger.info(f"Selected {len(picks)}/{plan.slots} questions for skill {plan.skill_id}")
    return picks, excluded
