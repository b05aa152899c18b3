"""
Question Selection Service.

Entry point for building practice sessions.

Regular sessions:
1. Classify the learner's skills by decayed mastery
2. Plan a 40/40/20 weak/moderate/strong mix
3. Pick questions per tier at an adjusted difficulty
4. Back-fill any shortfall, then shuffle

New learners (no skill state at all) get easy questions from the
foundational modules instead.

Adaptive drills plan per-skill difficulty and slot counts from previous
drills of the module and never repeat a question the learner has seen in
any earlier drill.

Selection is read-only: persisting attempt results is done separately by
AttemptRecorder.
"""

from __future__ import annotations

import random
from collections.abc import Sequence
from datetime import datetime

from loguru import logger

from adaptive_practice.adaptive.drill import ALLOCATION_WINDOW, plan_drill, select_for_plan
from adaptive_practice.core.decay import DECAY_RATE
from adaptive_practice.core.exceptions import dependency_call
from adaptive_practice.core.models import DECAY_FLOOR, SelectionResult, SkillCategory
from adaptive_practice.selection.candidates import (
    fill_remaining_slots,
    select_beginner_questions,
    select_from_category,
    shuffle_results,
)
from adaptive_practice.selection.classifier import classify_skills, group_by_category
from adaptive_practice.selection.distribution import plan_distribution
from adaptive_practice.stores.interfaces import (
    DrillHistoryStore,
    QuestionRepository,
    SkillStateStore,
)

DEFAULT_SESSION_SIZE = 10
DEFAULT_BEGINNER_MODULES = (0, 1, 2)
BEGINNER_MAX_DIFFICULTY = 2

TIER_ORDER = (SkillCategory.WEAK, SkillCategory.MODERATE, SkillCategory.STRONG)


class QuestionSelectionService:
    """
    Adaptive question selection over injected stores.

    The service keeps no per-request state, so one instance can serve
    concurrent requests as long as the injected stores allow it.
    """

    def __init__(
        self,
        skill_states: SkillStateStore,
        questions: QuestionRepository,
        drills: DrillHistoryStore,
        rng: random.Random | None = None,
        beginner_modules: Sequence[int] = DEFAULT_BEGINNER_MODULES,
        beginner_max_difficulty: int = BEGINNER_MAX_DIFFICULTY,
        decay_rate: float = DECAY_RATE,
        decay_floor: float = DECAY_FLOOR,
        allocation_window: int = ALLOCATION_WINDOW,
    ):
        """
        Initialize the service.

        Args:
            skill_states: Per-skill learner state
            questions: Question bank
            drills: Completed drill history
            rng: Random source for shuffling (seed it for reproducible order)
            beginner_modules: Foundational modules for new learners
            beginner_max_difficulty: Difficulty ceiling on the beginner path
            decay_rate: Forgetting rate per day
            decay_floor: Minimum retention
            allocation_window: Recent drills used for allocation weighting
        """
        self.skill_states = skill_states
        self.questions = questions
        self.drills = drills
        self.rng = rng or random.Random()
        self.beginner_modules = tuple(beginner_modules)
        self.beginner_max_difficulty = beginner_max_difficulty
        self.decay_rate = decay_rate
        self.decay_floor = decay_floor
        self.allocation_window = allocation_window

    @classmethod
    def from_settings(
        cls,
        settings,
        skill_states: SkillStateStore,
        questions: QuestionRepository,
        drills: DrillHistoryStore,
    ) -> QuestionSelectionService:
        """Build a service using values from config.Settings."""
        rng = random.Random(settings.random_seed) if settings.random_seed is not None else None
        return cls(
            skill_states,
            questions,
            drills,
            rng=rng,
            beginner_modules=settings.beginner_module_ids,
            beginner_max_difficulty=settings.beginner_max_difficulty,
            decay_rate=settings.decay_rate,
            decay_floor=settings.decay_floor,
            allocation_window=settings.allocation_window,
        )

    # ========================================
    # Regular Sessions
    # ========================================

    def select_questions_for_session(
        self,
        user_id: str,
        session_size: int = DEFAULT_SESSION_SIZE,
        exclude_ids: Sequence[str] = (),
        focus_modules: Sequence[int] = (),
        now: datetime | None = None,
    ) -> list[SelectionResult]:
        """
        Select a balanced, shuffled list of questions for a practice session.

        Args:
            user_id: Learner
            session_size: Questions wanted
            exclude_ids: Question ids that must not appear (e.g. recently attempted)
            focus_modules: Restrict selection to these modules when non-empty
            now: Reference time for decay (defaults to UTC now)

        Returns:
            Up to `session_size` SelectionResults with no duplicate questions

        Raises:
            DependencyUnavailable: A store call failed
        """
        logger.info(f"Selecting {session_size} questions for user: {user_id}")
        if session_size <= 0:
            return []

        excluded = frozenset(exclude_ids)
        focus = tuple(focus_modules)

        with dependency_call("SkillStateStore", "list_by_user"):
            states = self.skill_states.list_by_user(user_id)

        if not states:
            logger.info("New user detected - selecting beginner-friendly questions")
            step = select_beginner_questions(
                self.questions,
                session_size,
                excluded,
                modules=focus or self.beginner_modules,
                max_difficulty=self.beginner_max_difficulty,
            )
            return shuffle_results(step.results, self.rng)

        classified = classify_skills(
            states, now, decay_rate=self.decay_rate, decay_floor=self.decay_floor
        )
        groups = group_by_category(classified)
        quota = plan_distribution(
            len(groups[SkillCategory.WEAK]),
            len(groups[SkillCategory.MODERATE]),
            len(groups[SkillCategory.STRONG]),
            session_size,
        )
        quotas = {
            SkillCategory.WEAK: quota.weak,
            SkillCategory.MODERATE: quota.moderate,
            SkillCategory.STRONG: quota.strong,
        }

        selected: list[SelectionResult] = []
        for category in TIER_ORDER:
            remaining = session_size - len(selected)
            step = select_from_category(
                groups[category],
                min(quotas[category], remaining),
                category,
                self.questions,
                excluded,
                focus_modules=focus,
            )
            selected.extend(step.results)
            excluded = step.excluded

        if len(selected) < session_size:
            needed = session_size - len(selected)
            logger.warning(
                f"Only found {len(selected)}/{session_size} questions, filling remaining slots"
            )
            step = fill_remaining_slots(self.questions, needed, excluded, focus_modules=focus)
            selected.extend(step.results)
            excluded = step.excluded

        logger.info(f"Selected {len(selected)} questions for user {user_id}")
        return shuffle_results(selected, self.rng)

    def get_next_question(
        self,
        user_id: str,
        attempted_question_ids: Sequence[str] = (),
        now: datetime | None = None,
    ) -> SelectionResult | None:
        """
        Select a single next question for an ongoing session.

        Args:
            user_id: Learner
            attempted_question_ids: Questions already attempted in the session
            now: Reference time for decay

        Returns:
            The next SelectionResult, or None when nothing is left
        """
        results = self.select_questions_for_session(
            user_id,
            session_size=1,
            exclude_ids=attempted_question_ids,
            now=now,
        )
        return results[0] if results else None

    # ========================================
    # Adaptive Drills
    # ========================================

    def select_adaptive_drill_questions(
        self,
        user_id: str,
        module_id: int,
        session_size: int = DEFAULT_SESSION_SIZE,
    ) -> list[SelectionResult]:
        """
        Select questions for the next adaptive drill of a module.

        Args:
            user_id: Learner
            module_id: Drill module
            session_size: Drill slot budget

        Returns:
            Shuffled SelectionResults; empty when the module has no questions.
            Every skill of the module gets at least one slot, so a module with
            more skills than `session_size` yields one question per skill.

        Raises:
            DependencyUnavailable: A store call failed
        """
        logger.info(f"Selecting adaptive drill questions for user {user_id}, module {module_id}")
        if session_size <= 0:
            return []

        with dependency_call("QuestionRepository", "distinct_skill_ids"):
            skill_ids = self.questions.distinct_skill_ids(module_id)

        if not skill_ids:
            logger.warning(f"No micro-skills found for module {module_id}")
            return []

        with dependency_call("DrillHistoryStore", "recent_completed_drills"):
            completed = self.drills.recent_completed_drills(user_id, module_id, limit=None)

        excluded = frozenset(qid for drill in completed for qid in drill.question_ids)
        logger.info(
            f"Found {len(completed)} previous drill(s) with {len(excluded)} attempted questions to exclude"
        )

        plans = plan_drill(skill_ids, completed, session_size, window=self.allocation_window)

        selected: list[SelectionResult] = []
        for plan in plans:
            with dependency_call("SkillStateStore", "get"):
                state = self.skill_states.get(user_id, module_id, plan.skill_id)
            picks, excluded = select_for_plan(
                plan,
                module_id,
                self.questions,
                excluded,
                mastery=state.mastery_level if state else 0.0,
            )
            selected.extend(picks)

        return shuffle_results(selected, self.rng)
