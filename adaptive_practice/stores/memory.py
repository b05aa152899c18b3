"""
In-Memory Stores.

Dictionary-backed implementations of the store protocols. Used by the test
suite and for quick demos; questions keep insertion order so selections are
reproducible with a seeded RNG.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace

from adaptive_practice.core.models import DrillHistory, QuestionItem, SkillState


class InMemorySkillStateStore:
    """Skill states keyed by (user_id, module_id, skill_id)."""

    def __init__(self, states: Iterable[SkillState] = ()):
        self._states: dict[tuple[str, int, int], SkillState] = {}
        for state in states:
            self.upsert(state)

    def list_by_user(self, user_id: str) -> list[SkillState]:
        return [replace(s) for key, s in self._states.items() if key[0] == user_id]

    def get(self, user_id: str, module_id: int, skill_id: int) -> SkillState | None:
        state = self._states.get((user_id, module_id, skill_id))
        return replace(state) if state else None

    def upsert(self, state: SkillState) -> None:
        self._states[state.key] = replace(state)

    def __len__(self) -> int:
        return len(self._states)


class InMemoryQuestionRepository:
    """Question bank held in a list."""

    def __init__(self, questions: Iterable[QuestionItem] = ()):
        self._questions: dict[str, QuestionItem] = {}
        self.add(questions)

    def add(self, questions: Iterable[QuestionItem]) -> None:
        for question in questions:
            self._questions[question.id] = question

    def find(
        self,
        module_id: int | None = None,
        skill_id: int | None = None,
        difficulty_min: int = 1,
        difficulty_max: int = 10,
        excluding: Iterable[str] = (),
        limit: int | None = None,
        module_ids: Iterable[int] | None = None,
    ) -> list[QuestionItem]:
        excluded = set(excluding)
        allowed_modules = set(module_ids) if module_ids is not None else None
        matches = []
        for question in self._questions.values():
            if limit is not None and len(matches) >= limit:
                break
            if question.id in excluded:
                continue
            if module_id is not None and question.module_id != module_id:
                continue
            if allowed_modules is not None and question.module_id not in allowed_modules:
                continue
            if skill_id is not None and question.skill_id != skill_id:
                continue
            if not difficulty_min <= question.difficulty <= difficulty_max:
                continue
            matches.append(question)
        return matches

    def distinct_skill_ids(self, module_id: int) -> list[int]:
        seen: list[int] = []
        for question in self._questions.values():
            if question.module_id == module_id and question.skill_id not in seen:
                seen.append(question.skill_id)
        return seen

    def lowest_difficulty_available(
        self, module_id: int, skill_id: int, excluding: Iterable[str] = ()
    ) -> QuestionItem | None:
        candidates = self.find(module_id=module_id, skill_id=skill_id, excluding=excluding)
        if not candidates:
            return None
        return min(candidates, key=lambda q: q.difficulty)

    def get(self, question_id: str) -> QuestionItem | None:
        return self._questions.get(question_id)

    def __len__(self) -> int:
        return len(self._questions)


class InMemoryDrillHistoryStore:
    """Completed drills, returned most recent first."""

    def __init__(self, drills: Iterable[DrillHistory] = ()):
        self._drills: list[DrillHistory] = []
        for drill in drills:
            self.save(drill)

    def recent_completed_drills(
        self, user_id: str, module_id: int, limit: int | None = None
    ) -> list[DrillHistory]:
        drills = [d for d in self._drills if d.user_id == user_id and d.module_id == module_id]
        drills.sort(key=lambda d: d.completed_at, reverse=True)
        return drills if limit is None else drills[:limit]

    def save(self, drill: DrillHistory) -> None:
        self._drills.append(drill)
