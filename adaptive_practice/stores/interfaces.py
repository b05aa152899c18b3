"""
Store Interfaces.

The engine never talks to a database directly. It is handed objects that
satisfy these protocols (constructor injection) so that selection and
adaptation logic can run against SQL, in-memory or test doubles alike.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol

from adaptive_practice.core.models import DrillHistory, QuestionItem, SkillState


class SkillStateStore(Protocol):
    """Per user x module x skill learning state."""

    def list_by_user(self, user_id: str) -> list[SkillState]:
        """All skill states recorded for a user."""
        ...

    def get(self, user_id: str, module_id: int, skill_id: int) -> SkillState | None:
        """A single skill state, or None if the skill was never attempted."""
        ...

    def upsert(self, state: SkillState) -> None:
        """Insert or replace a skill state."""
        ...


class QuestionRepository(Protocol):
    """Read access to the question bank."""

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
        """
        Questions matching the filters, in the repository's stable order.

        `module_id` and `module_ids` may be combined; a question must
        satisfy both when both are given.
        """
        ...

    def distinct_skill_ids(self, module_id: int) -> list[int]:
        """Skill ids that have at least one question in the module."""
        ...

    def lowest_difficulty_available(
        self, module_id: int, skill_id: int, excluding: Iterable[str] = ()
    ) -> QuestionItem | None:
        """The easiest non-excluded question for a skill."""
        ...

    def get(self, question_id: str) -> QuestionItem | None:
        """A single question by id."""
        ...


class DrillHistoryStore(Protocol):
    """Completed adaptive drills."""

    def recent_completed_drills(
        self, user_id: str, module_id: int, limit: int | None = None
    ) -> list[DrillHistory]:
        """Completed drills, most recent first. `limit=None` returns all."""
        ...

    def save(self, drill: DrillHistory) -> None:
        """Record a completed drill."""
        ...
