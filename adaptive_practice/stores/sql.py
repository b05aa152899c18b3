"""
SQL Stores.

SQLAlchemy-backed implementations of the store protocols. Every method runs
in its own session_scope() transaction; database errors are re-raised as
DependencyUnavailable so callers see one failure type regardless of backend.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from contextlib import contextmanager

from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload, sessionmaker

from adaptive_practice.core.exceptions import DependencyUnavailable
from adaptive_practice.core.models import DrillAnswer, DrillHistory, QuestionItem, SkillState
from adaptive_practice.db.database import session_scope
from adaptive_practice.db.models import DrillAnswerRow, DrillRow, QuestionRow, SkillStateRow


@contextmanager
def _translate_errors(dependency: str, operation: str) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        logger.error(f"{dependency}.{operation} database error: {exc}")
        raise DependencyUnavailable(dependency, operation, str(exc)) from exc


# =============================================================================
# Row <-> Domain Conversion
# =============================================================================


def _state_from_row(row: SkillStateRow) -> SkillState:
    return SkillState(
        user_id=row.user_id,
        module_id=row.module_id,
        skill_id=row.skill_id,
        current_difficulty=row.current_difficulty,
        mastery_level=row.mastery_level,
        attempts=row.attempts,
        correct=row.correct,
        last_5_outcomes=tuple(row.last_5_outcomes or ()),
        decay_factor=row.decay_factor,
        last_practiced=row.last_practiced,
        hints_usage_rate=row.hints_usage_rate,
        avg_confidence=row.avg_confidence,
        avg_time_seconds=row.avg_time_seconds,
    )


def _question_from_row(row: QuestionRow) -> QuestionItem:
    return QuestionItem(
        id=row.id,
        module_id=row.module_id,
        skill_id=row.skill_id,
        difficulty=row.difficulty,
        expected_time_seconds=row.expected_time_seconds,
        max_hints=row.max_hints,
    )


def _drill_from_row(row: DrillRow) -> DrillHistory:
    return DrillHistory(
        drill_id=row.id,
        user_id=row.user_id,
        module_id=row.module_id,
        completed_at=row.completed_at,
        answers=tuple(
            DrillAnswer(
                question_id=a.question_id,
                skill_id=a.skill_id,
                difficulty=a.difficulty,
                is_correct=a.is_correct,
            )
            for a in row.answers
        ),
    )


# =============================================================================
# Stores
# =============================================================================


class SqlSkillStateStore:
    """Skill states in the user_skill_states table."""

    def __init__(self, session_factory: sessionmaker[Session] | None = None):
        self._session_factory = session_factory

    def list_by_user(self, user_id: str) -> list[SkillState]:
        with _translate_errors("SqlSkillStateStore", "list_by_user"):
            with session_scope(self._session_factory) as session:
                rows = session.scalars(
                    select(SkillStateRow)
                    .where(SkillStateRow.user_id == user_id)
                    .order_by(SkillStateRow.module_id, SkillStateRow.skill_id)
                ).all()
                return [_state_from_row(r) for r in rows]

    def get(self, user_id: str, module_id: int, skill_id: int) -> SkillState | None:
        with _translate_errors("SqlSkillStateStore", "get"):
            with session_scope(self._session_factory) as session:
                row = session.scalars(
                    select(SkillStateRow).where(
                        SkillStateRow.user_id == user_id,
                        SkillStateRow.module_id == module_id,
                        SkillStateRow.skill_id == skill_id,
                    )
                ).first()
                return _state_from_row(row) if row else None

    def upsert(self, state: SkillState) -> None:
        with _translate_errors("SqlSkillStateStore", "upsert"):
            with session_scope(self._session_factory) as session:
                row = session.scalars(
                    select(SkillStateRow).where(
                        SkillStateRow.user_id == state.user_id,
                        SkillStateRow.module_id == state.module_id,
                        SkillStateRow.skill_id == state.skill_id,
                    )
                ).first()
                if row is None:
                    row = SkillStateRow(
                        user_id=state.user_id,
                        module_id=state.module_id,
                        skill_id=state.skill_id,
                    )
                    session.add(row)

                row.current_difficulty = state.current_difficulty
                row.mastery_level = state.mastery_level
                row.attempts = state.attempts
                row.correct = state.correct
                row.last_5_outcomes = list(state.last_5_outcomes)
                row.decay_factor = state.decay_factor
                row.last_practiced = state.last_practiced
                row.hints_usage_rate = state.hints_usage_rate
                row.avg_confidence = state.avg_confidence
                row.avg_time_seconds = state.avg_time_seconds


class SqlQuestionRepository:
    """Question bank in the questions table, ordered by question id."""

    def __init__(self, session_factory: sessionmaker[Session] | None = None):
        self._session_factory = session_factory

    def add(self, questions: Iterable[QuestionItem]) -> int:
        """Insert or update questions. Returns the number written."""
        count = 0
        with _translate_errors("SqlQuestionRepository", "add"):
            with session_scope(self._session_factory) as session:
                for question in questions:
                    session.merge(
                        QuestionRow(
                            id=question.id,
                            module_id=question.module_id,
                            skill_id=question.skill_id,
                            difficulty=question.difficulty,
                            expected_time_seconds=question.expected_time_seconds,
                            max_hints=question.max_hints,
                        )
                    )
                    count += 1
        logger.debug(f"Stored {count} questions")
        return count

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
        stmt = select(QuestionRow).where(
            QuestionRow.difficulty >= difficulty_min,
            QuestionRow.difficulty <= difficulty_max,
        )
        if module_id is not None:
            stmt = stmt.where(QuestionRow.module_id == module_id)
        if module_ids is not None:
            stmt = stmt.where(QuestionRow.module_id.in_(list(module_ids)))
        if skill_id is not None:
            stmt = stmt.where(QuestionRow.skill_id == skill_id)
        excluded = list(excluding)
        if excluded:
            stmt = stmt.where(QuestionRow.id.not_in(excluded))
        stmt = stmt.order_by(QuestionRow.id)
        if limit is not None:
            stmt = stmt.limit(limit)

        with _translate_errors("SqlQuestionRepository", "find"):
            with session_scope(self._session_factory) as session:
                return [_question_from_row(r) for r in session.scalars(stmt).all()]

    def distinct_skill_ids(self, module_id: int) -> list[int]:
        with _translate_errors("SqlQuestionRepository", "distinct_skill_ids"):
            with session_scope(self._session_factory) as session:
                return list(
                    session.scalars(
                        select(QuestionRow.skill_id)
                        .where(QuestionRow.module_id == module_id)
                        .distinct()
                        .order_by(QuestionRow.skill_id)
                    ).all()
                )

    def lowest_difficulty_available(
        self, module_id: int, skill_id: int, excluding: Iterable[str] = ()
    ) -> QuestionItem | None:
        stmt = select(QuestionRow).where(
            QuestionRow.module_id == module_id,
            QuestionRow.skill_id == skill_id,
        )
        excluded = list(excluding)
        if excluded:
            stmt = stmt.where(QuestionRow.id.not_in(excluded))
        stmt = stmt.order_by(QuestionRow.difficulty, QuestionRow.id).limit(1)

        with _translate_errors("SqlQuestionRepository", "lowest_difficulty_available"):
            with session_scope(self._session_factory) as session:
                row = session.scalars(stmt).first()
                return _question_from_row(row) if row else None

    def get(self, question_id: str) -> QuestionItem | None:
        with _translate_errors("SqlQuestionRepository", "get"):
            with session_scope(self._session_factory) as session:
                row = session.get(QuestionRow, question_id)
                return _question_from_row(row) if row else None


class SqlDrillHistoryStore:
    """Completed drills in the adaptive_drills / drill_answers tables."""

    def __init__(self, session_factory: sessionmaker[Session] | None = None):
        self._session_factory = session_factory

    def recent_completed_drills(
        self, user_id: str, module_id: int, limit: int | None = None
    ) -> list[DrillHistory]:
        stmt = (
            select(DrillRow)
            .options(selectinload(DrillRow.answers))
            .where(DrillRow.user_id == user_id, DrillRow.module_id == module_id)
            .order_by(DrillRow.completed_at.desc())
        )
        if limit is not None:
            stmt = stmt.limit(limit)

        with _translate_errors("SqlDrillHistoryStore", "recent_completed_drills"):
            with session_scope(self._session_factory) as session:
                return [_drill_from_row(r) for r in session.scalars(stmt).all()]

    def save(self, drill: DrillHistory) -> None:
        with _translate_errors("SqlDrillHistoryStore", "save"):
            with session_scope(self._session_factory) as session:
                row = DrillRow(
                    id=drill.drill_id,
                    user_id=drill.user_id,
                    module_id=drill.module_id,
                    completed_at=drill.completed_at,
                )
                row.answers = [
                    DrillAnswerRow(
                        position=i,
                        question_id=a.question_id,
                        skill_id=a.skill_id,
                        difficulty=a.difficulty,
                        is_correct=a.is_correct,
                    )
                    for i, a in enumerate(drill.answers)
                ]
                session.add(row)
        logger.info(f"Saved drill {drill.drill_id} with {len(drill.answers)} answers")
