"""
Practice Engine Tables.

SQLAlchemy models backing the SQL stores:
- User skill state (one row per user x module x skill)
- Question bank
- Completed adaptive drills and their answers
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Declarative base for all practice engine tables."""


class SkillStateRow(Base):
    """
    Learning state per user per micro-skill.

    Mastery is stored on the 0-1 scale; last_5_outcomes is a JSON list of
    0/1 values, most recent last.
    """

    __tablename__ = "user_skill_states"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    module_id: Mapped[int] = mapped_column(Integer, nullable=False)
    skill_id: Mapped[int] = mapped_column(Integer, nullable=False)

    current_difficulty: Mapped[int] = mapped_column(Integer, default=1)
    mastery_level: Mapped[float] = mapped_column(Float, default=0.0)
    attempts: Mapped[int] = mapped_column(Integer, default=0)
    correct: Mapped[int] = mapped_column(Integer, default=0)
    last_5_outcomes: Mapped[list] = mapped_column(JSON, default=list)
    decay_factor: Mapped[float] = mapped_column(Float, default=1.0)
    last_practiced: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    hints_usage_rate: Mapped[float] = mapped_column(Float, default=0.0)
    avg_confidence: Mapped[float] = mapped_column(Float, default=0.5)
    avg_time_seconds: Mapped[float] = mapped_column(Float, default=0.0)

    __table_args__ = (
        UniqueConstraint("user_id", "module_id", "skill_id", name="uq_user_skill_state"),
    )

    def __repr__(self) -> str:
        return (
            f"<SkillStateRow(user={self.user_id}, module={self.module_id}, "
            f"skill={self.skill_id}, mastery={self.mastery_level:.2f})>"
        )


class QuestionRow(Base):
    """A practice question tagged with module, micro-skill and difficulty."""

    __tablename__ = "questions"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    module_id: Mapped[int] = mapped_column(Integer, nullable=False)
    skill_id: Mapped[int] = mapped_column(Integer, nullable=False)
    difficulty: Mapped[int] = mapped_column(Integer, nullable=False)
    expected_time_seconds: Mapped[float] = mapped_column(Float, default=60.0)
    max_hints: Mapped[int] = mapped_column(Integer, default=2)

    __table_args__ = (
        Index("idx_questions_module_skill_difficulty", "module_id", "skill_id", "difficulty"),
    )


class DrillRow(Base):
    """A completed adaptive drill."""

    __tablename__ = "adaptive_drills"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    module_id: Mapped[int] = mapped_column(Integer, nullable=False)
    completed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    answers: Mapped[list[DrillAnswerRow]] = relationship(
        back_populates="drill",
        order_by="DrillAnswerRow.position",
        cascade="all, delete-orphan",
    )

    __table_args__ = (Index("idx_drills_user_module", "user_id", "module_id", "completed_at"),)


class DrillAnswerRow(Base):
    """One answer inside a completed drill."""

    __tablename__ = "drill_answers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    drill_id: Mapped[str] = mapped_column(
        ForeignKey("adaptive_drills.id", ondelete="CASCADE"), nullable=False
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    question_id: Mapped[str] = mapped_column(String(64), nullable=False)
    skill_id: Mapped[int] = mapped_column(Integer, nullable=False)
    difficulty: Mapped[int] = mapped_column(Integer, nullable=False)
    is_correct: Mapped[bool] = mapped_column(Boolean, nullable=False)

    drill: Mapped[DrillRow] = relationship(back_populates="answers")
