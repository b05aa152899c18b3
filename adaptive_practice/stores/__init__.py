"""
Stores - persistence seams for the practice engine.

- interfaces: SkillStateStore, QuestionRepository, DrillHistoryStore protocols
- memory: dictionary-backed implementations
- sql: SQLAlchemy implementations (import from adaptive_practice.stores.sql)
"""
from adaptive_practice.stores.interfaces import (
    DrillHistoryStore,
    QuestionRepository,
    SkillStateStore,
)
from adaptive_practice.stores.memory import (
    InMemoryDrillHistoryStore,
    InMemoryQuestionRepository,
    InMemorySkillStateStore,
)

__all__ = [
    "DrillHistoryStore",
    "InMemoryDrillHistoryStore",
    "InMemoryQuestionRepository",
    "InMemorySkillStateStore",
    "QuestionRepository",
    "SkillStateStore",
]
