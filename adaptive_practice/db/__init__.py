# SQLAlchemy persistence
from .database import (
    build_engine,
    build_session_factory,
    get_engine,
    get_session_factory,
    init_db,
    session_scope,
)
from .models import Base, DrillAnswerRow, DrillRow, QuestionRow, SkillStateRow

__all__ = [
    "Base",
    "DrillAnswerRow",
    "DrillRow",
    "QuestionRow",
    "SkillStateRow",
    "build_engine",
    "build_session_factory",
    "get_engine",
    "get_session_factory",
    "init_db",
    "session_scope",
]
