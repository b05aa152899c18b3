"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import random
import sys
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from adaptive_practice.core.models import (  # noqa: E402
    DrillAnswer,
    DrillHistory,
    QuestionItem,
    SkillState,
)
from adaptive_practice.selection.service import QuestionSelectionService  # noqa: E402
from adaptive_practice.stores.memory import (  # noqa: E402
    InMemoryDrillHistoryStore,
    InMemoryQuestionRepository,
    InMemorySkillStateStore,
)

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=UTC)


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests (SQLite database)")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


# ========================================
# Builders
# ========================================


def make_state(
    module_id: int = 1,
    skill_id: int = 1,
    mastery: float = 0.5,
    difficulty: int = 3,
    user_id: str = "learner-1",
    days_ago: float | None = 0,
    **kwargs,
) -> SkillState:
    """Skill state practiced `days_ago` days before NOW (None = never)."""
    last = NOW - timedelta(days=days_ago) if days_ago is not None else None
    return SkillState(
        user_id=user_id,
        module_id=module_id,
        skill_id=skill_id,
        current_difficulty=difficulty,
        mastery_level=mastery,
        last_practiced=last,
        **kwargs,
    )


def make_bank(
    modules=(1,),
    skills=(1, 2, 3),
    difficulties=range(1, 11),
    per_level: int = 2,
) -> list[QuestionItem]:
    """Question ids look like m1-s2-d5-0."""
    return [
        QuestionItem(id=f"m{m}-s{s}-d{d}-{i}", module_id=m, skill_id=s, difficulty=d)
        for m in modules
        for s in skills
        for d in difficulties
        for i in range(per_level)
    ]


def make_drill(
    drill_id: str,
    answers: list[tuple[int, int, bool]],
    completed_at: datetime,
    module_id: int = 1,
    user_id: str = "learner-1",
) -> DrillHistory:
    """Drill from (skill_id, difficulty, is_correct) tuples; question ids are generated."""
    return DrillHistory(
        drill_id=drill_id,
        user_id=user_id,
        module_id=module_id,
        completed_at=completed_at,
        answers=tuple(
            DrillAnswer(
                question_id=f"{drill_id}-q{i}",
                skill_id=skill_id,
                difficulty=difficulty,
                is_correct=correct,
            )
            for i, (skill_id, difficulty, correct) in enumerate(answers)
        ),
    )


class FailingStore:
    """Store double whose every method raises."""

    def __init__(self, exc: Exception | None = None):
        self.exc = exc or ConnectionError("connection refused")

    def __getattr__(self, name):
        def _fail(*args, **kwargs):
            raise self.exc

        return _fail


# ========================================
# Fixtures
# ========================================


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def rng():
    return random.Random(42)


@pytest.fixture
def skill_store():
    return InMemorySkillStateStore()


@pytest.fixture
def question_repo():
    return InMemoryQuestionRepository(make_bank())


@pytest.fixture
def drill_store():
    return InMemoryDrillHistoryStore()


@pytest.fixture
def service(skill_store, question_repo, drill_store, rng):
    """Selection service over in-memory stores with a seeded RNG."""
    return QuestionSelectionService(skill_store, question_repo, drill_store, rng=rng)
