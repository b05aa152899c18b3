"""
Unit tests for the in-memory stores.

Tests:
- Skill state upsert/get isolation
- Question filters, ordering and lowest-available lookup
- Drill history ordering
"""

from datetime import timedelta

from conftest import NOW, make_bank, make_drill, make_state

from adaptive_practice.core.models import QuestionItem
from adaptive_practice.stores.memory import (
    InMemoryDrillHistoryStore,
    InMemoryQuestionRepository,
    InMemorySkillStateStore,
)


class TestInMemorySkillStateStore:
    """Tests for skill state storage."""

    def test_upsert_and_get(self):
        store = InMemorySkillStateStore()
        store.upsert(make_state(module_id=1, skill_id=2, mastery=0.4))

        state = store.get("learner-1", 1, 2)

        assert state is not None
        assert state.mastery_level == 0.4
        assert store.get("learner-1", 1, 3) is None

    def test_upsert_replaces(self):
        store = InMemorySkillStateStore([make_state(mastery=0.2)])
        store.upsert(make_state(mastery=0.9))

        assert len(store) == 1
        assert store.get("learner-1", 1, 1).mastery_level == 0.9

    def test_list_by_user(self):
        store = InMemorySkillStateStore(
            [
                make_state(skill_id=1),
                make_state(skill_id=2),
                make_state(skill_id=1, user_id="someone-else"),
            ]
        )

        assert len(store.list_by_user("learner-1")) == 2
        assert store.list_by_user("nobody") == []

    def test_returned_states_are_copies(self):
        store = InMemorySkillStateStore([make_state(mastery=0.2)])

        state = store.get("learner-1", 1, 1)
        state.mastery_level = 1.0

        assert store.get("learner-1", 1, 1).mastery_level == 0.2


class TestInMemoryQuestionRepository:
    """Tests for question lookups."""

    def test_find_filters(self):
        repo = InMemoryQuestionRepository(make_bank(modules=(1, 2)))

        found = repo.find(module_id=2, skill_id=3, difficulty_min=4, difficulty_max=5)

        assert len(found) == 4
        assert all(q.module_id == 2 and q.skill_id == 3 for q in found)
        assert all(4 <= q.difficulty <= 5 for q in found)

    def test_find_with_module_list_exclusions_and_limit(self):
        repo = InMemoryQuestionRepository(make_bank(modules=(1, 2, 3)))

        found = repo.find(module_ids=[1, 3], excluding=["m1-s1-d1-0"], limit=3)

        assert len(found) == 3
        assert "m1-s1-d1-0" not in {q.id for q in found}
        assert all(q.module_id in (1, 3) for q in found)

    def test_find_keeps_insertion_order(self):
        questions = [
            QuestionItem(id="b", module_id=1, skill_id=1, difficulty=2),
            QuestionItem(id="a", module_id=1, skill_id=1, difficulty=1),
        ]
        repo = InMemoryQuestionRepository(questions)

        assert [q.id for q in repo.find()] == ["b", "a"]

    def test_distinct_skill_ids(self):
        repo = InMemoryQuestionRepository(make_bank(modules=(1, 2), skills=(4, 2, 9)))

        assert repo.distinct_skill_ids(1) == [4, 2, 9]
        assert repo.distinct_skill_ids(7) == []

    def test_lowest_difficulty_available(self):
        repo = InMemoryQuestionRepository(make_bank(skills=(1,), per_level=1))

        lowest = repo.lowest_difficulty_available(1, 1, excluding=["m1-s1-d1-0", "m1-s1-d2-0"])

        assert lowest.id == "m1-s1-d3-0"
        assert repo.lowest_difficulty_available(1, 99) is None

    def test_get(self):
        repo = InMemoryQuestionRepository(make_bank(skills=(1,)))

        assert repo.get("m1-s1-d5-1").difficulty == 5
        assert repo.get("missing") is None


class TestInMemoryDrillHistoryStore:
    """Tests for drill history."""

    def test_most_recent_first_and_limit(self):
        store = InMemoryDrillHistoryStore()
        for days_ago, drill_id in [(5, "old"), (1, "new"), (3, "mid")]:
            store.save(make_drill(drill_id, [(1, 1, True)], NOW - timedelta(days=days_ago)))

        drills = store.recent_completed_drills("learner-1", 1)

        assert [d.drill_id for d in drills] == ["new", "mid", "old"]
        assert [d.drill_id for d in store.recent_completed_drills("learner-1", 1, limit=2)] == [
            "new",
            "mid",
        ]

    def test_scoped_to_user_and_module(self):
        store = InMemoryDrillHistoryStore(
            [
                make_drill("a", [(1, 1, True)], NOW, module_id=1),
                make_drill("b", [(1, 1, True)], NOW, module_id=2),
                make_drill("c", [(1, 1, True)], NOW, user_id="other"),
            ]
        )

        assert [d.drill_id for d in store.recent_completed_drills("learner-1", 1)] == ["a"]
