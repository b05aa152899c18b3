"""
Unit tests for the skill classifier.

Tests:
- Threshold boundaries on the 0-1 mastery scale
- Decay applied before classification
- Grouping and duplicate handling
"""

import pytest
from conftest import NOW, make_state

from adaptive_practice.core.models import SkillCategory
from adaptive_practice.selection.classifier import (
    categorize,
    classify_skill,
    classify_skills,
    group_by_category,
)


class TestCategorize:
    """Tests for tier boundaries."""

    @pytest.mark.parametrize(
        "mastery,expected",
        [
            (0.0, SkillCategory.WEAK),
            (0.499, SkillCategory.WEAK),
            (0.50, SkillCategory.MODERATE),
            (0.749, SkillCategory.MODERATE),
            (0.75, SkillCategory.STRONG),
            (1.0, SkillCategory.STRONG),
        ],
    )
    def test_boundaries(self, mastery, expected):
        assert categorize(mastery) == expected


class TestClassifySkill:
    """Tests for decay-adjusted classification."""

    def test_fresh_skill_keeps_raw_mastery(self):
        skill = classify_skill(make_state(mastery=0.8, days_ago=0), NOW)

        assert skill.decay_factor == 1.0
        assert skill.effective_mastery == pytest.approx(0.8)
        assert skill.category == SkillCategory.STRONG

    def test_decay_can_demote_a_strong_skill(self):
        """0.9 mastery untouched for two weeks decays to about 0.45."""
        skill = classify_skill(make_state(mastery=0.9, days_ago=14), NOW)

        assert skill.effective_mastery == pytest.approx(0.9 * 0.4966, abs=1e-3)
        assert skill.category == SkillCategory.WEAK

    def test_never_practiced_has_no_decay(self):
        skill = classify_skill(make_state(mastery=0.6, days_ago=None), NOW)

        assert skill.decay_factor == 1.0
        assert skill.category == SkillCategory.MODERATE

    def test_exposes_state_fields(self):
        skill = classify_skill(make_state(module_id=4, skill_id=7, difficulty=6), NOW)

        assert (skill.module_id, skill.skill_id, skill.current_difficulty) == (4, 7, 6)


class TestClassifySkills:
    """Tests for classifying a learner's whole skill set."""

    def test_duplicates_keep_last_record(self):
        states = [
            make_state(module_id=1, skill_id=1, mastery=0.2),
            make_state(module_id=1, skill_id=1, mastery=0.9),
        ]

        skills = classify_skills(states, NOW)

        assert len(skills) == 1
        assert skills[0].category == SkillCategory.STRONG

    def test_same_skill_in_different_modules_is_distinct(self):
        states = [make_state(module_id=1, skill_id=1), make_state(module_id=2, skill_id=1)]

        assert len(classify_skills(states, NOW)) == 2

    def test_group_by_category(self):
        skills = classify_skills(
            [
                make_state(skill_id=1, mastery=0.1),
                make_state(skill_id=2, mastery=0.6),
                make_state(skill_id=3, mastery=0.7),
                make_state(skill_id=4, mastery=0.95),
            ],
            NOW,
        )

        groups = group_by_category(skills)

        assert [s.skill_id for s in groups[SkillCategory.WEAK]] == [1]
        assert [s.skill_id for s in groups[SkillCategory.MODERATE]] == [2, 3]
        assert [s.skill_id for s in groups[SkillCategory.STRONG]] == [4]

    def test_group_of_nothing_has_all_tiers(self):
        groups = group_by_category([])

        assert set(groups) == {SkillCategory.WEAK, SkillCategory.MODERATE, SkillCategory.STRONG}
        assert all(v == [] for v in groups.values())
