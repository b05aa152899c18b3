"""
Question Selection.

Pipeline: classifier -> distribution -> candidates, orchestrated by
QuestionSelectionService (regular sessions and adaptive drills).
"""
from adaptive_practice.selection.classifier import ClassifiedSkill, classify_skills
from adaptive_practice.selection.distribution import CategoryQuota, plan_distribution
from adaptive_practice.selection.service import QuestionSelectionService

__all__ = [
    "CategoryQuota",
    "ClassifiedSkill",
    "QuestionSelectionService",
    "classify_skills",
    "plan_distribution",
]
