"""
Difficulty Adaptation.

Components:
- continuous: per-answer adaptation over the trailing 5 outcomes
- drill: between-drill difficulty, allocation weighting and slot filling
- attempts: AttemptRecorder, the grade-time write-back into skill state
"""
from adaptive_practice.adaptive.attempts import AttemptOutcome, AttemptRecorder
from adaptive_practice.adaptive.continuous import AttemptUpdate, apply_attempt, continuous_adjustment
from adaptive_practice.adaptive.drill import (
    SkillDrillPlan,
    allocate_slots,
    allocation_weight,
    next_drill_difficulty,
    plan_drill,
)

__all__ = [
    "AttemptOutcome",
    "AttemptRecorder",
    "AttemptUpdate",
    "SkillDrillPlan",
    "allocate_slots",
    "allocation_weight",
    "apply_attempt",
    "continuous_adjustment",
    "next_drill_difficulty",
    "plan_drill",
]
