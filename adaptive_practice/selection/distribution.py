"""
Distribution Planner.

Turns the size of each need-tier into per-category question quotas.

Default mix: 40% weak, 40% moderate, 20% strong. When a tier has fewer
skills than its quota the surplus moves down the ladder:
- weak surplus: 60% (floored) to moderate, 40% (ceiled) to strong
- moderate surplus: all of it to strong

Strong is never capped here; the back-fill step covers any shortfall.
"""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from adaptive_practice.core.models import round_half_up

WEAK_SHARE = 0.40
MODERATE_SHARE = 0.40
STRONG_SHARE = 0.20

WEAK_SURPLUS_TO_MODERATE_PCT = 60


@dataclass(frozen=True)
class CategoryQuota:
    """Target question counts per need-tier."""

    weak: int
    moderate: int
    strong: int

    @property
    def total(self) -> int:
        return self.weak + self.moderate + self.strong


def base_quota(session_size: int) -> CategoryQuota:
    """The 40/40/20 split before any redistribution."""
    return CategoryQuota(
        weak=round_half_up(session_size * WEAK_SHARE),
        moderate=round_half_up(session_size * MODERATE_SHARE),
        strong=round_half_up(session_size * STRONG_SHARE),
    )


def plan_distribution(
    weak_count: int,
    moderate_count: int,
    strong_count: int,
    session_size: int = 10,
) -> CategoryQuota:
    """
    Plan how many questions each need-tier receives.

    Args:
        weak_count: Distinct weak skills
        moderate_count: Distinct moderate skills
        strong_count: Distinct strong skills
        session_size: Questions in the session

    Returns:
        CategoryQuota after redistribution
    """
    quota = base_quota(session_size)
    weak, moderate, strong = quota.weak, quota.moderate, quota.strong

    if weak_count < weak:
        surplus = weak - weak_count
        weak = weak_count
        # integer split keeps the surplus exact: floor(60%) and ceil(40%)
        to_moderate = (surplus * WEAK_SURPLUS_TO_MODERATE_PCT) // 100
        moderate += to_moderate
        strong += surplus - to_moderate

    if moderate_count < moderate:
        surplus = moderate - moderate_count
        moderate = moderate_count
        strong += surplus

    planned = CategoryQuota(weak=weak, moderate=moderate, strong=strong)
    logger.debug(
        f"Skill distribution - Weak: {weak_count}, Moderate: {moderate_count}, "
        f"Strong: {strong_count} -> target {planned.weak}/{planned.moderate}/{planned.strong}"
    )
    return planned
