"""
Skill Decay Model.

Skills fade without practice. Retention is modelled as

    decay_factor = max(floor, e^(-rate * days_since_last_practice))

with rate 0.05/day and a 10% floor:
- 0 days: 1.00
- 7 days: 0.70
- 14 days: 0.50
- 30 days: 0.22

A skill that was never practiced has nothing to decay and keeps 1.0.
"""

from __future__ import annotations

import math
from datetime import UTC, datetime

from adaptive_practice.core.models import DECAY_FLOOR

DECAY_RATE = 0.05
SECONDS_PER_DAY = 86400


def decay_factor(days: float, rate: float = DECAY_RATE, floor: float = DECAY_FLOOR) -> float:
    """
    Retention multiplier after `days` without practice.

    Args:
        days: Days since last practice (negative values count as 0)
        rate: Exponential decay rate per day
        floor: Minimum retention

    Returns:
        Factor in [floor, 1.0]
    """
    days = max(0.0, days)
    return max(floor, math.exp(-rate * days))


def days_since(last_practiced: datetime | None, now: datetime | None = None) -> int | None:
    """
    Whole days elapsed since the last practice.

    Args:
        last_practiced: Timestamp of the last attempt (naive values are UTC)
        now: Current time (defaults to UTC now)

    Returns:
        Floored day count, or None if the skill was never practiced
    """
    if last_practiced is None:
        return None

    if now is None:
        now = datetime.now(UTC)

    if last_practiced.tzinfo is None:
        last_practiced = last_practiced.replace(tzinfo=UTC)
    if now.tzinfo is None:
        now = now.replace(tzinfo=UTC)

    elapsed = (now - last_practiced).total_seconds()
    return max(0, math.floor(elapsed / SECONDS_PER_DAY))


def skill_decay(
    last_practiced: datetime | None,
    now: datetime | None = None,
    rate: float = DECAY_RATE,
    floor: float = DECAY_FLOOR,
) -> float:
    """Decay factor for a skill given its last practice time."""
    days = days_since(last_practiced, now)
    if days is None:
        return 1.0
    return decay_factor(days, rate=rate, floor=floor)


def effective_mastery(mastery_level: float, factor: float) -> float:
    """Mastery after applying decay."""
    return mastery_level * factor
