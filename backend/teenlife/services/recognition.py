"""
TeenLife Hours Backend — Recognition Calculator
=================================================

What:  PVSA (President's Volunteer Service Award) tier and milestone math.
How:   Pure functions over a total of *approved* hours. All cut-offs live in
       one RecognitionConfig table; callers pass a different table to test
       or to change the program rules.
Who:   VolunteerService (milestone checks after a verification transition)
       and GET /api/volunteer/recognition.

PVSA bands:
    Ages 11-15:            bronze 50,  silver 75,  gold 100
    Everyone else / unknown: bronze 100, silver 175, gold 250

Milestones (independent of tier): 10, 50, 100, 200, 500 hours. When one
transition jumps over several milestones only the highest is reported.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple

TIERS = ("none", "bronze", "silver", "gold")


@dataclass(frozen=True)
class TierThresholds:
    bronze: float
    silver: float
    gold: float

    def floor_of(self, tier: str) -> float:
        """Hours at which `tier` starts; 0 for none."""
        if tier == "none":
            return 0.0
        return getattr(self, tier)


@dataclass(frozen=True)
class RecognitionConfig:
    milestones: Tuple[float, ...] = (10, 50, 100, 200, 500)
    younger_age_range: Tuple[int, int] = (11, 15)
    younger: TierThresholds = field(default_factory=lambda: TierThresholds(50, 75, 100))
    default: TierThresholds = field(default_factory=lambda: TierThresholds(100, 175, 250))

    def thresholds_for(self, age: Optional[int]) -> TierThresholds:
        low, high = self.younger_age_range
        if age is not None and low <= age <= high:
            return self.younger
        return self.default


DEFAULT_RECOGNITION_CONFIG = RecognitionConfig()


@dataclass(frozen=True)
class RecognitionState:
    approved_hours_total: float
    tier: str
    next_tier: str  # "max" once gold is reached
    thresholds: TierThresholds
    progress_percent: float
    hours_to_next_tier: float


def compute_tier(
    total_approved_hours: float,
    age: Optional[int] = None,
    config: RecognitionConfig = DEFAULT_RECOGNITION_CONFIG,
) -> RecognitionState:
    """
    Derive the PVSA tier for a total of approved hours.

    Progress is linear between the current tier's floor and the next tier's
    threshold, clamped to [0, 100]. At gold there is no next tier: progress
    is 100 and nothing remains.
    """
    thresholds = config.thresholds_for(age)
    total = max(0.0, float(total_approved_hours))

    if total >= thresholds.gold:
        tier = "gold"
    elif total >= thresholds.silver:
        tier = "silver"
    elif total >= thresholds.bronze:
        tier = "bronze"
    else:
        tier = "none"

    if tier == "gold":
        return RecognitionState(
            approved_hours_total=total,
            tier=tier,
            next_tier="max",
            thresholds=thresholds,
            progress_percent=100.0,
            hours_to_next_tier=0.0,
        )

    next_tier = TIERS[TIERS.index(tier) + 1]
    floor = thresholds.floor_of(tier)
    ceiling = thresholds.floor_of(next_tier)
    progress = (total - floor) / (ceiling - floor) * 100

    return RecognitionState(
        approved_hours_total=total,
        tier=tier,
        next_tier=next_tier,
        thresholds=thresholds,
        progress_percent=round(min(100.0, max(0.0, progress)), 2),
        hours_to_next_tier=max(0.0, ceiling - total),
    )


def check_milestone(
    old_total: float,
    new_total: float,
    config: RecognitionConfig = DEFAULT_RECOGNITION_CONFIG,
) -> Optional[float]:
    """
    Return the highest milestone crossed going from old_total to new_total.

    A milestone m is crossed when `new_total >= m and old_total < m`.
    Returns None when nothing was crossed, including for decreasing totals.
    """
    crossed = [m for m in config.milestones if new_total >= m and old_total < m]
    if not crossed:
        return None
    return max(crossed)
