"""
TeenLife Hours Backend — Recognition Calculator Tests
=======================================================

What:  PVSA tier and milestone math. Pure functions, no database.

What we test:
    ✅ Tier boundaries for both age bands
    ✅ Progress and hours remaining between tiers, and at gold
    ✅ Tier never decreases as hours grow
    ✅ Milestone crossing, including multi-milestone jumps and decreases
    ✅ A custom RecognitionConfig replaces the defaults
"""

import pytest

from teenlife.services.recognition import (
    DEFAULT_RECOGNITION_CONFIG,
    TIERS,
    RecognitionConfig,
    TierThresholds,
    check_milestone,
    compute_tier,
)


class TestComputeTier:
    """Tier derivation for the 16+ band (the default when age is unknown)."""

    @pytest.mark.parametrize(
        "total,expected_tier",
        [
            (0, "none"),
            (99.5, "none"),
            (100, "bronze"),
            (174, "bronze"),
            (175, "silver"),
            (249.99, "silver"),
            (250, "gold"),
            (1000, "gold"),
        ],
    )
    def test_default_band_boundaries(self, total, expected_tier):
        assert compute_tier(total).tier == expected_tier

    def test_midway_to_silver(self):
        """120h: bronze, 20 of the 75 hours between bronze and silver."""
        state = compute_tier(120)

        assert state.tier == "bronze"
        assert state.next_tier == "silver"
        assert state.progress_percent == pytest.approx(26.67)
        assert state.hours_to_next_tier == 55

    def test_progress_from_zero(self):
        state = compute_tier(25)

        assert state.tier == "none"
        assert state.next_tier == "bronze"
        assert state.progress_percent == 25.0
        assert state.hours_to_next_tier == 75

    def test_gold_is_terminal(self):
        state = compute_tier(300)

        assert state.tier == "gold"
        assert state.next_tier == "max"
        assert state.progress_percent == 100.0
        assert state.hours_to_next_tier == 0

    def test_negative_total_clamped(self):
        state = compute_tier(-5)
        assert state.tier == "none"
        assert state.approved_hours_total == 0
        assert state.progress_percent == 0

    def test_tier_is_monotonic_in_hours(self):
        ranks = [TIERS.index(compute_tier(h / 2).tier) for h in range(0, 700)]
        assert ranks == sorted(ranks)


class TestComputeTierYoungerBand:
    """Ages 11-15 use the 50/75/100 thresholds."""

    @pytest.mark.parametrize(
        "total,expected_tier",
        [(49, "none"), (50, "bronze"), (75, "silver"), (99, "silver"), (100, "gold")],
    )
    def test_younger_band_boundaries(self, total, expected_tier):
        assert compute_tier(total, age=13).tier == expected_tier

    @pytest.mark.parametrize("age", [11, 15])
    def test_band_edges_are_inclusive(self, age):
        assert compute_tier(60, age=age).thresholds.bronze == 50

    @pytest.mark.parametrize("age", [10, 16, 17, None])
    def test_outside_band_uses_default(self, age):
        state = compute_tier(60, age=age)
        assert state.thresholds.bronze == 100
        assert state.tier == "none"

    def test_same_hours_differ_by_age(self):
        assert compute_tier(80, age=14).tier == "silver"
        assert compute_tier(80, age=16).tier == "none"


class TestCheckMilestone:

    @pytest.mark.parametrize(
        "old,new,expected",
        [
            (5, 12, 10),
            (0, 10, 10),
            (9.5, 10, 10),
            (10, 12, None),
            (45, 55, 50),
            (95, 120, 100),
            (480, 520, 500),
            (520, 600, None),
        ],
    )
    def test_single_crossing(self, old, new, expected):
        assert check_milestone(old, new) == expected

    def test_jump_over_several_reports_highest(self):
        assert check_milestone(0, 120) == 100
        assert check_milestone(5, 600) == 500

    def test_decrease_crosses_nothing(self):
        assert check_milestone(120, 90) is None

    def test_no_change(self):
        assert check_milestone(50, 50) is None


class TestRecognitionConfig:

    def test_defaults(self):
        assert DEFAULT_RECOGNITION_CONFIG.milestones == (10, 50, 100, 200, 500)
        assert DEFAULT_RECOGNITION_CONFIG.thresholds_for(None) == TierThresholds(100, 175, 250)
        assert DEFAULT_RECOGNITION_CONFIG.thresholds_for(12) == TierThresholds(50, 75, 100)

    def test_custom_config_is_used(self):
        config = RecognitionConfig(
            milestones=(1, 2),
            default=TierThresholds(bronze=1, silver=2, gold=3),
        )

        assert compute_tier(2.5, config=config).tier == "silver"
        assert check_milestone(0, 5, config) == 2
        assert check_milestone(0, 15) == 10
