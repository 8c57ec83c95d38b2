"""
Tests for tier classification and tier configuration checks.
"""
from decimal import Decimal

import pytest
from hypothesis import given, strategies as st, settings

from apps.common.exceptions import InvalidSnapshotError, TierConfigurationError
from apps.membership.services import (
    TierSnapshot, classify, ensure_valid_tier_configuration, tier_progress,
    validate_tier_configuration
)


def _tier(level, name, low, high):
    return TierSnapshot(id=level, tier_level=level, tier_name=name, min_points=low, max_points=high)


DEFAULT_TIERS = [
    _tier(1, 'Bronze', 0, 99),
    _tier(2, 'Silver', 100, 499),
    _tier(3, 'Gold', 500, 1999),
    _tier(4, 'Platinum', 2000, None),
]


@st.composite
def well_formed_tiers(draw):
    """Contiguous tiers starting at 0 with an unbounded top tier"""
    widths = draw(st.lists(st.integers(min_value=1, max_value=500), min_size=0, max_size=5))
    tiers = []
    low = 0
    for level, width in enumerate(widths, start=1):
        tiers.append(_tier(level, f'T{level}', low, low + width - 1))
        low += width
    tiers.append(_tier(len(widths) + 1, 'Top', low, None))
    return tiers


class TestClassify:

    def test_silver_gold_boundaries(self, silver_gold_tiers):
        assert classify(999, silver_gold_tiers).tier_name == 'Silver'
        assert classify(1000, silver_gold_tiers).tier_name == 'Gold'
        assert classify(1500, silver_gold_tiers).tier_name == 'Gold'

    def test_zero_points_lands_in_entry_tier(self, silver_gold_tiers):
        assert classify(0, silver_gold_tiers).tier_name == 'Silver'

    def test_order_of_input_does_not_matter(self, silver_gold_tiers):
        assert classify(1000, list(reversed(silver_gold_tiers))).tier_name == 'Gold'

    def test_below_lowest_tier_is_no_tier(self):
        tiers = [_tier(1, 'Silver', 100, 999), _tier(2, 'Gold', 1000, None)]
        assert classify(50, tiers) is None

    def test_no_tiers_configured(self):
        assert classify(500, []) is None

    def test_overlap_resolves_to_lowest_level(self):
        tiers = [_tier(2, 'Gold', 500, None), _tier(1, 'Silver', 0, 800)]
        assert classify(600, tiers).tier_name == 'Silver'

    def test_negative_points_rejected(self, silver_gold_tiers):
        with pytest.raises(InvalidSnapshotError):
            classify(-1, silver_gold_tiers)

    @given(tiers=well_formed_tiers(), points=st.integers(min_value=0, max_value=5000))
    @settings(max_examples=100, deadline=None)
    def test_total_on_well_formed_tiers(self, tiers, points):
        assert classify(points, tiers) is not None

    @given(
        tiers=well_formed_tiers(),
        points=st.integers(min_value=0, max_value=5000),
        extra=st.integers(min_value=0, max_value=5000),
    )
    @settings(max_examples=100, deadline=None)
    def test_monotonic_in_points(self, tiers, points, extra):
        lower = classify(points, tiers)
        higher = classify(points + extra, tiers)
        assert higher.tier_level >= lower.tier_level


class TestTierConfiguration:

    def test_default_tiers_are_valid(self):
        assert validate_tier_configuration(DEFAULT_TIERS) == []
        ensure_valid_tier_configuration(DEFAULT_TIERS)

    @given(tiers=well_formed_tiers())
    @settings(max_examples=50, deadline=None)
    def test_generated_tiers_are_valid(self, tiers):
        assert validate_tier_configuration(tiers) == []

    def test_gap_reported(self):
        tiers = [_tier(1, 'Silver', 0, 999), _tier(2, 'Gold', 1200, None)]
        problems = validate_tier_configuration(tiers)
        assert len(problems) == 1
        assert 'Gap between Silver and Gold' in problems[0]

    def test_overlap_reported(self):
        tiers = [_tier(1, 'Silver', 0, 999), _tier(2, 'Gold', 900, None)]
        assert validate_tier_configuration(tiers) == ['Silver and Gold overlap']

    def test_unbounded_tier_must_be_last(self):
        tiers = [_tier(1, 'Silver', 0, None), _tier(2, 'Gold', 1000, None)]
        problems = validate_tier_configuration(tiers)
        assert any('only the highest tier may be unbounded' in p for p in problems)

    def test_min_above_max_reported(self):
        problems = validate_tier_configuration([_tier(1, 'Silver', 500, 100)])
        assert problems == ['Silver: min_points 500 exceeds max_points 100']

    def test_duplicate_level_reported(self):
        tiers = [_tier(1, 'Silver', 0, 999), _tier(1, 'Gold', 1000, None)]
        assert 'Duplicate tier level 1' in validate_tier_configuration(tiers)

    def test_ensure_raises_with_problems(self):
        tiers = [_tier(1, 'Silver', 0, 999), _tier(2, 'Gold', 1200, None)]
        with pytest.raises(TierConfigurationError) as excinfo:
            ensure_valid_tier_configuration(tiers)
        assert len(excinfo.value.problems) == 1


class TestTierProgress:

    def test_progress_towards_next_tier(self):
        progress = tier_progress(300, DEFAULT_TIERS)
        assert progress.current_tier.tier_name == 'Silver'
        assert progress.next_tier.tier_name == 'Gold'
        assert progress.remaining_points == 200
        assert progress.progress_percentage == Decimal('50.00')

    def test_top_tier_is_complete(self):
        progress = tier_progress(5000, DEFAULT_TIERS)
        assert progress.current_tier.tier_name == 'Platinum'
        assert progress.next_tier is None
        assert progress.remaining_points == 0
        assert progress.progress_percentage == Decimal('100')

    def test_below_lowest_tier(self):
        tiers = [_tier(1, 'Silver', 100, 999), _tier(2, 'Gold', 1000, None)]
        progress = tier_progress(25, tiers)
        assert progress.current_tier is None
        assert progress.next_tier.tier_name == 'Silver'
        assert progress.remaining_points == 75
        assert progress.progress_percentage == Decimal('25.00')
