"""
Test configuration for the outlet loyalty server.
"""
import os
from decimal import Decimal

import pytest


def pytest_configure():
    """Configure Django settings for testing."""
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'outlet_server.settings.test')


@pytest.fixture
def silver_gold_tiers():
    """Two-tier configuration: Silver 0-999, Gold 1000+"""
    from apps.membership.services import TierSnapshot
    return [
        TierSnapshot(id=1, tier_level=1, tier_name='Silver', min_points=0, max_points=999),
        TierSnapshot(id=2, tier_level=2, tier_name='Gold', min_points=1000, max_points=None),
    ]


@pytest.fixture
def loyalty_settings():
    from apps.points.services import LoyaltySettings
    return LoyaltySettings(
        is_enabled=True,
        points_per_item=Decimal('1'),
        point_value_idr=Decimal('1000'),
        min_points_to_redeem=10,
        max_points_per_transaction=100,
        max_redemption_percentage=50,
    )


@pytest.fixture
def member():
    from apps.membership.services import MemberSnapshot
    return MemberSnapshot(user_id=7, loyalty_points=200, tier_id=None)


@pytest.fixture
def api_client():
    from rest_framework.test import APIClient
    return APIClient()
