"""
Points views module.
"""
from .settings_views import loyalty_settings
from .redemption_views import validate_points_redemption, get_max_redeemable_points
from .transaction_views import get_points_transactions

__all__ = [
    'loyalty_settings',
    'validate_points_redemption',
    'get_max_redeemable_points',
    'get_points_transactions',
]
