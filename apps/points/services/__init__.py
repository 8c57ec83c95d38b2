"""
Points services module.
"""
from .loyalty_settings import LoyaltySettings, get_loyalty_settings
from .points_calculator import accrue, accrue_for_order
from .redemption_guard import (
    REDEMPTION_MESSAGES, RedemptionReason, RedemptionResult, authorize_redemption, max_redeemable_points
)
from .points_service import PointsService

__all__ = [
    'LoyaltySettings',
    'get_loyalty_settings',
    'accrue',
    'accrue_for_order',
    'REDEMPTION_MESSAGES',
    'RedemptionReason',
    'RedemptionResult',
    'authorize_redemption',
    'max_redeemable_points',
    'PointsService',
]
