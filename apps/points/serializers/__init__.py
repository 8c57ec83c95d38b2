"""
Points serializers module.
"""
from .settings_serializers import LoyaltySettingSerializer
from .transaction_serializers import LoyaltyTransactionSerializer
from .redemption_serializers import (
    PointsRedemptionSerializer, RedemptionResultSerializer, MaxRedeemableQuerySerializer
)

__all__ = [
    'LoyaltySettingSerializer',
    'LoyaltyTransactionSerializer',
    'PointsRedemptionSerializer',
    'RedemptionResultSerializer',
    'MaxRedeemableQuerySerializer',
]
