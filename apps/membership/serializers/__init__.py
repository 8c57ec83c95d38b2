"""
Membership serializers module.
"""
from .tier_serializers import MembershipTierSerializer, TierSnapshotSerializer
from .status_serializers import LoyaltyStatusSerializer, TierChangeLogSerializer

__all__ = [
    'MembershipTierSerializer',
    'TierSnapshotSerializer',
    'LoyaltyStatusSerializer',
    'TierChangeLogSerializer',
]
