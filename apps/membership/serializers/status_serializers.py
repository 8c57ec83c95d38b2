"""
Member loyalty status serializers.
"""
from rest_framework import serializers
from ..models import TierChangeLog
from .tier_serializers import TierSnapshotSerializer


class LoyaltyStatusSerializer(serializers.Serializer):
    """
    Serializer for the member loyalty status.
    Used for: GET /api/membership/status/
    """
    loyalty_points = serializers.IntegerField()
    total_spent = serializers.DecimalField(max_digits=14, decimal_places=2)
    current_tier = TierSnapshotSerializer(allow_null=True)
    next_tier = TierSnapshotSerializer(allow_null=True)
    remaining_points = serializers.IntegerField()
    progress_percentage = serializers.DecimalField(max_digits=5, decimal_places=2)
    tiers = TierSnapshotSerializer(many=True)


class TierChangeLogSerializer(serializers.ModelSerializer):
    """
    Serializer for tier change history.
    Used for: GET /api/membership/tier-history/
    """
    from_tier_name = serializers.CharField(source='from_tier.tier_name', read_only=True, default=None)
    to_tier_name = serializers.CharField(source='to_tier.tier_name', read_only=True, default=None)

    class Meta:
        model = TierChangeLog
        fields = ['from_tier_name', 'to_tier_name', 'reason', 'points_at_change', 'created_at']
        read_only_fields = fields
