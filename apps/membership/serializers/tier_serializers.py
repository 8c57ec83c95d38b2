"""
Membership tier serializers.
"""
from rest_framework import serializers
from ..models import MembershipTier


class MembershipTierSerializer(serializers.ModelSerializer):
    """
    Serializer for membership tier records.
    Used for: GET /api/membership/tiers/
    """
    class Meta:
        model = MembershipTier
        fields = ['id', 'tier_level', 'tier_name', 'min_points', 'max_points',
                  'benefits_description']
        read_only_fields = fields


class TierSnapshotSerializer(serializers.Serializer):
    """Serializer for TierSnapshot values produced by the classifier"""
    id = serializers.IntegerField()
    tier_level = serializers.IntegerField()
    tier_name = serializers.CharField()
    min_points = serializers.IntegerField()
    max_points = serializers.IntegerField(allow_null=True)
    benefits_description = serializers.CharField(allow_blank=True)
