"""
Loyalty settings serializer.
"""
from rest_framework import serializers
from apps.common.validators import validate_percentage
from ..models import LoyaltySetting


class LoyaltySettingSerializer(serializers.ModelSerializer):
    """
    Serializer for the programme settings.
    Used for: GET/PUT /api/points/settings/
    """
    updated_by = serializers.CharField(source='updated_by.username', read_only=True, default=None)

    class Meta:
        model = LoyaltySetting
        fields = [
            'is_enabled', 'points_per_item', 'point_value_idr', 'min_points_to_redeem',
            'max_points_per_transaction', 'max_redemption_percentage',
            'version', 'updated_by', 'updated_at'
        ]
        read_only_fields = ['version', 'updated_by', 'updated_at']
        extra_kwargs = {
            'max_redemption_percentage': {'validators': [validate_percentage]},
        }

    def validate_point_value_idr(self, value):
        if value <= 0:
            raise serializers.ValidationError("Point value must be positive")
        return value
