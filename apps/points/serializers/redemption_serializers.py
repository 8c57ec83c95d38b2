"""
Points redemption serializers.
"""
from rest_framework import serializers
from apps.common.validators import validate_points_amount


class PointsRedemptionSerializer(serializers.Serializer):
    """
    Serializer for redemption checks.
    Used for: POST /api/points/redeem/validate/
    """
    points = serializers.IntegerField(
        min_value=0,
        validators=[validate_points_amount],
        help_text="Points the member wants to spend"
    )
    subtotal = serializers.DecimalField(
        max_digits=14,
        decimal_places=2,
        min_value=0,
        help_text="Cart subtotal before discounts"
    )


class MaxRedeemableQuerySerializer(serializers.Serializer):
    order_amount = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=0)


class RedemptionResultSerializer(serializers.Serializer):
    """Serializer for RedemptionResult values"""
    requested_points = serializers.IntegerField()
    allowed_points = serializers.IntegerField()
    discount_amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    reason = serializers.SerializerMethodField()
    is_rejected = serializers.BooleanField()
    is_capped = serializers.BooleanField()

    def get_reason(self, obj):
        return obj.reason.value if obj.reason else None
