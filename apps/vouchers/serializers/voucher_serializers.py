"""
Voucher serializers.
"""
from rest_framework import serializers

from apps.common.validators import validate_price_range, validate_quantity

from ..models import UserVoucher
from ..services import ORDER_TYPES, CartLine, normalise_order_type


class OrderTypeField(serializers.CharField):
    """Accepts any casing or separator and returns the canonical order type"""

    def __init__(self, **kwargs):
        kwargs.setdefault('max_length', 20)
        super().__init__(**kwargs)

    def to_internal_value(self, data):
        value = super().to_internal_value(data)
        allowed = {normalise_order_type(t): t for t in ORDER_TYPES}
        key = normalise_order_type(value)
        if key not in allowed:
            raise serializers.ValidationError(f"Order type must be one of {', '.join(ORDER_TYPES)}")
        return allowed[key]


class CartLineSerializer(serializers.Serializer):
    """One cart line as sent by the client"""
    product_id = serializers.CharField(max_length=64)
    category_id = serializers.CharField(max_length=64, required=False, allow_null=True, default=None)
    quantity = serializers.IntegerField(validators=[validate_quantity])
    unit_price = serializers.DecimalField(max_digits=12, decimal_places=2, validators=[validate_price_range])


class VoucherCheckSerializer(serializers.Serializer):
    """
    Serializer for voucher checks against a cart.
    Used for: POST /api/vouchers/check/
    """
    code = serializers.CharField(max_length=50, trim_whitespace=False)
    order_type = OrderTypeField()
    items = CartLineSerializer(many=True, allow_empty=False)

    def cart_lines(self):
        return [CartLine(**item) for item in self.validated_data['items']]


class VoucherValidationSerializer(serializers.Serializer):
    """Serializer for VoucherValidation values"""
    valid = serializers.BooleanField()
    discount_amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    reason = serializers.SerializerMethodField()
    voucher_id = serializers.IntegerField(allow_null=True)

    def get_reason(self, obj):
        return obj.reason.value if obj.reason else None


class RewardSerializer(serializers.Serializer):
    """
    Serializer for the rewards catalogue.
    Used for: GET /api/vouchers/rewards/
    """
    id = serializers.IntegerField(source='voucher.id')
    code = serializers.CharField(source='voucher.code')
    description = serializers.CharField(source='voucher.description')
    point_cost = serializers.IntegerField(source='voucher.point_cost')
    discount_type = serializers.CharField(source='voucher.discount_type')
    discount_value = serializers.DecimalField(source='voucher.discount_value', max_digits=12, decimal_places=2)
    end_date = serializers.DateTimeField(source='voucher.end_date', allow_null=True)
    target_tier = serializers.CharField(source='voucher.target_tier.tier_name', default=None)
    is_affordable = serializers.BooleanField()
    is_tier_eligible = serializers.BooleanField()


class VoucherClaimSerializer(serializers.Serializer):
    voucher_id = serializers.IntegerField(min_value=1)


class UserVoucherSerializer(serializers.ModelSerializer):
    """
    Serializer for claimed vouchers.
    Used for: GET /api/vouchers/mine/
    """
    code = serializers.CharField(source='voucher.code', read_only=True)
    description = serializers.CharField(source='voucher.description', read_only=True)
    discount_type = serializers.CharField(source='voucher.discount_type', read_only=True)
    discount_value = serializers.DecimalField(
        source='voucher.discount_value', max_digits=12, decimal_places=2, read_only=True
    )
    end_date = serializers.DateTimeField(source='voucher.end_date', read_only=True)

    class Meta:
        model = UserVoucher
        fields = ['id', 'code', 'description', 'discount_type', 'discount_value', 'end_date',
                  'is_used', 'redeemed_at', 'used_at']
        read_only_fields = fields

