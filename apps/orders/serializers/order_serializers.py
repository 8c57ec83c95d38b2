"""
Order serializers for checkout, pricing previews and order display.
"""
from rest_framework import serializers

from apps.vouchers.serializers import CartLineSerializer, OrderTypeField
from apps.vouchers.services import CartLine
from ..models import Order, OrderItem


class OrderCreateSerializer(serializers.Serializer):
    """
    Serializer for checkout requests.
    Used for: POST /api/order/ and POST /api/order/quote/
    """
    order_type = OrderTypeField()
    items = CartLineSerializer(many=True, allow_empty=False)
    voucher_code = serializers.CharField(
        max_length=50, required=False, allow_blank=True, allow_null=True, trim_whitespace=False, default=None
    )
    points_to_redeem = serializers.IntegerField(min_value=0, required=False, default=0)
    notes = serializers.CharField(required=False, allow_blank=True, default='')

    def cart_lines(self):
        return [CartLine(**item) for item in self.validated_data['items']]


class PriceBreakdownSerializer(serializers.Serializer):
    """Serializer for PriceBreakdown values"""
    subtotal = serializers.DecimalField(max_digits=14, decimal_places=2)
    item_count = serializers.IntegerField()
    voucher_discount = serializers.DecimalField(max_digits=14, decimal_places=2)
    points_used = serializers.IntegerField()
    points_discount = serializers.DecimalField(max_digits=14, decimal_places=2)
    discount_total = serializers.DecimalField(max_digits=14, decimal_places=2)
    tax = serializers.DecimalField(max_digits=14, decimal_places=2)
    total = serializers.DecimalField(max_digits=14, decimal_places=2)
    voucher_reason = serializers.SerializerMethodField()
    points_reason = serializers.SerializerMethodField()

    def get_voucher_reason(self, obj):
        if obj.voucher is None or obj.voucher.reason is None:
            return None
        return obj.voucher.reason.value

    def get_points_reason(self, obj):
        return obj.redemption.reason.value if obj.redemption.reason else None


class OrderItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderItem
        fields = ['product_id', 'category_id', 'quantity', 'unit_price', 'amount']
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    """
    Serializer for order detail.
    Used for: GET /api/order/<id>/
    """
    items = OrderItemSerializer(many=True, read_only=True)
    status_display = serializers.CharField(source='get_status_display', read_only=True)

    class Meta:
        model = Order
        fields = [
            'id', 'order_number', 'order_type', 'status', 'status_display',
            'subtotal', 'tax', 'discount', 'voucher_code', 'points_used', 'points_discount',
            'total', 'points_earned', 'notes', 'items', 'completed_at', 'created_at'
        ]
        read_only_fields = fields


class OrderListSerializer(serializers.ModelSerializer):
    """Minimal fields for order list display"""
    status_display = serializers.CharField(source='get_status_display', read_only=True)

    class Meta:
        model = Order
        fields = ['id', 'order_number', 'order_type', 'status', 'status_display', 'total',
                  'points_used', 'points_earned', 'created_at']
        read_only_fields = fields
