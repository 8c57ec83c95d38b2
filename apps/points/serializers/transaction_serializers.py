"""
Loyalty ledger serializers.
"""
from rest_framework import serializers
from ..models import LoyaltyTransaction


class LoyaltyTransactionSerializer(serializers.ModelSerializer):
    """
    Serializer for ledger entries.
    Used for: GET /api/points/transactions/
    """
    transaction_type_display = serializers.CharField(source='get_transaction_type_display', read_only=True)
    order_number = serializers.CharField(source='order.order_number', read_only=True, default=None)

    class Meta:
        model = LoyaltyTransaction
        fields = [
            'id', 'transaction_type', 'transaction_type_display', 'points_change',
            'points_balance_after', 'earning_method', 'order_number', 'notes', 'created_at'
        ]
        read_only_fields = fields
