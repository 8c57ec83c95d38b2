"""
Order serializers module.
"""
from .order_serializers import (
    OrderCreateSerializer, PriceBreakdownSerializer,
    OrderItemSerializer, OrderSerializer, OrderListSerializer
)

__all__ = [
    'OrderCreateSerializer',
    'PriceBreakdownSerializer',
    'OrderItemSerializer',
    'OrderSerializer',
    'OrderListSerializer',
]
