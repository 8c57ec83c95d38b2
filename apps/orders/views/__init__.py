"""
Order views module.
"""
from .order_views import OrderListCreateView, OrderQuoteView, OrderDetailView, CompleteOrderView

__all__ = [
    'OrderListCreateView',
    'OrderQuoteView',
    'OrderDetailView',
    'CompleteOrderView',
]
