"""
Order services module.
"""
from .pricing import DEFAULT_TAX_RATE, PriceBreakdown, combine_discounts, price_order
from .checkout_service import CheckoutService

__all__ = [
    'DEFAULT_TAX_RATE',
    'PriceBreakdown',
    'combine_discounts',
    'price_order',
    'CheckoutService',
]
