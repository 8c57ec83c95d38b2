"""
Common validators module.
"""
from .points_validators import validate_points_amount
from .price_validators import (
    validate_price_range, validate_quantity, validate_percentage
)

__all__ = [
    'validate_points_amount',
    'validate_price_range',
    'validate_quantity',
    'validate_percentage',
]
