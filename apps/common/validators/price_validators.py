"""
Price, quantity and percentage validators.
"""
from rest_framework import serializers


def validate_price_range(value, min_value=0, max_value=None):
    """
    Validate price is within acceptable range.

    Args:
        value: Price decimal
        min_value: Minimum allowed price (default: 0)
        max_value: Maximum allowed price (optional)

    Raises:
        serializers.ValidationError: If price is outside valid range

    Returns:
        decimal.Decimal: Validated price
    """
    if value < min_value:
        raise serializers.ValidationError(f"Price must be at least {min_value}.")

    if max_value is not None and value > max_value:
        raise serializers.ValidationError(f"Price must not exceed {max_value}.")

    return value


def validate_quantity(value):
    """
    Validate a cart line quantity (positive integer).
    """
    if value <= 0:
        raise serializers.ValidationError("Quantity must be greater than 0.")

    return value


def validate_percentage(value):
    """
    Validate a percentage between 0 and 100 inclusive.
    """
    if value < 0 or value > 100:
        raise serializers.ValidationError("Percentage must be between 0 and 100.")

    return value
