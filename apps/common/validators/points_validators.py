"""
Points-related validators.
"""
from rest_framework import serializers


def validate_points_amount(value):
    """
    Validate a requested points amount.

    Zero is allowed and means "redeem nothing".

    Raises:
        serializers.ValidationError: If the amount is negative
    """
    if value < 0:
        raise serializers.ValidationError("Points amount must not be negative.")

    return value
