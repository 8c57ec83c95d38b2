"""
Points models module.
"""
from .loyalty_setting import LoyaltySetting
from .transaction import LoyaltyTransaction

__all__ = [
    'LoyaltySetting',
    'LoyaltyTransaction',
]
