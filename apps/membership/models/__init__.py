"""
Membership models module.
"""
from .tier import MembershipTier
from .tier_change_log import TierChangeLog

__all__ = [
    'MembershipTier',
    'TierChangeLog',
]
