"""
Membership services module.
"""
from .member_snapshot import MemberSnapshot
from .tier_classifier import (
    TierSnapshot, TierProgress, classify, tier_progress,
    validate_tier_configuration, ensure_valid_tier_configuration,
)
from .membership_service import MembershipService

__all__ = [
    'MemberSnapshot',
    'TierSnapshot',
    'TierProgress',
    'classify',
    'tier_progress',
    'validate_tier_configuration',
    'ensure_valid_tier_configuration',
    'MembershipService',
]
