"""
Membership views module.
"""
from .status_views import MembershipStatusView, TierListView, TierChangeHistoryView

__all__ = [
    'MembershipStatusView',
    'TierListView',
    'TierChangeHistoryView',
]
