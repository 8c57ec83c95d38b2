"""
Voucher views module.
"""
from .voucher_views import VoucherCheckView, RewardListView, RewardClaimView, MyVoucherListView

__all__ = [
    'VoucherCheckView',
    'RewardListView',
    'RewardClaimView',
    'MyVoucherListView',
]
