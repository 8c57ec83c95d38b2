"""
Voucher serializers module.
"""
from .voucher_serializers import (
    OrderTypeField, CartLineSerializer, VoucherCheckSerializer, VoucherValidationSerializer,
    RewardSerializer, VoucherClaimSerializer, UserVoucherSerializer
)

__all__ = [
    'OrderTypeField',
    'CartLineSerializer',
    'VoucherCheckSerializer',
    'VoucherValidationSerializer',
    'RewardSerializer',
    'VoucherClaimSerializer',
    'UserVoucherSerializer',
]
