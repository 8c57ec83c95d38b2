"""
Voucher services module.
"""
from .voucher_validator import (
    CartLine, ClaimReason, CustomerEligibility, DiscountType, ORDER_TYPES,
    VoucherReason, VoucherSnapshot, VoucherValidation,
    cart_item_count, cart_subtotal, check_claim, normalise_order_type,
    validate, voucher_discount
)
from .voucher_service import CLAIM_MESSAGES, VOUCHER_MESSAGES, VoucherService

__all__ = [
    'CartLine',
    'ClaimReason',
    'CustomerEligibility',
    'DiscountType',
    'ORDER_TYPES',
    'VoucherReason',
    'VoucherSnapshot',
    'VoucherValidation',
    'cart_item_count',
    'cart_subtotal',
    'check_claim',
    'normalise_order_type',
    'validate',
    'voucher_discount',
    'CLAIM_MESSAGES',
    'VOUCHER_MESSAGES',
    'VoucherService',
]
