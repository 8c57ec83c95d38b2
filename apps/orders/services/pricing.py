"""
Order pricing: combines the voucher and points discounts for one cart.

Both discounts are computed against the same subtotal. When the voucher
has already taken part of the subtotal, the point redemption is reduced so
the combined discount never exceeds the subtotal.
"""
from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Optional

from apps.common.money import ZERO, clamp, floor_int, quantize_money, to_decimal
from apps.points.services.redemption_guard import RedemptionReason, RedemptionResult, authorize_redemption
from apps.vouchers.services.voucher_validator import (
    VoucherValidation, cart_item_count, cart_subtotal, validate
)

DEFAULT_TAX_RATE = Decimal('0.11')


def combine_discounts(subtotal, voucher_discount, points_discount):
    """Sum of both discounts, clamped to ``[0, subtotal]``"""
    subtotal = to_decimal(subtotal)
    total = to_decimal(voucher_discount) + to_decimal(points_discount)
    return quantize_money(clamp(total, ZERO, max(subtotal, ZERO)))


@dataclass(frozen=True)
class PriceBreakdown:
    subtotal: Decimal
    item_count: int
    voucher: Optional[VoucherValidation]
    redemption: RedemptionResult
    voucher_discount: Decimal
    points_discount: Decimal
    discount_total: Decimal
    tax: Decimal
    total: Decimal

    @property
    def points_used(self):
        return self.redemption.allowed_points

    @property
    def is_voucher_rejected(self):
        return self.voucher is not None and not self.voucher.valid


def _fit_redemption(redemption, room, settings):
    """Shrink ``redemption`` so its discount fits in ``room``"""
    if redemption.discount_amount <= room:
        return redemption
    allowed = min(redemption.allowed_points, floor_int(room / settings.point_value_idr))
    return replace(
        redemption,
        allowed_points=allowed,
        discount_amount=quantize_money(Decimal(allowed) * settings.point_value_idr),
        reason=RedemptionReason.CAPPED_BY_VOUCHER,
    )


def price_order(cart_lines, order_type, member, settings, now, voucher_code=None, voucher=None,
                points_requested=0, user_use_count=0, claimed_count=0, tax_rate=DEFAULT_TAX_RATE):
    """
    Price a cart for ``member``.

    ``voucher`` is the snapshot resolved from ``voucher_code`` (None when the
    code did not match). No voucher check runs when ``voucher_code`` is empty.
    Rejections are reported in the breakdown, never raised.
    """
    cart_lines = tuple(cart_lines)
    subtotal = cart_subtotal(cart_lines)

    voucher_result = None
    voucher_discount = ZERO
    if voucher_code:
        voucher_result = validate(
            voucher, member, subtotal, order_type, cart_lines, now, user_use_count, claimed_count
        )
        if voucher_result.valid:
            voucher_discount = voucher_result.discount_amount

    redemption = authorize_redemption(points_requested, member.loyalty_points, subtotal, settings)
    if not redemption.is_rejected:
        redemption = _fit_redemption(redemption, subtotal - voucher_discount, settings)
    points_discount = ZERO if redemption.is_rejected else redemption.discount_amount

    discount_total = combine_discounts(subtotal, voucher_discount, points_discount)
    tax = quantize_money(subtotal * to_decimal(tax_rate))
    return PriceBreakdown(
        subtotal=subtotal,
        item_count=cart_item_count(cart_lines),
        voucher=voucher_result,
        redemption=redemption,
        voucher_discount=voucher_discount,
        points_discount=points_discount,
        discount_total=discount_total,
        tax=tax,
        total=quantize_money(subtotal - discount_total + tax),
    )
