"""
Voucher eligibility rules.

``validate`` decides whether a voucher code may be applied to a cart and what
it is worth. Checks run in a fixed order and stop at the first failure, so a
voucher that fails several checks always reports the same reason:

    NOT_FOUND, INACTIVE, EXPIRED, NOT_YET_VALID, TIER_INELIGIBLE,
    LIMIT_REACHED, ORDER_TYPE_INELIGIBLE, SUBTOTAL_TOO_LOW,
    NO_ELIGIBLE_ITEMS, CUSTOMER_INELIGIBLE, NOT_CLAIMED

Nothing here touches the database; usage is recorded separately by
``VoucherService.record_usage`` once an order is placed.
"""
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional, Tuple

from apps.common.exceptions import InvalidSnapshotError
from apps.common.money import ZERO, quantize_money, to_decimal


class DiscountType(str, Enum):
    PERCENTAGE = 'percentage'
    FIXED = 'fixed'


class CustomerEligibility(str, Enum):
    ALL = 'ALL'
    NEW_USER = 'NEW_USER'
    SPECIFIC_USER = 'SPECIFIC_USER'


class VoucherReason(str, Enum):
    NOT_FOUND = 'NOT_FOUND'
    INACTIVE = 'INACTIVE'
    EXPIRED = 'EXPIRED'
    NOT_YET_VALID = 'NOT_YET_VALID'
    TIER_INELIGIBLE = 'TIER_INELIGIBLE'
    LIMIT_REACHED = 'LIMIT_REACHED'
    ORDER_TYPE_INELIGIBLE = 'ORDER_TYPE_INELIGIBLE'
    SUBTOTAL_TOO_LOW = 'SUBTOTAL_TOO_LOW'
    NO_ELIGIBLE_ITEMS = 'NO_ELIGIBLE_ITEMS'
    CUSTOMER_INELIGIBLE = 'CUSTOMER_INELIGIBLE'
    NOT_CLAIMED = 'NOT_CLAIMED'


class ClaimReason(str, Enum):
    NOT_REDEEMABLE = 'NOT_REDEEMABLE'
    EXPIRED = 'EXPIRED'
    NOT_YET_VALID = 'NOT_YET_VALID'
    SOLD_OUT = 'SOLD_OUT'
    INSUFFICIENT_POINTS = 'INSUFFICIENT_POINTS'
    TIER_INELIGIBLE = 'TIER_INELIGIBLE'


ORDER_TYPES = ('DINE_IN', 'PICKUP', 'DELIVERY')


def normalise_order_type(value):
    """``dine_in``, ``dine-in`` and ``DINEIN`` all become ``DINEIN``"""
    if value is None:
        return ''
    return ''.join(ch for ch in str(value).upper() if ch.isalnum())


def _as_tuple(values):
    if values is None:
        return ()
    if isinstance(values, (str, bytes)):
        raise InvalidSnapshotError(f"expected a list, got {values!r}")
    return tuple(values)


@dataclass(frozen=True)
class CartLine:
    product_id: Any
    quantity: int
    unit_price: Decimal
    category_id: Any = None

    def __post_init__(self):
        if self.quantity is None or self.quantity < 0:
            raise InvalidSnapshotError(f"quantity must be non-negative, got {self.quantity!r}")
        price = to_decimal(self.unit_price)
        if price < 0:
            raise InvalidSnapshotError(f"unit_price must be non-negative, got {price}")
        object.__setattr__(self, 'unit_price', price)

    @property
    def line_total(self):
        return self.unit_price * self.quantity


def cart_subtotal(lines):
    return quantize_money(sum((line.line_total for line in lines), ZERO))


def cart_item_count(lines):
    return sum(line.quantity for line in lines)


@dataclass(frozen=True)
class VoucherSnapshot:
    id: Any
    code: str
    discount_type: DiscountType
    discount_value: Decimal
    max_discount: Optional[Decimal] = None
    min_order: Optional[Decimal] = None
    point_cost: int = 0
    is_active: bool = True
    is_redeemable: bool = False
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    target_tier_id: Optional[Any] = None
    usage_limit: Optional[int] = None
    used_count: int = 0
    user_usage_limit: Optional[int] = None
    valid_order_types: Tuple[str, ...] = ()
    valid_product_ids: Tuple[Any, ...] = ()
    valid_category_ids: Tuple[Any, ...] = ()
    customer_eligibility: CustomerEligibility = CustomerEligibility.ALL
    eligible_user_ids: Tuple[Any, ...] = ()

    def __post_init__(self):
        try:
            discount_type = DiscountType(self.discount_type)
            eligibility = CustomerEligibility(self.customer_eligibility or CustomerEligibility.ALL)
        except ValueError as e:
            raise InvalidSnapshotError(f"voucher {self.code!r}: {e}") from e
        object.__setattr__(self, 'discount_type', discount_type)
        object.__setattr__(self, 'customer_eligibility', eligibility)

        value = to_decimal(self.discount_value)
        if value < 0:
            raise InvalidSnapshotError(f"voucher {self.code!r}: discount_value must be non-negative")
        if discount_type == DiscountType.PERCENTAGE and value > 100:
            raise InvalidSnapshotError(f"voucher {self.code!r}: percentage above 100")
        object.__setattr__(self, 'discount_value', value)

        for name in ('max_discount', 'min_order'):
            amount = getattr(self, name)
            if amount is not None:
                object.__setattr__(self, name, to_decimal(amount))

        if self.point_cost is None:
            object.__setattr__(self, 'point_cost', 0)
        if self.point_cost < 0:
            raise InvalidSnapshotError(f"voucher {self.code!r}: point_cost must be non-negative")

        for name in ('valid_order_types', 'valid_product_ids', 'valid_category_ids', 'eligible_user_ids'):
            object.__setattr__(self, name, _as_tuple(getattr(self, name)))

    @property
    def is_scoped(self):
        return bool(self.valid_product_ids or self.valid_category_ids)

    @property
    def is_point_gated(self):
        return self.point_cost > 0


@dataclass(frozen=True)
class VoucherValidation:
    valid: bool
    discount_amount: Decimal = ZERO
    reason: Optional[VoucherReason] = None
    voucher_id: Optional[Any] = None


def _reject(reason, voucher=None):
    return VoucherValidation(False, ZERO, reason, voucher.id if voucher else None)


def _window_reason(voucher, now):
    """'EXPIRED', 'NOT_YET_VALID' or None; bounds are inclusive"""
    if voucher.end_date is not None and now > voucher.end_date:
        return 'EXPIRED'
    if voucher.start_date is not None and now < voucher.start_date:
        return 'NOT_YET_VALID'
    return None


def _has_eligible_item(voucher, cart_lines):
    products = {str(pid) for pid in voucher.valid_product_ids}
    categories = {str(cid) for cid in voucher.valid_category_ids}
    for line in cart_lines:
        if str(line.product_id) in products:
            return True
        if line.category_id is not None and str(line.category_id) in categories:
            return True
    return False


def _customer_allowed(voucher, member):
    if voucher.customer_eligibility == CustomerEligibility.NEW_USER:
        return member.previous_order_count == 0
    if voucher.customer_eligibility == CustomerEligibility.SPECIFIC_USER:
        return str(member.user_id) in {str(uid) for uid in voucher.eligible_user_ids}
    return True


def voucher_discount(voucher, subtotal):
    """Discount ``voucher`` grants on ``subtotal``, never above the subtotal"""
    subtotal = to_decimal(subtotal)
    if voucher.discount_type == DiscountType.FIXED:
        discount = voucher.discount_value
    else:
        discount = subtotal * voucher.discount_value / Decimal(100)
        if voucher.max_discount is not None:
            discount = min(discount, voucher.max_discount)
    return quantize_money(min(discount, subtotal))


def validate(voucher, member, subtotal, order_type, cart_lines, now, user_use_count=0, claimed_count=0):
    """
    Check ``voucher`` against a member's cart.

    Args:
        voucher: VoucherSnapshot, or None when the code did not resolve
        member: MemberSnapshot whose ``tier_id`` is the classified tier
        subtotal: cart subtotal before discounts
        order_type: DINE_IN, PICKUP or DELIVERY (any casing or separator)
        cart_lines: iterable of CartLine
        now: aware datetime the validity window is compared to
        user_use_count: times this member has already used the voucher
        claimed_count: unused claims the member holds; vouchers with a
            ``point_cost`` are only applied against a claim bought with points

    Returns:
        VoucherValidation; ``discount_amount`` is zero unless ``valid``.
    """
    subtotal = to_decimal(subtotal)
    if subtotal < 0:
        raise InvalidSnapshotError(f"subtotal must be non-negative, got {subtotal}")
    cart_lines = tuple(cart_lines)

    if voucher is None:
        return _reject(VoucherReason.NOT_FOUND)

    if not voucher.is_active:
        return _reject(VoucherReason.INACTIVE, voucher)

    window = _window_reason(voucher, now)
    if window is not None:
        return _reject(VoucherReason(window), voucher)

    if voucher.target_tier_id is not None and voucher.target_tier_id != member.tier_id:
        return _reject(VoucherReason.TIER_INELIGIBLE, voucher)

    if voucher.usage_limit is not None and voucher.used_count >= voucher.usage_limit:
        return _reject(VoucherReason.LIMIT_REACHED, voucher)
    if voucher.user_usage_limit is not None and user_use_count >= voucher.user_usage_limit:
        return _reject(VoucherReason.LIMIT_REACHED, voucher)

    if voucher.valid_order_types:
        allowed = {normalise_order_type(t) for t in voucher.valid_order_types}
        if normalise_order_type(order_type) not in allowed:
            return _reject(VoucherReason.ORDER_TYPE_INELIGIBLE, voucher)

    if voucher.min_order is not None and subtotal < voucher.min_order:
        return _reject(VoucherReason.SUBTOTAL_TOO_LOW, voucher)

    if voucher.is_scoped and not _has_eligible_item(voucher, cart_lines):
        return _reject(VoucherReason.NO_ELIGIBLE_ITEMS, voucher)

    if not _customer_allowed(voucher, member):
        return _reject(VoucherReason.CUSTOMER_INELIGIBLE, voucher)

    if voucher.is_point_gated and claimed_count < 1:
        return _reject(VoucherReason.NOT_CLAIMED, voucher)

    return VoucherValidation(True, voucher_discount(voucher, subtotal), None, voucher.id)


def check_claim(voucher, member, now):
    """
    Check whether ``member`` may buy ``voucher`` with points.

    Returns the ClaimReason of the first failed check, or None.
    """
    if not voucher.is_active or not voucher.is_redeemable:
        return ClaimReason.NOT_REDEEMABLE

    window = _window_reason(voucher, now)
    if window is not None:
        return ClaimReason(window)

    if voucher.usage_limit is not None and voucher.used_count >= voucher.usage_limit:
        return ClaimReason.SOLD_OUT

    if member.loyalty_points < voucher.point_cost:
        return ClaimReason.INSUFFICIENT_POINTS

    if voucher.target_tier_id is not None and voucher.target_tier_id != member.tier_id:
        return ClaimReason.TIER_INELIGIBLE

    return None
