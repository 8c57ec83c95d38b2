"""
Point redemption limits.

``authorize_redemption`` decides how many of the requested points may be
spent on an order and what they are worth. It never rejects a request for
exceeding a cap: the per-transaction cap and the order-percentage cap clamp
the amount down and report which cap applied. Rejections are reserved for
requests that cannot be honoured at all (programme disabled, not enough
points, below the minimum).
"""
import logging
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional

from apps.common.exceptions import InvalidSnapshotError
from apps.common.money import ZERO, floor_int, quantize_money, to_decimal

logger = logging.getLogger(__name__)


class RedemptionReason(str, Enum):
    LOYALTY_DISABLED = 'LOYALTY_DISABLED'
    INSUFFICIENT_POINTS = 'INSUFFICIENT_POINTS'
    BELOW_MINIMUM = 'BELOW_MINIMUM'
    CAPPED_PER_TRANSACTION = 'CAPPED_PER_TRANSACTION'
    CAPPED_BY_ORDER_PERCENTAGE = 'CAPPED_BY_ORDER_PERCENTAGE'
    CAPPED_BY_VOUCHER = 'CAPPED_BY_VOUCHER'

    @property
    def is_failure(self):
        return self in REDEMPTION_FAILURES


REDEMPTION_FAILURES = frozenset({
    RedemptionReason.LOYALTY_DISABLED,
    RedemptionReason.INSUFFICIENT_POINTS,
    RedemptionReason.BELOW_MINIMUM,
})

REDEMPTION_MESSAGES = {
    RedemptionReason.LOYALTY_DISABLED: 'Loyalty programme is not active',
    RedemptionReason.INSUFFICIENT_POINTS: 'Insufficient loyalty points',
    RedemptionReason.BELOW_MINIMUM: 'Not enough points requested to redeem',
    RedemptionReason.CAPPED_PER_TRANSACTION: 'Points reduced to the per-order maximum',
    RedemptionReason.CAPPED_BY_ORDER_PERCENTAGE: 'Points reduced to the maximum share of the order',
    RedemptionReason.CAPPED_BY_VOUCHER: 'Points reduced to the amount left after the voucher',
}


@dataclass(frozen=True)
class RedemptionResult:
    requested_points: int
    allowed_points: int
    discount_amount: Decimal
    reason: Optional[RedemptionReason] = None

    @property
    def is_rejected(self):
        return self.reason is not None and self.reason.is_failure

    @property
    def is_capped(self):
        return self.reason is not None and not self.reason.is_failure


def _reject(points_requested, reason):
    return RedemptionResult(points_requested, 0, ZERO, reason)


def _percentage_cap_points(subtotal, settings):
    max_discount = subtotal * Decimal(settings.max_redemption_percentage) / Decimal(100)
    return floor_int(max_discount / settings.point_value_idr)


def authorize_redemption(points_requested, user_points, subtotal, settings):
    """
    Decide how many points may be redeemed against ``subtotal``.

    Args:
        points_requested: points the member wants to spend (0 is a no-op)
        user_points: the member's current balance
        subtotal: cart subtotal before discounts
        settings: LoyaltySettings snapshot

    Returns:
        RedemptionResult with ``allowed_points``, ``discount_amount`` and the
        reason code of the rejection or of the cap that clamped the request.
    """
    if points_requested is None or points_requested < 0:
        raise InvalidSnapshotError(f"points_requested must be non-negative, got {points_requested!r}")
    if user_points is None or user_points < 0:
        raise InvalidSnapshotError(f"user_points must be non-negative, got {user_points!r}")
    subtotal = to_decimal(subtotal)
    if subtotal < 0:
        raise InvalidSnapshotError(f"subtotal must be non-negative, got {subtotal}")

    if points_requested == 0:
        return RedemptionResult(0, 0, ZERO)

    if not settings.is_enabled:
        return _reject(points_requested, RedemptionReason.LOYALTY_DISABLED)

    if points_requested > user_points:
        return _reject(points_requested, RedemptionReason.INSUFFICIENT_POINTS)

    # The minimum applies to what was asked for, not to the clamped amount
    if points_requested < settings.min_points_to_redeem:
        return _reject(points_requested, RedemptionReason.BELOW_MINIMUM)

    allowed = points_requested
    reason = None

    cap = settings.max_points_per_transaction
    if cap is not None and allowed > cap:
        allowed = cap
        reason = RedemptionReason.CAPPED_PER_TRANSACTION

    percentage_cap = _percentage_cap_points(subtotal, settings)
    if allowed > percentage_cap:
        allowed = percentage_cap
        reason = RedemptionReason.CAPPED_BY_ORDER_PERCENTAGE

    discount = quantize_money(Decimal(allowed) * settings.point_value_idr)
    logger.debug(
        "Redemption of %s points authorised as %s (%s), reason=%s",
        points_requested, allowed, discount, reason,
    )
    return RedemptionResult(points_requested, allowed, discount, reason)


def max_redeemable_points(user_points, subtotal, settings):
    """
    Largest amount ``authorize_redemption`` would accept unclamped.

    0 when the programme is off or the member cannot reach the minimum.
    """
    if not settings.is_enabled:
        return 0

    limit = min(user_points, _percentage_cap_points(to_decimal(subtotal), settings))
    if settings.max_points_per_transaction is not None:
        limit = min(limit, settings.max_points_per_transaction)

    if limit <= 0 or limit < settings.min_points_to_redeem:
        return 0
    return limit
