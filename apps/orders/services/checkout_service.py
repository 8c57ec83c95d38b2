"""
Checkout: prices a cart, then creates the order and spends the member's
points and voucher in one transaction.
"""
import logging
import uuid

from django.conf import settings as django_settings
from django.db import transaction
from django.utils import timezone

from apps.common.exceptions import CheckoutRejected, SettlementConflict
from apps.points.services import REDEMPTION_MESSAGES, PointsService, get_loyalty_settings
from apps.vouchers.services import VOUCHER_MESSAGES, VoucherService
from ..models import Order, OrderItem
from .pricing import price_order

logger = logging.getLogger(__name__)


class CheckoutService:
    """Service class for placing and completing orders"""

    @staticmethod
    def generate_order_number() -> str:
        """Generate unique order number"""
        return f"ORD-{timezone.now():%Y%m%d}-{uuid.uuid4().hex[:8].upper()}"

    @staticmethod
    def quote(user, order_type, lines, voucher_code=None, points_to_redeem=0, loyalty_settings=None, now=None):
        """Price a cart without writing anything; returns (breakdown, voucher)"""
        if loyalty_settings is None:
            loyalty_settings = get_loyalty_settings()

        voucher = VoucherService.find_by_code(voucher_code) if voucher_code else None
        breakdown = price_order(
            lines,
            order_type,
            VoucherService.member_snapshot(user),
            loyalty_settings,
            now or timezone.now(),
            voucher_code=voucher_code,
            voucher=voucher.to_snapshot() if voucher else None,
            points_requested=points_to_redeem,
            user_use_count=VoucherService.user_use_count(user, voucher) if voucher else 0,
            claimed_count=VoucherService.unused_claim_count(user, voucher) if voucher else 0,
            tax_rate=django_settings.ORDER_TAX_RATE,
        )
        return breakdown, voucher

    @staticmethod
    def place_order(user, order_type, lines, voucher_code=None, points_to_redeem=0, notes=''):
        """
        Place an order for ``user``.

        Raises CheckoutRejected with the voucher or redemption reason code when
        either discount is refused. If the member's balance changes between
        pricing and commit, the order is re-priced once against fresh data.
        """
        lines = list(lines)
        for attempt in range(2):
            if attempt:
                user.refresh_from_db()

            breakdown, voucher = CheckoutService.quote(
                user, order_type, lines, voucher_code, points_to_redeem
            )
            if breakdown.is_voucher_rejected:
                reason = breakdown.voucher.reason
                raise CheckoutRejected(reason, VOUCHER_MESSAGES[reason])
            if breakdown.redemption.is_rejected:
                reason = breakdown.redemption.reason
                raise CheckoutRejected(reason, REDEMPTION_MESSAGES[reason])

            try:
                order = CheckoutService._commit(user, order_type, lines, breakdown, voucher, voucher_code, notes)
            except SettlementConflict as e:
                if attempt:
                    raise
                logger.warning("Checkout for user %s re-priced after balance change: %s", user.pk, e)
                continue

            logger.info(
                "Order %s placed by user %s: subtotal=%s discount=%s points=%s total=%s",
                order.order_number, user.pk, breakdown.subtotal, breakdown.discount_total,
                breakdown.points_used, breakdown.total,
            )
            return order

    @staticmethod
    def _commit(user, order_type, lines, breakdown, voucher, voucher_code, notes):
        with transaction.atomic():
            order = Order.objects.create(
                order_number=CheckoutService.generate_order_number(),
                user=user,
                order_type=order_type,
                subtotal=breakdown.subtotal,
                tax=breakdown.tax,
                discount=breakdown.voucher_discount,
                points_used=breakdown.points_used,
                points_discount=breakdown.points_discount,
                total=breakdown.total,
                voucher=voucher,
                voucher_code=voucher_code or '',
                notes=notes,
            )
            OrderItem.objects.bulk_create([
                OrderItem(
                    order=order,
                    product_id=str(line.product_id),
                    category_id=str(line.category_id) if line.category_id is not None else None,
                    quantity=line.quantity,
                    unit_price=line.unit_price,
                    amount=line.line_total,
                )
                for line in lines
            ])

            if voucher is not None:
                VoucherService.record_usage(voucher, user, order)

            if breakdown.points_used:
                PointsService.redeem_for_order(
                    user,
                    breakdown.points_used,
                    order=order,
                    notes=f'Redeemed for order #{order.order_number}',
                    expected_balance=user.loyalty_points,
                )
        return order

    @staticmethod
    def complete_order(order):
        """Mark ``order`` completed and credit its loyalty points"""
        with transaction.atomic():
            locked = Order.objects.select_for_update().get(pk=order.pk)
            if locked.status == 'cancelled':
                raise CheckoutRejected('ORDER_CANCELLED', 'Cancelled orders cannot be completed')

            if locked.status != 'completed':
                locked.status = 'completed'
                locked.completed_at = timezone.now()
                locked.save(update_fields=['status', 'completed_at', 'updated_at'])

            PointsService.settle_completed_order(locked)

        logger.info("Order %s completed, %s points earned", locked.order_number, locked.points_earned)
        return locked
