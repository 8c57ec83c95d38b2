"""
Points service: the only code that writes a member's points balance.

Balance changes run inside ``transaction.atomic()`` with the user row locked
(``select_for_update``), so two checkouts for the same member serialise and
the second one sees the balance left by the first.
"""
import logging

from django.contrib.auth import get_user_model
from django.db import transaction
from django.utils import timezone

from apps.common.exceptions import CheckoutRejected, SettlementConflict
from apps.membership.services import MembershipService
from ..models import LoyaltyTransaction
from .loyalty_settings import get_loyalty_settings
from .points_calculator import COMPLETED, accrue_for_order
from .redemption_guard import RedemptionReason

logger = logging.getLogger(__name__)


class PointsService:
    """Service for handling points operations"""

    @staticmethod
    def lock_member(user):
        """Re-read ``user`` with a row lock; call inside an atomic block"""
        return get_user_model().objects.select_for_update().get(pk=user.pk)

    @staticmethod
    def redeem_for_order(user, points, order=None, notes='', expected_balance=None):
        """
        Deduct already authorised ``points`` from the member.

        The balance is re-checked under the row lock. When ``expected_balance``
        (the balance the redemption was priced against) no longer matches,
        SettlementConflict is raised so the caller can re-price; a balance too
        low for ``points`` raises CheckoutRejected(INSUFFICIENT_POINTS).
        """
        if points <= 0:
            return None

        with transaction.atomic():
            member = PointsService.lock_member(user)
            if expected_balance is not None and member.loyalty_points != expected_balance:
                raise SettlementConflict(
                    f"Balance of user {member.pk} is {member.loyalty_points}, expected {expected_balance}"
                )
            if member.loyalty_points < points:
                logger.warning(
                    "Redemption of %s points refused for user %s: balance is %s",
                    points, member.pk, member.loyalty_points,
                )
                raise CheckoutRejected(RedemptionReason.INSUFFICIENT_POINTS, 'Insufficient loyalty points')

            member.loyalty_points -= points
            member.save(update_fields=['loyalty_points', 'updated_at'])

            entry = LoyaltyTransaction.objects.create(
                user=member,
                transaction_type='redeemed',
                points_change=-points,
                points_balance_after=member.loyalty_points,
                order=order,
                notes=notes or f'Redeemed {points} points',
            )
            MembershipService.refresh_member_tier(member, reason='Points redeemed')

        user.loyalty_points = member.loyalty_points
        user.current_tier_id = member.current_tier_id
        logger.info("User %s redeemed %s points, balance %s", member.pk, points, member.loyalty_points)
        return entry

    @staticmethod
    def settle_completed_order(order, settings=None):
        """
        Credit accrual points and spending for a completed order.

        Runs once per order; a second call for the same order returns 0.
        """
        from apps.orders.models import Order

        if settings is None:
            settings = get_loyalty_settings()

        with transaction.atomic():
            locked_order = Order.objects.select_for_update().get(pk=order.pk)
            if locked_order.loyalty_settled_at is not None:
                logger.info("Order %s already settled, skipping", locked_order.order_number)
                return 0
            if locked_order.status != COMPLETED:
                logger.warning("Order %s is %s, not settling", locked_order.order_number, locked_order.status)
                return 0

            item_count = locked_order.item_count()
            points = accrue_for_order(locked_order.status, item_count, settings)

            member = PointsService.lock_member(locked_order.user)
            member.total_spent += locked_order.total
            member.loyalty_points += points
            member.save(update_fields=['loyalty_points', 'total_spent', 'updated_at'])

            if points > 0:
                LoyaltyTransaction.objects.create(
                    user=member,
                    transaction_type='earned',
                    points_change=points,
                    points_balance_after=member.loyalty_points,
                    earning_method={
                        'type': 'per_item',
                        'rate': str(settings.points_per_item),
                        'items': item_count,
                    },
                    order=locked_order,
                    notes=f'Earned {points} points from order #{locked_order.order_number}',
                )
            MembershipService.refresh_member_tier(member, reason='Order completed')

            locked_order.points_earned = points
            locked_order.loyalty_settled_at = timezone.now()
            locked_order.save(update_fields=['points_earned', 'loyalty_settled_at', 'updated_at'])

        order.points_earned = points
        order.loyalty_settled_at = locked_order.loyalty_settled_at
        logger.info(
            "Settled order %s for user %s: +%s points, balance %s",
            locked_order.order_number, member.pk, points, member.loyalty_points,
        )
        return points

    @staticmethod
    def get_transactions(user):
        return LoyaltyTransaction.objects.filter(user=user).select_related('order')
