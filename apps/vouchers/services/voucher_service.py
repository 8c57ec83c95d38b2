"""
Voucher service: resolves vouchers and members into snapshots for the
validator, and owns the two operations that write voucher state
(claiming a reward with points, recording usage on an order).
"""
import logging
from dataclasses import replace

from django.db import transaction
from django.utils import timezone

from apps.common.exceptions import CheckoutRejected
from apps.membership.services import MembershipService
from apps.points.services import PointsService
from ..models import UserVoucher, Voucher
from .voucher_validator import ClaimReason, VoucherReason, check_claim, validate

logger = logging.getLogger(__name__)


VOUCHER_MESSAGES = {
    VoucherReason.NOT_FOUND: 'Voucher not found',
    VoucherReason.INACTIVE: 'Voucher is not active',
    VoucherReason.EXPIRED: 'Voucher has expired',
    VoucherReason.NOT_YET_VALID: 'Voucher is not valid yet',
    VoucherReason.TIER_INELIGIBLE: 'Voucher is not available for your membership tier',
    VoucherReason.LIMIT_REACHED: 'Voucher usage limit reached',
    VoucherReason.ORDER_TYPE_INELIGIBLE: 'Voucher is not valid for this order type',
    VoucherReason.SUBTOTAL_TOO_LOW: 'Order subtotal is below the voucher minimum',
    VoucherReason.NO_ELIGIBLE_ITEMS: 'Cart has no items this voucher applies to',
    VoucherReason.CUSTOMER_INELIGIBLE: 'You are not eligible for this voucher',
    VoucherReason.NOT_CLAIMED: 'Redeem this voucher with points before using it',
}

CLAIM_MESSAGES = {
    ClaimReason.NOT_REDEEMABLE: 'Voucher cannot be redeemed',
    ClaimReason.EXPIRED: 'Voucher has expired',
    ClaimReason.NOT_YET_VALID: 'Voucher is not valid yet',
    ClaimReason.SOLD_OUT: 'Voucher is sold out',
    ClaimReason.INSUFFICIENT_POINTS: 'Not enough points',
    ClaimReason.TIER_INELIGIBLE: 'Voucher is not available for your membership tier',
}


class VoucherService:
    """Service class for voucher operations"""

    @staticmethod
    def find_by_code(code):
        """Exact, case-sensitive lookup; None when nothing matches"""
        if not code:
            return None
        # Database collations may compare case-insensitively
        for voucher in Voucher.objects.filter(code=code):
            if voucher.code == code:
                return voucher
        return None

    @staticmethod
    def member_snapshot(user, tiers=None):
        """Member state with the tier classified from the current balance"""
        from apps.orders.models import Order

        tier = MembershipService.resolve_tier(user, tiers)
        # Every earlier order counts, cancelled ones included
        previous_orders = Order.objects.filter(user=user).count()
        snapshot = user.to_member_snapshot(previous_order_count=previous_orders)
        return replace(snapshot, tier_id=tier.id if tier else None)

    @staticmethod
    def user_use_count(user, voucher):
        return UserVoucher.objects.filter(user=user, voucher=voucher, is_used=True).count()

    @staticmethod
    def unused_claim_count(user, voucher):
        return UserVoucher.objects.filter(user=user, voucher=voucher, is_used=False).count()

    @staticmethod
    def check_voucher(user, code, subtotal, order_type, cart_lines, now=None, member=None):
        """Run the eligibility checks for ``code``; read-only"""
        voucher = VoucherService.find_by_code(code)
        if member is None:
            member = VoucherService.member_snapshot(user)

        result = validate(
            voucher.to_snapshot() if voucher else None,
            member,
            subtotal,
            order_type,
            cart_lines,
            now or timezone.now(),
            user_use_count=VoucherService.user_use_count(user, voucher) if voucher else 0,
            claimed_count=VoucherService.unused_claim_count(user, voucher) if voucher else 0,
        )
        logger.debug(
            "Voucher %r for user %s on %s: valid=%s reason=%s discount=%s",
            code, user.pk, subtotal, result.valid, result.reason, result.discount_amount,
        )
        return result

    @staticmethod
    def record_usage(voucher, user, order=None):
        """
        Count one use of ``voucher`` by ``user``.

        Limits are re-checked under the voucher row lock. A claimed, unused
        reward is consumed first; otherwise a used ledger row is created,
        except for vouchers with a point cost, which need a claim.
        """
        now = timezone.now()
        with transaction.atomic():
            locked = Voucher.objects.select_for_update().get(pk=voucher.pk)

            if locked.usage_limit is not None and locked.used_count >= locked.usage_limit:
                raise CheckoutRejected(VoucherReason.LIMIT_REACHED, VOUCHER_MESSAGES[VoucherReason.LIMIT_REACHED])
            if (locked.user_usage_limit is not None
                    and VoucherService.user_use_count(user, locked) >= locked.user_usage_limit):
                raise CheckoutRejected(VoucherReason.LIMIT_REACHED, VOUCHER_MESSAGES[VoucherReason.LIMIT_REACHED])

            locked.used_count += 1
            locked.save(update_fields=['used_count', 'updated_at'])

            entry = (UserVoucher.objects.select_for_update()
                     .filter(user=user, voucher=locked, is_used=False)
                     .order_by('created_at', 'pk')
                     .first())
            if entry is None:
                if locked.point_cost:
                    raise CheckoutRejected(VoucherReason.NOT_CLAIMED, VOUCHER_MESSAGES[VoucherReason.NOT_CLAIMED])
                entry = UserVoucher.objects.create(
                    user=user, voucher=locked, is_used=True, used_at=now, order=order
                )
            else:
                entry.is_used = True
                entry.used_at = now
                entry.order = order
                entry.save(update_fields=['is_used', 'used_at', 'order'])

        voucher.used_count = locked.used_count
        logger.info("Voucher %s used by user %s (%s/%s)", locked.code, user.pk, locked.used_count,
                    locked.usage_limit or 'unlimited')
        return entry

    @staticmethod
    def reward_queryset(now=None):
        now = now or timezone.now()
        return (Voucher.objects.select_related('target_tier')
                .filter(is_active=True, is_redeemable=True)
                .exclude(start_date__gt=now)
                .exclude(end_date__lt=now)
                .order_by('point_cost', 'pk'))

    @staticmethod
    def list_rewards(user, now=None):
        """Rewards catalogue with affordability and tier flags for ``user``"""
        rewards = []
        for voucher in VoucherService.reward_queryset(now):
            rewards.append({
                'voucher': voucher,
                'is_affordable': user.loyalty_points >= voucher.point_cost,
                'is_tier_eligible': voucher.target_tier_id is None or voucher.target_tier_id == user.current_tier_id,
            })
        return rewards

    @staticmethod
    def claim_voucher(user, voucher_id, now=None):
        """
        Buy a reward voucher with points.

        Raises Voucher.DoesNotExist for an unknown id and CheckoutRejected
        carrying a ClaimReason when the member may not claim it.
        """
        now = now or timezone.now()
        with transaction.atomic():
            voucher = Voucher.objects.select_for_update().get(pk=voucher_id)
            member = PointsService.lock_member(user)

            reason = check_claim(voucher.to_snapshot(), member.to_member_snapshot(), now)
            if reason is not None:
                logger.info("Claim of voucher %s refused for user %s: %s", voucher.code, member.pk, reason.value)
                raise CheckoutRejected(reason, CLAIM_MESSAGES[reason])

            user_voucher = UserVoucher.objects.create(
                user=member, voucher=voucher, is_used=False, redeemed_at=now
            )
            PointsService.redeem_for_order(member, voucher.point_cost, notes=f'Redeemed voucher: {voucher.code}')

        user.loyalty_points = member.loyalty_points
        user.current_tier_id = member.current_tier_id
        logger.info("User %s claimed voucher %s for %s points", member.pk, voucher.code, voucher.point_cost)
        return user_voucher

    @staticmethod
    def get_user_vouchers(user, include_used=False):
        vouchers = UserVoucher.objects.select_related('voucher').filter(user=user)
        if not include_used:
            vouchers = vouchers.filter(is_used=False)
        return vouchers
