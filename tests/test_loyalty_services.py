"""
Database-backed tests for settlement, redemption, vouchers and checkout.
"""
from datetime import timedelta
from decimal import Decimal
from io import StringIO

from django.core.exceptions import ValidationError
from django.core.management import call_command
from django.test import TestCase
from django.utils import timezone

from apps.common.exceptions import CheckoutRejected, SettlementConflict
from apps.membership.models import MembershipTier, TierChangeLog
from apps.membership.services import MembershipService
from apps.orders.models import Order
from apps.orders.services import CheckoutService
from apps.points.models import LoyaltySetting, LoyaltyTransaction
from apps.points.services import PointsService, get_loyalty_settings
from apps.vouchers.models import UserVoucher
from apps.vouchers.services import CartLine, VoucherService

from tests.factories import (
    MembershipTierFactory, OrderFactory, OrderItemFactory, UserFactory, VoucherFactory
)


class LoyaltyTestCase(TestCase):
    """Bronze 0-99, Silver 100-499, Gold 500+"""

    def setUp(self):
        self.bronze = MembershipTierFactory(tier_level=1, tier_name='Bronze', min_points=0, max_points=99)
        self.silver = MembershipTierFactory(tier_level=2, tier_name='Silver', min_points=100, max_points=499)
        self.gold = MembershipTierFactory(tier_level=3, tier_name='Gold', min_points=500, max_points=None)

    def completed_order(self, user, quantities=(1,), total=Decimal('33300.00')):
        order = OrderFactory(user=user, status='completed', total=total)
        for quantity in quantities:
            OrderItemFactory(order=order, quantity=quantity)
        return order


class LoyaltySettingTest(TestCase):

    def test_load_creates_row_from_defaults(self):
        self.assertFalse(LoyaltySetting.objects.exists())
        snapshot = get_loyalty_settings()
        self.assertEqual(LoyaltySetting.objects.count(), 1)
        self.assertEqual(snapshot.point_value_idr, Decimal('1000'))
        self.assertEqual(snapshot.min_points_to_redeem, 10)
        self.assertIsNone(snapshot.max_points_per_transaction)

    def test_load_returns_existing_row(self):
        first = LoyaltySetting.load()
        self.assertEqual(LoyaltySetting.load().pk, first.pk)

    def test_update_bumps_version(self):
        setting = LoyaltySetting.load()
        setting.update_values({'max_redemption_percentage': 30})
        self.assertEqual(setting.version, 2)
        self.assertEqual(get_loyalty_settings().max_redemption_percentage, 30)

    def test_update_rejects_invalid_values(self):
        setting = LoyaltySetting.load()
        with self.assertRaises(ValidationError):
            setting.update_values({'max_redemption_percentage': 150})


class MembershipTierModelTest(LoyaltyTestCase):

    def test_clean_rejects_gap(self):
        platinum = MembershipTier(tier_level=4, tier_name='Platinum', min_points=3000)
        with self.assertRaises(ValidationError):
            platinum.clean()

    def test_setup_command_creates_default_tiers(self):
        MembershipTier.objects.all().delete()
        out = StringIO()
        call_command('setup_membership_tiers', stdout=out)
        call_command('setup_membership_tiers', stdout=out)
        self.assertEqual(
            list(MembershipTier.objects.values_list('tier_name', flat=True)),
            ['Bronze', 'Silver', 'Gold', 'Platinum'],
        )
        self.assertIn('0 created, 4 updated', out.getvalue())

    def test_loyalty_status(self):
        user = UserFactory(loyalty_points=300)
        status = MembershipService.get_loyalty_status(user)
        self.assertEqual(status['current_tier'].tier_name, 'Silver')
        self.assertEqual(status['next_tier'].tier_name, 'Gold')
        self.assertEqual(status['remaining_points'], 200)


class SettlementTest(LoyaltyTestCase):

    def test_completed_order_credits_points_and_spend(self):
        user = UserFactory()
        order = self.completed_order(user, quantities=(2, 1))

        points = PointsService.settle_completed_order(order)

        user.refresh_from_db()
        self.assertEqual(points, 3)
        self.assertEqual(user.loyalty_points, 3)
        self.assertEqual(user.total_spent, Decimal('33300.00'))
        entry = LoyaltyTransaction.objects.get(user=user)
        self.assertEqual(entry.transaction_type, 'earned')
        self.assertEqual(entry.points_change, 3)
        self.assertEqual(entry.points_balance_after, 3)
        self.assertEqual(entry.earning_method['items'], 3)

    def test_settlement_is_idempotent(self):
        user = UserFactory()
        order = self.completed_order(user, quantities=(4,))

        PointsService.settle_completed_order(order)
        self.assertEqual(PointsService.settle_completed_order(order), 0)

        user.refresh_from_db()
        self.assertEqual(user.loyalty_points, 4)
        self.assertEqual(user.total_spent, Decimal('33300.00'))
        self.assertEqual(LoyaltyTransaction.objects.filter(user=user).count(), 1)

    def test_pending_order_is_not_settled(self):
        user = UserFactory()
        order = OrderFactory(user=user, status='pending')
        OrderItemFactory(order=order, quantity=5)

        self.assertEqual(PointsService.settle_completed_order(order), 0)
        user.refresh_from_db()
        self.assertEqual(user.loyalty_points, 0)
        self.assertEqual(user.total_spent, Decimal('0'))

    def test_settlement_promotes_tier(self):
        user = UserFactory(loyalty_points=95, current_tier=self.bronze)
        order = self.completed_order(user, quantities=(5,))

        PointsService.settle_completed_order(order)

        user.refresh_from_db()
        self.assertEqual(user.current_tier, self.silver)
        change = TierChangeLog.objects.get(user=user)
        self.assertEqual(change.from_tier, self.bronze)
        self.assertEqual(change.to_tier, self.silver)
        self.assertEqual(change.points_at_change, 100)


class RedemptionTest(LoyaltyTestCase):

    def test_redeem_deducts_and_logs(self):
        user = UserFactory(loyalty_points=120, current_tier=self.silver)

        entry = PointsService.redeem_for_order(user, 30)

        user.refresh_from_db()
        self.assertEqual(user.loyalty_points, 90)
        self.assertEqual(entry.points_change, -30)
        self.assertEqual(entry.transaction_type, 'redeemed')
        # Redemption lowers the balance the tier is classified on
        self.assertEqual(user.current_tier, self.bronze)

    def test_insufficient_balance_rejected(self):
        user = UserFactory(loyalty_points=20)
        with self.assertRaises(CheckoutRejected) as ctx:
            PointsService.redeem_for_order(user, 30)
        self.assertEqual(ctx.exception.reason, 'INSUFFICIENT_POINTS')
        user.refresh_from_db()
        self.assertEqual(user.loyalty_points, 20)

    def test_stale_balance_conflicts(self):
        user = UserFactory(loyalty_points=100)
        with self.assertRaises(SettlementConflict):
            PointsService.redeem_for_order(user, 30, expected_balance=150)
        self.assertFalse(LoyaltyTransaction.objects.exists())


class VoucherServiceTest(LoyaltyTestCase):

    def test_code_lookup_is_case_sensitive(self):
        VoucherFactory(code='HEMAT10')
        self.assertIsNotNone(VoucherService.find_by_code('HEMAT10'))
        self.assertIsNone(VoucherService.find_by_code('hemat10'))
        self.assertIsNone(VoucherService.find_by_code(' HEMAT10'))

    def test_check_does_not_record_usage(self):
        user = UserFactory()
        voucher = VoucherFactory(code='HEMAT10', user_usage_limit=1)
        lines = [CartLine(product_id='latte', quantity=1, unit_price=Decimal('50000'))]

        first = VoucherService.check_voucher(user, 'HEMAT10', Decimal('50000'), 'PICKUP', lines)
        second = VoucherService.check_voucher(user, 'HEMAT10', Decimal('50000'), 'PICKUP', lines)

        self.assertTrue(first.valid)
        self.assertEqual(first, second)
        voucher.refresh_from_db()
        self.assertEqual(voucher.used_count, 0)
        self.assertFalse(UserVoucher.objects.exists())

    def test_check_uses_classified_tier(self):
        user = UserFactory(loyalty_points=600, current_tier=None)
        VoucherFactory(code='GOLDONLY', target_tier=self.gold)
        lines = [CartLine(product_id='latte', quantity=1, unit_price=Decimal('50000'))]
        result = VoucherService.check_voucher(user, 'GOLDONLY', Decimal('50000'), 'PICKUP', lines)
        self.assertTrue(result.valid)

    def test_record_usage_enforces_limits(self):
        user = UserFactory()
        voucher = VoucherFactory(usage_limit=1)

        VoucherService.record_usage(voucher, user)
        voucher.refresh_from_db()
        self.assertEqual(voucher.used_count, 1)

        with self.assertRaises(CheckoutRejected) as ctx:
            VoucherService.record_usage(voucher, UserFactory())
        self.assertEqual(ctx.exception.reason, 'LIMIT_REACHED')

    def test_claim_deducts_points(self):
        user = UserFactory(loyalty_points=200, current_tier=self.silver)
        voucher = VoucherFactory(is_redeemable=True, point_cost=150)

        user_voucher = VoucherService.claim_voucher(user, voucher.pk)

        self.assertFalse(user_voucher.is_used)
        self.assertIsNotNone(user_voucher.redeemed_at)
        user.refresh_from_db()
        self.assertEqual(user.loyalty_points, 50)
        entry = LoyaltyTransaction.objects.get(user=user)
        self.assertEqual(entry.points_change, -150)
        self.assertIn(voucher.code, entry.notes)

    def test_claim_without_enough_points(self):
        user = UserFactory(loyalty_points=100)
        voucher = VoucherFactory(is_redeemable=True, point_cost=150)
        with self.assertRaises(CheckoutRejected) as ctx:
            VoucherService.claim_voucher(user, voucher.pk)
        self.assertEqual(ctx.exception.reason, 'INSUFFICIENT_POINTS')
        self.assertFalse(UserVoucher.objects.exists())

    def test_usage_consumes_claimed_voucher(self):
        user = UserFactory(loyalty_points=200)
        voucher = VoucherFactory(is_redeemable=True, point_cost=100)
        claimed = VoucherService.claim_voucher(user, voucher.pk)

        used = VoucherService.record_usage(voucher, user)

        self.assertEqual(used.pk, claimed.pk)
        self.assertTrue(used.is_used)
        self.assertEqual(UserVoucher.objects.count(), 1)

    def test_rewards_list_flags(self):
        user = UserFactory(loyalty_points=120, current_tier=self.silver)
        VoucherFactory(code='CHEAP', is_redeemable=True, point_cost=100)
        VoucherFactory(code='PRICEY', is_redeemable=True, point_cost=300, target_tier=self.gold)
        VoucherFactory(code='HIDDEN', is_redeemable=False)
        VoucherFactory(code='OLD', is_redeemable=True, end_date=timezone.now() - timedelta(days=1))

        rewards = VoucherService.list_rewards(user)

        self.assertEqual([r['voucher'].code for r in rewards], ['CHEAP', 'PRICEY'])
        self.assertTrue(rewards[0]['is_affordable'])
        self.assertFalse(rewards[1]['is_affordable'])
        self.assertFalse(rewards[1]['is_tier_eligible'])


class CheckoutTest(LoyaltyTestCase):

    def setUp(self):
        super().setUp()
        self.lines = [
            CartLine(product_id='latte', category_id='coffee', quantity=2, unit_price=Decimal('25000')),
            CartLine(product_id='croissant', category_id='bakery', quantity=2, unit_price=Decimal('25000')),
        ]

    def test_place_order_with_voucher_and_points(self):
        user = UserFactory(loyalty_points=120, current_tier=self.silver)
        voucher = VoucherFactory(code='HEMAT10', discount_value=Decimal('10000'))

        order = CheckoutService.place_order(user, 'PICKUP', self.lines, voucher_code='HEMAT10', points_to_redeem=20)

        self.assertEqual(order.subtotal, Decimal('100000.00'))
        self.assertEqual(order.discount, Decimal('10000.00'))
        self.assertEqual(order.points_used, 20)
        self.assertEqual(order.points_discount, Decimal('20000.00'))
        self.assertEqual(order.tax, Decimal('11000.00'))
        self.assertEqual(order.total, Decimal('81000.00'))
        self.assertEqual(order.items.count(), 2)
        self.assertEqual(order.voucher, voucher)

        user.refresh_from_db()
        voucher.refresh_from_db()
        self.assertEqual(user.loyalty_points, 100)
        self.assertEqual(voucher.used_count, 1)
        self.assertTrue(UserVoucher.objects.get(user=user).is_used)
        self.assertEqual(LoyaltyTransaction.objects.get(order=order).points_change, -20)

    def test_rejected_voucher_creates_nothing(self):
        user = UserFactory(loyalty_points=120)
        VoucherFactory(code='OLD', end_date=timezone.now() - timedelta(days=1))

        with self.assertRaises(CheckoutRejected) as ctx:
            CheckoutService.place_order(user, 'PICKUP', self.lines, voucher_code='OLD', points_to_redeem=20)

        self.assertEqual(ctx.exception.reason, 'EXPIRED')
        self.assertFalse(Order.objects.exists())
        user.refresh_from_db()
        self.assertEqual(user.loyalty_points, 120)

    def test_rejected_points_create_nothing(self):
        user = UserFactory(loyalty_points=5)
        with self.assertRaises(CheckoutRejected) as ctx:
            CheckoutService.place_order(user, 'PICKUP', self.lines, points_to_redeem=20)
        self.assertEqual(ctx.exception.reason, 'INSUFFICIENT_POINTS')
        self.assertFalse(Order.objects.exists())

    def test_stale_balance_is_repriced(self):
        user = UserFactory(loyalty_points=120)
        # Another checkout spent points after this user object was loaded
        type(user).objects.filter(pk=user.pk).update(loyalty_points=15)

        order = CheckoutService.place_order(user, 'PICKUP', self.lines, points_to_redeem=15)

        self.assertEqual(order.points_used, 15)
        user.refresh_from_db()
        self.assertEqual(user.loyalty_points, 0)

    def test_stale_balance_rejected_when_no_longer_enough(self):
        user = UserFactory(loyalty_points=120)
        type(user).objects.filter(pk=user.pk).update(loyalty_points=10)

        with self.assertRaises(CheckoutRejected) as ctx:
            CheckoutService.place_order(user, 'PICKUP', self.lines, points_to_redeem=20)
        self.assertEqual(ctx.exception.reason, 'INSUFFICIENT_POINTS')
        self.assertFalse(Order.objects.exists())

    def test_complete_order_settles_loyalty(self):
        user = UserFactory(loyalty_points=98, current_tier=self.bronze)
        order = CheckoutService.place_order(user, 'DINE_IN', self.lines)

        completed = CheckoutService.complete_order(order)

        self.assertEqual(completed.status, 'completed')
        self.assertIsNotNone(completed.completed_at)
        self.assertEqual(completed.points_earned, 4)
        user.refresh_from_db()
        self.assertEqual(user.loyalty_points, 102)
        self.assertEqual(user.total_spent, order.total)
        self.assertEqual(user.current_tier, self.silver)

        CheckoutService.complete_order(order)
        user.refresh_from_db()
        self.assertEqual(user.loyalty_points, 102)

    def test_cancelled_order_cannot_complete(self):
        order = OrderFactory(status='cancelled')
        with self.assertRaises(CheckoutRejected):
            CheckoutService.complete_order(order)


class RewardVoucherCheckoutTest(LoyaltyTestCase):
    """Vouchers with a point cost apply only against a claim bought with points"""

    def setUp(self):
        super().setUp()
        self.lines = [CartLine(product_id='latte', quantity=4, unit_price=Decimal('25000'))]
        self.reward = VoucherFactory(
            code='REWARD50', discount_value=Decimal('20000'), point_cost=500, is_redeemable=True
        )

    def test_unclaimed_reward_rejected_at_checkout(self):
        user = UserFactory(loyalty_points=0)

        with self.assertRaises(CheckoutRejected) as ctx:
            CheckoutService.place_order(user, 'PICKUP', self.lines, voucher_code='REWARD50')

        self.assertEqual(ctx.exception.reason, 'NOT_CLAIMED')
        self.assertFalse(Order.objects.exists())
        self.reward.refresh_from_db()
        self.assertEqual(self.reward.used_count, 0)
        self.assertFalse(UserVoucher.objects.exists())

    def test_unclaimed_reward_reported_by_check(self):
        user = UserFactory(loyalty_points=1000)
        result = VoucherService.check_voucher(user, 'REWARD50', Decimal('100000'), 'PICKUP', self.lines)
        self.assertFalse(result.valid)
        self.assertEqual(result.reason.value, 'NOT_CLAIMED')

    def test_claimed_reward_applies_once(self):
        user = UserFactory(loyalty_points=600)
        claim = VoucherService.claim_voucher(user, self.reward.pk)

        order = CheckoutService.place_order(user, 'PICKUP', self.lines, voucher_code='REWARD50')

        self.assertEqual(order.discount, Decimal('20000.00'))
        claim.refresh_from_db()
        self.assertTrue(claim.is_used)
        self.assertEqual(claim.order, order)
        self.assertEqual(UserVoucher.objects.filter(user=user).count(), 1)
        user.refresh_from_db()
        self.assertEqual(user.loyalty_points, 100)

        with self.assertRaises(CheckoutRejected) as ctx:
            CheckoutService.place_order(user, 'PICKUP', self.lines, voucher_code='REWARD50')
        self.assertEqual(ctx.exception.reason, 'NOT_CLAIMED')

    def test_record_usage_requires_claim(self):
        user = UserFactory()
        with self.assertRaises(CheckoutRejected) as ctx:
            VoucherService.record_usage(self.reward, user)
        self.assertEqual(ctx.exception.reason, 'NOT_CLAIMED')
        self.reward.refresh_from_db()
        self.assertEqual(self.reward.used_count, 0)


class NewUserVoucherTest(LoyaltyTestCase):

    def test_cancelled_orders_count_as_previous_orders(self):
        user = UserFactory()
        VoucherFactory(code='WELCOME', customer_eligibility='NEW_USER')
        lines = [CartLine(product_id='latte', quantity=1, unit_price=Decimal('50000'))]

        first = VoucherService.check_voucher(user, 'WELCOME', Decimal('50000'), 'PICKUP', lines)
        OrderFactory(user=user, status='cancelled')
        second = VoucherService.check_voucher(user, 'WELCOME', Decimal('50000'), 'PICKUP', lines)

        self.assertTrue(first.valid)
        self.assertEqual(second.reason.value, 'CUSTOMER_INELIGIBLE')


class TierGapTest(LoyaltyTestCase):
    """A deleted middle tier leaves a gap; ordering and settlement keep working"""

    def setUp(self):
        super().setUp()
        with self.assertLogs('apps.membership', level='ERROR'):
            self.silver.delete()
        self.lines = [CartLine(product_id='latte', quantity=2, unit_price=Decimal('25000'))]

    def test_checkout_and_settlement_with_gap(self):
        user = UserFactory(loyalty_points=50)

        with self.assertLogs('apps.membership', level='ERROR'):
            order = CheckoutService.place_order(user, 'PICKUP', self.lines)
        completed = CheckoutService.complete_order(order)

        self.assertEqual(completed.points_earned, 2)
        user.refresh_from_db()
        self.assertEqual(user.loyalty_points, 52)
        self.assertEqual(user.current_tier, self.bronze)

    def test_member_inside_gap_has_no_tier(self):
        user = UserFactory(loyalty_points=200)
        self.assertIsNone(MembershipService.resolve_tier(user))
        self.assertEqual(MembershipService.resolve_tier(UserFactory(loyalty_points=800)), self.gold.to_snapshot())

    def test_status_still_served(self):
        status = MembershipService.get_loyalty_status(UserFactory(loyalty_points=200))
        self.assertIsNone(status['current_tier'])
        self.assertEqual(status['next_tier'].tier_name, 'Gold')
