"""
Tests for combining voucher and points discounts into an order total.
"""
from datetime import datetime, timedelta, timezone as dt_timezone
from decimal import Decimal

from hypothesis import given, strategies as st, settings

from apps.membership.services import MemberSnapshot
from apps.orders.services import combine_discounts, price_order
from apps.points.services import LoyaltySettings, RedemptionReason
from apps.vouchers.services import CartLine, VoucherReason, VoucherSnapshot

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=dt_timezone.utc)
SETTINGS = LoyaltySettings(point_value_idr=Decimal('1000'), min_points_to_redeem=10, max_redemption_percentage=50)
MEMBER = MemberSnapshot(user_id=1, loyalty_points=500)
CART = [CartLine(product_id='latte', quantity=4, unit_price=Decimal('25000'))]

money = st.decimals(min_value=0, max_value=10_000_000, places=2)


def voucher(**overrides):
    fields = {
        'id': 1,
        'code': 'HEMAT',
        'discount_type': 'fixed',
        'discount_value': Decimal('20000'),
        'start_date': NOW - timedelta(days=1),
        'end_date': NOW + timedelta(days=1),
    }
    fields.update(overrides)
    return VoucherSnapshot(**fields)


class TestCombineDiscounts:

    def test_sum_within_subtotal(self):
        assert combine_discounts(Decimal('100'), Decimal('30'), Decimal('20')) == Decimal('50.00')

    def test_sum_clamped_to_subtotal(self):
        assert combine_discounts(Decimal('100'), Decimal('80'), Decimal('50')) == Decimal('100.00')

    def test_zero_subtotal(self):
        assert combine_discounts(Decimal('0'), Decimal('10'), Decimal('10')) == Decimal('0.00')

    @given(subtotal=money, voucher_discount=money, points_discount=money)
    @settings(max_examples=200, deadline=None)
    def test_payable_never_negative(self, subtotal, voucher_discount, points_discount):
        discount = combine_discounts(subtotal, voucher_discount, points_discount)
        assert Decimal('0') <= discount <= subtotal
        assert subtotal - discount >= 0


class TestPriceOrder:

    def test_no_discounts(self):
        breakdown = price_order(CART, 'PICKUP', MEMBER, SETTINGS, NOW)
        assert breakdown.subtotal == Decimal('100000.00')
        assert breakdown.item_count == 4
        assert breakdown.voucher is None
        assert breakdown.discount_total == Decimal('0')
        assert breakdown.tax == Decimal('11000.00')
        assert breakdown.total == Decimal('111000.00')

    def test_voucher_and_points(self):
        breakdown = price_order(
            CART, 'PICKUP', MEMBER, SETTINGS, NOW,
            voucher_code='HEMAT', voucher=voucher(), points_requested=30,
        )
        assert breakdown.voucher_discount == Decimal('20000.00')
        assert breakdown.points_used == 30
        assert breakdown.points_discount == Decimal('30000.00')
        assert breakdown.discount_total == Decimal('50000.00')
        assert breakdown.total == Decimal('61000.00')
        assert breakdown.redemption.reason is None

    def test_points_reduced_when_voucher_takes_most_of_subtotal(self):
        big_voucher = voucher(discount_value=Decimal('80000'))
        breakdown = price_order(
            CART, 'PICKUP', MEMBER, SETTINGS, NOW,
            voucher_code='HEMAT', voucher=big_voucher, points_requested=50,
        )
        assert breakdown.voucher_discount == Decimal('80000.00')
        assert breakdown.points_used == 20
        assert breakdown.points_discount == Decimal('20000.00')
        assert breakdown.discount_total == breakdown.subtotal
        assert breakdown.redemption.reason == RedemptionReason.CAPPED_BY_VOUCHER
        assert not breakdown.redemption.is_rejected

    def test_unknown_code_reported(self):
        breakdown = price_order(CART, 'PICKUP', MEMBER, SETTINGS, NOW, voucher_code='NOPE')
        assert breakdown.is_voucher_rejected
        assert breakdown.voucher.reason == VoucherReason.NOT_FOUND
        assert breakdown.voucher_discount == Decimal('0')

    def test_rejected_points_give_no_discount(self):
        breakdown = price_order(CART, 'PICKUP', MEMBER, SETTINGS, NOW, points_requested=900)
        assert breakdown.redemption.reason == RedemptionReason.INSUFFICIENT_POINTS
        assert breakdown.points_used == 0
        assert breakdown.points_discount == Decimal('0')

    def test_custom_tax_rate(self):
        breakdown = price_order(CART, 'PICKUP', MEMBER, SETTINGS, NOW, tax_rate=Decimal('0'))
        assert breakdown.total == breakdown.subtotal

    @given(
        price=st.decimals(min_value=0, max_value=500_000, places=2),
        quantity=st.integers(min_value=1, max_value=10),
        voucher_value=st.decimals(min_value=0, max_value=5_000_000, places=2),
        points=st.integers(min_value=0, max_value=500),
    )
    @settings(max_examples=100, deadline=None)
    def test_discounts_never_exceed_subtotal(self, price, quantity, voucher_value, points):
        cart = [CartLine(product_id='p', quantity=quantity, unit_price=price)]
        breakdown = price_order(
            cart, 'PICKUP', MEMBER, SETTINGS, NOW,
            voucher_code='HEMAT', voucher=voucher(discount_value=voucher_value), points_requested=points,
        )
        assert breakdown.voucher_discount + breakdown.points_discount <= breakdown.subtotal
        assert breakdown.total >= breakdown.tax
