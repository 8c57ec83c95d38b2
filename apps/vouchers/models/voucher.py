from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models


class Voucher(models.Model):
    """Administrator-issued discount code"""
    DISCOUNT_TYPES = [
        ('percentage', 'Percentage'),
        ('fixed', 'Fixed Amount'),
    ]

    CUSTOMER_ELIGIBILITY = [
        ('ALL', 'All Customers'),
        ('NEW_USER', 'New Customers'),
        ('SPECIFIC_USER', 'Specific Customers'),
    ]

    # Matched case-sensitively, exactly as stored
    code = models.CharField(max_length=50, unique=True)
    description = models.TextField(blank=True, default='')
    discount_type = models.CharField(max_length=20, choices=DISCOUNT_TYPES)
    discount_value = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])
    max_discount = models.DecimalField(
        max_digits=12, decimal_places=2, null=True, blank=True,
        help_text="Ceiling for percentage discounts"
    )
    min_order = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    point_cost = models.PositiveIntegerField(default=0, help_text="Points needed to claim as a reward")

    is_active = models.BooleanField(default=True)
    is_redeemable = models.BooleanField(default=False, help_text="Listed in the rewards catalogue")
    start_date = models.DateTimeField(null=True, blank=True)
    end_date = models.DateTimeField(null=True, blank=True)
    target_tier = models.ForeignKey(
        'membership.MembershipTier',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='vouchers',
    )

    usage_limit = models.PositiveIntegerField(null=True, blank=True, help_text="Total uses, empty for unlimited")
    used_count = models.PositiveIntegerField(default=0)
    user_usage_limit = models.PositiveIntegerField(null=True, blank=True)

    valid_order_types = models.JSONField(default=list, blank=True)
    valid_product_ids = models.JSONField(default=list, blank=True)
    valid_category_ids = models.JSONField(default=list, blank=True)
    customer_eligibility = models.CharField(max_length=20, choices=CUSTOMER_ELIGIBILITY, default='ALL')
    eligible_user_ids = models.JSONField(default=list, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'vouchers'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['is_active', 'is_redeemable']),
        ]

    def __str__(self):
        return self.code

    def clean(self):
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValidationError({'end_date': 'End date must not be before start date'})
        if self.discount_type == 'percentage' and self.discount_value is not None and self.discount_value > 100:
            raise ValidationError({'discount_value': 'Percentage discount cannot exceed 100'})

    def to_snapshot(self):
        from ..services.voucher_validator import VoucherSnapshot
        return VoucherSnapshot(
            id=self.pk,
            code=self.code,
            discount_type=self.discount_type,
            discount_value=self.discount_value,
            max_discount=self.max_discount,
            min_order=self.min_order,
            point_cost=self.point_cost,
            is_active=self.is_active,
            is_redeemable=self.is_redeemable,
            start_date=self.start_date,
            end_date=self.end_date,
            target_tier_id=self.target_tier_id,
            usage_limit=self.usage_limit,
            used_count=self.used_count,
            user_usage_limit=self.user_usage_limit,
            valid_order_types=self.valid_order_types or (),
            valid_product_ids=self.valid_product_ids or (),
            valid_category_ids=self.valid_category_ids or (),
            customer_eligibility=self.customer_eligibility,
            eligible_user_ids=self.eligible_user_ids or (),
        )
