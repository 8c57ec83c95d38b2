from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models, transaction


class LoyaltySetting(models.Model):
    """Programme-wide loyalty configuration (single row)"""
    is_enabled = models.BooleanField(default=True)
    points_per_item = models.DecimalField(
        max_digits=8, decimal_places=2, default=1, validators=[MinValueValidator(0)]
    )
    point_value_idr = models.DecimalField(
        max_digits=12, decimal_places=2, default=1000, validators=[MinValueValidator(Decimal('0.01'))],
        help_text="Monetary value of one point"
    )
    min_points_to_redeem = models.IntegerField(default=10, validators=[MinValueValidator(0)])
    max_points_per_transaction = models.IntegerField(
        null=True, blank=True, validators=[MinValueValidator(0)],
        help_text="Empty for no per-order cap"
    )
    max_redemption_percentage = models.IntegerField(
        default=50, validators=[MinValueValidator(0), MaxValueValidator(100)],
        help_text="Highest share of the subtotal payable with points"
    )
    version = models.PositiveIntegerField(default=1)
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'loyalty_settings'
        verbose_name = 'Loyalty Setting'
        verbose_name_plural = 'Loyalty Settings'

    def __str__(self):
        state = 'enabled' if self.is_enabled else 'disabled'
        return f"Loyalty settings v{self.version} ({state})"

    @classmethod
    def default_values(cls):
        defaults = settings.LOYALTY_DEFAULTS
        return {
            'is_enabled': defaults['IS_ENABLED'],
            'points_per_item': defaults['POINTS_PER_ITEM'],
            'point_value_idr': defaults['POINT_VALUE'],
            'min_points_to_redeem': defaults['MIN_POINTS_TO_REDEEM'],
            'max_points_per_transaction': defaults['MAX_POINTS_PER_TRANSACTION'],
            'max_redemption_percentage': defaults['MAX_REDEMPTION_PERCENTAGE'],
        }

    @classmethod
    def load(cls):
        """Return the settings row, creating it from LOYALTY_DEFAULTS on first use"""
        setting = cls.objects.order_by('pk').first()
        if setting is None:
            with transaction.atomic():
                setting = cls.objects.select_for_update().order_by('pk').first()
                if setting is None:
                    setting = cls.objects.create(**cls.default_values())
        return setting

    def update_values(self, values, user=None):
        """Apply changed fields and bump the version"""
        for key, value in values.items():
            setattr(self, key, value)
        self.version += 1
        self.updated_by = user
        self.full_clean()
        self.save()
        return self

    def to_snapshot(self):
        from ..services.loyalty_settings import LoyaltySettings
        return LoyaltySettings(
            is_enabled=self.is_enabled,
            points_per_item=self.points_per_item,
            point_value_idr=self.point_value_idr,
            min_points_to_redeem=self.min_points_to_redeem,
            max_points_per_transaction=self.max_points_per_transaction,
            max_redemption_percentage=self.max_redemption_percentage,
            version=self.version,
        )
