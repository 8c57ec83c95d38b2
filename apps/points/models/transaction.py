from django.conf import settings
from django.db import models


class LoyaltyTransaction(models.Model):
    """Ledger entry for every change of a member's points balance"""
    TRANSACTION_TYPES = [
        ('earned', 'Points Earned'),
        ('redeemed', 'Points Redeemed'),
        ('adjustment', 'Manual Adjustment'),
    ]

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='loyalty_transactions')
    transaction_type = models.CharField(max_length=20, choices=TRANSACTION_TYPES)
    points_change = models.IntegerField()  # Positive for earning, negative for redemption
    points_balance_after = models.IntegerField()
    earning_method = models.JSONField(null=True, blank=True)
    order = models.ForeignKey(
        'orders.Order', on_delete=models.SET_NULL, null=True, blank=True, related_name='loyalty_transactions'
    )
    notes = models.CharField(max_length=200, blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'loyalty_transactions'
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['user', 'created_at']),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=['order', 'transaction_type'],
                condition=models.Q(order__isnull=False),
                name='loyalty_transactions_one_per_order_and_type',
            ),
        ]

    def __str__(self):
        return f"{self.user.username} {self.points_change:+d} points ({self.get_transaction_type_display()})"

    @property
    def is_earning(self):
        return self.points_change > 0
