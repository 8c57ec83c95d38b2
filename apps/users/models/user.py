from django.contrib.auth.models import AbstractUser
from django.core.validators import MinValueValidator
from django.db import models


class User(AbstractUser):
    """Customer account carrying the loyalty state"""
    phone = models.CharField(max_length=20, unique=True, null=True, blank=True)

    # Loyalty state, written only by order settlement and point redemption
    loyalty_points = models.IntegerField(default=0, validators=[MinValueValidator(0)])
    total_spent = models.DecimalField(max_digits=14, decimal_places=2, default=0)
    current_tier = models.ForeignKey(
        'membership.MembershipTier',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='members',
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'users'
        verbose_name = 'User'
        verbose_name_plural = 'Users'
        constraints = [
            models.CheckConstraint(
                condition=models.Q(loyalty_points__gte=0),
                name='users_loyalty_points_non_negative',
            ),
        ]

    def __str__(self):
        return self.username or self.phone or f"User {self.id}"

    def to_member_snapshot(self, previous_order_count=0):
        """Freeze the loyalty state for the decision layer"""
        from apps.membership.services.member_snapshot import MemberSnapshot
        return MemberSnapshot(
            user_id=self.pk,
            loyalty_points=self.loyalty_points,
            total_spent=self.total_spent,
            tier_id=self.current_tier_id,
            previous_order_count=previous_order_count,
        )
