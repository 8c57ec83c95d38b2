from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models


class MembershipTier(models.Model):
    """Membership tier keyed by a contiguous loyalty points range"""
    tier_level = models.PositiveIntegerField(unique=True, help_text="Ordering key, 1 is the entry tier")
    tier_name = models.CharField(max_length=50)
    min_points = models.IntegerField(validators=[MinValueValidator(0)])
    max_points = models.IntegerField(null=True, blank=True, help_text="Empty for the unbounded top tier")
    benefits_description = models.TextField(blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'membership_tiers'
        ordering = ['tier_level']

    def __str__(self):
        return self.tier_name

    def to_snapshot(self):
        from ..services.tier_classifier import TierSnapshot
        return TierSnapshot(
            id=self.pk,
            tier_level=self.tier_level,
            tier_name=self.tier_name,
            min_points=self.min_points,
            max_points=self.max_points,
            benefits_description=self.benefits_description,
        )

    def clean(self):
        """Reject a tier that would overlap or leave a gap next to the saved ones"""
        from ..services.tier_classifier import validate_tier_configuration

        if self.tier_level is None or self.min_points is None:
            return

        others = MembershipTier.objects.exclude(pk=self.pk)
        problems = validate_tier_configuration(
            [tier.to_snapshot() for tier in others] + [self.to_snapshot()]
        )
        if problems:
            raise ValidationError(problems)

    @classmethod
    def snapshots(cls):
        """All tiers as snapshots, ascending by level"""
        return [tier.to_snapshot() for tier in cls.objects.order_by('tier_level')]
