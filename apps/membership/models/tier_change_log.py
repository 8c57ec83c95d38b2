from django.db import models
from django.conf import settings


class TierChangeLog(models.Model):
    """History of tier changes"""
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='tier_changes')
    from_tier = models.ForeignKey(
        'MembershipTier', on_delete=models.SET_NULL, related_name='changes_from', null=True, blank=True
    )
    to_tier = models.ForeignKey(
        'MembershipTier', on_delete=models.SET_NULL, related_name='changes_to', null=True, blank=True
    )
    reason = models.CharField(max_length=200)
    points_at_change = models.IntegerField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'tier_change_logs'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.user.username}: {self.from_tier} -> {self.to_tier}"
