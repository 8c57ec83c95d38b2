from django.conf import settings
from django.db import models


class UserVoucher(models.Model):
    """Voucher usage ledger: claimed rewards and used vouchers per member"""
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='user_vouchers')
    voucher = models.ForeignKey('vouchers.Voucher', on_delete=models.CASCADE, related_name='user_vouchers')
    is_used = models.BooleanField(default=False)
    redeemed_at = models.DateTimeField(null=True, blank=True, help_text="When the voucher was claimed with points")
    used_at = models.DateTimeField(null=True, blank=True)
    order = models.ForeignKey(
        'orders.Order', on_delete=models.SET_NULL, null=True, blank=True, related_name='voucher_usages'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'user_vouchers'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', 'voucher', 'is_used']),
        ]

    def __str__(self):
        state = 'used' if self.is_used else 'available'
        return f"{self.user} - {self.voucher.code} ({state})"
