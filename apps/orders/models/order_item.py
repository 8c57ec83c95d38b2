from django.core.validators import MinValueValidator
from django.db import models


class OrderItem(models.Model):
    """Order line item with the price paid at checkout"""

    order = models.ForeignKey('Order', on_delete=models.CASCADE, related_name='items')
    product_id = models.CharField(max_length=64)
    category_id = models.CharField(max_length=64, null=True, blank=True)
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    unit_price = models.DecimalField(max_digits=12, decimal_places=2)
    amount = models.DecimalField(max_digits=14, decimal_places=2, help_text="Line total (quantity * unit_price)")

    class Meta:
        db_table = 'order_items'
        indexes = [
            models.Index(fields=['order']),
            models.Index(fields=['product_id']),
        ]

    def __str__(self):
        return f"{self.product_id} x{self.quantity}"

    def save(self, *args, **kwargs):
        # Calculate amount if not set
        if self.amount is None:
            self.amount = self.quantity * self.unit_price
        super().save(*args, **kwargs)
