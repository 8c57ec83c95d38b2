from django.contrib import admin, messages

from apps.common.exceptions import CheckoutRejected
from .models import Order, OrderItem
from .services import CheckoutService


class OrderItemInline(admin.TabularInline):
    """Inline admin for order items"""
    model = OrderItem
    extra = 0
    readonly_fields = ['product_id', 'category_id', 'quantity', 'unit_price', 'amount']
    can_delete = False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """Admin interface for orders"""

    list_display = [
        'order_number', 'user', 'order_type', 'status', 'subtotal', 'discount',
        'points_used', 'total', 'points_earned', 'created_at'
    ]
    list_filter = ['status', 'order_type', 'created_at']
    search_fields = ['order_number', 'user__username', 'user__phone', 'voucher_code']
    ordering = ['-created_at']
    inlines = [OrderItemInline]
    actions = ['complete_orders']
    readonly_fields = [
        'order_number', 'user', 'status', 'subtotal', 'tax', 'discount', 'points_used', 'points_discount',
        'total', 'voucher', 'voucher_code', 'points_earned', 'loyalty_settled_at',
        'completed_at', 'created_at', 'updated_at'
    ]

    fieldsets = (
        ('Basic Information', {
            'fields': ('order_number', 'user', 'order_type', 'status', 'notes')
        }),
        ('Pricing', {
            'fields': ('subtotal', 'tax', 'voucher', 'voucher_code', 'discount',
                       'points_used', 'points_discount', 'total')
        }),
        ('Loyalty', {
            'fields': ('points_earned', 'loyalty_settled_at')
        }),
        ('Timestamps', {
            'fields': ('completed_at', 'created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    @admin.action(description='Complete selected orders and credit points')
    def complete_orders(self, request, queryset):
        completed = 0
        for order in queryset:
            try:
                CheckoutService.complete_order(order)
                completed += 1
            except CheckoutRejected as e:
                self.message_user(request, f'{order.order_number}: {e}', messages.WARNING)
        self.message_user(request, f'{completed} order(s) completed')
