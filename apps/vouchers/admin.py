from django.contrib import admin
from .models import Voucher, UserVoucher


@admin.register(Voucher)
class VoucherAdmin(admin.ModelAdmin):
    """Admin interface for vouchers"""

    list_display = [
        'code', 'discount_type', 'discount_value', 'point_cost', 'target_tier',
        'is_active', 'is_redeemable', 'used_count', 'usage_limit', 'end_date'
    ]
    list_filter = ['discount_type', 'is_active', 'is_redeemable', 'customer_eligibility', 'target_tier']
    search_fields = ['code', 'description']
    list_editable = ['is_active']
    readonly_fields = ['used_count', 'created_at', 'updated_at']

    fieldsets = (
        ('Basic Information', {
            'fields': ('code', 'description', 'is_active')
        }),
        ('Discount', {
            'fields': ('discount_type', 'discount_value', 'max_discount', 'min_order')
        }),
        ('Validity', {
            'fields': ('start_date', 'end_date')
        }),
        ('Rewards Catalogue', {
            'fields': ('is_redeemable', 'point_cost', 'target_tier')
        }),
        ('Limits', {
            'fields': ('usage_limit', 'used_count', 'user_usage_limit')
        }),
        ('Scope', {
            'fields': ('valid_order_types', 'valid_product_ids', 'valid_category_ids',
                       'customer_eligibility', 'eligible_user_ids'),
            'classes': ('collapse',)
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )


@admin.register(UserVoucher)
class UserVoucherAdmin(admin.ModelAdmin):
    list_display = ['user', 'voucher', 'is_used', 'redeemed_at', 'used_at', 'order']
    list_filter = ['is_used', 'created_at']
    search_fields = ['user__username', 'voucher__code']
    readonly_fields = ['created_at']

    def get_queryset(self, request):
        return super().get_queryset(request).select_related('user', 'voucher', 'order')

    def has_add_permission(self, request):
        return False  # Usage rows are written by checkout and reward claims
