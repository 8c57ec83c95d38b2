from django.contrib import admin
from .models import LoyaltySetting, LoyaltyTransaction


@admin.register(LoyaltySetting)
class LoyaltySettingAdmin(admin.ModelAdmin):
    list_display = ['is_enabled', 'points_per_item', 'point_value_idr', 'min_points_to_redeem',
                    'max_points_per_transaction', 'max_redemption_percentage', 'version', 'updated_at']
    readonly_fields = ['version', 'updated_by', 'created_at', 'updated_at']

    def has_add_permission(self, request):
        return not LoyaltySetting.objects.exists()  # Single settings row

    def has_delete_permission(self, request, obj=None):
        return False

    def save_model(self, request, obj, form, change):
        if change:
            obj.version += 1
        obj.updated_by = request.user
        super().save_model(request, obj, form, change)


@admin.register(LoyaltyTransaction)
class LoyaltyTransactionAdmin(admin.ModelAdmin):
    list_display = ['user', 'transaction_type', 'points_change', 'points_balance_after', 'order', 'created_at']
    list_filter = ['transaction_type', 'created_at']
    search_fields = ['user__username', 'user__phone', 'notes', 'order__order_number']
    readonly_fields = ['created_at']

    def has_add_permission(self, request):
        return False  # Ledger entries are created programmatically

    def has_change_permission(self, request, obj=None):
        return False  # Ledger entries should not be modified
