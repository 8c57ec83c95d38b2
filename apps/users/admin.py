from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """Custom User admin with loyalty state"""
    list_display = [
        'username', 'email', 'phone', 'current_tier',
        'loyalty_points', 'total_spent', 'is_staff', 'created_at'
    ]
    list_filter = ['is_staff', 'is_active', 'current_tier', 'created_at']
    search_fields = ['username', 'email', 'phone']
    ordering = ['-created_at']

    fieldsets = BaseUserAdmin.fieldsets + (
        ('Contact', {
            'fields': ('phone',)
        }),
        ('Loyalty', {
            'fields': ('current_tier', 'loyalty_points', 'total_spent'),
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )
    # Balances change only through settlement and redemption
    readonly_fields = ['created_at', 'updated_at', 'current_tier', 'loyalty_points', 'total_spent']

    def get_queryset(self, request):
        """Optimize queryset with related objects"""
        return super().get_queryset(request).select_related('current_tier')
