from django.contrib import admin
from .models import MembershipTier, TierChangeLog


@admin.register(MembershipTier)
class MembershipTierAdmin(admin.ModelAdmin):
    """Admin interface for membership tiers"""

    list_display = [
        'tier_level', 'tier_name', 'min_points', 'max_points', 'member_count', 'updated_at'
    ]
    search_fields = ['tier_name']
    ordering = ['tier_level']
    readonly_fields = ['created_at', 'updated_at', 'member_count']

    fieldsets = (
        ('Basic Information', {
            'fields': ('tier_level', 'tier_name', 'benefits_description')
        }),
        ('Points Range', {
            'fields': ('min_points', 'max_points')
        }),
        ('Statistics', {
            'fields': ('member_count',),
            'classes': ('collapse',)
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    @admin.display(description='Members')
    def member_count(self, obj):
        return obj.members.count()


@admin.register(TierChangeLog)
class TierChangeLogAdmin(admin.ModelAdmin):
    """Admin interface for tier change logs"""

    list_display = ['user', 'from_tier', 'to_tier', 'reason', 'points_at_change', 'created_at']
    list_filter = ['to_tier', 'created_at']
    search_fields = ['user__username', 'reason']
    ordering = ['-created_at']

    def get_queryset(self, request):
        """Optimize queryset with related objects"""
        return super().get_queryset(request).select_related('user', 'from_tier', 'to_tier')

    def has_add_permission(self, request):
        # Change logs are created by settlement
        return False

    def has_change_permission(self, request, obj=None):
        return False
