# ==========================================
# apps/accounts/admin.py
# ==========================================

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.html import format_html
from .models import User, SalesTarget, UserRole


ROLE_COLORS = {
    UserRole.ADMIN: '#8E3B46',
    UserRole.MANAGER: '#3B5B8E',
    UserRole.FINANCE: '#6B8E5E',
    UserRole.EMPLOYEE: '#777777',
}


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """Back-office user administration with role and store columns."""

    list_display = [
        'email',
        'username',
        'role_badge',
        'store_display',
        'is_active',
        'created_at',
        'last_login',
    ]

    list_filter = [
        'role',
        'store',
        'is_active',
        'is_staff',
    ]

    search_fields = [
        'email',
        'username',
    ]

    ordering = ['-created_at']
    date_hierarchy = 'created_at'

    fieldsets = (
        ('Basic Information', {
            'fields': ('email', 'username', 'password')
        }),
        ('Back office', {
            'fields': ('role', 'store'),
        }),
        ('Permissions', {
            'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions'),
        }),
        ('Timestamps', {
            'fields': ('created_at', 'last_login'),
            'classes': ('collapse',),
        }),
    )

    add_fieldsets = (
        ('Create User', {
            'classes': ('wide',),
            'fields': ('email', 'username', 'role', 'store', 'password1', 'password2'),
        }),
    )

    readonly_fields = [
        'created_at',
        'last_login',
    ]

    filter_horizontal = ['groups', 'user_permissions']

    def role_badge(self, obj):
        return format_html(
            '<span style="background: {}; color: white; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">{}</span>',
            ROLE_COLORS.get(obj.role, '#777777'),
            obj.get_role_display(),
        )
    role_badge.short_description = 'Role'
    role_badge.admin_order_field = 'role'

    def store_display(self, obj):
        return obj.store.name if obj.store_id else 'Global access'
    store_display.short_description = 'Store'

    actions = ['activate_users', 'deactivate_users']

    @admin.action(description='Activate selected users')
    def activate_users(self, request, queryset):
        count = queryset.update(is_active=True)
        self.message_user(request, f'Activated {count} user(s).')

    @admin.action(description='Deactivate selected users')
    def deactivate_users(self, request, queryset):
        """Deactivate selected users (excludes superusers) and drop pending reset tokens."""
        safe_queryset = queryset.filter(is_superuser=False)
        count = safe_queryset.update(is_active=False, reset_token=None, reset_requested_at=None)
        skipped = queryset.count() - count
        msg = f'Deactivated {count} user(s).'
        if skipped:
            msg += f' Skipped {skipped} superuser(s).'
        self.message_user(request, msg)

    def get_queryset(self, request):
        return super().get_queryset(request).select_related('store')


@admin.register(SalesTarget)
class SalesTargetAdmin(admin.ModelAdmin):
    list_display = ['user', 'month', 'monthly_goal', 'commission_rate', 'bonus_commission_rate']
    list_filter = ['month']
    search_fields = ['user__email', 'user__username']
    autocomplete_fields = ['user']
