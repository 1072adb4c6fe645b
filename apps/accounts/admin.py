# ==========================================
# apps/accounts/admin.py
# ==========================================

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.html import format_html
from .models import User, Role


ROLE_COLORS = {
    Role.ADMIN: '#B85C5C',
    Role.MANAGER: '#C9A227',
    Role.USER: '#7A8B99',
}


def _pill(color, label):
    return format_html(
        '<span style="background: {}; color: white; padding: 3px 8px; '
        'border-radius: 10px; font-size: 11px;">{}</span>',
        color, label
    )


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """Dashboard operators: role badges and role changes in bulk."""

    list_display = ['email', 'display_name', 'role_badge', 'is_active', 'last_login']
    list_filter = ['role', 'is_active']
    search_fields = ['email', 'display_name']
    ordering = ['email']

    # The custom user has no username; BaseUserAdmin's fieldsets reference it
    fieldsets = (
        (None, {'fields': ('email', 'display_name', 'password')}),
        ('Role', {'fields': ('role', 'is_active', 'is_staff', 'is_superuser')}),
        ('Activity', {'fields': ('created_at', 'last_login'), 'classes': ('collapse',)}),
    )
    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'display_name', 'role', 'password1', 'password2'),
        }),
    )
    readonly_fields = ['created_at', 'last_login']
    filter_horizontal = []

    actions = ['make_manager', 'make_viewer', 'deactivate_operators']

    @admin.display(description='Role', ordering='role')
    def role_badge(self, obj):
        return _pill(ROLE_COLORS.get(obj.role, '#7A8B99'), obj.get_role_display())

    @admin.action(description='Set role: manager')
    def make_manager(self, request, queryset):
        count = queryset.exclude(role=Role.ADMIN).update(role=Role.MANAGER)
        self.message_user(request, f'{count} operator(s) are now managers.')

    @admin.action(description='Set role: user (read only)')
    def make_viewer(self, request, queryset):
        count = queryset.exclude(role=Role.ADMIN).update(role=Role.USER)
        self.message_user(request, f'{count} operator(s) are now read-only users.')

    @admin.action(description='Deactivate selected operators')
    def deactivate_operators(self, request, queryset):
        count = queryset.filter(is_superuser=False).exclude(pk=request.user.pk).update(is_active=False)
        self.message_user(request, f'Deactivated {count} operator(s).')
