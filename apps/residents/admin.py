# ==========================================
# apps/residents/admin.py
# ==========================================

from django.contrib import admin
from django.utils.html import format_html
from apps.residents.models import Resident, Token, ResidentPaymentStatus, TokenStatus


STATUS_COLORS = {
    ResidentPaymentStatus.PAID: '#6B8E5E',
    ResidentPaymentStatus.PENDING: '#A47449',
    ResidentPaymentStatus.OVERDUE: '#B85C5C',
    ResidentPaymentStatus.LATE: '#B85C5C',
}


def _badge(color, label):
    return format_html(
        '<span style="background: {}; color: white; padding: 3px 8px; '
        'border-radius: 10px; font-size: 11px;">{}</span>',
        color, label
    )


class TokenInline(admin.TabularInline):
    """Inline admin for resident tokens."""
    model = Token
    extra = 0
    fields = [
        'name',
        'status',
        'payment_status',
        'next_payment_date',
    ]
    readonly_fields = ['payment_status', 'next_payment_date']


@admin.register(Resident)
class ResidentAdmin(admin.ModelAdmin):
    """Admin interface for Residents."""

    list_display = [
        'full_name',
        'cedula',
        'phone',
        'payment_status_badge',
        'next_payment_date',
        'whatsapp_consent',
        'created_at'
    ]
    list_filter = [
        'payment_status',
        'whatsapp_consent',
        'created_at'
    ]
    search_fields = [
        'name',
        'last_name',
        'cedula',
        'registration_number',
        'phone'
    ]
    readonly_fields = [
        'payment_status',
        'last_payment_date',
        'next_payment_date',
        'created_at',
        'updated_at'
    ]
    inlines = [TokenInline]
    date_hierarchy = 'created_at'
    ordering = ['last_name', 'name']

    fieldsets = (
        ('Basic Information', {
            'fields': (
                'name',
                'last_name',
                'cedula',
                'registration_number',
            )
        }),
        ('Contact', {
            'fields': (
                'phone',
                'address',
                'whatsapp_consent',
            )
        }),
        ('Payment State', {
            'fields': (
                'payment_status',
                'last_payment_date',
                'next_payment_date',
            )
        }),
        ('Metadata', {
            'fields': (
                'created_at',
                'updated_at'
            ),
            'classes': ('collapse',)
        }),
    )

    def payment_status_badge(self, obj):
        return _badge(STATUS_COLORS.get(obj.payment_status, '#ccc'), obj.get_payment_status_display())
    payment_status_badge.short_description = 'Payment'
    payment_status_badge.admin_order_field = 'payment_status'


@admin.register(Token)
class TokenAdmin(admin.ModelAdmin):
    """Admin interface for access tokens."""

    list_display = [
        'name',
        'resident',
        'status_badge',
        'payment_status',
        'next_payment_date',
        'created_at'
    ]
    list_filter = ['status', 'payment_status']
    search_fields = ['name', 'resident__name', 'resident__last_name', 'resident__cedula']
    readonly_fields = ['payment_status', 'last_payment_date', 'next_payment_date', 'created_at', 'updated_at']
    raw_id_fields = ['resident']

    actions = ['activate_tokens', 'deactivate_tokens']

    def status_badge(self, obj):
        color = '#6B8E5E' if obj.status == TokenStatus.ACTIVE else '#B85C5C'
        return _badge(color, obj.get_status_display())
    status_badge.short_description = 'Status'
    status_badge.admin_order_field = 'status'

    @admin.action(description='Activate selected tokens')
    def activate_tokens(self, request, queryset):
        count = queryset.update(status=TokenStatus.ACTIVE)
        self.message_user(request, f'Activated {count} token(s).')

    @admin.action(description='Deactivate selected tokens')
    def deactivate_tokens(self, request, queryset):
        count = queryset.update(status=TokenStatus.INACTIVE)
        self.message_user(request, f'Deactivated {count} token(s).')
