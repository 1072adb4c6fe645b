# ==========================================
# apps/payments/admin.py
# ==========================================

from django.contrib import admin
from django.utils.html import format_html
from apps.payments.models import Payment, PaymentStatus


STATUS_COLORS = {
    PaymentStatus.PAID: '#6B8E5E',
    PaymentStatus.COMPLETED: '#6B8E5E',
    PaymentStatus.PENDING: '#A47449',
    PaymentStatus.OVERDUE: '#B85C5C',
}


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    """
    Admin interface for payments.

    Status changes belong to the payment status engine, so the status and
    payment date are read only here.
    """

    list_display = [
        'resident',
        'period',
        'amount',
        'status_badge',
        'payment_date',
        'due_date',
    ]
    list_filter = ['status', 'year', 'month']
    search_fields = ['resident__name', 'resident__last_name', 'resident__cedula']
    readonly_fields = ['status', 'payment_date', 'created_at', 'updated_at']
    raw_id_fields = ['resident']
    date_hierarchy = 'created_at'
    ordering = ['-year', '-month']

    def period(self, obj):
        return f"{obj.month:02d}/{obj.year}"
    period.short_description = 'Period'

    def status_badge(self, obj):
        return format_html(
            '<span style="background: {}; color: white; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">{}</span>',
            STATUS_COLORS.get(obj.status, '#ccc'), obj.get_status_display()
        )
    status_badge.short_description = 'Status'
    status_badge.admin_order_field = 'status'
