# ==========================================
# apps/notifications/admin.py
# ==========================================

from django.contrib import admin
from apps.notifications.models import Notification


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    """Admin interface for the notification log (read only)."""

    list_display = ['resident', 'type', 'short_message', 'created_at']
    list_filter = ['type', 'created_at']
    search_fields = ['message', 'resident__name', 'resident__last_name', 'resident__cedula']
    readonly_fields = ['resident', 'message', 'type', 'created_at']
    date_hierarchy = 'created_at'
    ordering = ['-created_at']

    def short_message(self, obj):
        return obj.message if len(obj.message) <= 60 else f"{obj.message[:57]}..."
    short_message.short_description = 'Message'

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
