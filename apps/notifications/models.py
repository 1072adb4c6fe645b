from django.db import models


class NotificationType(models.TextChoices):
    WHATSAPP = 'whatsapp', 'WhatsApp'
    WARNING = 'warning', 'Advertencia'
    REMINDER = 'reminder', 'Recordatorio'
    ALERT = 'alert', 'Alerta'


class Notification(models.Model):
    """Append-only log of messages delivered to a resident."""

    resident = models.ForeignKey(
        'residents.Resident',
        on_delete=models.CASCADE,
        related_name='notifications'
    )
    message = models.TextField()
    type = models.CharField(
        max_length=20,
        choices=NotificationType.choices,
        default=NotificationType.WHATSAPP
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'notifications'
        indexes = [
            models.Index(fields=['resident', 'created_at'], name='notifications_resident_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.get_type_display()} -> {self.resident_id} at {self.created_at:%Y-%m-%d %H:%M}"
