from rest_framework import serializers
from apps.residents.models import ResidentPaymentStatus
from .models import Notification, NotificationType
from .services import BULK_MESSAGE_TYPES


# =============================================================================
# Input Serializers
# =============================================================================

class SendMessageInputSerializer(serializers.Serializer):
    """Free text for a single resident; blank text is rejected by the service."""

    message = serializers.CharField(required=False, allow_blank=True, max_length=4096)


class BulkSendFiltersSerializer(serializers.Serializer):
    payment_status = serializers.ChoiceField(choices=ResidentPaymentStatus.choices, required=False)
    has_tokens = serializers.BooleanField(required=False, allow_null=True, default=None)


class BulkSendInputSerializer(serializers.Serializer):
    """
    Validate a bulk WhatsApp request.

    Body:
        message_type (str): payment_reminder | overdue_payment |
            maintenance_notification | custom
        custom_message (str): Required for ``custom``; ``{name}`` is replaced
        filters (dict): Optional payment_status / has_tokens
    """

    message_type = serializers.ChoiceField(choices=[(t, t) for t in BULK_MESSAGE_TYPES])
    custom_message = serializers.CharField(required=False, allow_blank=True, max_length=4096)
    filters = BulkSendFiltersSerializer(required=False)

    def validate(self, attrs):
        if attrs['message_type'] == 'custom' and not attrs.get('custom_message', '').strip():
            raise serializers.ValidationError({'custom_message': 'Custom message is required'})
        return attrs


class NotificationFilterSerializer(serializers.Serializer):
    resident = serializers.IntegerField(required=False, min_value=1)
    type = serializers.ChoiceField(choices=NotificationType.choices, required=False)


# =============================================================================
# Output Serializers
# =============================================================================

class NotificationSerializer(serializers.ModelSerializer):
    resident_name = serializers.CharField(source='resident.full_name', read_only=True)

    class Meta:
        model = Notification
        fields = ['id', 'resident', 'resident_name', 'message', 'type', 'created_at']
        read_only_fields = fields
