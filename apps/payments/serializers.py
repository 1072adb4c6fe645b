from rest_framework import serializers
from .models import Payment, PaymentStatus

MONTH_NAMES = [
    'enero', 'febrero', 'marzo', 'abril', 'mayo', 'junio',
    'julio', 'agosto', 'septiembre', 'octubre', 'noviembre', 'diciembre',
]


# =============================================================================
# Input Serializers
# =============================================================================

class PaymentFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for payment listing.

    Query Parameters:
        resident (int): Filter by resident
        status (str): Filter by payment status
        month (int): Filter by period month
        year (int): Filter by period year
    """

    resident = serializers.IntegerField(required=False, min_value=1)
    status = serializers.ChoiceField(choices=PaymentStatus.choices, required=False)
    month = serializers.IntegerField(required=False, min_value=1, max_value=12)
    year = serializers.IntegerField(required=False, min_value=1)


class RecordPaymentInputSerializer(serializers.Serializer):
    """Amount, month and year are checked again by the status engine."""

    resident = serializers.IntegerField()
    amount = serializers.DecimalField(max_digits=10, decimal_places=2)
    month = serializers.IntegerField(required=False)
    year = serializers.IntegerField(required=False)


class RunDateInputSerializer(serializers.Serializer):
    """Optional reference date for batch operations (defaults to today)."""

    date = serializers.DateField(required=False)


# =============================================================================
# Output Serializers
# =============================================================================

class PaymentSerializer(serializers.ModelSerializer):
    """Main serializer for payments."""

    resident_name = serializers.CharField(source='resident.full_name', read_only=True)
    cedula = serializers.CharField(source='resident.cedula', read_only=True)
    registration_number = serializers.CharField(source='resident.registration_number', read_only=True)
    is_settled = serializers.BooleanField(read_only=True)

    class Meta:
        model = Payment
        fields = [
            'id',
            'resident',
            'resident_name',
            'cedula',
            'registration_number',
            'amount',
            'month',
            'year',
            'payment_date',
            'due_date',
            'status',
            'is_settled',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class RecentPaymentSerializer(PaymentSerializer):
    month_name = serializers.SerializerMethodField()

    class Meta(PaymentSerializer.Meta):
        fields = PaymentSerializer.Meta.fields + ['month_name']
        read_only_fields = fields

    def get_month_name(self, obj):
        return MONTH_NAMES[obj.month - 1]


class SweepResultSerializer(serializers.Serializer):
    skipped = serializers.BooleanField()
    updated_count = serializers.IntegerField()
    notified_count = serializers.IntegerField()
    failed_count = serializers.IntegerField()
    failures = serializers.ListField(child=serializers.DictField())


class ReminderResultSerializer(serializers.Serializer):
    candidates = serializers.IntegerField()
    notified_count = serializers.IntegerField()
    failed_count = serializers.IntegerField()
    failures = serializers.ListField(child=serializers.DictField())


class OpenCycleResultSerializer(serializers.Serializer):
    updated_count = serializers.IntegerField()
