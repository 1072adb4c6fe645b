from rest_framework import serializers
from .models import Resident, Token, ResidentPaymentStatus, TokenStatus


# =============================================================================
# Input Serializers
# =============================================================================

class ResidentFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for resident listing.

    Query Parameters:
        payment_status (str): Filter by payment status
        search (str): Match name, last name, cedula or registration number
        has_tokens (bool): Only residents with (or without) tokens
    """

    payment_status = serializers.ChoiceField(
        choices=ResidentPaymentStatus.choices,
        required=False
    )
    search = serializers.CharField(max_length=100, required=False)
    has_tokens = serializers.BooleanField(required=False, allow_null=True, default=None)


class ResidentInputSerializer(serializers.Serializer):
    """Fields accepted when creating or editing a resident."""

    name = serializers.CharField(max_length=100)
    last_name = serializers.CharField(max_length=100)
    cedula = serializers.CharField(max_length=20)
    registration_number = serializers.CharField(max_length=50, required=False, allow_blank=True)
    phone = serializers.CharField(max_length=30, required=False, allow_blank=True)
    address = serializers.CharField(max_length=255, required=False, allow_blank=True)
    whatsapp_consent = serializers.BooleanField(required=False, default=True)


class BulkResidentRowSerializer(serializers.Serializer):
    name = serializers.CharField()
    last_name = serializers.CharField()
    cedula = serializers.CharField()
    registration_number = serializers.CharField(required=False, allow_blank=True)
    phone = serializers.CharField(required=False, allow_blank=True)
    address = serializers.CharField(required=False, allow_blank=True)


class TokenInputSerializer(serializers.Serializer):
    resident = serializers.IntegerField()
    name = serializers.CharField(max_length=100)


class TokenUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100, required=False)
    status = serializers.ChoiceField(choices=TokenStatus.choices, required=False)


# =============================================================================
# Output Serializers
# =============================================================================

class TokenSerializer(serializers.ModelSerializer):
    """Serializer for access tokens."""

    resident_name = serializers.CharField(source='resident.full_name', read_only=True)

    class Meta:
        model = Token
        fields = [
            'id',
            'resident',
            'resident_name',
            'name',
            'status',
            'payment_status',
            'last_payment_date',
            'next_payment_date',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class ResidentListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for list views."""

    full_name = serializers.CharField(read_only=True)
    token_count = serializers.IntegerField(source='tokens.count', read_only=True)
    is_overdue = serializers.BooleanField(read_only=True)

    class Meta:
        model = Resident
        fields = [
            'id',
            'full_name',
            'cedula',
            'registration_number',
            'phone',
            'payment_status',
            'next_payment_date',
            'token_count',
            'is_overdue',
        ]
        read_only_fields = fields


class ResidentSerializer(serializers.ModelSerializer):
    """Main serializer for residents."""

    full_name = serializers.CharField(read_only=True)
    tokens = TokenSerializer(many=True, read_only=True)

    class Meta:
        model = Resident
        fields = [
            'id',
            'name',
            'last_name',
            'full_name',
            'cedula',
            'registration_number',
            'phone',
            'address',
            'whatsapp_consent',
            'payment_status',
            'last_payment_date',
            'next_payment_date',
            'tokens',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields
