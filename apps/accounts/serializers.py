from rest_framework import serializers
from django.contrib.auth.password_validation import validate_password
from .models import User, Role


def _password_field(**kwargs):
    return serializers.CharField(
        write_only=True,
        validators=[validate_password],
        style={'input_type': 'password'},
        **kwargs
    )


class UserSerializer(serializers.ModelSerializer):
    """Operator profile; the role can only be changed by an admin."""

    role_display = serializers.CharField(source='get_role_display', read_only=True)

    class Meta:
        model = User
        fields = [
            'id',
            'email',
            'display_name',
            'role',
            'role_display',
            'is_active',
            'created_at',
            'last_login',
        ]
        read_only_fields = fields


# =============================================================================
# Input Serializers
# =============================================================================

class UserRegistrationSerializer(serializers.Serializer):
    """Self-registration; the account always starts with the ``user`` role."""

    email = serializers.EmailField()
    password = _password_field()
    password_confirm = serializers.CharField(write_only=True, style={'input_type': 'password'})
    display_name = serializers.CharField(max_length=100, required=False, allow_blank=True)

    def validate_email(self, value):
        return value.lower()

    def validate(self, attrs):
        if attrs['password'] != attrs['password_confirm']:
            raise serializers.ValidationError({'password_confirm': 'Passwords do not match'})
        return attrs


class UserLoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, style={'input_type': 'password'})


class UserCreateSerializer(serializers.Serializer):
    """Admin input for creating an operator with an explicit role."""

    email = serializers.EmailField()
    password = _password_field()
    display_name = serializers.CharField(max_length=100, required=False, allow_blank=True)
    role = serializers.ChoiceField(choices=Role.choices, default=Role.USER)

    def validate_email(self, value):
        return value.lower()


class UserUpdateSerializer(serializers.Serializer):
    """Admin input for editing an operator; omitted fields are left as they are."""

    display_name = serializers.CharField(max_length=100, required=False, allow_blank=True)
    role = serializers.ChoiceField(choices=Role.choices, required=False)
    is_active = serializers.BooleanField(required=False)
    password = _password_field(required=False)
