from rest_framework import serializers
from django.contrib.auth.password_validation import validate_password
from apps.stores.models import Store
from .models import User, UserRole, SalesTarget


class UserSerializer(serializers.ModelSerializer):
    """User profile as shown in listings and the current-user endpoint."""

    store_name = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = [
            'id',
            'email',
            'username',
            'role',
            'store',
            'store_name',
            'is_active',
            'created_at',
            'last_login',
        ]
        read_only_fields = fields

    def get_store_name(self, obj):
        if obj.store_id is None:
            return 'Global access'
        return obj.store.name


class UserRegistrationSerializer(serializers.Serializer):
    """Input for admin-only user registration."""

    email = serializers.EmailField()
    password = serializers.CharField(
        write_only=True,
        validators=[validate_password],
        style={'input_type': 'password'}
    )
    username = serializers.CharField(max_length=100)
    role = serializers.ChoiceField(choices=UserRole.choices)
    store = serializers.PrimaryKeyRelatedField(
        queryset=Store.objects.all(),
        required=False,
        allow_null=True,
        default=None,
    )


class UserUpdateSerializer(serializers.Serializer):
    """Input for updating a user; every field is optional."""

    username = serializers.CharField(max_length=100, required=False)
    role = serializers.ChoiceField(choices=UserRole.choices, required=False)
    store = serializers.PrimaryKeyRelatedField(
        queryset=Store.objects.all(),
        required=False,
        allow_null=True,
    )


class UserFilterSerializer(serializers.Serializer):
    role = serializers.ChoiceField(choices=UserRole.choices, required=False)
    store = serializers.UUIDField(required=False)
    include_inactive = serializers.BooleanField(required=False, default=False)


class UserLoginSerializer(serializers.Serializer):
    """Serializer for user login."""

    email = serializers.EmailField(required=True)
    password = serializers.CharField(
        required=True,
        write_only=True,
        style={'input_type': 'password'}
    )


class PasswordResetRequestSerializer(serializers.Serializer):
    """Serializer for password reset request."""

    email = serializers.EmailField(required=True)


class PasswordResetConfirmSerializer(serializers.Serializer):
    """Serializer for password reset confirmation."""

    token = serializers.CharField(required=True)
    new_password = serializers.CharField(
        required=True,
        validators=[validate_password],
        style={'input_type': 'password'}
    )
    new_password_confirm = serializers.CharField(
        required=True,
        style={'input_type': 'password'}
    )

    def validate(self, attrs):
        """Validate password confirmation."""
        if attrs['new_password'] != attrs['new_password_confirm']:
            raise serializers.ValidationError({
                'new_password_confirm': 'Passwords do not match'
            })
        return attrs


class UserSummarySerializer(serializers.ModelSerializer):
    """Compact user reference embedded in sales, counts and payables."""

    class Meta:
        model = User
        fields = ['id', 'username', 'email']
        read_only_fields = fields


class SalesTargetSerializer(serializers.ModelSerializer):
    user = UserSummarySerializer(read_only=True)

    class Meta:
        model = SalesTarget
        fields = [
            'id',
            'user',
            'month',
            'monthly_goal',
            'commission_rate',
            'bonus_commission_rate',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'user', 'created_at', 'updated_at']


class SalesTargetInputSerializer(serializers.Serializer):
    month = serializers.RegexField(
        regex=r'^\d{4}-(0[1-9]|1[0-2])$',
        help_text='Month in YYYY-MM format',
    )
    monthly_goal = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    commission_rate = serializers.DecimalField(max_digits=5, decimal_places=2, min_value=0, max_value=100)
    bonus_commission_rate = serializers.DecimalField(max_digits=5, decimal_places=2, min_value=0, max_value=100)
