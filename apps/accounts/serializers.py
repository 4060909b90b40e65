from rest_framework import serializers

from .models import User, UserRole, Language, username_validator


# =============================================================================
# Output Serializers
# =============================================================================

class UserSerializer(serializers.ModelSerializer):
    """Basic user serializer for profile display."""

    class Meta:
        model = User
        fields = [
            'id',
            'username',
            'email',
            'english_name',
            'arabic_name',
            'apartment_id',
            'role',
            'preferred_language',
            'is_active',
            'created_at',
            'last_login',
            'password_changed_at',
        ]
        read_only_fields = [
            'id', 'username', 'apartment_id', 'role', 'is_active',
            'created_at', 'last_login', 'password_changed_at',
        ]


class UserMinimalSerializer(serializers.ModelSerializer):
    """Minimal user info for nested serialization."""

    class Meta:
        model = User
        fields = ['id', 'username', 'english_name', 'arabic_name']
        read_only_fields = fields


# =============================================================================
# Input Serializers
# =============================================================================

class UserRegistrationSerializer(serializers.Serializer):
    """Serializer for self-service registration of apartment users."""

    username = serializers.CharField(
        min_length=3,
        max_length=50,
        validators=[username_validator],
    )
    password = serializers.CharField(
        write_only=True,
        style={'input_type': 'password'}
    )
    password_confirm = serializers.CharField(
        write_only=True,
        style={'input_type': 'password'}
    )
    apartment_id = serializers.CharField(max_length=50)
    english_name = serializers.CharField(max_length=100, required=False, allow_blank=True)
    arabic_name = serializers.CharField(max_length=100, required=False, allow_blank=True)
    email = serializers.EmailField(required=False, allow_blank=True)
    preferred_language = serializers.ChoiceField(choices=Language.choices, required=False)

    def validate(self, attrs):
        """Validate password confirmation."""
        if attrs['password'] != attrs['password_confirm']:
            raise serializers.ValidationError({
                'password_confirm': 'Passwords do not match'
            })
        return attrs


class UserLoginSerializer(serializers.Serializer):
    """Serializer for user login."""

    username = serializers.CharField(required=True)
    password = serializers.CharField(
        required=True,
        write_only=True,
        style={'input_type': 'password'}
    )


class ChangePasswordSerializer(serializers.Serializer):
    """Serializer for changing the current user's password."""

    current_password = serializers.CharField(
        required=True,
        style={'input_type': 'password'}
    )
    new_password = serializers.CharField(
        required=True,
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
        if attrs['new_password'] == attrs['current_password']:
            raise serializers.ValidationError({
                'new_password': 'New password must be different from the current password'
            })
        return attrs


class PasswordStrengthInputSerializer(serializers.Serializer):
    password = serializers.CharField(required=True, allow_blank=True, trim_whitespace=False)


class PasswordStrengthSerializer(serializers.Serializer):
    score = serializers.IntegerField(min_value=0, max_value=7)
    strength = serializers.CharField()
    feedback = serializers.ListField(child=serializers.CharField())


class ProfileUpdateSerializer(serializers.Serializer):
    english_name = serializers.CharField(max_length=100, required=False, allow_blank=True)
    arabic_name = serializers.CharField(max_length=100, required=False, allow_blank=True)
    email = serializers.EmailField(required=False, allow_blank=True)
    preferred_language = serializers.ChoiceField(choices=Language.choices, required=False)


# =============================================================================
# User Management (admins)
# =============================================================================

class UserFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for user listing.

    Query Parameters:
        role (str): Filter by role
        apartment (str): Filter by apartment ID
        search (str): Match username or names
    """

    role = serializers.ChoiceField(choices=UserRole.choices, required=False)
    apartment = serializers.CharField(max_length=50, required=False)
    search = serializers.CharField(max_length=100, required=False)


class UserCreateSerializer(serializers.Serializer):
    username = serializers.CharField(
        min_length=3,
        max_length=50,
        validators=[username_validator],
    )
    password = serializers.CharField(write_only=True, style={'input_type': 'password'})
    role = serializers.ChoiceField(choices=UserRole.choices, default=UserRole.APARTMENT_USER)
    apartment_id = serializers.CharField(max_length=50, required=False, allow_blank=True)
    english_name = serializers.CharField(max_length=100, required=False, allow_blank=True)
    arabic_name = serializers.CharField(max_length=100, required=False, allow_blank=True)
    email = serializers.EmailField(required=False, allow_blank=True)
    preferred_language = serializers.ChoiceField(choices=Language.choices, required=False)


class UserUpdateSerializer(serializers.Serializer):
    role = serializers.ChoiceField(choices=UserRole.choices, required=False)
    apartment_id = serializers.CharField(max_length=50, required=False, allow_blank=True)
    english_name = serializers.CharField(max_length=100, required=False, allow_blank=True)
    arabic_name = serializers.CharField(max_length=100, required=False, allow_blank=True)
    email = serializers.EmailField(required=False, allow_blank=True)
    preferred_language = serializers.ChoiceField(choices=Language.choices, required=False)
    is_active = serializers.BooleanField(required=False)


class PasswordResetResponseSerializer(serializers.Serializer):
    message = serializers.CharField()
    new_password = serializers.CharField()
