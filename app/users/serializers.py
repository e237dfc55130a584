# users/serializers.py
from rest_framework import serializers
from django.contrib.auth import authenticate
from django.core.exceptions import ValidationError
from django.utils.translation import gettext_lazy as _

from .models import User
from .exceptions import RoleMismatchError
from .services import AuthenticationService, LOGIN_ROLES
from .validators import validate_cpf, validate_whatsapp, BRAZILIAN_STATES


class UserSerializer(serializers.ModelSerializer):
    """
    Basic serializer for User model - returns user data
    """
    class Meta:
        model = User
        fields = [
            'id', 'email', 'user_type', 'full_name', 'cpf', 'whatsapp',
            'is_active', 'profile_picture_url', 'registration_date',
            'last_login_date'
        ]
        read_only_fields = [
            'id', 'email', 'user_type', 'cpf', 'is_active',
            'registration_date', 'last_login_date'
        ]


class UserRegistrationSerializer(serializers.ModelSerializer):
    user_type = serializers.ChoiceField(
        choices=[('Patient', _('Patient')), ('Psychologist', _('Psychologist'))]
    )
    full_name = serializers.CharField(min_length=3, max_length=255)
    cpf = serializers.CharField(max_length=14)
    whatsapp = serializers.CharField(max_length=20)
    password = serializers.CharField(write_only=True, min_length=6)
    password_confirm = serializers.CharField(write_only=True)
    crp_number = serializers.CharField(max_length=20, required=False, allow_blank=True)
    crp_state = serializers.ChoiceField(choices=BRAZILIAN_STATES, required=False, allow_blank=True)

    class Meta:
        model = User
        fields = [
            'email', 'user_type', 'full_name', 'cpf', 'whatsapp',
            'password', 'password_confirm', 'crp_number', 'crp_state'
        ]

    def validate_cpf(self, value):
        try:
            validate_cpf(value)
        except ValidationError as e:
            raise serializers.ValidationError(list(e.messages))
        return value

    def validate_whatsapp(self, value):
        try:
            validate_whatsapp(value)
        except ValidationError as e:
            raise serializers.ValidationError(list(e.messages))
        return value

    def validate(self, attrs):
        password = attrs.get('password')
        password_confirm = attrs.pop('password_confirm')

        if password != password_confirm:
            raise serializers.ValidationError({'password_confirm': _("Passwords do not match")})

        if attrs.get('user_type') == 'Psychologist':
            errors = {}
            if not attrs.get('crp_number'):
                errors['crp_number'] = _("CRP number is required for psychologists")
            if not attrs.get('crp_state'):
                errors['crp_state'] = _("CRP state is required for psychologists")
            if errors:
                raise serializers.ValidationError(errors)

        return attrs

    def create(self, validated_data):
        # Delegate to service
        return AuthenticationService.register_user(**validated_data)


class LoginSerializer(serializers.Serializer):
    """
    Serializer for user login through a role-specific entry point
    """
    email = serializers.EmailField(
        help_text=_("Your email address")
    )
    password = serializers.CharField(
        style={'input_type': 'password'},
        help_text=_("Your password")
    )
    role = serializers.ChoiceField(
        choices=list(LOGIN_ROLES.keys()),
        help_text=_("Entry point used to log in: patient, psychologist or admin")
    )

    def validate(self, attrs):
        """
        Validate credentials and role, return user
        """
        email = attrs.get('email')
        password = attrs.get('password')

        user = authenticate(
            request=self.context.get('request'),
            username=email,  # We use email as username
            password=password
        )

        if not user:
            raise serializers.ValidationError(
                _("Invalid email or password"),
                code='authorization'
            )

        if not user.is_active:
            raise serializers.ValidationError(
                _("User account is disabled"),
                code='authorization'
            )

        try:
            AuthenticationService.check_login_role(user, attrs['role'])
        except RoleMismatchError:
            raise serializers.ValidationError(
                _("This account is not registered as %(role)s") % {'role': attrs['role']},
                code='authorization'
            )

        attrs['user'] = user
        return attrs
