# payments/serializers.py
from rest_framework import serializers
from django.utils.translation import gettext_lazy as _
from decimal import Decimal

from .references import build_reference


class BookingPaymentSerializer(serializers.Serializer):
    """
    Fields shared by both payment variants. Field names follow the
    client payload (camelCase).
    """
    rate = serializers.DecimalField(
        max_digits=10,
        decimal_places=2,
        help_text=_("Session price in BRL")
    )
    psychologistId = serializers.CharField(max_length=64)
    sessionTimestampMillis = serializers.IntegerField(min_value=0)
    payerEmail = serializers.EmailField()
    patientId = serializers.CharField(max_length=64)

    def validate_rate(self, value):
        if value <= Decimal('0.00'):
            raise serializers.ValidationError(_("Rate must be a positive amount"))
        return value

    def validate(self, attrs):
        try:
            build_reference(attrs['psychologistId'], attrs['sessionTimestampMillis'], attrs['patientId'])
        except ValueError as e:
            raise serializers.ValidationError(str(e))
        return attrs


class CreatePaymentSerializer(BookingPaymentSerializer):
    """Card / hosted checkout payment"""
    psychologistName = serializers.CharField(max_length=255)


class CreatePixPaymentSerializer(BookingPaymentSerializer):
    """PIX payment"""
    description = serializers.CharField(max_length=255)


class PaymentNotificationSerializer(serializers.Serializer):
    """Webhook body: {type: 'payment', data: {id}}"""
    type = serializers.CharField(required=False, allow_blank=True)
    data = serializers.DictField(required=False)


def first_error_message(errors) -> str:
    """Flatten DRF errors into one human-readable message"""
    if isinstance(errors, dict):
        for field, value in errors.items():
            message = first_error_message(value)
            if field == 'non_field_errors':
                return message
            return f"{field}: {message}"
    if isinstance(errors, list) and errors:
        return first_error_message(errors[0])
    return str(errors)
