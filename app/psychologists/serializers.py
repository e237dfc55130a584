# psychologists/serializers.py
from rest_framework import serializers
from django.utils.translation import gettext_lazy as _
from decimal import Decimal

from .models import Psychologist, PsychologistAvailability


class PsychologistSerializer(serializers.ModelSerializer):
    """
    Psychologist's own profile, including payout destination
    """
    id = serializers.UUIDField(source='user.id', read_only=True)
    full_name = serializers.CharField(source='user.full_name', read_only=True)
    email = serializers.EmailField(source='user.email', read_only=True)
    profile_picture_url = serializers.URLField(source='user.profile_picture_url', read_only=True)

    class Meta:
        model = Psychologist
        fields = [
            'id', 'full_name', 'email', 'profile_picture_url', 'title', 'crp',
            'biography', 'specialties', 'hourly_rate', 'rating', 'reviews_count',
            'payout_bank', 'payout_agency', 'payout_account',
            'created_at', 'updated_at'
        ]
        read_only_fields = fields


class PsychologistProfileUpdateSerializer(serializers.ModelSerializer):
    """
    Editable professional profile fields
    """
    specialties = serializers.ListField(
        child=serializers.CharField(max_length=100),
        required=False,
        help_text=_("List of specialties")
    )
    hourly_rate = serializers.DecimalField(
        max_digits=10,
        decimal_places=2,
        min_value=Decimal('0.01'),
        required=False,
        help_text=_("Price of one session in BRL, must be positive")
    )

    class Meta:
        model = Psychologist
        fields = ['title', 'crp', 'biography', 'specialties', 'hourly_rate']


class PayoutInfoSerializer(serializers.ModelSerializer):
    class Meta:
        model = Psychologist
        fields = ['payout_bank', 'payout_agency', 'payout_account']


class PsychologistAvailabilitySerializer(serializers.ModelSerializer):
    """
    One day of the weekly availability template
    """
    day_name = serializers.SerializerMethodField()
    day_key = serializers.CharField(read_only=True)

    class Meta:
        model = PsychologistAvailability
        fields = ['day_of_week', 'day_key', 'day_name', 'enabled', 'start_time', 'end_time']

    def get_day_name(self, obj):
        return str(obj.get_day_name())


class AvailabilityEntrySerializer(serializers.Serializer):
    """
    Input for one day when replacing the weekly template
    """
    day_of_week = serializers.IntegerField(min_value=0, max_value=6)
    enabled = serializers.BooleanField()
    start_time = serializers.TimeField(format='%H:%M')
    end_time = serializers.TimeField(format='%H:%M')

    def validate(self, data):
        """Cross-field validation"""
        if data['start_time'] >= data['end_time']:
            raise serializers.ValidationError({
                'end_time': _("End time must be after start time")
            })
        return data


class AvailabilityReplaceSerializer(serializers.Serializer):
    entries = AvailabilityEntrySerializer(many=True)

    def validate_entries(self, value):
        if not value:
            raise serializers.ValidationError(_("At least one day must be provided"))
        days = [entry['day_of_week'] for entry in value]
        if len(days) != len(set(days)):
            raise serializers.ValidationError(_("Each day of the week can only appear once"))
        return value


class PsychologistMarketplaceSerializer(serializers.ModelSerializer):
    """
    Marketplace card for a psychologist
    """
    id = serializers.UUIDField(source='user.id', read_only=True)
    full_name = serializers.CharField(source='user.full_name', read_only=True)
    profile_picture_url = serializers.URLField(source='user.profile_picture_url', read_only=True)

    class Meta:
        model = Psychologist
        fields = [
            'id', 'full_name', 'profile_picture_url', 'title', 'crp',
            'specialties', 'hourly_rate', 'rating', 'reviews_count'
        ]
        read_only_fields = fields


class PsychologistDetailSerializer(PsychologistMarketplaceSerializer):
    """
    Marketplace profile with biography, weekly availability, reviews and
    the timestamps that are already booked
    """
    availability = PsychologistAvailabilitySerializer(source='availability_entries', many=True, read_only=True)
    reviews = serializers.SerializerMethodField()
    booked_slots = serializers.SerializerMethodField()

    class Meta(PsychologistMarketplaceSerializer.Meta):
        fields = PsychologistMarketplaceSerializer.Meta.fields + [
            'biography', 'availability', 'reviews', 'booked_slots'
        ]
        read_only_fields = fields

    def get_reviews(self, obj):
        from .services import PsychologistService
        return PsychologistService.get_reviews(obj)

    def get_booked_slots(self, obj):
        from .services import PsychologistService
        return PsychologistService.get_booked_slots(obj)
