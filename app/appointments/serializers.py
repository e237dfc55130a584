# appointments/serializers.py
from rest_framework import serializers
from django.utils.translation import gettext_lazy as _

from .models import TherapySession


class TherapySessionSerializer(serializers.ModelSerializer):
    """
    Session as seen by its participants and admins
    """
    patient_id = serializers.UUIDField(read_only=True)
    psychologist_id = serializers.UUIDField(read_only=True)
    session_timestamp_millis = serializers.IntegerField(read_only=True)
    session_end = serializers.DateTimeField(read_only=True)
    participant_ids = serializers.ListField(child=serializers.CharField(), read_only=True)

    class Meta:
        model = TherapySession
        fields = [
            'session_id', 'patient_id', 'patient_name', 'psychologist_id',
            'psychologist_name', 'participant_ids', 'session_timestamp',
            'session_timestamp_millis', 'session_end', 'status', 'rate',
            'payment_id', 'payment_status', 'payment_method', 'reviewed',
            'rating', 'review_comment', 'effective_duration_in_seconds',
            'created_at', 'updated_at'
        ]
        read_only_fields = fields

    def to_representation(self, instance):
        data = super().to_representation(instance)
        request = self.context.get('request')
        # The note is private to the psychologist
        if request and request.user.pk == instance.psychologist_id:
            data['psychologist_note'] = instance.psychologist_note
        return data


class LeaveRoomSerializer(serializers.Serializer):
    duration_seconds = serializers.IntegerField(
        min_value=0,
        help_text=_("Seconds the participant spent in the video room")
    )


class PsychologistNoteSerializer(serializers.Serializer):
    psychologist_note = serializers.CharField(allow_blank=True, max_length=10000)


class ReviewSerializer(serializers.Serializer):
    rating = serializers.IntegerField(
        min_value=1,
        max_value=5,
        help_text=_("Rating from 1 to 5")
    )
    comment = serializers.CharField(allow_blank=True, required=False, default='', max_length=2000)


class BookingStatusQuerySerializer(serializers.Serializer):
    psychologist_id = serializers.UUIDField()
    session_timestamp_millis = serializers.IntegerField(min_value=0)


class PsychologistPatientSerializer(serializers.Serializer):
    """Row of a psychologist's patient list"""
    patient_id = serializers.UUIDField()
    patient_name = serializers.CharField()
    email = serializers.EmailField()
    profile_picture_url = serializers.URLField(allow_null=True, allow_blank=True)
    sessions_count = serializers.IntegerField()
    last_session = serializers.DateTimeField()


class PatientHistorySerializer(serializers.Serializer):
    """A patient's record as seen by their psychologist"""
    patient_id = serializers.UUIDField()
    patient_name = serializers.CharField()
    email = serializers.EmailField()
    profile_picture_url = serializers.URLField(allow_null=True, allow_blank=True)
    total_sessions = serializers.IntegerField()
    completed_sessions = serializers.IntegerField()
    next_session = serializers.DateTimeField(allow_null=True)
    sessions = TherapySessionSerializer(many=True)
