# factories/sessions.py
import factory
from datetime import timedelta
from decimal import Decimal
from django.utils import timezone

from appointments.models import TherapySession
from core.timeutils import datetime_to_millis
from payments.references import session_document_id
from .base import BaseFactory
from .users import PatientUserFactory, PsychologistUserFactory


def next_full_hour(days_ahead=1):
    """Start of a one-hour slot days_ahead from now, on the hour"""
    start = timezone.localtime() + timedelta(days=days_ahead)
    return start.replace(minute=0, second=0, microsecond=0)


class TherapySessionFactory(BaseFactory):
    """
    Factory for sessions as the payment webhook creates them
    """

    class Meta:
        model = TherapySession

    patient = factory.SubFactory(PatientUserFactory)
    psychologist = factory.SubFactory(PsychologistUserFactory)
    patient_name = factory.LazyAttribute(lambda obj: obj.patient.full_name)
    psychologist_name = factory.LazyAttribute(lambda obj: obj.psychologist.full_name)

    session_timestamp = factory.LazyFunction(next_full_hour)
    session_id = factory.LazyAttribute(
        lambda obj: session_document_id(obj.psychologist.id, datetime_to_millis(obj.session_timestamp))
    )

    status = TherapySession.STATUS_PAID
    rate = Decimal('150.00')
    payment_id = factory.Sequence(lambda n: f'{1000000000 + n}')
    payment_status = 'approved'
    payment_method = 'pix'
    reviewed = False
    effective_duration_in_seconds = 0


class PastSessionFactory(TherapySessionFactory):
    """Session whose slot is already over"""
    session_timestamp = factory.LazyFunction(lambda: next_full_hour(days_ahead=-2))


class CompletedSessionFactory(PastSessionFactory):
    status = TherapySession.STATUS_COMPLETED
    effective_duration_in_seconds = 3000
