# appointments/models.py
from datetime import timedelta
from django.conf import settings
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models
from django.db.models import Q
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from core.timeutils import datetime_to_millis
from users.models import User


class TherapySessionQuerySet(models.QuerySet):

    def for_participant(self, user):
        """Sessions where the user is the patient or the psychologist"""
        return self.filter(Q(patient=user) | Q(psychologist=user))

    def upcoming(self, now=None):
        now = now or timezone.now()
        grace = timedelta(minutes=settings.SESSION_GRACE_MINUTES)
        return self.filter(
            session_timestamp__gt=now - grace
        ).exclude(
            status__in=TherapySession.CLOSED_STATUSES
        )

    def history(self, now=None):
        now = now or timezone.now()
        grace = timedelta(minutes=settings.SESSION_GRACE_MINUTES)
        return self.filter(
            Q(session_timestamp__lte=now - grace) | Q(status__in=TherapySession.CLOSED_STATUSES)
        )


class TherapySession(models.Model):
    """
    A paid booking between a patient and a psychologist for one slot.
    Created only by the payment confirmation pipeline; never deleted.
    """

    STATUS_PAID = 'Pago'
    STATUS_SCHEDULED = 'Agendada'
    STATUS_COMPLETED = 'Concluída'
    STATUS_CANCELLED = 'Cancelada'

    STATUS_CHOICES = [
        (STATUS_PAID, _('Paid')),
        (STATUS_SCHEDULED, _('Scheduled')),
        (STATUS_COMPLETED, _('Completed')),
        (STATUS_CANCELLED, _('Cancelled')),
    ]

    OPEN_STATUSES = [STATUS_PAID, STATUS_SCHEDULED]
    CLOSED_STATUSES = [STATUS_COMPLETED, STATUS_CANCELLED]
    # Sessions whose rate counts as platform revenue
    REVENUE_STATUSES = [STATUS_PAID, STATUS_SCHEDULED, STATUS_COMPLETED]

    # Deterministic key: session-{psychologistId}-{sessionTimestampMillis}
    session_id = models.CharField(
        primary_key=True,
        max_length=128,
        editable=False,
        help_text=_("Deterministic identifier derived from psychologist and slot")
    )

    # Participants
    patient = models.ForeignKey(
        User,
        on_delete=models.PROTECT,
        related_name='patient_sessions',
        help_text=_("Patient who booked and paid for the session")
    )
    psychologist = models.ForeignKey(
        User,
        on_delete=models.PROTECT,
        related_name='psychologist_sessions',
        help_text=_("Psychologist providing the session")
    )
    patient_name = models.CharField(_('patient name'), max_length=255)
    psychologist_name = models.CharField(_('psychologist name'), max_length=255)

    # Scheduling
    session_timestamp = models.DateTimeField(
        _('session start'),
        help_text=_("Start of the booked one-hour slot")
    )
    status = models.CharField(
        _('status'),
        max_length=20,
        choices=STATUS_CHOICES,
        default=STATUS_PAID
    )

    # Payment
    rate = models.DecimalField(
        _('rate'),
        max_digits=10,
        decimal_places=2,
        help_text=_("Amount captured by the payment gateway")
    )
    payment_id = models.CharField(
        _('payment id'),
        max_length=64,
        blank=True,
        help_text=_("Gateway payment identifier")
    )
    payment_status = models.CharField(_('payment status'), max_length=30, blank=True)
    payment_method = models.CharField(_('payment method'), max_length=50, blank=True)

    # Post-session
    reviewed = models.BooleanField(_('reviewed'), default=False)
    rating = models.PositiveSmallIntegerField(
        _('rating'),
        null=True,
        blank=True,
        validators=[MinValueValidator(1), MaxValueValidator(5)]
    )
    review_comment = models.TextField(_('review comment'), blank=True)
    psychologist_note = models.TextField(
        _('psychologist note'),
        blank=True,
        help_text=_("Private note kept by the psychologist")
    )
    effective_duration_in_seconds = models.PositiveIntegerField(
        _('effective duration'),
        default=0,
        help_text=_("Time spent in the video room, in seconds")
    )

    # Timestamps
    created_at = models.DateTimeField(_('created at'), auto_now_add=True)
    updated_at = models.DateTimeField(_('updated at'), auto_now=True)

    objects = TherapySessionQuerySet.as_manager()

    class Meta:
        verbose_name = _('Therapy Session')
        verbose_name_plural = _('Therapy Sessions')
        db_table = 'sessions'
        indexes = [
            models.Index(fields=['psychologist', 'session_timestamp'], name='sessions_psychol_2f6c1e_idx'),
            models.Index(fields=['patient', 'session_timestamp'], name='sessions_patient_9b3d27_idx'),
            models.Index(fields=['status'], name='sessions_status_41c8a0_idx'),
        ]

    def __str__(self):
        return f"{self.session_id} ({self.status})"

    @property
    def session_timestamp_millis(self):
        return datetime_to_millis(self.session_timestamp)

    @property
    def session_end(self):
        return self.session_timestamp + timedelta(minutes=settings.SESSION_DURATION_MINUTES)

    @property
    def participant_ids(self):
        return [str(self.patient_id), str(self.psychologist_id)]

    @property
    def is_upcoming(self):
        grace = timedelta(minutes=settings.SESSION_GRACE_MINUTES)
        return (
            self.session_timestamp + grace > timezone.now() and
            self.status not in self.CLOSED_STATUSES
        )

    @property
    def has_started(self):
        return self.session_timestamp <= timezone.now()

    def is_participant(self, user):
        return user.pk in (self.patient_id, self.psychologist_id)
