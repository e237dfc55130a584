# psychologists/models.py
from decimal import Decimal
from django.db import models
from django.utils.translation import gettext_lazy as _
from django.core.validators import MinValueValidator, MaxValueValidator
from django.core.exceptions import ValidationError
from users.models import User
import logging
logger = logging.getLogger(__name__)


class Psychologist(models.Model):
    """
    Psychologist profile model - extends the base User model
    """

    # Primary key linking to User
    user = models.OneToOneField(
        User,
        on_delete=models.CASCADE,
        primary_key=True,
        related_name='psychologist_profile',
        help_text=_("Link to the base user account")
    )

    # Professional profile
    title = models.CharField(
        _('title'),
        max_length=150,
        blank=True,
        help_text=_("Professional title shown in the marketplace")
    )
    crp = models.CharField(
        _('CRP'),
        max_length=30,
        blank=True,
        help_text=_("Regional Psychology Council registration, as number/state")
    )
    biography = models.TextField(
        _('biography'),
        blank=True,
        help_text=_("Professional biography")
    )
    specialties = models.JSONField(
        _('specialties'),
        default=list,
        blank=True,
        help_text=_("List of specialties, e.g. ['TCC', 'Ansiedade']")
    )
    hourly_rate = models.DecimalField(
        _('hourly rate'),
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal('0.01'))],
        help_text=_("Price of one session in BRL")
    )

    # Review aggregate
    rating = models.DecimalField(
        _('rating'),
        max_digits=3,
        decimal_places=2,
        default=Decimal('0.00'),
        help_text=_("Average review rating")
    )
    reviews_count = models.PositiveIntegerField(
        _('reviews count'),
        default=0,
        help_text=_("Number of reviews received")
    )

    # Payout destination
    payout_bank = models.CharField(_('bank'), max_length=100, blank=True)
    payout_agency = models.CharField(_('agency'), max_length=20, blank=True)
    payout_account = models.CharField(_('account'), max_length=30, blank=True)

    # Timestamps
    created_at = models.DateTimeField(
        _('created at'),
        auto_now_add=True
    )
    updated_at = models.DateTimeField(
        _('updated at'),
        auto_now=True
    )

    class Meta:
        verbose_name = _('Psychologist')
        verbose_name_plural = _('Psychologists')
        db_table = 'psychologists'
        indexes = [
            models.Index(fields=['hourly_rate'], name='psychologis_hourly__c1a2b4_idx'),
            models.Index(fields=['rating'], name='psychologis_rating_8d0e17_idx'),
        ]

    def __str__(self):
        return f"{self.display_name} ({self.crp})"

    def clean(self):
        """Model validation"""
        errors = {}

        if not isinstance(self.specialties, list) or not all(isinstance(s, str) for s in self.specialties):
            errors['specialties'] = _("Specialties must be a list of strings")

        if self.hourly_rate is not None and self.hourly_rate <= 0:
            errors['hourly_rate'] = _("Hourly rate must be positive")

        if errors:
            raise ValidationError(errors)

    def save(self, *args, **kwargs):
        """Override save to run validation"""
        self.full_clean()
        super().save(*args, **kwargs)

    @property
    def full_name(self):
        return self.user.full_name

    @property
    def display_name(self):
        return self.user.full_name or self.user.email

    @property
    def is_marketplace_visible(self):
        """
        Only complete profiles (name, specialties and a rate) are listed
        """
        return bool(
            self.user.is_active and
            self.user.full_name and
            self.specialties and
            self.hourly_rate and self.hourly_rate > 0
        )

    @classmethod
    def get_marketplace_psychologists(cls):
        """Active psychologists that have a rate; completeness is checked per profile"""
        return cls.objects.select_related('user').filter(
            user__is_active=True,
            hourly_rate__isnull=False,
        ).order_by('-rating', 'user__full_name')

    @classmethod
    def get_default_availability_template(cls):
        """Default weekly availability for new psychologists (0=Sunday)"""
        return [
            {'day_of_week': 0, 'enabled': False, 'start_time': '09:00', 'end_time': '12:00'},
            {'day_of_week': 1, 'enabled': True, 'start_time': '09:00', 'end_time': '18:00'},
            {'day_of_week': 2, 'enabled': True, 'start_time': '09:00', 'end_time': '18:00'},
            {'day_of_week': 3, 'enabled': True, 'start_time': '09:00', 'end_time': '18:00'},
            {'day_of_week': 4, 'enabled': True, 'start_time': '09:00', 'end_time': '18:00'},
            {'day_of_week': 5, 'enabled': True, 'start_time': '09:00', 'end_time': '14:00'},
            {'day_of_week': 6, 'enabled': False, 'start_time': '09:00', 'end_time': '12:00'},
        ]


class PsychologistAvailability(models.Model):
    """
    Weekly availability template: one entry per day of the week, broken down
    into 1-hour bookable slots
    """

    DAY_KEYS = ['domingo', 'segunda', 'terca', 'quarta', 'quinta', 'sexta', 'sabado']

    # Primary key
    availability_id = models.BigAutoField(
        primary_key=True,
        help_text=_("Unique identifier for availability entry")
    )

    # Psychologist relationship
    psychologist = models.ForeignKey(
        Psychologist,
        on_delete=models.CASCADE,
        related_name='availability_entries',
        help_text=_("Psychologist this availability belongs to")
    )

    # Day and Time Configuration
    day_of_week = models.IntegerField(
        _('day of week'),
        validators=[
            MinValueValidator(0, message=_("Day of week must be 0-6 (0=Sunday)")),
            MaxValueValidator(6, message=_("Day of week must be 0-6 (6=Saturday)"))
        ],
        help_text=_("Day of week: 0=Sunday, 1=Monday, 2=Tuesday, 3=Wednesday, 4=Thursday, 5=Friday, 6=Saturday")
    )
    enabled = models.BooleanField(
        _('enabled'),
        default=False,
        help_text=_("Whether the psychologist takes sessions on this day")
    )
    start_time = models.TimeField(
        _('start time'),
        help_text=_("Start time of the working window")
    )
    end_time = models.TimeField(
        _('end time'),
        help_text=_("End time of the working window")
    )

    # Timestamps
    created_at = models.DateTimeField(
        _('created at'),
        auto_now_add=True
    )
    updated_at = models.DateTimeField(
        _('updated at'),
        auto_now=True
    )

    class Meta:
        verbose_name = _('Psychologist Availability')
        verbose_name_plural = _('Psychologist Availabilities')
        db_table = 'psychologist_availability'
        ordering = ['day_of_week']
        constraints = [
            models.CheckConstraint(
                condition=models.Q(end_time__gt=models.F('start_time')),
                name='end_time_after_start_time'
            ),
            models.UniqueConstraint(
                fields=['psychologist', 'day_of_week'],
                name='unique_psychologist_day'
            ),
        ]

    def __str__(self):
        return f"{self.psychologist.display_name} - {self.get_day_name()} {self.get_time_range_display()}"

    def clean(self):
        """Model validation"""
        if self.start_time and self.end_time and self.end_time <= self.start_time:
            raise ValidationError({'end_time': _("End time must be after start time")})

    def save(self, *args, **kwargs):
        """Override save to run validation"""
        self.full_clean()
        super().save(*args, **kwargs)

    def get_day_name(self):
        """Get human-readable day name"""
        days = [
            _('Sunday'), _('Monday'), _('Tuesday'), _('Wednesday'),
            _('Thursday'), _('Friday'), _('Saturday')
        ]
        return days[self.day_of_week]

    @property
    def day_key(self):
        return self.DAY_KEYS[self.day_of_week]

    def get_time_range_display(self):
        """Get formatted time range string"""
        return f"{self.start_time.strftime('%H:%M')} - {self.end_time.strftime('%H:%M')}"

    @staticmethod
    def weekday_to_day_of_week(target_date):
        """Convert Python weekday (0=Monday) to our day_of_week (0=Sunday)"""
        return (target_date.weekday() + 1) % 7
