# users/models.py
import uuid
from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin
from django.db import models
from django.utils.translation import gettext_lazy as _
from django.utils import timezone

from .managers import UserManager


class User(AbstractBaseUser, PermissionsMixin):
    """
    Custom User model where email is the unique identifier.
    The UUID primary key never contains '_', which keeps it safe to embed
    in payment references.
    """

    # User Type Choices
    USER_TYPE_CHOICES = [
        ('Patient', _('Patient')),
        ('Psychologist', _('Psychologist')),
        ('Admin', _('Admin')),
    ]

    # Primary fields
    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text=_("Unique identifier for the user")
    )
    email = models.EmailField(
        _('email address'),
        unique=True,
        help_text=_("User's email address, used for login")
    )
    user_type = models.CharField(
        max_length=20,
        choices=USER_TYPE_CHOICES,
        help_text=_("Type of user: Patient, Psychologist, or Admin")
    )

    # Identity fields
    full_name = models.CharField(
        _('full name'),
        max_length=255,
        blank=True,
        help_text=_("Name shown to other users")
    )
    cpf = models.CharField(
        _('CPF'),
        max_length=11,
        blank=True,
        help_text=_("Brazilian taxpayer id, digits only")
    )
    whatsapp = models.CharField(
        _('WhatsApp'),
        max_length=20,
        blank=True,
        help_text=_("WhatsApp number in +55 format")
    )

    # Status fields
    is_active = models.BooleanField(
        _('active'),
        default=True,
        help_text=_("Designates whether this user should be treated as active.")
    )
    is_staff = models.BooleanField(
        _('staff status'),
        default=False,
        help_text=_("Designates whether the user can log into the admin site.")
    )

    # Profile fields
    profile_picture_url = models.URLField(
        _('profile picture'),
        max_length=512,
        blank=True,
        null=True,
        help_text=_("URL to user's profile picture")
    )

    # Timestamp fields
    registration_date = models.DateTimeField(
        _('registration date'),
        default=timezone.now,
        help_text=_("When the user registered")
    )
    last_login_date = models.DateTimeField(
        _('last login'),
        blank=True,
        null=True,
        help_text=_("Last time user logged in")
    )
    created_at = models.DateTimeField(
        _('created at'),
        auto_now_add=True
    )
    updated_at = models.DateTimeField(
        _('updated at'),
        auto_now=True
    )

    # Custom manager
    objects = UserManager()

    # Django auth settings
    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['user_type']

    class Meta:
        verbose_name = _('User')
        verbose_name_plural = _('Users')
        db_table = 'users'
        indexes = [
            models.Index(fields=['email'], name='users_email_4b85f2_idx'),
            models.Index(fields=['user_type'], name='users_user_ty_5a4d0c_idx'),
            models.Index(fields=['created_at'], name='users_created_6541e9_idx'),
        ]

    def __str__(self):
        return f"{self.email} ({self.user_type})"

    @property
    def is_patient(self):
        """Check if user is a patient"""
        return self.user_type == 'Patient'

    @property
    def is_psychologist(self):
        """Check if user is a psychologist"""
        return self.user_type == 'Psychologist'

    @property
    def is_admin(self):
        """Check if user is an admin"""
        return self.user_type == 'Admin'

    @property
    def display_name(self):
        return self.full_name or self.email
