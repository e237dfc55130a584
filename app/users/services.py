# users/services.py
from django.db import transaction
from django.utils import timezone
import logging
from typing import Optional

from .models import User
from .exceptions import EmailAlreadyExistsError, InvalidUserTypeError, RoleMismatchError
from .validators import normalize_cpf, normalize_whatsapp

# Set up logging
logger = logging.getLogger(__name__)


# Login entry points and the account type each one accepts
LOGIN_ROLES = {
    'patient': 'Patient',
    'psychologist': 'Psychologist',
    'admin': 'Admin',
}


class AuthenticationService:
    """
    Service class for authentication-related business logic
    """

    @staticmethod
    def register_user(email: str, password: str, user_type: str, full_name: str,
                      cpf: str, whatsapp: str, crp_number: Optional[str] = None,
                      crp_state: Optional[str] = None, **extra_data) -> User:
        """
        Register a new patient or psychologist.
        Psychologists get their professional profile and default weekly
        availability from the post_save signal; the CRP is applied here.
        """
        if user_type not in ['Patient', 'Psychologist']:
            raise InvalidUserTypeError(f"Cannot self-register as {user_type}")

        if User.objects.filter(email__iexact=email).exists():
            raise EmailAlreadyExistsError(email)

        try:
            with transaction.atomic():
                fields = dict(
                    full_name=full_name.strip(),
                    cpf=normalize_cpf(cpf),
                    whatsapp=normalize_whatsapp(whatsapp),
                    **extra_data
                )
                if user_type == 'Patient':
                    user = User.objects.create_patient(email=email, password=password, **fields)
                else:
                    user = User.objects.create_psychologist(email=email, password=password, **fields)

                    # Import here to avoid circular imports
                    from psychologists.services import PsychologistService
                    PsychologistService.apply_registration_credentials(user, crp_number, crp_state)

            logger.info(f"New {user_type} registered: {user.email}")
            return user

        except Exception as e:
            logger.error(f"Failed to register user {email}: {str(e)}", exc_info=True)
            raise

    @staticmethod
    def check_login_role(user: User, role: str) -> None:
        """
        Refuse a login made through another role's entry point
        """
        expected = LOGIN_ROLES[role]
        if user.user_type != expected:
            logger.warning(f"Login role mismatch for {user.email}: expected {expected}, got {user.user_type}")
            raise RoleMismatchError(expected, user.user_type)

    @staticmethod
    def record_login(user: User) -> None:
        user.last_login_date = timezone.now()
        user.save(update_fields=['last_login_date'])


class UserService:
    """
    Service class for user-related business logic
    """

    @staticmethod
    def get_user_profile(user: User) -> dict:
        """
        Get user profile with additional computed data
        """
        profile_data = {
            'id': user.id,
            'email': user.email,
            'user_type': user.user_type,
            'full_name': user.full_name,
            'whatsapp': user.whatsapp,
            'profile_picture_url': user.profile_picture_url,
            'registration_date': user.registration_date,
        }

        if user.is_psychologist and hasattr(user, 'psychologist_profile'):
            profile = user.psychologist_profile
            profile_data['psychologist_profile'] = {
                'title': profile.title,
                'crp': profile.crp,
                'hourly_rate': profile.hourly_rate,
                'rating': profile.rating,
                'reviews_count': profile.reviews_count,
            }

        return profile_data

    @staticmethod
    def update_user_profile(user: User, **update_data) -> User:
        """
        Update user profile with validation
        """
        allowed_fields = ['full_name', 'whatsapp', 'profile_picture_url']
        updated_fields = []

        for field, value in update_data.items():
            if field in allowed_fields and hasattr(user, field):
                if field == 'whatsapp':
                    value = normalize_whatsapp(value)
                setattr(user, field, value)
                updated_fields.append(field)

        if updated_fields:
            updated_fields.append('updated_at')
            user.save(update_fields=updated_fields)
            logger.info(f"Updated profile for user {user.email}: {updated_fields}")

        return user

    @staticmethod
    def get_user_detail(user: User) -> dict:
        """
        Admin view of a user: account data plus their sessions and, for
        psychologists, their payouts
        """
        # Import here to avoid circular imports
        from appointments.models import TherapySession
        from appointments.serializers import TherapySessionSerializer
        from finance.models import Payout
        from finance.serializers import PayoutSerializer
        from .serializers import UserSerializer

        sessions = TherapySession.objects.for_participant(user).order_by('-session_timestamp')
        detail = {
            'user': UserSerializer(user).data,
            'sessions': TherapySessionSerializer(sessions, many=True).data,
        }
        if user.is_psychologist:
            payouts = Payout.objects.filter(psychologist=user).order_by('-requested_at')
            detail['payouts'] = PayoutSerializer(payouts, many=True).data
        return detail
