# psychologists/services.py
from django.conf import settings
from django.db import transaction
from django.db.models import Avg, Count
from django.utils import timezone
from datetime import date, time
from decimal import Decimal, ROUND_HALF_UP
import logging
from typing import Optional, Dict, Any, List

from .models import Psychologist, PsychologistAvailability
from .slots import compute_available_slots
from users.models import User

logger = logging.getLogger(__name__)


class PsychologistProfileError(Exception):
    """Base exception for psychologist profile related errors"""
    pass


class PsychologistNotFoundError(PsychologistProfileError):
    """Raised when psychologist profile is not found"""
    pass


class AvailabilityManagementError(PsychologistProfileError):
    """Raised when availability management operations fail"""
    pass


class PsychologistService:
    """
    Service class for psychologist profile management and business logic
    """

    @staticmethod
    def get_psychologist_by_user(user: User) -> Optional[Psychologist]:
        """
        Get psychologist profile by user, return None if not found
        """
        try:
            return Psychologist.objects.select_related('user').get(user=user)
        except Psychologist.DoesNotExist:
            logger.warning(f"Psychologist profile not found for user {user.email}")
            return None

    @staticmethod
    def get_psychologist_by_user_or_raise(user: User) -> Psychologist:
        """
        Get psychologist profile by user, raise exception if not found
        """
        psychologist = PsychologistService.get_psychologist_by_user(user)
        if not psychologist:
            raise PsychologistNotFoundError(f"Psychologist profile not found for user {user.email}")
        return psychologist

    @staticmethod
    def get_psychologist_by_id(psychologist_id) -> Optional[Psychologist]:
        """
        Get psychologist by user ID
        """
        try:
            return Psychologist.objects.select_related('user').get(user__id=psychologist_id)
        except (Psychologist.DoesNotExist, ValueError):
            logger.warning(f"Psychologist {psychologist_id} not found")
            return None

    @staticmethod
    def create_default_profile(user: User) -> Psychologist:
        """
        Create the professional profile and weekly availability a new
        psychologist starts with
        """
        defaults = settings.PSYCHOLOGIST_DEFAULT_PROFILE

        with transaction.atomic():
            psychologist, created = Psychologist.objects.get_or_create(
                user=user,
                defaults={
                    'title': defaults['TITLE'],
                    'biography': defaults['BIOGRAPHY'],
                    'specialties': list(defaults['SPECIALTIES']),
                    'hourly_rate': defaults['HOURLY_RATE'],
                }
            )
            if created:
                for entry in Psychologist.get_default_availability_template():
                    PsychologistAvailability.objects.create(
                        psychologist=psychologist,
                        day_of_week=entry['day_of_week'],
                        enabled=entry['enabled'],
                        start_time=time.fromisoformat(entry['start_time']),
                        end_time=time.fromisoformat(entry['end_time']),
                    )

        return psychologist

    @staticmethod
    def apply_registration_credentials(user: User, crp_number: Optional[str], crp_state: Optional[str]) -> Psychologist:
        """
        Store the CRP given at signup on the psychologist's profile
        """
        psychologist = PsychologistService.create_default_profile(user)
        if crp_number and crp_state:
            psychologist.crp = f"{crp_number.strip()}/{crp_state.upper()}"
            psychologist.save(update_fields=['crp', 'updated_at'])
        return psychologist

    @staticmethod
    def update_psychologist_profile(psychologist: Psychologist, update_data: Dict[str, Any]) -> Psychologist:
        """
        Update psychologist profile fields
        """
        allowed_fields = ['title', 'crp', 'biography', 'specialties', 'hourly_rate']
        updated_fields = []

        for field, value in update_data.items():
            if field in allowed_fields:
                setattr(psychologist, field, value)
                updated_fields.append(field)

        if updated_fields:
            psychologist.save()
            logger.info(f"Psychologist profile updated for {psychologist.user.email}: {updated_fields}")

        return psychologist

    @staticmethod
    def update_payout_info(psychologist: Psychologist, update_data: Dict[str, Any]) -> Psychologist:
        """
        Update the bank account payouts are sent to
        """
        for field in ['payout_bank', 'payout_agency', 'payout_account']:
            if field in update_data:
                setattr(psychologist, field, update_data[field])

        psychologist.save()
        logger.info(f"Payout info updated for psychologist {psychologist.user.email}")
        return psychologist

    @staticmethod
    def get_availability(psychologist: Psychologist) -> List[PsychologistAvailability]:
        return list(psychologist.availability_entries.order_by('day_of_week'))

    @staticmethod
    def replace_availability(psychologist: Psychologist, entries: List[Dict[str, Any]]) -> List[PsychologistAvailability]:
        """
        Replace the weekly template entries for the supplied days in one step
        """
        try:
            with transaction.atomic():
                for entry in entries:
                    PsychologistAvailability.objects.update_or_create(
                        psychologist=psychologist,
                        day_of_week=entry['day_of_week'],
                        defaults={
                            'enabled': entry['enabled'],
                            'start_time': entry['start_time'],
                            'end_time': entry['end_time'],
                        }
                    )
        except Exception as e:
            logger.error(f"Failed to update availability for {psychologist.user.email}: {str(e)}")
            raise AvailabilityManagementError(f"Failed to update availability: {str(e)}")

        logger.info(f"Availability updated for {psychologist.user.email}: days {[e['day_of_week'] for e in entries]}")
        return PsychologistService.get_availability(psychologist)

    @staticmethod
    def get_marketplace_psychologists() -> List[Psychologist]:
        """
        Psychologists with a complete profile; incomplete ones are skipped
        """
        visible = []
        for psychologist in Psychologist.get_marketplace_psychologists():
            if psychologist.is_marketplace_visible:
                visible.append(psychologist)
            else:
                logger.warning(f"Skipping incomplete psychologist profile {psychologist.user_id} in marketplace")
        return visible

    @staticmethod
    def get_booked_slots(psychologist: Psychologist) -> List[int]:
        """Epoch millis of every session booked with this psychologist"""
        # Import here to avoid circular imports
        from appointments.repositories import SessionRepository
        return SessionRepository().booked_timestamps_for(psychologist.user)

    @staticmethod
    def get_reviews(psychologist: Psychologist) -> List[Dict[str, Any]]:
        """Reviews left by patients on this psychologist's sessions"""
        from appointments.models import TherapySession

        reviewed = TherapySession.objects.filter(
            psychologist=psychologist.user,
            reviewed=True,
            rating__isnull=False,
        ).order_by('-session_timestamp')

        return [
            {
                'session_id': session.session_id,
                'patient_name': session.patient_name,
                'rating': session.rating,
                'comment': session.review_comment,
                'session_timestamp': session.session_timestamp,
            }
            for session in reviewed
        ]

    @staticmethod
    def get_available_slots(psychologist: Psychologist, target_date: date, now=None) -> Dict[str, Any]:
        """
        Free slot labels of a psychologist on a given day
        """
        day_of_week = PsychologistAvailability.weekday_to_day_of_week(target_date)
        availability = psychologist.availability_entries.filter(day_of_week=day_of_week).first()

        slots = compute_available_slots(
            availability,
            target_date,
            PsychologistService.get_booked_slots(psychologist),
            now=now or timezone.now(),
        )
        return {
            'psychologist_id': str(psychologist.user_id),
            'date': target_date.isoformat(),
            'day_of_week': day_of_week,
            'slots': slots,
        }

    @staticmethod
    def update_rating_aggregate(psychologist_user: User) -> Optional[Psychologist]:
        """
        Recompute the average rating and review count from reviewed sessions
        """
        from appointments.models import TherapySession

        psychologist = PsychologistService.get_psychologist_by_user(psychologist_user)
        if not psychologist:
            return None

        aggregate = TherapySession.objects.filter(
            psychologist=psychologist_user,
            reviewed=True,
            rating__isnull=False,
        ).aggregate(average=Avg('rating'), count=Count('session_id'))

        average = aggregate['average'] or 0
        psychologist.rating = Decimal(str(average)).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)
        psychologist.reviews_count = aggregate['count']
        psychologist.save(update_fields=['rating', 'reviews_count', 'updated_at'])

        logger.info(
            f"Rating updated for psychologist {psychologist_user.email}: "
            f"{psychologist.rating} over {psychologist.reviews_count} reviews"
        )
        return psychologist
