# appointments/services/services.py
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Count, Max
from django.utils import timezone
import logging
from typing import Optional, Dict, Any, List

from ..models import TherapySession
from ..repositories import SessionRepository
from psychologists.services import PsychologistService
from users.models import User

logger = logging.getLogger(__name__)


# ============================================================================
# CUSTOM EXCEPTIONS
# ============================================================================

class SessionServiceError(Exception):
    """Base exception for therapy session related errors"""
    pass


class SessionNotFoundError(SessionServiceError):
    """Raised when a session is not found"""
    pass


class SessionAccessDeniedError(SessionServiceError):
    """Raised when user doesn't have access to a session"""
    pass


class SessionStateError(SessionServiceError):
    """Raised when a transition is not allowed from the session's current status"""
    pass


class ReviewError(SessionServiceError):
    """Raised when a review cannot be recorded"""
    pass


# ============================================================================
# SESSION QUERIES
# ============================================================================

class SessionQueryService:
    """
    Read access to sessions with participant-based access control
    """

    @staticmethod
    def user_can_access_session(user: User, session: TherapySession) -> bool:
        # Admins can access all sessions
        if user.is_admin or user.is_staff:
            return True
        return session.is_participant(user)

    @staticmethod
    def get_session_for_user(session_id: str, user: User) -> TherapySession:
        """
        Get session by ID with access control
        """
        session = TherapySession.objects.select_related('patient', 'psychologist').filter(
            session_id=session_id
        ).first()

        if session is None:
            raise SessionNotFoundError(f"Session {session_id} not found")

        if not SessionQueryService.user_can_access_session(user, session):
            raise SessionAccessDeniedError("User does not have access to this session")

        return session

    @staticmethod
    def get_user_sessions(user: User, scope: Optional[str] = None):
        """
        Sessions visible to a user; scope is 'upcoming', 'history' or None
        """
        queryset = TherapySession.objects.select_related('patient', 'psychologist')

        if not (user.is_admin or user.is_staff):
            queryset = queryset.for_participant(user)

        if scope == 'upcoming':
            return queryset.upcoming().order_by('session_timestamp')
        if scope == 'history':
            return queryset.history().order_by('-session_timestamp')
        return queryset.order_by('-session_timestamp')

    @staticmethod
    def get_booking_status(psychologist_id: str, session_timestamp_millis: int,
                           repository: Optional[SessionRepository] = None) -> Dict[str, Any]:
        """
        Whether the confirmation pipeline has created the session for a slot
        """
        # Import here to avoid circular imports
        from payments.references import session_document_id

        repository = repository or SessionRepository()
        session_id = session_document_id(psychologist_id, session_timestamp_millis)
        session = repository.get(session_id)

        return {
            'session_id': session_id,
            'confirmed': session is not None,
            'status': session.status if session else None,
        }

    @staticmethod
    def get_psychologist_patients(psychologist: User) -> List[Dict[str, Any]]:
        """
        Everyone who has booked with a psychologist, most recently seen first
        """
        if not psychologist.is_psychologist:
            raise SessionAccessDeniedError("Only psychologists have a patient list")

        rows = (
            TherapySession.objects.filter(psychologist=psychologist)
            .values('patient_id', 'patient__full_name', 'patient__email', 'patient__profile_picture_url')
            .annotate(sessions_count=Count('session_id'), last_session=Max('session_timestamp'))
            .order_by('-last_session')
        )

        return [
            {
                'patient_id': row['patient_id'],
                'patient_name': row['patient__full_name'] or row['patient__email'],
                'email': row['patient__email'],
                'profile_picture_url': row['patient__profile_picture_url'],
                'sessions_count': row['sessions_count'],
                'last_session': row['last_session'],
            }
            for row in rows
        ]

    @staticmethod
    def get_patient_history(psychologist: User, patient_id: str) -> Dict[str, Any]:
        """
        One patient's sessions with this psychologist plus summary stats.
        Patients the psychologist has never seen are not found.
        """
        if not psychologist.is_psychologist:
            raise SessionAccessDeniedError("Only psychologists can view patient histories")

        try:
            sessions = list(
                TherapySession.objects.select_related('patient', 'psychologist')
                .filter(psychologist=psychologist, patient_id=patient_id)
                .order_by('-session_timestamp')
            )
        except ValidationError:
            sessions = []

        if not sessions:
            raise SessionNotFoundError(f"No sessions with patient {patient_id}")

        patient = sessions[0].patient
        upcoming = [s for s in sessions if s.is_upcoming]

        return {
            'patient_id': patient.id,
            'patient_name': patient.display_name,
            'email': patient.email,
            'profile_picture_url': patient.profile_picture_url,
            'total_sessions': len(sessions),
            'completed_sessions': sum(1 for s in sessions if s.status == TherapySession.STATUS_COMPLETED),
            'next_session': min(s.session_timestamp for s in upcoming) if upcoming else None,
            'sessions': sessions,
        }


# ============================================================================
# SESSION LIFECYCLE
# ============================================================================

class SessionLifecycleService:
    """
    Status transitions and post-session records
    """

    @staticmethod
    def cancel_session(session: TherapySession, cancelled_by: User) -> TherapySession:
        """
        Cancel an open session (Pago or Agendada)
        """
        if session.status not in TherapySession.OPEN_STATUSES:
            raise SessionStateError(f"Session in status {session.status} cannot be cancelled")

        session.status = TherapySession.STATUS_CANCELLED
        session.save(update_fields=['status', 'updated_at'])

        logger.info(f"Session {session.session_id} cancelled by {cancelled_by.email}")
        return session

    @staticmethod
    def schedule_session(session: TherapySession, psychologist: User) -> TherapySession:
        """
        Psychologist confirms a paid session
        """
        if session.psychologist_id != psychologist.pk:
            raise SessionAccessDeniedError("Only the session's psychologist can schedule it")
        if session.status != TherapySession.STATUS_PAID:
            raise SessionStateError(f"Session in status {session.status} cannot be scheduled")

        session.status = TherapySession.STATUS_SCHEDULED
        session.save(update_fields=['status', 'updated_at'])

        logger.info(f"Session {session.session_id} scheduled by {psychologist.email}")
        return session

    @staticmethod
    def record_room_exit(session: TherapySession, user: User, duration_seconds: int) -> Dict[str, Any]:
        """
        Record what happens when a participant leaves the video room.

        The stored duration only grows. When the psychologist leaves an open
        session it is marked completed. Failures are logged and reported back
        as not recorded, the caller is never blocked on them.
        """
        try:
            with transaction.atomic():
                locked = TherapySession.objects.select_for_update().get(session_id=session.session_id)
                update_fields = ['updated_at']

                if duration_seconds > locked.effective_duration_in_seconds:
                    locked.effective_duration_in_seconds = duration_seconds
                    update_fields.append('effective_duration_in_seconds')

                if user.pk == locked.psychologist_id and locked.status in TherapySession.OPEN_STATUSES:
                    locked.status = TherapySession.STATUS_COMPLETED
                    update_fields.append('status')

                locked.save(update_fields=update_fields)

            logger.info(
                f"Room exit recorded for session {locked.session_id} by {user.email}: "
                f"{locked.effective_duration_in_seconds}s, status {locked.status}"
            )
            return {'recorded': True, 'session': locked}

        except Exception as e:
            logger.error(f"Failed to record room exit for session {session.session_id}: {str(e)}")
            return {'recorded': False, 'session': session}

    @staticmethod
    def save_psychologist_note(session: TherapySession, psychologist: User, note: str) -> TherapySession:
        if session.psychologist_id != psychologist.pk:
            raise SessionAccessDeniedError("Only the session's psychologist can write notes")

        session.psychologist_note = note
        session.save(update_fields=['psychologist_note', 'updated_at'])
        logger.info(f"Psychologist note saved for session {session.session_id}")
        return session

    @staticmethod
    def submit_review(session: TherapySession, patient: User, rating: int, comment: str = '') -> TherapySession:
        """
        Patient rates a session once; the psychologist's aggregate rating is
        recomputed afterwards
        """
        if session.patient_id != patient.pk:
            raise SessionAccessDeniedError("Only the session's patient can review it")
        if session.status == TherapySession.STATUS_CANCELLED:
            raise ReviewError("Cancelled sessions cannot be reviewed")
        if not session.has_started:
            raise ReviewError("Sessions can only be reviewed after they start")
        if not 1 <= rating <= 5:
            raise ReviewError("Rating must be between 1 and 5")

        with transaction.atomic():
            locked = TherapySession.objects.select_for_update().get(session_id=session.session_id)
            if locked.reviewed:
                raise ReviewError("Session has already been reviewed")

            locked.reviewed = True
            locked.rating = rating
            locked.review_comment = comment
            locked.save(update_fields=['reviewed', 'rating', 'review_comment', 'updated_at'])

            PsychologistService.update_rating_aggregate(locked.psychologist)

        logger.info(f"Review submitted for session {locked.session_id}: {rating} stars")
        return locked
