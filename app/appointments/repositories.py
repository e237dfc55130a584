# appointments/repositories.py
from django.db import IntegrityError, transaction
import logging
from typing import Optional, Tuple, List

from core.timeutils import datetime_to_millis
from .models import TherapySession

logger = logging.getLogger(__name__)


class SessionRepository:
    """
    Storage access for therapy sessions.

    Passed explicitly to the services that need it so tests can swap in a
    different store.
    """

    def exists(self, session_id: str) -> bool:
        return TherapySession.objects.filter(session_id=session_id).exists()

    def get(self, session_id: str) -> Optional[TherapySession]:
        return TherapySession.objects.filter(session_id=session_id).first()

    def create_if_absent(self, session_id: str, **fields) -> Tuple[TherapySession, bool]:
        """
        Insert the session unless one with this key already exists.
        Returns (session, created); a concurrent insert of the same key
        resolves to the existing row.
        """
        try:
            with transaction.atomic():
                session = TherapySession.objects.create(session_id=session_id, **fields)
            return session, True
        except IntegrityError:
            existing = self.get(session_id)
            if existing is None:
                raise
            logger.info(f"Session {session_id} was created concurrently, keeping existing row")
            return existing, False

    def booked_timestamps_for(self, psychologist) -> List[int]:
        """Epoch millis of every session booked with a psychologist (user)"""
        timestamps = TherapySession.objects.filter(
            psychologist=psychologist
        ).values_list('session_timestamp', flat=True)
        return [datetime_to_millis(ts) for ts in timestamps]
