# psychologists/slots.py
"""
Bookable slot computation for a psychologist's weekly availability template.

Slots sit on a one-hour grid starting at the entry's start time. A slot is
offered when it starts before the entry's end time, is not already booked
(exact millisecond match against session timestamps) and, on the current
day, starts after the current moment.
"""
from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional

from django.conf import settings
from django.utils import timezone

from core.timeutils import datetime_to_millis, local_datetime


def slot_step() -> timedelta:
    return timedelta(minutes=getattr(settings, 'SESSION_DURATION_MINUTES', 60))


def generate_slot_starts(availability, target_date: date) -> List[datetime]:
    """
    All grid slot start datetimes of one availability entry on target_date,
    before any booking or past-time filtering
    """
    if availability is None or not availability.enabled:
        return []

    slots = []
    current = local_datetime(target_date, availability.start_time)
    end = local_datetime(target_date, availability.end_time)
    step = slot_step()

    while current < end:
        slots.append(current)
        current += step

    return slots


def compute_available_slots(availability, target_date: date, booked_millis: Iterable[int],
                            now: Optional[datetime] = None) -> List[str]:
    """
    Ordered 'HH:MM' labels of the free slots of an availability entry on target_date
    """
    now = now or timezone.now()
    booked = set(int(ms) for ms in booked_millis)
    is_today = target_date == timezone.localtime(now).date()

    labels = []
    for slot in generate_slot_starts(availability, target_date):
        if is_today and slot <= now:
            continue
        if datetime_to_millis(slot) in booked:
            continue
        labels.append(slot.strftime('%H:%M'))

    return labels

