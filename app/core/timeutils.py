# core/timeutils.py
"""
Conversions between aware datetimes and the epoch-millisecond timestamps
used to identify booked session slots.
"""
from datetime import datetime, date, time, timedelta, timezone as dt_timezone

from django.utils import timezone

EPOCH = datetime(1970, 1, 1, tzinfo=dt_timezone.utc)


def datetime_to_millis(value: datetime) -> int:
    """Epoch milliseconds of an aware datetime"""
    if timezone.is_naive(value):
        value = timezone.make_aware(value)
    return (value - EPOCH) // timedelta(milliseconds=1)


def millis_to_datetime(millis: int) -> datetime:
    """Aware datetime (platform time zone) for epoch milliseconds"""
    utc_value = EPOCH + timedelta(milliseconds=millis)
    return timezone.localtime(utc_value)


def local_datetime(day: date, at: time) -> datetime:
    """Combine a calendar day and a wall-clock time in the platform time zone"""
    return timezone.make_aware(datetime.combine(day, at))
