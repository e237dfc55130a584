# payments/references.py
"""
Booking reference carried through the payment gateway.

A reference encodes who booked which psychologist for which slot:

    sid_{psychologistId}_{sessionTimestampMillis}_uid_{patientId}

It is attached to every charge as the gateway's external reference and is
read back from the authoritative payment record when the confirmation
notification arrives. The session primary key derived from it,

    session-{psychologistId}-{sessionTimestampMillis}

is what makes confirmation idempotent: one slot, one session.
"""
from dataclasses import dataclass

SEPARATOR = '_'
SESSION_TAG = 'sid'
USER_TAG = 'uid'


class MalformedReferenceError(ValueError):
    """Raised when a reference string cannot be parsed unambiguously"""
    pass


@dataclass(frozen=True)
class BookingReference:
    psychologist_id: str
    session_timestamp_millis: int
    patient_id: str

    def __str__(self):
        return build_reference(self.psychologist_id, self.session_timestamp_millis, self.patient_id)

    @property
    def session_id(self) -> str:
        return session_document_id(self.psychologist_id, self.session_timestamp_millis)


def _check_id(name: str, value) -> str:
    value = str(value) if value is not None else ''
    if not value:
        raise ValueError(f"{name} is required")
    if SEPARATOR in value:
        raise ValueError(f"{name} must not contain '{SEPARATOR}'")
    return value


def _check_timestamp(value) -> int:
    if isinstance(value, bool):
        millis = None
    elif isinstance(value, int):
        millis = value
    elif isinstance(value, float) and value.is_integer():
        millis = int(value)
    elif isinstance(value, str) and value.isascii() and value.isdigit():
        millis = int(value)
    else:
        millis = None

    if millis is None or millis < 0:
        raise ValueError("session timestamp must be a non-negative integer number of milliseconds")
    return millis


def build_reference(psychologist_id, session_timestamp_millis, patient_id) -> str:
    """
    Encode a booking into its reference string.
    Raises ValueError for ids containing the separator or a bad timestamp.
    """
    psychologist_id = _check_id('psychologist id', psychologist_id)
    patient_id = _check_id('patient id', patient_id)
    millis = _check_timestamp(session_timestamp_millis)
    return SEPARATOR.join([SESSION_TAG, psychologist_id, str(millis), USER_TAG, patient_id])


def parse_reference(reference: str) -> BookingReference:
    """
    Decode a reference string, failing closed on anything but the exact
    five-part layout. Ids are opaque; whether they name real
    users is checked by whoever looks them up
    """
    if not isinstance(reference, str) or not reference:
        raise MalformedReferenceError("Reference is empty")

    parts = reference.split(SEPARATOR)
    if len(parts) != 5:
        raise MalformedReferenceError(f"Reference must have 5 parts, got {len(parts)}")

    tag, psychologist_id, timestamp, user_tag, patient_id = parts
    if tag != SESSION_TAG or user_tag != USER_TAG:
        raise MalformedReferenceError("Reference tags are missing")

    if not (timestamp.isascii() and timestamp.isdigit()):
        raise MalformedReferenceError("Reference timestamp is not a number of milliseconds")

    if not psychologist_id or not patient_id:
        raise MalformedReferenceError("Reference ids are empty")

    return BookingReference(
        psychologist_id=psychologist_id,
        session_timestamp_millis=int(timestamp),
        patient_id=patient_id,
    )


def session_document_id(psychologist_id, session_timestamp_millis) -> str:
    """Deterministic session primary key for a psychologist's slot"""
    return f"session-{psychologist_id}-{int(session_timestamp_millis)}"
