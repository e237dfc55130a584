# payments/services.py
from django.core.exceptions import ValidationError
from django.db import DatabaseError
from django.conf import settings
from decimal import Decimal, InvalidOperation
from typing import Dict, Any, Optional
import logging
import uuid

from appointments.models import TherapySession
from appointments.repositories import SessionRepository
from core.timeutils import millis_to_datetime
from users.models import User
from .providers import BasePaymentProvider, PaymentProviderConfigError
from .providers.base_provider import PaymentProviderError
from .references import (
    build_reference,
    parse_reference,
    session_document_id,
    MalformedReferenceError,
)

logger = logging.getLogger(__name__)


def find_user(user_id, **filters) -> Optional[User]:
    """User by primary key, or None when the id is unknown or not a valid key"""
    try:
        return User.objects.filter(pk=user_id, **filters).first()
    except ValidationError:
        return None


# ============================================================================
# EXCEPTIONS
# ============================================================================

class PaymentServiceError(Exception):
    """Base exception for payment service errors"""
    pass


class PaymentConfigurationError(PaymentServiceError):
    """Gateway credentials or notification URL are missing"""
    pass


class PaymentValidationError(PaymentServiceError):
    """Booking data is incomplete or inconsistent"""
    pass


class PaymentPermissionError(PaymentServiceError):
    """Caller may not pay for this booking"""
    pass


class SlotUnavailableError(PaymentServiceError):
    """A session already exists for the requested slot"""
    pass


class PaymentGatewayError(PaymentServiceError):
    """The gateway refused or failed the request"""

    def __init__(self, message: str, gateway_message: str = None):
        super().__init__(message)
        self.gateway_message = gateway_message


class InvalidReferenceError(PaymentServiceError):
    """The payment's external reference cannot be parsed"""
    pass


class SessionDataError(PaymentServiceError):
    """Data needed to create the session is missing; the gateway should retry"""
    pass


# ============================================================================
# HELPERS
# ============================================================================

def get_notification_url(provider: BasePaymentProvider) -> str:
    """Public webhook URL for the provider, from PAYMENT_NOTIFICATION_BASE_URL"""
    base_url = getattr(settings, 'PAYMENT_NOTIFICATION_BASE_URL', '')
    if not base_url:
        raise PaymentConfigurationError("PAYMENT_NOTIFICATION_BASE_URL is not configured")
    return provider.get_webhook_endpoint_url(base_url)


def format_session_datetime(session_timestamp_millis: int) -> str:
    return millis_to_datetime(session_timestamp_millis).strftime('%d/%m/%Y %H:%M')


# ============================================================================
# INITIATION
# ============================================================================

class PaymentInitiationService:
    """
    Starts a card (hosted checkout) or PIX payment for a booking.
    Nothing is stored: the session only exists once the confirmation
    notification arrives.
    """

    def __init__(self, provider: BasePaymentProvider, repository: Optional[SessionRepository] = None):
        self.provider = provider
        self.repository = repository or SessionRepository()

    @staticmethod
    def check_requester(user: User, patient_id: str) -> None:
        """A patient only pays for their own bookings; admins may pay for anyone"""
        if user.is_admin or user.is_staff:
            return
        if str(user.id) != str(patient_id):
            raise PaymentPermissionError("You can only pay for your own sessions")

    @staticmethod
    def validate_booking(psychologist_id: str, session_timestamp_millis: int, patient_id: str) -> str:
        """
        Check the booking can be encoded and refers to real accounts.
        Returns the reference string.
        """
        try:
            reference = build_reference(psychologist_id, session_timestamp_millis, patient_id)
        except ValueError as e:
            raise PaymentValidationError(str(e))

        if find_user(psychologist_id, user_type='Psychologist', is_active=True) is None:
            raise PaymentValidationError("Psychologist not found")
        if find_user(patient_id, is_active=True) is None:
            raise PaymentValidationError("Patient not found")

        return reference

    def check_slot_available(self, psychologist_id: str, session_timestamp_millis: int) -> str:
        session_id = session_document_id(psychologist_id, session_timestamp_millis)
        if self.repository.exists(session_id):
            raise SlotUnavailableError(f"Slot {session_id} is already booked")
        return session_id

    def create_card_payment(
        self,
        psychologist_name: str,
        rate: Decimal,
        psychologist_id: str,
        session_timestamp_millis: int,
        payer_email: str,
        patient_id: str,
    ) -> Dict[str, Any]:
        """
        Create a hosted checkout preference for the booking

        Returns:
            Dict with preferenceId
        """
        reference = self.validate_booking(psychologist_id, session_timestamp_millis, patient_id)
        session_id = self.check_slot_available(psychologist_id, session_timestamp_millis)
        notification_url = get_notification_url(self.provider)

        item = {
            'id': session_id,
            'title': f"Sessão de Terapia com {psychologist_name}",
            'description': f"Agendamento de sessão para {format_session_datetime(session_timestamp_millis)}",
            'quantity': 1,
            'unit_price': rate,
            'currency_id': settings.PAYMENT_SETTINGS.get('DEFAULT_CURRENCY', 'BRL'),
        }

        try:
            result = self.provider.create_preference(
                item=item,
                payer_email=payer_email,
                external_reference=reference,
                notification_url=notification_url,
            )
        except PaymentProviderConfigError as e:
            raise PaymentConfigurationError(str(e))
        except PaymentProviderError as e:
            logger.error(f"Failed to create preference for {session_id}: {str(e)}")
            raise PaymentGatewayError(str(e), gateway_message=e.gateway_message)

        logger.info(f"Created checkout preference {result['preference_id']} for {session_id}")
        return {'preferenceId': result['preference_id']}

    def create_pix_payment(
        self,
        rate: Decimal,
        description: str,
        psychologist_id: str,
        session_timestamp_millis: int,
        payer_email: str,
        patient_id: str,
        idempotency_key: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Create a PIX charge for the booking

        Returns:
            Dict with paymentId, qrCode and qrCodeBase64
        """
        reference = self.validate_booking(psychologist_id, session_timestamp_millis, patient_id)
        session_id = self.check_slot_available(psychologist_id, session_timestamp_millis)
        notification_url = get_notification_url(self.provider)

        # One key per request; the provider reuses it across retries
        idempotency_key = idempotency_key or str(uuid.uuid4())

        try:
            result = self.provider.create_pix_payment(
                amount=rate,
                description=description,
                payer_email=payer_email,
                external_reference=reference,
                notification_url=notification_url,
                idempotency_key=idempotency_key,
            )
        except PaymentProviderConfigError as e:
            raise PaymentConfigurationError(str(e))
        except PaymentProviderError as e:
            logger.error(f"Failed to create PIX payment for {session_id}: {str(e)}")
            raise PaymentGatewayError(str(e), gateway_message=e.gateway_message)

        logger.info(f"Created PIX payment {result['payment_id']} for {session_id}")
        return {
            'paymentId': result['payment_id'],
            'qrCode': result.get('qr_code'),
            'qrCodeBase64': result.get('qr_code_base64'),
        }


# ============================================================================
# CONFIRMATION
# ============================================================================

class PaymentConfirmationService:
    """
    Turns an approved payment into exactly one session.

    The payment status is always read back from the provider; the
    notification only tells us which payment to look at.
    """

    APPROVED = 'approved'

    def __init__(self, provider: BasePaymentProvider, repository: SessionRepository):
        self.provider = provider
        self.repository = repository

    def process_payment_notification(self, payment_id: str) -> Dict[str, Any]:
        """
        Handle a 'payment' notification

        Returns:
            Dict with 'created' (bool), 'session_id' (when known) and 'message'

        Raises:
            PaymentGatewayError: payment record could not be fetched
            InvalidReferenceError: approved payment with an unparseable reference
            SessionDataError: patient or psychologist account is missing
            PaymentServiceError: the session could not be stored
        """
        try:
            payment = self.provider.get_payment(payment_id)
        except PaymentProviderError as e:
            logger.error(f"Failed to fetch payment {payment_id}: {str(e)}")
            raise PaymentGatewayError(str(e), gateway_message=e.gateway_message)

        reference_string = payment.get('external_reference')
        if payment.get('status') != self.APPROVED or not reference_string:
            logger.info(
                f"Payment {payment_id} status is '{payment.get('status')}' or has no reference, nothing to do"
            )
            return {'created': False, 'session_id': None, 'message': 'Payment not approved.'}

        try:
            reference = parse_reference(reference_string)
        except MalformedReferenceError as e:
            logger.error(f"Invalid external_reference '{reference_string}' on payment {payment_id}: {str(e)}")
            raise InvalidReferenceError(str(e))

        session_id = reference.session_id

        try:
            already_stored = self.repository.exists(session_id)
            patient = find_user(reference.patient_id)
            psychologist = find_user(reference.psychologist_id)
        except DatabaseError as e:
            logger.error(f"Failed to look up session {session_id}: {str(e)}", exc_info=True)
            raise PaymentServiceError(f"Failed to look up session {session_id}")

        if already_stored:
            logger.info(f"Session {session_id} already exists, ignoring duplicate notification")
            return {'created': False, 'session_id': session_id, 'message': 'Session already processed.'}

        if patient is None or psychologist is None:
            raise SessionDataError(f"Patient or psychologist not found for session {session_id}")

        try:
            session, created = self.repository.create_if_absent(
                session_id,
                patient=patient,
                psychologist=psychologist,
                patient_name=patient.full_name,
                psychologist_name=psychologist.full_name,
                session_timestamp=millis_to_datetime(reference.session_timestamp_millis),
                status=TherapySession.STATUS_PAID,
                rate=self._captured_amount(payment),
                payment_id=str(payment.get('payment_id') or payment_id),
                payment_status=payment.get('status'),
                payment_method=payment.get('payment_method') or '',
                reviewed=False,
                effective_duration_in_seconds=0,
            )
        except DatabaseError as e:
            logger.error(f"Failed to store session {session_id}: {str(e)}", exc_info=True)
            raise PaymentServiceError(f"Failed to store session {session_id}")

        if not created:
            return {'created': False, 'session_id': session_id, 'message': 'Session already processed.'}

        logger.info(f"Session {session_id} created from payment {payment_id}")
        return {'created': True, 'session_id': session_id, 'message': 'Session created.'}

    @staticmethod
    def _captured_amount(payment: Dict[str, Any]) -> Decimal:
        amount = payment.get('transaction_amount')
        if amount is None:
            raise SessionDataError(f"Payment {payment.get('payment_id')} has no transaction amount")
        try:
            return Decimal(str(amount)).quantize(Decimal('0.01'))
        except InvalidOperation:
            raise SessionDataError(f"Payment {payment.get('payment_id')} has an invalid transaction amount")
