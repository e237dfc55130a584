# payments/providers/mercadopago_provider.py
import mercadopago
from mercadopago.config import RequestOptions
import requests
from typing import Dict, Any
from decimal import Decimal, InvalidOperation
from functools import wraps
from django.conf import settings
import logging
import time

from .base_provider import (
    BasePaymentProvider,
    PaymentProviderConfigError,
    PaymentCreateError,
    PaymentFetchError,
    GatewayUnavailableError,
)

logger = logging.getLogger(__name__)

PLACEHOLDER_TOKEN = 'YOUR_MERCADO_PAGO_ACCESS_TOKEN'


def retry_on_gateway_failure(max_retries=None, delay=None):
    """
    Decorator to retry gateway calls on transport errors and 5xx answers.
    Client errors (4xx) are raised immediately.
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            retries = max_retries
            if retries is None:
                retries = settings.PAYMENT_SETTINGS.get('GATEWAY_MAX_RETRIES', 3)
            wait = delay
            if wait is None:
                wait = settings.PAYMENT_SETTINGS.get('GATEWAY_RETRY_DELAY_SECONDS', 0.5)

            max_attempts = retries + 1
            last_exception = None
            for attempt in range(max_attempts):
                try:
                    return func(*args, **kwargs)
                except (requests.exceptions.RequestException, GatewayUnavailableError) as e:
                    last_exception = e
                    logger.warning(
                        f"Mercado Pago call {func.__name__} attempt {attempt + 1} failed: {str(e)}"
                    )
                    if attempt < max_attempts - 1:
                        time.sleep(wait * (attempt + 1))

            logger.error(
                f"Mercado Pago call {func.__name__} failed after {max_attempts} attempts: {str(last_exception)}"
            )
            if isinstance(last_exception, GatewayUnavailableError):
                raise last_exception
            raise GatewayUnavailableError(f"Mercado Pago unreachable: {str(last_exception)}")
        return wrapper
    return decorator


def _gateway_message(response: Any) -> str:
    """Best human-readable message from a Mercado Pago error body"""
    if not isinstance(response, dict):
        return ''
    cause = response.get('cause')
    if isinstance(cause, list) and cause and isinstance(cause[0], dict):
        description = cause[0].get('description')
        if description:
            return description
    return response.get('message') or response.get('error') or ''


class MercadoPagoPaymentProvider(BasePaymentProvider):
    """
    Mercado Pago payment provider implementation
    Handles checkout preferences, PIX charges and payment lookups
    """

    def __init__(self):
        super().__init__()
        self.sdk = mercadopago.SDK(self.config['ACCESS_TOKEN'])

    def _get_provider_name(self) -> str:
        return 'mercadopago'

    def _get_provider_config(self) -> Dict[str, Any]:
        """Get Mercado Pago configuration from Django settings"""
        return settings.PAYMENT_PROVIDERS.get('MERCADOPAGO', {})

    def _validate_config(self) -> None:
        """Validate Mercado Pago configuration"""
        access_token = self.config.get('ACCESS_TOKEN')
        if not access_token or access_token == PLACEHOLDER_TOKEN:
            raise PaymentProviderConfigError("Mercado Pago ACCESS_TOKEN is required but not configured")

    def _unwrap(self, result: Dict[str, Any], action: str, error_class) -> Dict[str, Any]:
        """
        Turn an SDK result ({'status': ..., 'response': ...}) into the response
        body, raising on non-2xx answers
        """
        status_code = result.get('status') if isinstance(result, dict) else None
        response = result.get('response', {}) if isinstance(result, dict) else {}

        if status_code is not None and 200 <= status_code < 300:
            return response

        message = _gateway_message(response)
        self.log_provider_interaction(action, {
            'status_code': status_code,
            'message': message,
        }, success=False)

        if status_code is None or status_code >= 500:
            raise GatewayUnavailableError(
                f"Mercado Pago {action} failed with status {status_code}",
                status_code=status_code,
                gateway_message=message,
            )
        raise error_class(
            f"Mercado Pago {action} rejected with status {status_code}: {message}",
            status_code=status_code,
            gateway_message=message,
        )

    @retry_on_gateway_failure()
    def create_preference(
        self,
        item: Dict[str, Any],
        payer_email: str,
        external_reference: str,
        notification_url: str,
    ) -> Dict[str, Any]:
        """Create a Mercado Pago checkout preference"""
        if not self.validate_currency_support(item.get('currency_id', '')):
            raise PaymentCreateError(f"Currency {item.get('currency_id')} not supported by Mercado Pago")

        preference_data = {
            'items': [dict(item, unit_price=float(item['unit_price']))],
            'payer': {
                'email': payer_email,
            },
            'external_reference': external_reference,
            'notification_url': notification_url,
        }

        result = self.sdk.preference().create(preference_data)
        preference = self._unwrap(result, 'create_preference', PaymentCreateError)

        self.log_provider_interaction('create_preference', {
            'preference_id': preference.get('id'),
            'external_reference': external_reference,
        })

        return {
            'preference_id': preference.get('id'),
            'provider_data': preference,
        }

    @retry_on_gateway_failure()
    def create_pix_payment(
        self,
        amount: Decimal,
        description: str,
        payer_email: str,
        external_reference: str,
        notification_url: str,
        idempotency_key: str,
    ) -> Dict[str, Any]:
        """Create a PIX charge; every retry sends the same idempotency key"""
        if not self.validate_amount_limits(amount, 'BRL'):
            raise PaymentCreateError(f"Amount {amount} BRL is invalid")

        payment_data = {
            'transaction_amount': float(amount),
            'description': description,
            'payment_method_id': 'pix',
            'payer': {
                'email': payer_email,
            },
            'external_reference': external_reference,
            'notification_url': notification_url,
        }
        request_options = RequestOptions(custom_headers={'x-idempotency-key': idempotency_key})

        result = self.sdk.payment().create(payment_data, request_options)
        payment = self._unwrap(result, 'create_pix_payment', PaymentCreateError)

        transaction_data = (payment.get('point_of_interaction') or {}).get('transaction_data') or {}

        self.log_provider_interaction('create_pix_payment', {
            'payment_id': payment.get('id'),
            'status': payment.get('status'),
            'external_reference': external_reference,
        })

        return {
            'payment_id': payment.get('id'),
            'status': payment.get('status'),
            'qr_code': transaction_data.get('qr_code'),
            'qr_code_base64': transaction_data.get('qr_code_base64'),
            'provider_data': payment,
        }

    @retry_on_gateway_failure()
    def get_payment(self, payment_id: str) -> Dict[str, Any]:
        """Read the authoritative payment record"""
        result = self.sdk.payment().get(payment_id)
        payment = self._unwrap(result, 'get_payment', PaymentFetchError)

        amount = payment.get('transaction_amount')
        try:
            amount = Decimal(str(amount)) if amount is not None else None
            if amount is not None and not amount.is_finite():
                raise InvalidOperation(amount)
        except InvalidOperation:
            raise PaymentFetchError(
                f"Payment {payment_id} has an invalid transaction amount: {amount!r}",
                status_code=result.get('status'),
            )

        self.log_provider_interaction('get_payment', {
            'payment_id': payment.get('id', payment_id),
            'status': payment.get('status'),
        })

        return {
            'payment_id': str(payment.get('id', payment_id)),
            'status': payment.get('status'),
            'status_detail': payment.get('status_detail'),
            'external_reference': payment.get('external_reference'),
            'transaction_amount': amount,
            'payment_method': self.get_payment_method(payment),
            'provider_data': payment,
        }

    @staticmethod
    def get_payment_method(payment: Dict[str, Any]) -> str:
        """'pix' for instant transfers, otherwise the payment type (credit_card, ...)"""
        method_id = payment.get('payment_method_id') or ''
        if method_id == 'pix':
            return 'pix'
        return payment.get('payment_type_id') or method_id
