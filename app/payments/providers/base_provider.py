from abc import ABC, abstractmethod
from typing import Dict, Any, List
from decimal import Decimal
from django.conf import settings
import logging

logger = logging.getLogger(__name__)


class PaymentProviderError(Exception):
    """Base exception for payment provider errors"""

    def __init__(self, message: str, status_code: int = None, gateway_message: str = None):
        super().__init__(message)
        self.status_code = status_code
        self.gateway_message = gateway_message


class PaymentProviderConfigError(PaymentProviderError):
    """Raised when provider configuration is invalid"""
    pass


class PaymentCreateError(PaymentProviderError):
    """Raised when a preference or charge cannot be created"""
    pass


class PaymentFetchError(PaymentProviderError):
    """Raised when the authoritative payment record cannot be read"""
    pass


class GatewayUnavailableError(PaymentProviderError):
    """Raised on transport failures and 5xx answers; these are retried"""
    pass


class BasePaymentProvider(ABC):
    """
    Abstract base class for payment providers
    Defines the interface that all payment providers must implement
    """

    def __init__(self):
        self.provider_name = self._get_provider_name()
        self.config = self._get_provider_config()
        self._validate_config()

    @abstractmethod
    def _get_provider_name(self) -> str:
        """Return the provider name (e.g., 'mercadopago')"""
        pass

    @abstractmethod
    def _get_provider_config(self) -> Dict[str, Any]:
        """Return provider-specific configuration from settings"""
        pass

    @abstractmethod
    def _validate_config(self) -> None:
        """Validate provider configuration, raise PaymentProviderConfigError if invalid"""
        pass

    @abstractmethod
    def create_preference(
        self,
        item: Dict[str, Any],
        payer_email: str,
        external_reference: str,
        notification_url: str,
    ) -> Dict[str, Any]:
        """
        Create a hosted checkout (card/redirect) for a single item

        Args:
            item: Item data with id, title, description, quantity, unit_price, currency_id
            payer_email: Email of the paying patient
            external_reference: Booking reference string
            notification_url: URL the gateway notifies on payment updates

        Returns:
            Dict containing:
                - preference_id: Provider's checkout preference ID
                - provider_data: Raw provider response data

        Raises:
            PaymentCreateError: If the preference cannot be created
        """
        pass

    @abstractmethod
    def create_pix_payment(
        self,
        amount: Decimal,
        description: str,
        payer_email: str,
        external_reference: str,
        notification_url: str,
        idempotency_key: str,
    ) -> Dict[str, Any]:
        """
        Create an instant-transfer (PIX) charge

        Args:
            amount: Charge amount in BRL
            description: Description shown to the payer
            payer_email: Email of the paying patient
            external_reference: Booking reference string
            notification_url: URL the gateway notifies on payment updates
            idempotency_key: Key sent with every attempt of this charge

        Returns:
            Dict containing:
                - payment_id: Provider's payment ID
                - status: Initial payment status
                - qr_code: Copy-and-paste PIX code
                - qr_code_base64: QR code image (base64 PNG)
                - provider_data: Raw provider response data

        Raises:
            PaymentCreateError: If the charge cannot be created
        """
        pass

    @abstractmethod
    def get_payment(self, payment_id: str) -> Dict[str, Any]:
        """
        Get the authoritative payment record from the provider

        Returns:
            Dict containing:
                - payment_id: Provider's payment ID
                - status: Current payment status ('approved', 'pending', ...)
                - status_detail: Provider's status detail
                - external_reference: Booking reference attached at creation
                - transaction_amount: Amount captured, as Decimal
                - payment_method: Method used ('pix', 'credit_card', ...)
                - provider_data: Raw provider response data

        Raises:
            PaymentFetchError: If status retrieval fails
        """
        pass

    def is_enabled(self) -> bool:
        """Check if provider is enabled"""
        return self.config.get('ENABLED', False)

    def get_supported_currencies(self) -> List[str]:
        """Get list of currencies supported by this provider"""
        return settings.PAYMENT_SETTINGS.get('SUPPORTED_CURRENCIES', ['BRL'])

    def get_webhook_endpoint_url(self, base_url: str) -> str:
        """Get full webhook endpoint URL for this provider"""
        endpoint = self.config.get('WEBHOOK_ENDPOINT', f'/api/webhooks/{self.provider_name}')
        return f"{base_url.rstrip('/')}{endpoint}"

    def validate_currency_support(self, currency: str) -> bool:
        """Check if currency is supported by this provider"""
        supported = self.get_supported_currencies()
        return currency.upper() in [c.upper() for c in supported]

    def validate_amount_limits(self, amount: Decimal, currency: str) -> bool:
        """
        Validate amount against provider limits
        Override in provider classes with specific limits
        """
        return amount > Decimal('0.00')

    def log_provider_interaction(self, action: str, data: Dict[str, Any], success: bool = True):
        """Log provider interactions for debugging and audit"""
        log_data = {
            'provider': self.provider_name,
            'action': action,
            'success': success,
            'data_keys': list(data.keys()) if isinstance(data, dict) else 'non-dict'
        }

        if success:
            logger.info(f"Payment provider interaction: {log_data}")
        else:
            logger.error(f"Payment provider interaction failed: {log_data}")
