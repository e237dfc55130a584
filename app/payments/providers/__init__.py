from typing import Dict, Type, List
from django.conf import settings
import logging

from .base_provider import BasePaymentProvider, PaymentProviderConfigError
from .mercadopago_provider import MercadoPagoPaymentProvider

logger = logging.getLogger(__name__)


class PaymentProviderFactory:
    """
    Factory class for creating payment provider instances
    Manages provider registration and instantiation
    """

    # Registry of available providers
    _providers: Dict[str, Type[BasePaymentProvider]] = {
        'mercadopago': MercadoPagoPaymentProvider,
    }

    # Process-level cache of provider instances
    _instances: Dict[str, BasePaymentProvider] = {}

    @classmethod
    def register_provider(cls, name: str, provider_class: Type[BasePaymentProvider]) -> None:
        """
        Register a new payment provider

        Args:
            name: Provider name (e.g., 'mercadopago')
            provider_class: Provider class that extends BasePaymentProvider
        """
        if not issubclass(provider_class, BasePaymentProvider):
            raise ValueError("Provider class must extend BasePaymentProvider")

        cls._providers[name.lower()] = provider_class

        # Clear cached instance if it exists
        cls._instances.pop(name.lower(), None)

        logger.info(f"Registered payment provider: {name}")

    @classmethod
    def get_provider(cls, name: str) -> BasePaymentProvider:
        """
        Get payment provider instance by name

        Raises:
            PaymentProviderConfigError: If provider not found or misconfigured
        """
        name = name.lower()

        if name in cls._instances:
            return cls._instances[name]

        if name not in cls._providers:
            available = ', '.join(cls._providers.keys())
            raise PaymentProviderConfigError(
                f"Payment provider '{name}' not found. Available providers: {available}"
            )

        try:
            instance = cls._providers[name]()
        except PaymentProviderConfigError:
            logger.error(f"Payment provider '{name}' is misconfigured")
            raise
        except Exception as e:
            logger.error(f"Failed to create payment provider '{name}': {str(e)}")
            raise PaymentProviderConfigError(f"Failed to initialize payment provider '{name}': {str(e)}")

        if not instance.is_enabled():
            raise PaymentProviderConfigError(f"Payment provider '{name}' is disabled")

        cls._instances[name] = instance
        logger.info(f"Created payment provider instance: {name}")
        return instance

    @classmethod
    def get_provider_names(cls) -> List[str]:
        return list(cls._providers.keys())

    @classmethod
    def get_default_provider(cls) -> BasePaymentProvider:
        """Provider named by PAYMENT_SETTINGS['DEFAULT_PROVIDER']"""
        name = settings.PAYMENT_SETTINGS.get('DEFAULT_PROVIDER', 'mercadopago')
        return cls.get_provider(name)

    @classmethod
    def validate_all_providers(cls) -> Dict[str, bool]:
        """
        Validate configuration for all registered providers

        Returns:
            Dict mapping provider names to validation status
        """
        validation_results = {}

        for name in cls._providers.keys():
            try:
                cls.get_provider(name)
                validation_results[name] = True
            except PaymentProviderConfigError as e:
                logger.warning(f"Provider '{name}' failed validation: {str(e)}")
                validation_results[name] = False

        return validation_results

    @classmethod
    def clear_cache(cls) -> None:
        """Clear all cached provider instances"""
        cls._instances.clear()
        logger.info("Cleared payment provider cache")


def get_payment_provider(name: str) -> BasePaymentProvider:
    """Get payment provider by name"""
    return PaymentProviderFactory.get_provider(name)


def get_default_payment_provider() -> BasePaymentProvider:
    """Get default payment provider"""
    return PaymentProviderFactory.get_default_provider()
