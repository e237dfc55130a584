# payments/apps.py
from django.apps import AppConfig
import logging

logger = logging.getLogger(__name__)


class PaymentsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'payments'
    verbose_name = 'Payments'

    def ready(self):
        """
        Initialize payments app when Django starts
        """
        self._validate_payment_configuration()

    def _validate_payment_configuration(self):
        """Log the payment gateway configuration status on startup"""
        from django.conf import settings
        from .providers import PaymentProviderFactory

        if not hasattr(settings, 'PAYMENT_PROVIDERS'):
            logger.warning("PAYMENT_PROVIDERS not configured in settings")
            return

        validation_results = PaymentProviderFactory.validate_all_providers()
        enabled_count = sum(1 for valid in validation_results.values() if valid)

        logger.info(f"Payment providers validation: {enabled_count}/{len(validation_results)} enabled")

        if enabled_count == 0:
            logger.error("No payment providers are enabled, payment endpoints will answer 500")

        if not getattr(settings, 'PAYMENT_NOTIFICATION_BASE_URL', ''):
            logger.warning("PAYMENT_NOTIFICATION_BASE_URL is not set, payment initiation will fail")
