from django.core.management.base import BaseCommand
from django.conf import settings

from payments.providers import PaymentProviderFactory, PaymentProviderConfigError


class Command(BaseCommand):
    help = 'Validate Mercado Pago payment configuration'

    def handle(self, *args, **options):
        self.stdout.write("Validating payment configuration...")

        if 'payments' not in settings.INSTALLED_APPS:
            self.stdout.write(
                self.style.ERROR("❌ Payments app not in INSTALLED_APPS")
            )
            return

        self.stdout.write(
            self.style.SUCCESS("✅ Payments app properly installed")
        )

        if not hasattr(settings, 'PAYMENT_PROVIDERS'):
            self.stdout.write(
                self.style.ERROR("❌ PAYMENT_PROVIDERS not configured")
            )
            return

        mp_config = settings.PAYMENT_PROVIDERS.get('MERCADOPAGO', {})
        if not mp_config.get('ENABLED'):
            self.stdout.write(
                self.style.WARNING("⚠️  Mercado Pago is disabled")
            )
        else:
            PaymentProviderFactory.clear_cache()
            try:
                provider = PaymentProviderFactory.get_provider('mercadopago')
                self.stdout.write(
                    self.style.SUCCESS(f"✅ Mercado Pago configuration looks good ({provider.provider_name})")
                )
            except PaymentProviderConfigError as e:
                self.stdout.write(
                    self.style.ERROR(f"❌ Mercado Pago misconfigured: {str(e)}")
                )

        base_url = getattr(settings, 'PAYMENT_NOTIFICATION_BASE_URL', '')
        if base_url:
            endpoint = mp_config.get('WEBHOOK_ENDPOINT', '/api/mp-webhook')
            self.stdout.write(
                self.style.SUCCESS(f"✅ Notification URL: {base_url.rstrip('/')}{endpoint}")
            )
        else:
            self.stdout.write(
                self.style.ERROR("❌ PAYMENT_NOTIFICATION_BASE_URL not configured")
            )

        payment_settings = getattr(settings, 'PAYMENT_SETTINGS', {})
        self.stdout.write(f"   Currency: {payment_settings.get('DEFAULT_CURRENCY', 'BRL')}")
        self.stdout.write(f"   Gateway retries: {payment_settings.get('GATEWAY_MAX_RETRIES', 3)}")
        self.stdout.write(f"   Platform commission: {getattr(settings, 'PLATFORM_COMMISSION_RATE', 'not set')}")

        self.stdout.write(
            self.style.SUCCESS("Payment configuration validation complete!")
        )
