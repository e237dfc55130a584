# payments/urls.py
from django.urls import path

from .views import CreatePaymentView, CreatePixPaymentView, MercadoPagoWebhookView

app_name = 'payments'

urlpatterns = [
    path('create-payment', CreatePaymentView.as_view(), name='create-payment'),
    path('create-pix-payment', CreatePixPaymentView.as_view(), name='create-pix-payment'),
    path('mp-webhook', MercadoPagoWebhookView.as_view(), name='mp-webhook'),
]

# Available endpoints:
# POST /api/create-payment          - Card checkout preference
# POST /api/create-pix-payment      - PIX charge with QR code
# POST /api/mp-webhook              - Mercado Pago notifications
