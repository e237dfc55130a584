# payments/views.py
from rest_framework import status, permissions
from rest_framework.response import Response
from rest_framework.views import APIView
from django.utils.translation import gettext_lazy as _
from django.utils.decorators import method_decorator
from django.views.decorators.csrf import csrf_exempt
from drf_spectacular.utils import extend_schema
import logging

from appointments.repositories import SessionRepository
from .providers import get_payment_provider, PaymentProviderConfigError
from .serializers import (
    CreatePaymentSerializer,
    CreatePixPaymentSerializer,
    PaymentNotificationSerializer,
    first_error_message,
)
from .services import (
    PaymentInitiationService,
    PaymentConfirmationService,
    PaymentServiceError,
    PaymentConfigurationError,
    PaymentValidationError,
    PaymentPermissionError,
    SlotUnavailableError,
    PaymentGatewayError,
    InvalidReferenceError,
)

logger = logging.getLogger(__name__)

PROVIDER_NAME = 'mercadopago'

CONFIGURATION_ERROR_MESSAGE = _(
    "A integração de pagamento não está configurada corretamente no servidor. "
    "Por favor, contate o suporte."
)


class PaymentInitiationView(APIView):
    """
    Base view for payment initiation endpoints
    """
    permission_classes = [permissions.IsAuthenticated]
    serializer_class = None
    default_gateway_message = _("Falha ao criar o pagamento.")

    def initiate(self, service: PaymentInitiationService, data: dict) -> dict:
        raise NotImplementedError

    def post(self, request):
        serializer = self.serializer_class(data=request.data)
        if not serializer.is_valid():
            return Response({
                'message': first_error_message(serializer.errors),
                'errors': serializer.errors
            }, status=status.HTTP_400_BAD_REQUEST)

        data = serializer.validated_data

        try:
            PaymentInitiationService.check_requester(request.user, data['patientId'])
            provider = get_payment_provider(PROVIDER_NAME)
            result = self.initiate(PaymentInitiationService(provider, SessionRepository()), data)
            return Response(result, status=status.HTTP_200_OK)

        except PaymentPermissionError as e:
            return Response({'message': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except PaymentValidationError as e:
            return Response({'message': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        except SlotUnavailableError:
            return Response({
                'message': _('Este horário já foi reservado.')
            }, status=status.HTTP_409_CONFLICT)
        except (PaymentProviderConfigError, PaymentConfigurationError) as e:
            logger.error(f"Payment gateway is not configured: {str(e)}")
            return Response({
                'message': CONFIGURATION_ERROR_MESSAGE
            }, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
        except PaymentGatewayError as e:
            return Response({
                'message': e.gateway_message or self.default_gateway_message
            }, status=status.HTTP_502_BAD_GATEWAY)


@extend_schema(
    request=CreatePaymentSerializer,
    responses={
        200: {
            'description': 'Checkout preference created',
            'example': {'preferenceId': '123456789-abcd-ef01'}
        },
        400: {'description': 'Invalid booking data'},
        403: {'description': 'Paying for another patient'},
        409: {'description': 'Slot already booked'},
        500: {'description': 'Payment gateway not configured'},
        502: {'description': 'Payment gateway failure'}
    },
    description="Create a Mercado Pago checkout preference for a session",
    tags=['Payments']
)
class CreatePaymentView(PaymentInitiationView):
    """
    POST /api/create-payment
    """
    serializer_class = CreatePaymentSerializer
    default_gateway_message = _("Falha ao criar a preferência de pagamento.")

    def initiate(self, service, data):
        return service.create_card_payment(
            psychologist_name=data['psychologistName'],
            rate=data['rate'],
            psychologist_id=data['psychologistId'],
            session_timestamp_millis=data['sessionTimestampMillis'],
            payer_email=data['payerEmail'],
            patient_id=data['patientId'],
        )


@extend_schema(
    request=CreatePixPaymentSerializer,
    responses={
        200: {
            'description': 'PIX charge created',
            'example': {
                'paymentId': 1234567890,
                'qrCode': '00020126580014br.gov.bcb.pix...',
                'qrCodeBase64': 'iVBORw0KGgoAAAANSUhEUgAA...'
            }
        },
        400: {'description': 'Invalid booking data'},
        403: {'description': 'Paying for another patient'},
        409: {'description': 'Slot already booked'},
        500: {'description': 'Payment gateway not configured'},
        502: {'description': 'Payment gateway failure'}
    },
    description="Create a Mercado Pago PIX charge for a session",
    tags=['Payments']
)
class CreatePixPaymentView(PaymentInitiationView):
    """
    POST /api/create-pix-payment
    """
    serializer_class = CreatePixPaymentSerializer
    default_gateway_message = _("Falha ao criar o pagamento PIX.")

    def initiate(self, service, data):
        return service.create_pix_payment(
            rate=data['rate'],
            description=data['description'],
            psychologist_id=data['psychologistId'],
            session_timestamp_millis=data['sessionTimestampMillis'],
            payer_email=data['payerEmail'],
            patient_id=data['patientId'],
        )


@method_decorator(csrf_exempt, name='dispatch')
class MercadoPagoWebhookView(APIView):
    """
    Mercado Pago notification endpoint
    """
    permission_classes = [permissions.AllowAny]
    authentication_classes = []  # No authentication for webhooks

    @staticmethod
    def get_notification(request):
        """Notification type and payment id from the body, falling back to the query string"""
        serializer = PaymentNotificationSerializer(data=request.data if isinstance(request.data, dict) else {})
        body = serializer.validated_data if serializer.is_valid() else {}

        notification_type = body.get('type') or request.query_params.get('type') or request.query_params.get('topic')
        payment_id = (body.get('data') or {}).get('id')
        if not payment_id:
            payment_id = request.query_params.get('data.id') or request.query_params.get('id')
        return notification_type, str(payment_id) if payment_id else None

    @extend_schema(
        request=PaymentNotificationSerializer,
        responses={
            200: {
                'description': 'Notification processed',
                'example': {'success': True, 'received': True}
            },
            400: {'description': 'Missing payment id or invalid external reference'},
            500: {'description': 'Processing failed, the gateway will retry'}
        },
        description="Handle Mercado Pago payment notifications",
        tags=['Webhooks']
    )
    def post(self, request):
        """
        Handle Mercado Pago notifications
        POST /api/mp-webhook
        """
        notification_type, payment_id = self.get_notification(request)

        # Acknowledge other types of notifications without processing
        if notification_type != 'payment':
            return Response({'success': True, 'received': True}, status=status.HTTP_200_OK)

        if not payment_id:
            return Response({'error': 'Missing payment id.'}, status=status.HTTP_400_BAD_REQUEST)

        try:
            provider = get_payment_provider(PROVIDER_NAME)
        except PaymentProviderConfigError as e:
            logger.error(f"Mercado Pago is not configured for webhook: {str(e)}")
            return Response({
                'error': 'Internal server configuration error.'
            }, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

        service = PaymentConfirmationService(provider=provider, repository=SessionRepository())

        try:
            result = service.process_payment_notification(payment_id)
        except InvalidReferenceError:
            return Response({
                'error': 'Invalid external reference format.'
            }, status=status.HTTP_400_BAD_REQUEST)
        except PaymentServiceError as e:
            logger.error(f"Failed to process payment {payment_id}: {str(e)}")
            return Response({
                'error': 'Failed to process payment update.'
            }, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

        if result['session_id'] and not result['created']:
            return Response({'success': True, 'message': result['message']}, status=status.HTTP_200_OK)

        return Response({'success': True, 'received': True}, status=status.HTTP_200_OK)
