# payments/tests/test_views.py
from decimal import Decimal
from unittest.mock import patch, MagicMock
from django.db import DatabaseError
from django.test import override_settings
from rest_framework import status
from rest_framework.authtoken.models import Token
from rest_framework.test import APITestCase

from appointments.models import TherapySession
from appointments.repositories import SessionRepository
from core.timeutils import millis_to_datetime
from factories.users import PatientUserFactory, PsychologistUserFactory, AdminUserFactory
from factories.sessions import TherapySessionFactory
from payments.providers.base_provider import (
    PaymentProviderConfigError,
    PaymentCreateError,
    GatewayUnavailableError,
    PaymentFetchError,
)
from payments.references import build_reference, session_document_id

SESSION_MILLIS = 1700000000000


def mock_provider():
    provider = MagicMock()
    provider.get_webhook_endpoint_url.side_effect = lambda base: f"{base.rstrip('/')}/api/mp-webhook"
    return provider


@override_settings(PAYMENT_NOTIFICATION_BASE_URL='https://timeplus.example.com')
class PaymentInitiationViewTestCase(APITestCase):
    """
    Test cases for /api/create-payment and /api/create-pix-payment
    """

    def setUp(self):
        self.patient = PatientUserFactory(email='ana@example.com')
        self.psychologist = PsychologistUserFactory(full_name='Dra. Beatriz Lima')
        self.token = Token.objects.create(user=self.patient)
        self.client.credentials(HTTP_AUTHORIZATION=f'Token {self.token.key}')

        self.card_data = {
            'psychologistName': 'Dra. Beatriz Lima',
            'rate': 150,
            'psychologistId': str(self.psychologist.id),
            'sessionTimestampMillis': SESSION_MILLIS,
            'payerEmail': 'ana@example.com',
            'patientId': str(self.patient.id),
        }
        self.pix_data = {
            'rate': 150,
            'description': 'Sessão de terapia com Dra. Beatriz Lima',
            'psychologistId': str(self.psychologist.id),
            'sessionTimestampMillis': SESSION_MILLIS,
            'payerEmail': 'ana@example.com',
            'patientId': str(self.patient.id),
        }

    @patch('payments.views.get_payment_provider')
    def test_create_payment_success(self, mock_get_provider):
        provider = mock_provider()
        provider.create_preference.return_value = {'preference_id': 'PREF-1', 'provider_data': {}}
        mock_get_provider.return_value = provider

        response = self.client.post('/api/create-payment', self.card_data, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {'preferenceId': 'PREF-1'})
        kwargs = provider.create_preference.call_args.kwargs
        self.assertEqual(
            kwargs['external_reference'],
            f"sid_{self.psychologist.id}_{SESSION_MILLIS}_uid_{self.patient.id}"
        )

    @patch('payments.views.get_payment_provider')
    def test_create_pix_payment_success(self, mock_get_provider):
        provider = mock_provider()
        provider.create_pix_payment.return_value = {
            'payment_id': 987, 'status': 'pending', 'qr_code': 'PIXCODE', 'qr_code_base64': 'BASE64'
        }
        mock_get_provider.return_value = provider

        response = self.client.post('/api/create-pix-payment', self.pix_data, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {'paymentId': 987, 'qrCode': 'PIXCODE', 'qrCodeBase64': 'BASE64'})
        self.assertTrue(provider.create_pix_payment.call_args.kwargs['idempotency_key'])

    @patch('payments.views.get_payment_provider')
    def test_non_positive_rate_rejected_before_gateway(self, mock_get_provider):
        for rate in [0, -10]:
            with self.subTest(rate=rate):
                response = self.client.post(
                    '/api/create-pix-payment', dict(self.pix_data, rate=rate), format='json'
                )

                self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
                self.assertIn('message', response.data)

        mock_get_provider.assert_not_called()

    @patch('payments.views.get_payment_provider')
    def test_missing_fields_rejected(self, mock_get_provider):
        for field in ['psychologistName', 'psychologistId', 'sessionTimestampMillis', 'payerEmail', 'patientId']:
            with self.subTest(field=field):
                data = dict(self.card_data)
                data.pop(field)

                response = self.client.post('/api/create-payment', data, format='json')

                self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        mock_get_provider.assert_not_called()

    @patch('payments.views.get_payment_provider')
    def test_ambiguous_ids_rejected(self, mock_get_provider):
        response = self.client.post(
            '/api/create-payment', dict(self.card_data, psychologistId='psy_1'), format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        mock_get_provider.assert_not_called()

    @patch('payments.views.get_payment_provider')
    def test_unknown_opaque_psychologist_id_is_400(self, mock_get_provider):
        provider = mock_provider()
        mock_get_provider.return_value = provider

        response = self.client.post('/api/create-payment', dict(self.card_data, psychologistId='P1'), format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        provider.create_preference.assert_not_called()

    @patch('payments.views.get_payment_provider')
    def test_paying_for_another_patient_forbidden(self, mock_get_provider):
        other = PatientUserFactory()

        response = self.client.post(
            '/api/create-pix-payment', dict(self.pix_data, patientId=str(other.id)), format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        mock_get_provider.assert_not_called()

    @patch('payments.views.get_payment_provider')
    def test_admin_may_pay_on_behalf_of_patient(self, mock_get_provider):
        provider = mock_provider()
        provider.create_preference.return_value = {'preference_id': 'PREF-2', 'provider_data': {}}
        mock_get_provider.return_value = provider
        admin = AdminUserFactory()
        self.client.force_authenticate(user=admin)

        response = self.client.post('/api/create-payment', self.card_data, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_unauthenticated_rejected(self):
        self.client.credentials()

        response = self.client.post('/api/create-payment', self.card_data, format='json')

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    @patch('payments.views.get_payment_provider')
    def test_taken_slot_conflict(self, mock_get_provider):
        mock_get_provider.return_value = mock_provider()
        TherapySessionFactory(
            patient=PatientUserFactory(),
            psychologist=self.psychologist,
            session_timestamp=millis_to_datetime(SESSION_MILLIS),
        )

        response = self.client.post('/api/create-payment', self.card_data, format='json')

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        mock_get_provider.return_value.create_preference.assert_not_called()

    @patch('payments.views.get_payment_provider')
    def test_missing_access_token_is_500(self, mock_get_provider):
        mock_get_provider.side_effect = PaymentProviderConfigError("ACCESS_TOKEN is required")

        response = self.client.post('/api/create-payment', self.card_data, format='json')

        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertNotIn('ACCESS_TOKEN', str(response.data['message']))

    @override_settings(PAYMENT_NOTIFICATION_BASE_URL='')
    @patch('payments.views.get_payment_provider')
    def test_missing_notification_url_is_500(self, mock_get_provider):
        mock_get_provider.return_value = mock_provider()

        response = self.client.post('/api/create-pix-payment', self.pix_data, format='json')

        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        mock_get_provider.return_value.create_pix_payment.assert_not_called()

    @patch('payments.views.get_payment_provider')
    def test_gateway_rejection_is_502_with_gateway_message(self, mock_get_provider):
        provider = mock_provider()
        provider.create_preference.side_effect = PaymentCreateError(
            "rejected", status_code=400, gateway_message='payer.email must be a valid email'
        )
        mock_get_provider.return_value = provider

        response = self.client.post('/api/create-payment', self.card_data, format='json')

        self.assertEqual(response.status_code, status.HTTP_502_BAD_GATEWAY)
        self.assertEqual(response.data['message'], 'payer.email must be a valid email')

    @patch('payments.views.get_payment_provider')
    def test_gateway_unavailable_is_502(self, mock_get_provider):
        provider = mock_provider()
        provider.create_pix_payment.side_effect = GatewayUnavailableError("down", status_code=503)
        mock_get_provider.return_value = provider

        response = self.client.post('/api/create-pix-payment', self.pix_data, format='json')

        self.assertEqual(response.status_code, status.HTTP_502_BAD_GATEWAY)
        self.assertTrue(response.data['message'])


class MercadoPagoWebhookViewTestCase(APITestCase):
    """
    Test cases for /api/mp-webhook
    """

    def setUp(self):
        self.patient = PatientUserFactory(full_name='Ana Souza')
        self.psychologist = PsychologistUserFactory(full_name='Dra. Beatriz Lima')
        self.reference = build_reference(self.psychologist.id, SESSION_MILLIS, self.patient.id)
        self.session_id = session_document_id(self.psychologist.id, SESSION_MILLIS)
        self.notification = {'type': 'payment', 'data': {'id': 'PAY1'}}

    def _provider(self, payment_status='approved', reference=None, amount='150'):
        provider = MagicMock()
        provider.get_payment.return_value = {
            'payment_id': 'PAY1',
            'status': payment_status,
            'status_detail': '',
            'external_reference': reference if reference is not None else self.reference,
            'transaction_amount': Decimal(amount),
            'payment_method': 'pix',
            'provider_data': {},
        }
        return provider

    @patch('payments.views.get_payment_provider')
    def test_approved_payment_creates_session(self, mock_get_provider):
        mock_get_provider.return_value = self._provider()

        response = self.client.post('/api/mp-webhook', self.notification, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['success'])
        session = TherapySession.objects.get(session_id=self.session_id)
        self.assertEqual(session.rate, Decimal('150.00'))
        self.assertEqual(session.status, 'Pago')
        self.assertEqual(session.patient_id, self.patient.id)
        mock_get_provider.return_value.get_payment.assert_called_once_with('PAY1')

    @patch('payments.views.get_payment_provider')
    def test_duplicate_delivery_is_idempotent(self, mock_get_provider):
        mock_get_provider.return_value = self._provider()

        first = self.client.post('/api/mp-webhook', self.notification, format='json')
        second = self.client.post('/api/mp-webhook', self.notification, format='json')

        self.assertEqual(first.status_code, status.HTTP_200_OK)
        self.assertEqual(second.status_code, status.HTTP_200_OK)
        self.assertEqual(second.data['message'], 'Session already processed.')
        self.assertEqual(TherapySession.objects.filter(session_id=self.session_id).count(), 1)

    @patch('payments.views.get_payment_provider')
    def test_body_status_is_not_trusted(self, mock_get_provider):
        mock_get_provider.return_value = self._provider(payment_status='pending')
        notification = dict(self.notification, status='approved')

        response = self.client.post('/api/mp-webhook', notification, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(TherapySession.objects.exists())

    @patch('payments.views.get_payment_provider')
    def test_non_payment_notifications_acknowledged(self, mock_get_provider):
        response = self.client.post(
            '/api/mp-webhook', {'type': 'merchant_order', 'data': {'id': 'MO1'}}, format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {'success': True, 'received': True})
        mock_get_provider.assert_not_called()

    @patch('payments.views.get_payment_provider')
    def test_payment_notification_without_id(self, mock_get_provider):
        response = self.client.post('/api/mp-webhook', {'type': 'payment', 'data': {}}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        mock_get_provider.assert_not_called()

    @patch('payments.views.get_payment_provider')
    def test_query_string_fallback(self, mock_get_provider):
        mock_get_provider.return_value = self._provider()

        response = self.client.post('/api/mp-webhook?type=payment&data.id=PAY1', {}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(TherapySession.objects.filter(session_id=self.session_id).exists())

    @patch('payments.views.get_payment_provider')
    def test_malformed_reference_is_400(self, mock_get_provider):
        mock_get_provider.return_value = self._provider(reference='sid_broken')

        response = self.client.post('/api/mp-webhook', self.notification, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(TherapySession.objects.exists())

    @patch('payments.views.get_payment_provider')
    def test_missing_user_is_500(self, mock_get_provider):
        reference = build_reference(self.psychologist.id, SESSION_MILLIS, 'f2b7c5de-7a38-4c39-8f11-93b1a1d0e4c2')
        mock_get_provider.return_value = self._provider(reference=reference)

        response = self.client.post('/api/mp-webhook', self.notification, format='json')

        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertFalse(TherapySession.objects.exists())

    @patch('payments.views.get_payment_provider')
    def test_opaque_unknown_ids_are_500(self, mock_get_provider):
        mock_get_provider.return_value = self._provider(reference='sid_P1_1700000000000_uid_U1')

        response = self.client.post('/api/mp-webhook', self.notification, format='json')

        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.data, {'error': 'Failed to process payment update.'})

    @patch.object(SessionRepository, 'exists', side_effect=DatabaseError('db down'))
    @patch('payments.views.get_payment_provider')
    def test_session_lookup_failure_is_json_500(self, mock_get_provider, mock_exists):
        mock_get_provider.return_value = self._provider()

        response = self.client.post('/api/mp-webhook', self.notification, format='json')

        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.data, {'error': 'Failed to process payment update.'})
        mock_exists.assert_called_once_with(self.session_id)

    @patch('payments.views.get_payment_provider')
    def test_gateway_fetch_failure_is_500(self, mock_get_provider):
        provider = MagicMock()
        provider.get_payment.side_effect = PaymentFetchError("not found", status_code=404)
        mock_get_provider.return_value = provider

        response = self.client.post('/api/mp-webhook', self.notification, format='json')

        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)

    @patch('payments.views.get_payment_provider')
    def test_missing_access_token_is_500(self, mock_get_provider):
        mock_get_provider.side_effect = PaymentProviderConfigError("ACCESS_TOKEN is required")

        response = self.client.post('/api/mp-webhook', self.notification, format='json')

        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
