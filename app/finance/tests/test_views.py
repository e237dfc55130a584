# finance/tests/test_views.py
from decimal import Decimal
from rest_framework import status
from rest_framework.test import APITestCase

from factories.finance import PayoutFactory
from factories.sessions import CompletedSessionFactory
from factories.users import PatientUserFactory, PsychologistUserFactory, AdminUserFactory
from finance.models import Payout


class PayoutViewSetTestCase(APITestCase):
    """
    Test cases for /api/finance/payouts/
    """

    def setUp(self):
        self.psychologist = PsychologistUserFactory()
        self.admin = AdminUserFactory()
        self.patient = PatientUserFactory()
        CompletedSessionFactory(psychologist=self.psychologist, patient=self.patient, rate=Decimal('150.00'))

    def test_psychologist_list_includes_balance(self):
        PayoutFactory(psychologist=self.psychologist, amount=Decimal('27.50'), status=Payout.STATUS_PAID)
        PayoutFactory()
        self.client.force_authenticate(user=self.psychologist)

        response = self.client.get('/api/finance/payouts/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['payouts']), 1)
        self.assertEqual(Decimal(response.data['balance']['balance']), Decimal('100.00'))

    def test_admin_list_shows_all_payouts(self):
        PayoutFactory(psychologist=self.psychologist)
        PayoutFactory()
        self.client.force_authenticate(user=self.admin)

        response = self.client.get('/api/finance/payouts/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 2)

    def test_patient_cannot_access_payouts(self):
        self.client.force_authenticate(user=self.patient)

        response = self.client.get('/api/finance/payouts/')

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_balance(self):
        self.client.force_authenticate(user=self.psychologist)

        response = self.client.get('/api/finance/payouts/balance/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(Decimal(response.data['total_revenue']), Decimal('150.00'))
        self.assertEqual(Decimal(response.data['total_earnings']), Decimal('127.50'))
        self.assertEqual(Decimal(response.data['balance']), Decimal('127.50'))

    def test_request_payout(self):
        self.client.force_authenticate(user=self.psychologist)

        response = self.client.post('/api/finance/payouts/request-payout/')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(Decimal(response.data['amount']), Decimal('127.50'))
        self.assertEqual(response.data['status'], 'Processando')

        second = self.client.post('/api/finance/payouts/request-payout/')
        self.assertEqual(second.status_code, status.HTTP_400_BAD_REQUEST)

    def test_admin_cannot_request_payout(self):
        self.client.force_authenticate(user=self.admin)

        response = self.client.post('/api/finance/payouts/request-payout/')

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_admin_approves_and_rejects(self):
        to_approve = PayoutFactory(psychologist=self.psychologist)
        to_reject = PayoutFactory(psychologist=self.psychologist)
        self.client.force_authenticate(user=self.admin)

        approved = self.client.post(f'/api/finance/payouts/{to_approve.payout_id}/approve/')
        rejected = self.client.post(f'/api/finance/payouts/{to_reject.payout_id}/reject/')

        self.assertEqual(approved.status_code, status.HTTP_200_OK)
        self.assertEqual(approved.data['status'], 'Pago')
        self.assertEqual(rejected.status_code, status.HTTP_200_OK)
        self.assertEqual(rejected.data['status'], 'Rejeitado')

    def test_settled_payout_cannot_change(self):
        payout = PayoutFactory(psychologist=self.psychologist, status=Payout.STATUS_REJECTED)
        self.client.force_authenticate(user=self.admin)

        response = self.client.post(f'/api/finance/payouts/{payout.payout_id}/approve/')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        payout.refresh_from_db()
        self.assertEqual(payout.status, Payout.STATUS_REJECTED)

    def test_psychologist_cannot_approve(self):
        payout = PayoutFactory(psychologist=self.psychologist)
        self.client.force_authenticate(user=self.psychologist)

        response = self.client.post(f'/api/finance/payouts/{payout.payout_id}/approve/')

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class ReportViewSetTestCase(APITestCase):
    """
    Test cases for /api/finance/reports/
    """

    def setUp(self):
        self.admin = AdminUserFactory()
        CompletedSessionFactory(rate=Decimal('200.00'))

    def test_summary(self):
        self.client.force_authenticate(user=self.admin)

        response = self.client.get('/api/finance/reports/summary/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(Decimal(response.data['total_revenue']), Decimal('200.00'))
        self.assertEqual(Decimal(response.data['platform_profit']), Decimal('30.00'))
        self.assertEqual(response.data['total_sessions'], 1)
        self.assertEqual(len(response.data['latest_transactions']), 1)

    def test_transactions(self):
        self.client.force_authenticate(user=self.admin)

        response = self.client.get('/api/finance/reports/transactions/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(Decimal(response.data[0]['commission']), Decimal('30.00'))

    def test_reports_are_admin_only(self):
        self.client.force_authenticate(user=PsychologistUserFactory())

        response = self.client.get('/api/finance/reports/summary/')

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
