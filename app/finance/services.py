# finance/services.py
from django.db import transaction
from django.db.models import Sum
from django.utils import timezone
from decimal import Decimal
from typing import Dict, Any, List
import logging

from appointments.models import TherapySession
from users.models import User
from .earnings import split_earnings, to_cents
from .models import Payout

logger = logging.getLogger(__name__)


class PayoutError(Exception):
    """Base exception for payout errors"""
    pass


class InsufficientBalanceError(PayoutError):
    """No balance available to withdraw"""
    pass


class PayoutStateError(PayoutError):
    """Payout has already been settled"""
    pass


class BalanceService:
    """
    Earnings and available balance of a psychologist
    """

    @staticmethod
    def get_completed_sessions(psychologist: User):
        return TherapySession.objects.filter(
            psychologist=psychologist,
            status=TherapySession.STATUS_COMPLETED
        )

    @staticmethod
    def get_balance(psychologist: User) -> Dict[str, Decimal]:
        """
        Revenue from completed sessions, the psychologist's share of it,
        payouts already committed and the balance left to withdraw
        """
        rates = BalanceService.get_completed_sessions(psychologist).values_list('rate', flat=True)

        total_revenue = Decimal('0.00')
        total_earnings = Decimal('0.00')
        for rate in rates:
            split = split_earnings(rate)
            total_revenue += to_cents(rate)
            total_earnings += split.psychologist_share

        committed = Payout.objects.filter(
            psychologist=psychologist,
            status__in=Payout.COMMITTED_STATUSES
        ).aggregate(total=Sum('amount'))['total'] or Decimal('0.00')

        balance = total_earnings - to_cents(committed)
        if balance < Decimal('0.00'):
            balance = Decimal('0.00')

        return {
            'total_revenue': total_revenue,
            'total_earnings': total_earnings,
            'total_committed': to_cents(committed),
            'balance': balance,
        }


class PayoutService:
    """
    Payout requests and their settlement
    """

    @staticmethod
    def get_payouts_for_user(user: User):
        queryset = Payout.objects.select_related('psychologist').order_by('-requested_at')
        if user.is_admin or user.is_staff:
            return queryset
        return queryset.filter(psychologist=user)

    @staticmethod
    def request_payout(psychologist: User) -> Payout:
        """
        Withdraw the whole available balance.
        The psychologist's row is locked so concurrent requests are serialized.
        """
        with transaction.atomic():
            locked = User.objects.select_for_update().get(pk=psychologist.pk)
            balance = BalanceService.get_balance(locked)['balance']

            if balance <= Decimal('0.00'):
                raise InsufficientBalanceError("No balance available for withdrawal")

            payout = Payout.objects.create(
                psychologist=locked,
                psychologist_name=locked.full_name,
                amount=balance,
                status=Payout.STATUS_PROCESSING,
            )

        logger.info(f"Payout {payout.payout_id} of {payout.amount} requested by {psychologist.email}")
        return payout

    @staticmethod
    def _settle(payout: Payout, new_status: str) -> Payout:
        with transaction.atomic():
            locked = Payout.objects.select_for_update().get(pk=payout.pk)
            if locked.status != Payout.STATUS_PROCESSING:
                raise PayoutStateError(f"Payout {locked.payout_id} is already {locked.status}")

            locked.status = new_status
            locked.processed_at = timezone.now()
            locked.save(update_fields=['status', 'processed_at'])

        logger.info(f"Payout {locked.payout_id} marked as {new_status}")
        return locked

    @staticmethod
    def approve_payout(payout: Payout) -> Payout:
        return PayoutService._settle(payout, Payout.STATUS_PAID)

    @staticmethod
    def reject_payout(payout: Payout) -> Payout:
        return PayoutService._settle(payout, Payout.STATUS_REJECTED)


class ReportService:
    """
    Platform-wide figures for the admin dashboard
    """

    LATEST_TRANSACTIONS = 5

    @staticmethod
    def session_transaction(session: TherapySession) -> Dict[str, Any]:
        split = split_earnings(session.rate)
        return {
            'session_id': session.session_id,
            'patient_name': session.patient_name,
            'psychologist_name': session.psychologist_name,
            'session_timestamp': session.session_timestamp,
            'created_at': session.created_at,
            'amount': to_cents(session.rate),
            'commission': split.platform_share,
            'psychologist_share': split.psychologist_share,
            'status': session.status,
            'payment_method': session.payment_method,
        }

    @staticmethod
    def get_transactions(limit: int = None) -> List[Dict[str, Any]]:
        """Every session with its amount and commission, newest first"""
        sessions = TherapySession.objects.order_by('-created_at')
        if limit:
            sessions = sessions[:limit]
        return [ReportService.session_transaction(session) for session in sessions]

    @staticmethod
    def get_summary() -> Dict[str, Any]:
        rates = TherapySession.objects.filter(
            status__in=TherapySession.REVENUE_STATUSES
        ).values_list('rate', flat=True)

        total_revenue = Decimal('0.00')
        platform_profit = Decimal('0.00')
        for rate in rates:
            total_revenue += to_cents(rate)
            platform_profit += split_earnings(rate).platform_share

        return {
            'total_revenue': total_revenue,
            'platform_profit': platform_profit,
            'active_users': User.objects.filter(is_active=True).exclude(user_type='Admin').count(),
            'total_sessions': TherapySession.objects.count(),
            'latest_transactions': ReportService.get_transactions(limit=ReportService.LATEST_TRANSACTIONS),
        }
