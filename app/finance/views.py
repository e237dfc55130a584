# finance/views.py
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet
from rest_framework.mixins import ListModelMixin
from django.shortcuts import get_object_or_404
from django.utils.translation import gettext_lazy as _
from drf_spectacular.utils import extend_schema
import logging

from users.permissions import IsPlatformAdmin
from .models import Payout
from .permissions import IsPsychologist, IsPsychologistOrAdmin
from .serializers import (
    PayoutSerializer,
    BalanceSerializer,
    ReportSummarySerializer,
    TransactionSerializer,
)
from .services import (
    BalanceService,
    PayoutService,
    ReportService,
    InsufficientBalanceError,
    PayoutStateError,
)

logger = logging.getLogger(__name__)


@extend_schema(tags=['Finance'])
class PayoutViewSet(GenericViewSet, ListModelMixin):
    """
    ViewSet for psychologist payouts
    """
    serializer_class = PayoutSerializer
    permission_classes = [IsPsychologistOrAdmin]
    lookup_field = 'payout_id'

    def get_queryset(self):
        if getattr(self, 'swagger_fake_view', False):
            return Payout.objects.none()
        return PayoutService.get_payouts_for_user(self.request.user)

    def get_permissions(self):
        if self.action in ['balance', 'request_payout']:
            return [IsPsychologist()]
        if self.action in ['approve', 'reject']:
            return [IsPlatformAdmin()]
        return super().get_permissions()

    @extend_schema(
        description="Psychologists see their own payouts and balance, admins see all payouts",
        responses={200: PayoutSerializer(many=True)}
    )
    def list(self, request, *args, **kwargs):
        payouts = PayoutSerializer(self.get_queryset(), many=True).data
        if request.user.is_psychologist:
            return Response({
                'balance': BalanceSerializer(BalanceService.get_balance(request.user)).data,
                'payouts': payouts
            }, status=status.HTTP_200_OK)
        return Response(payouts, status=status.HTTP_200_OK)

    @extend_schema(
        description="Revenue from completed sessions, earnings after commission and available balance",
        responses={200: BalanceSerializer}
    )
    @action(detail=False, methods=['get'])
    def balance(self, request):
        """
        GET /api/finance/payouts/balance/
        """
        return Response(BalanceSerializer(BalanceService.get_balance(request.user)).data)

    @extend_schema(
        request=None,
        responses={
            201: PayoutSerializer,
            400: {'description': 'No balance available'}
        },
        description="Request withdrawal of the whole available balance"
    )
    @action(detail=False, methods=['post'], url_path='request-payout')
    def request_payout(self, request):
        """
        POST /api/finance/payouts/request-payout/
        """
        try:
            payout = PayoutService.request_payout(request.user)
        except InsufficientBalanceError:
            return Response({
                'error': _('No balance available for withdrawal')
            }, status=status.HTTP_400_BAD_REQUEST)

        return Response(PayoutSerializer(payout).data, status=status.HTTP_201_CREATED)

    def _settle(self, request, payout_id, settle):
        payout = get_object_or_404(Payout, payout_id=payout_id)
        try:
            payout = settle(payout)
        except PayoutStateError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(PayoutSerializer(payout).data, status=status.HTTP_200_OK)

    @extend_schema(
        request=None,
        responses={200: PayoutSerializer, 400: {'description': 'Payout already settled'}},
        description="Mark a processing payout as paid (Admin only)"
    )
    @action(detail=True, methods=['post'])
    def approve(self, request, payout_id=None):
        """
        POST /api/finance/payouts/{id}/approve/
        """
        return self._settle(request, payout_id, PayoutService.approve_payout)

    @extend_schema(
        request=None,
        responses={200: PayoutSerializer, 400: {'description': 'Payout already settled'}},
        description="Reject a processing payout (Admin only)"
    )
    @action(detail=True, methods=['post'])
    def reject(self, request, payout_id=None):
        """
        POST /api/finance/payouts/{id}/reject/
        """
        return self._settle(request, payout_id, PayoutService.reject_payout)


@extend_schema(tags=['Finance'])
class ReportViewSet(GenericViewSet):
    """
    Admin dashboard reports
    """
    permission_classes = [IsPlatformAdmin]

    @extend_schema(responses={200: ReportSummarySerializer})
    @action(detail=False, methods=['get'])
    def summary(self, request):
        """
        GET /api/finance/reports/summary/
        """
        return Response(ReportSummarySerializer(ReportService.get_summary()).data)

    @extend_schema(responses={200: TransactionSerializer(many=True)})
    @action(detail=False, methods=['get'])
    def transactions(self, request):
        """
        GET /api/finance/reports/transactions/
        """
        return Response(TransactionSerializer(ReportService.get_transactions(), many=True).data)
