# finance/serializers.py
from rest_framework import serializers

from .models import Payout


class PayoutSerializer(serializers.ModelSerializer):
    """
    Serializer for Payout model
    """
    psychologist_id = serializers.UUIDField(source='psychologist.id', read_only=True)

    class Meta:
        model = Payout
        fields = [
            'payout_id', 'psychologist_id', 'psychologist_name', 'amount',
            'status', 'requested_at', 'processed_at'
        ]
        read_only_fields = fields


class BalanceSerializer(serializers.Serializer):
    total_revenue = serializers.DecimalField(max_digits=12, decimal_places=2)
    total_earnings = serializers.DecimalField(max_digits=12, decimal_places=2)
    total_committed = serializers.DecimalField(max_digits=12, decimal_places=2)
    balance = serializers.DecimalField(max_digits=12, decimal_places=2)


class TransactionSerializer(serializers.Serializer):
    session_id = serializers.CharField()
    patient_name = serializers.CharField()
    psychologist_name = serializers.CharField()
    session_timestamp = serializers.DateTimeField()
    created_at = serializers.DateTimeField()
    amount = serializers.DecimalField(max_digits=10, decimal_places=2)
    commission = serializers.DecimalField(max_digits=10, decimal_places=2)
    psychologist_share = serializers.DecimalField(max_digits=10, decimal_places=2)
    status = serializers.CharField()
    payment_method = serializers.CharField(allow_blank=True)


class ReportSummarySerializer(serializers.Serializer):
    total_revenue = serializers.DecimalField(max_digits=14, decimal_places=2)
    platform_profit = serializers.DecimalField(max_digits=14, decimal_places=2)
    active_users = serializers.IntegerField()
    total_sessions = serializers.IntegerField()
    latest_transactions = TransactionSerializer(many=True)
