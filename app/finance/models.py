# finance/models.py
import uuid
from decimal import Decimal
from django.db import models
from django.conf import settings
from django.core.validators import MinValueValidator
from django.utils.translation import gettext_lazy as _


class Payout(models.Model):
    """
    A psychologist's request to withdraw their available balance.
    Created as Processando and settled once by an admin.
    """

    STATUS_PROCESSING = 'Processando'
    STATUS_PAID = 'Pago'
    STATUS_REJECTED = 'Rejeitado'

    STATUS_CHOICES = [
        (STATUS_PROCESSING, _('Processing')),
        (STATUS_PAID, _('Paid')),
        (STATUS_REJECTED, _('Rejected')),
    ]

    # Payouts in these states count against the balance
    COMMITTED_STATUSES = [STATUS_PROCESSING, STATUS_PAID]

    payout_id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False
    )
    psychologist = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='payouts',
        help_text=_("Psychologist withdrawing the balance")
    )
    psychologist_name = models.CharField(_('psychologist name'), max_length=255)
    amount = models.DecimalField(
        _('amount'),
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    status = models.CharField(
        _('status'),
        max_length=20,
        choices=STATUS_CHOICES,
        default=STATUS_PROCESSING
    )
    requested_at = models.DateTimeField(_('requested at'), auto_now_add=True)
    processed_at = models.DateTimeField(_('processed at'), null=True, blank=True)

    class Meta:
        db_table = 'payouts'
        verbose_name = _('Payout')
        verbose_name_plural = _('Payouts')
        ordering = ['-requested_at']
        indexes = [
            models.Index(fields=['psychologist', 'status'], name='payouts_psychol_5e1a9c_idx'),
            models.Index(fields=['status'], name='payouts_status_b7d204_idx'),
        ]

    def __str__(self):
        return f"Payout {self.amount} to {self.psychologist_name} ({self.status})"

    @property
    def is_pending(self):
        return self.status == self.STATUS_PROCESSING
