# factories/finance.py
import factory
from decimal import Decimal

from finance.models import Payout
from .base import BaseFactory
from .users import PsychologistUserFactory


class PayoutFactory(BaseFactory):
    """
    Factory for payout requests
    """

    class Meta:
        model = Payout

    psychologist = factory.SubFactory(PsychologistUserFactory)
    psychologist_name = factory.LazyAttribute(lambda obj: obj.psychologist.full_name)
    amount = Decimal('100.00')
    status = Payout.STATUS_PROCESSING
