# finance/earnings.py
"""
Platform commission. Every figure shown to psychologists or admins is split
here so the two shares always add back up to the session rate.
"""
from collections import namedtuple
from decimal import Decimal, ROUND_HALF_UP

from django.conf import settings

CENTS = Decimal('0.01')

EarningsSplit = namedtuple('EarningsSplit', ['psychologist_share', 'platform_share'])


def commission_rate() -> Decimal:
    return Decimal(str(getattr(settings, 'PLATFORM_COMMISSION_RATE', '0.15')))


def to_cents(amount) -> Decimal:
    return Decimal(str(amount)).quantize(CENTS, rounding=ROUND_HALF_UP)


def split_earnings(rate) -> EarningsSplit:
    """
    Split a session rate into the psychologist's share and the platform's
    commission, both in cents
    """
    rate = to_cents(rate or 0)
    platform_share = (rate * commission_rate()).quantize(CENTS, rounding=ROUND_HALF_UP)
    return EarningsSplit(
        psychologist_share=rate - platform_share,
        platform_share=platform_share,
    )
