# users/validators.py
import re

from django.core.exceptions import ValidationError
from django.utils.translation import gettext_lazy as _


def normalize_cpf(value: str) -> str:
    """Strip punctuation from a CPF, keeping only digits"""
    return re.sub(r'\D', '', value or '')


def _cpf_check_digit(digits: str) -> int:
    weight = len(digits) + 1
    total = sum(int(digit) * (weight - index) for index, digit in enumerate(digits))
    remainder = (total * 10) % 11
    return 0 if remainder == 10 else remainder


def is_valid_cpf(value: str) -> bool:
    """
    Check a CPF against its two verifier digits.
    Sequences of one repeated digit (000.000.000-00 ...) are rejected.
    """
    cpf = normalize_cpf(value)
    if len(cpf) != 11 or cpf == cpf[0] * 11:
        return False

    if _cpf_check_digit(cpf[:9]) != int(cpf[9]):
        return False
    return _cpf_check_digit(cpf[:10]) == int(cpf[10])


def validate_cpf(value: str) -> None:
    if not is_valid_cpf(value):
        raise ValidationError(_("Invalid CPF"), code='invalid_cpf')


def normalize_whatsapp(value: str) -> str:
    """Normalize a Brazilian WhatsApp number to +55 followed by digits"""
    digits = re.sub(r'\D', '', value or '')
    if digits.startswith('55') and len(digits) > 11:
        digits = digits[2:]
    return f"+55{digits}"


def validate_whatsapp(value: str) -> None:
    digits = re.sub(r'\D', '', value or '')
    if digits.startswith('55') and len(digits) > 11:
        digits = digits[2:]
    if len(digits) < 8 or len(digits) > 11:
        raise ValidationError(_("Invalid WhatsApp number"), code='invalid_whatsapp')


BRAZILIAN_STATES = [
    'AC', 'AL', 'AP', 'AM', 'BA', 'CE', 'DF', 'ES', 'GO', 'MA', 'MT', 'MS', 'MG',
    'PA', 'PB', 'PR', 'PE', 'PI', 'RJ', 'RN', 'RS', 'RO', 'RR', 'SC', 'SP', 'SE', 'TO',
]
