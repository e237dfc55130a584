# factories/base.py
import factory
from django.contrib.auth.hashers import make_password
import random

from users.validators import _cpf_check_digit


class BaseFactory(factory.django.DjangoModelFactory):
    """
    Base factory with common configurations
    """

    class Meta:
        abstract = True


class PasswordMixin:
    """Mixin for handling password generation"""

    @factory.lazy_attribute
    def password(self):
        """Generate a hashed password"""
        return make_password('testpass123')


class RandomChoiceMixin:
    """Mixin with helper methods for random choices"""

    @staticmethod
    def random_bool(true_chance=0.5):
        """Return True with specified probability"""
        return random.random() < true_chance

    @staticmethod
    def random_choice_weighted(choices_weights):
        """
        Choose from weighted options
        Example: [('option1', 0.7), ('option2', 0.3)]
        """
        total = sum(weight for _, weight in choices_weights)
        r = random.uniform(0, total)
        upto = 0
        for choice, weight in choices_weights:
            if upto + weight >= r:
                return choice
            upto += weight
        return choices_weights[-1][0]  # fallback


class BrazilianDocumentsMixin:
    """Mixin for generating Brazilian identity data"""

    @staticmethod
    def generate_cpf():
        """Random CPF (digits only) with valid verifier digits"""
        while True:
            base = ''.join(str(random.randint(0, 9)) for _ in range(9))
            if base != base[0] * 9:
                break
        first = _cpf_check_digit(base)
        second = _cpf_check_digit(base + str(first))
        return f"{base}{first}{second}"

    @staticmethod
    def generate_whatsapp():
        """Mobile number in +55 format: area code, 9 and eight digits"""
        area_code = random.choice(['11', '21', '31', '41', '51', '61', '71', '81'])
        return f"+55{area_code}9{random.randint(10000000, 99999999)}"
