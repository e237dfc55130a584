# factories/users.py
import factory
from decimal import Decimal
from django.utils import timezone

from users.models import User
from .base import (
    BaseFactory,
    PasswordMixin,
    RandomChoiceMixin,
    BrazilianDocumentsMixin,
)


class UserFactory(BaseFactory, PasswordMixin):
    """
    Factory for creating User instances
    """

    class Meta:
        model = User
        django_get_or_create = ('email',)  # Avoid duplicate emails
        skip_postgeneration_save = True

    email = factory.Sequence(lambda n: f'user{n}@example.com')

    # More patients than psychologists, few admins
    user_type = factory.LazyFunction(
        lambda: RandomChoiceMixin.random_choice_weighted([
            ('Patient', 0.75),
            ('Psychologist', 0.23),
            ('Admin', 0.02)
        ])
    )

    # factory_boy only collects declarations from Factory classes, so the
    # mixin's declaration has to be wired in explicitly
    password = PasswordMixin.password

    full_name = factory.Faker('name', locale='pt_BR')
    cpf = factory.LazyFunction(BrazilianDocumentsMixin.generate_cpf)
    whatsapp = factory.LazyFunction(BrazilianDocumentsMixin.generate_whatsapp)

    is_active = True
    is_staff = factory.LazyAttribute(lambda obj: obj.user_type == 'Admin')
    is_superuser = factory.LazyAttribute(lambda obj: obj.user_type == 'Admin')

    registration_date = factory.Faker('date_time_between',
                                      start_date='-1y',
                                      end_date='now',
                                      tzinfo=timezone.get_current_timezone())
    last_login_date = None


class PatientUserFactory(UserFactory):
    """
    Factory specifically for Patient users
    """
    user_type = 'Patient'
    email = factory.Sequence(lambda n: f'patient{n}@example.com')


class PsychologistUserFactory(UserFactory):
    """
    Factory specifically for Psychologist users.
    The profile and default availability come from the post_save signal;
    profile fields can be overridden with profile__<field>=value.
    """
    user_type = 'Psychologist'
    email = factory.Sequence(lambda n: f'psicologo{n}@example.com')

    @factory.post_generation
    def profile(obj, create, extracted, **kwargs):
        if not create:
            return
        profile = obj.psychologist_profile
        kwargs.setdefault('crp', '06/123456')
        kwargs.setdefault('hourly_rate', Decimal('150.00'))
        for field, value in kwargs.items():
            setattr(profile, field, value)
        profile.save()


class AdminUserFactory(UserFactory):
    """
    Factory specifically for Admin users
    """
    user_type = 'Admin'
    is_staff = True
    is_superuser = True
    email = factory.Sequence(lambda n: f'admin{n}@timeplus.com.br')


class InactiveUserFactory(PatientUserFactory):
    """
    Factory for deactivated accounts
    """
    is_active = False
