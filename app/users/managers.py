from django.contrib.auth.base_user import BaseUserManager
from django.core.exceptions import ValidationError
from django.core.validators import validate_email
from django.utils.translation import gettext_lazy as _

ROLES = ('Patient', 'Psychologist', 'Admin')
SELF_SERVICE_ROLES = ('Patient', 'Psychologist')


class UserManager(BaseUserManager):
    '''
    Accounts are identified by email and carry exactly one role.
    Only Admin accounts may reach the Django admin.
    '''

    def check_email(self, email):
        if not email:
            raise ValueError(_('The Email field must be set'))

        email = self.normalize_email(email).strip()
        try:
            validate_email(email)
        except ValidationError:
            raise ValueError(_('Invalid email address'))
        return email

    @staticmethod
    def check_role(user_type, extra_fields):
        '''
        Reject unknown roles and staff flags on non-admin accounts
        '''
        if user_type not in ROLES:
            raise ValueError(_('Unknown user type: %(user_type)s') % {'user_type': user_type})

        if user_type != 'Admin' and (extra_fields.get('is_staff') or extra_fields.get('is_superuser')):
            raise ValueError(_('Only Admin accounts can have staff access.'))

    def create_user(self, email, password=None, **extra_fields):
        email = self.check_email(email)
        user_type = extra_fields.pop('user_type', None)
        self.check_role(user_type, extra_fields)

        user = self.model(email=email, user_type=user_type, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password, **extra_fields):
        """
        Admin account with full Django admin access
        """
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('is_active', True)
        extra_fields['user_type'] = 'Admin'

        if extra_fields.get('is_staff') is not True:
            raise ValueError(_("Superuser must have is_staff=True."))
        if extra_fields.get('is_superuser') is not True:
            raise ValueError(_("Superuser must have is_superuser=True."))

        return self.create_user(email, password, **extra_fields)

    def create_role_user(self, user_type, email, password=None, **extra_fields):
        '''
        Self-service signup: patients and psychologists only, active at once.
        A psychologist gets a default profile from the post_save signal.
        '''
        if user_type not in SELF_SERVICE_ROLES:
            raise ValueError(_('Cannot self-register as %(user_type)s') % {'user_type': user_type})

        extra_fields.setdefault('is_active', True)
        return self.create_user(email, password, user_type=user_type, **extra_fields)

    def create_patient(self, email, password=None, **extra_fields):
        return self.create_role_user('Patient', email, password, **extra_fields)

    def create_psychologist(self, email, password=None, **extra_fields):
        return self.create_role_user('Psychologist', email, password, **extra_fields)
