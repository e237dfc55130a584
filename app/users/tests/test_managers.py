from django.contrib.auth import get_user_model
from django.test import TestCase


User = get_user_model()


class UserManagerTest(TestCase):
    """Test cases for UserManager"""

    def test_create_user_normalizes_email(self):
        user = User.objects.create_user(
            email='Paciente@EXAMPLE.com',
            password='testpass123',
            user_type='Patient'
        )

        self.assertEqual(user.email, 'Paciente@example.com')
        self.assertTrue(user.check_password('testpass123'))

    def test_create_user_without_email(self):
        with self.assertRaises(ValueError):
            User.objects.create_user(email='', password='testpass123', user_type='Patient')

    def test_create_user_with_invalid_email(self):
        with self.assertRaises(ValueError):
            User.objects.create_user(email='not-an-email', password='testpass123', user_type='Patient')

    def test_create_user_requires_known_role(self):
        for user_type in [None, '', 'Therapist', 'patient']:
            with self.subTest(user_type=user_type):
                with self.assertRaises(ValueError):
                    User.objects.create_user(email='role@example.com', password='testpass123', user_type=user_type)

        self.assertFalse(User.objects.filter(email='role@example.com').exists())

    def test_only_admins_get_staff_access(self):
        with self.assertRaises(ValueError):
            User.objects.create_user(
                email='staff@example.com', password='testpass123', user_type='Psychologist', is_staff=True
            )

        with self.assertRaises(ValueError):
            User.objects.create_patient(email='root@example.com', password='testpass123', is_superuser=True)

    def test_role_signup_rejects_admin(self):
        with self.assertRaises(ValueError):
            User.objects.create_role_user('Admin', email='sneaky@example.com', password='testpass123')

    def test_create_role_user(self):
        user = User.objects.create_role_user('Psychologist', email=' Psi@Example.COM ', password='testpass123')

        self.assertEqual(user.email, 'Psi@example.com')
        self.assertTrue(user.is_psychologist)
        self.assertTrue(user.is_active)
        self.assertFalse(user.is_staff)

    def test_create_patient(self):
        user = User.objects.create_patient(email='patient@example.com', password='testpass123')

        self.assertEqual(user.user_type, 'Patient')
        self.assertTrue(user.is_patient)
        self.assertTrue(user.is_active)

    def test_create_psychologist_gets_profile(self):
        user = User.objects.create_psychologist(
            email='psi@example.com',
            password='testpass123',
            full_name='Dra. Ana Souza'
        )

        self.assertTrue(user.is_psychologist)
        self.assertTrue(hasattr(user, 'psychologist_profile'))

    def test_create_superuser(self):
        user = User.objects.create_superuser(email='admin@example.com', password='testpass123')

        self.assertEqual(user.user_type, 'Admin')
        self.assertTrue(user.is_staff)
        self.assertTrue(user.is_superuser)
        self.assertTrue(user.is_admin)

    def test_create_superuser_requires_staff(self):
        with self.assertRaises(ValueError):
            User.objects.create_superuser(email='admin@example.com', password='testpass123', is_staff=False)

    def test_create_superuser_is_always_admin(self):
        user = User.objects.create_superuser(email='root@example.com', password='testpass123', user_type='Patient')

        self.assertEqual(user.user_type, 'Admin')

    def test_display_name_falls_back_to_email(self):
        user = User.objects.create_patient(email='semnome@example.com', password='testpass123')

        self.assertEqual(user.display_name, 'semnome@example.com')
