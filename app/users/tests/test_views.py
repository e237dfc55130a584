from django.urls import reverse
from rest_framework import status
from rest_framework.authtoken.models import Token
from rest_framework.test import APITestCase

from factories.finance import PayoutFactory
from factories.sessions import TherapySessionFactory
from factories.users import PatientUserFactory, PsychologistUserFactory, AdminUserFactory
from users.models import User


class AuthViewSetTestCase(APITestCase):
    """
    Test cases for AuthViewSet
    """

    def setUp(self):
        self.register_url = reverse('auth-register')
        self.login_url = reverse('auth-login')
        self.logout_url = reverse('auth-logout')
        self.me_url = reverse('auth-me')
        self.update_profile_url = reverse('auth-update-profile')

        self.registration_data = {
            'email': 'joao@example.com',
            'user_type': 'Patient',
            'full_name': 'João Pereira',
            'cpf': '529.982.247-25',
            'whatsapp': '(21) 99876-5432',
            'password': 'testpass123',
            'password_confirm': 'testpass123',
        }
        self.patient = PatientUserFactory(email='existing@example.com')

    def test_register_patient(self):
        response = self.client.post(self.register_url, self.registration_data, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertIn('token', response.data)
        self.assertEqual(response.data['user']['user_type'], 'Patient')
        self.assertEqual(response.data['user']['cpf'], '52998224725')

    def test_register_psychologist_requires_crp(self):
        data = dict(self.registration_data, user_type='Psychologist')

        response = self.client.post(self.register_url, data, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('crp_number', response.data)
        self.assertIn('crp_state', response.data)

    def test_register_psychologist(self):
        data = dict(self.registration_data, user_type='Psychologist', crp_number='654321', crp_state='RJ')

        response = self.client.post(self.register_url, data, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        user = User.objects.get(email='joao@example.com')
        self.assertEqual(user.psychologist_profile.crp, '654321/RJ')

    def test_register_invalid_cpf(self):
        data = dict(self.registration_data, cpf='123.456.789-00')

        response = self.client.post(self.register_url, data, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('cpf', response.data)

    def test_register_password_mismatch(self):
        data = dict(self.registration_data, password_confirm='different123')

        response = self.client.post(self.register_url, data, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('password_confirm', response.data)

    def test_register_duplicate_email(self):
        data = dict(self.registration_data, email='existing@example.com')

        response = self.client.post(self.register_url, data, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_register_as_admin_rejected(self):
        data = dict(self.registration_data, user_type='Admin')

        response = self.client.post(self.register_url, data, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_login(self):
        response = self.client.post(self.login_url, {
            'email': 'existing@example.com',
            'password': 'testpass123',
            'role': 'patient',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['token'], Token.objects.get(user=self.patient).key)
        self.patient.refresh_from_db()
        self.assertIsNotNone(self.patient.last_login_date)

    def test_login_wrong_role(self):
        response = self.client.post(self.login_url, {
            'email': 'existing@example.com',
            'password': 'testpass123',
            'role': 'psychologist',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(Token.objects.filter(user=self.patient).exists())

    def test_login_wrong_password(self):
        response = self.client.post(self.login_url, {
            'email': 'existing@example.com',
            'password': 'wrongpass',
            'role': 'patient',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_logout(self):
        token = Token.objects.create(user=self.patient)
        self.client.credentials(HTTP_AUTHORIZATION=f'Token {token.key}')

        response = self.client.post(self.logout_url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(Token.objects.filter(user=self.patient).exists())

    def test_me(self):
        self.client.force_authenticate(user=self.patient)

        response = self.client.get(self.me_url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['email'], 'existing@example.com')

    def test_me_unauthenticated(self):
        response = self.client.get(self.me_url)

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_update_profile(self):
        self.client.force_authenticate(user=self.patient)

        response = self.client.patch(self.update_profile_url, {
            'full_name': 'Nome Atualizado',
            'cpf': '00000000000',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['user']['full_name'], 'Nome Atualizado')
        self.patient.refresh_from_db()
        self.assertNotEqual(self.patient.cpf, '00000000000')


class UserViewSetTestCase(APITestCase):
    """
    Test cases for admin user management
    """

    def setUp(self):
        self.admin = AdminUserFactory()
        self.patient = PatientUserFactory()
        self.psychologist = PsychologistUserFactory()

    def test_list_requires_admin(self):
        self.client.force_authenticate(user=self.patient)

        response = self.client.get('/api/users/')

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_list_filtered_by_type(self):
        self.client.force_authenticate(user=self.admin)

        response = self.client.get('/api/users/', {'user_type': 'Psychologist'})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 1)
        self.assertEqual(response.data['results'][0]['id'], str(self.psychologist.id))

    def test_detail_includes_sessions_and_payouts(self):
        TherapySessionFactory(patient=self.patient, psychologist=self.psychologist)
        PayoutFactory(psychologist=self.psychologist)
        self.client.force_authenticate(user=self.admin)

        response = self.client.get(f'/api/users/{self.psychologist.id}/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['sessions']), 1)
        self.assertEqual(len(response.data['payouts']), 1)

    def test_detail_missing_user(self):
        self.client.force_authenticate(user=self.admin)

        response = self.client.get('/api/users/00000000-0000-0000-0000-000000000000/')

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
