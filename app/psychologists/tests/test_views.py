from datetime import time, timedelta
from decimal import Decimal
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from core.timeutils import local_datetime
from factories.sessions import TherapySessionFactory, CompletedSessionFactory
from factories.users import PatientUserFactory, PsychologistUserFactory
from psychologists.models import PsychologistAvailability


class PsychologistProfileViewTest(APITestCase):
    """
    Test cases for /api/psychologists/profile/
    """

    def setUp(self):
        self.user = PsychologistUserFactory(full_name='Dra. Helena Costa')
        self.client.force_authenticate(user=self.user)

    def test_get_own_profile(self):
        response = self.client.get('/api/psychologists/profile/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['full_name'], 'Dra. Helena Costa')
        self.assertEqual(response.data['id'], str(self.user.id))

    def test_patient_forbidden(self):
        self.client.force_authenticate(user=PatientUserFactory())

        response = self.client.get('/api/psychologists/profile/')

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_update_profile(self):
        response = self.client.patch('/api/psychologists/profile/update-profile/', {
            'hourly_rate': '180.00',
            'specialties': ['Depressão', 'Luto'],
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        profile = self.user.psychologist_profile
        profile.refresh_from_db()
        self.assertEqual(profile.hourly_rate, Decimal('180.00'))
        self.assertEqual(profile.specialties, ['Depressão', 'Luto'])

    def test_update_profile_rejects_non_positive_rate(self):
        response = self.client.patch('/api/psychologists/profile/update-profile/', {
            'hourly_rate': '0',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_payout_info(self):
        response = self.client.patch('/api/psychologists/profile/payout-info/', {
            'payout_bank': 'Banco do Brasil',
            'payout_agency': '1234-5',
            'payout_account': '98765-0',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['payout_bank'], 'Banco do Brasil')


class PsychologistAvailabilityViewTest(APITestCase):
    """
    Test cases for the weekly availability template
    """

    def setUp(self):
        self.user = PsychologistUserFactory()
        self.client.force_authenticate(user=self.user)

    def test_list_seven_days(self):
        response = self.client.get('/api/psychologists/availability/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 7)
        self.assertEqual(response.data[0]['day_key'], 'domingo')

    def test_weekly_replace(self):
        response = self.client.put('/api/psychologists/availability/weekly/', {
            'entries': [
                {'day_of_week': 6, 'enabled': True, 'start_time': '08:00', 'end_time': '12:00'},
            ]
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        saturday = PsychologistAvailability.objects.get(psychologist__user=self.user, day_of_week=6)
        self.assertTrue(saturday.enabled)
        self.assertEqual(saturday.start_time, time(8, 0))

    def test_weekly_replace_rejects_inverted_window(self):
        response = self.client.put('/api/psychologists/availability/weekly/', {
            'entries': [
                {'day_of_week': 1, 'enabled': True, 'start_time': '12:00', 'end_time': '09:00'},
            ]
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_weekly_replace_rejects_duplicate_days(self):
        entry = {'day_of_week': 1, 'enabled': True, 'start_time': '09:00', 'end_time': '12:00'}

        response = self.client.put('/api/psychologists/availability/weekly/', {
            'entries': [entry, entry]
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class PsychologistMarketplaceViewTest(APITestCase):
    """
    Test cases for the marketplace patients browse
    """

    def setUp(self):
        self.patient = PatientUserFactory()
        self.psychologist = PsychologistUserFactory()
        self.incomplete = PsychologistUserFactory(profile__specialties=[])
        self.client.force_authenticate(user=self.patient)

    def test_requires_authentication(self):
        self.client.force_authenticate(user=None)

        response = self.client.get('/api/psychologists/marketplace/')

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_list_complete_profiles(self):
        response = self.client.get('/api/psychologists/marketplace/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([item['id'] for item in response.data['results']], [str(self.psychologist.id)])

    def test_detail_includes_reviews_and_booked_slots(self):
        booked = TherapySessionFactory(psychologist=self.psychologist, patient=self.patient)
        CompletedSessionFactory(psychologist=self.psychologist, reviewed=True, rating=5)

        response = self.client.get(f'/api/psychologists/marketplace/{self.psychologist.id}/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn(booked.session_timestamp_millis, response.data['booked_slots'])
        self.assertEqual(len(response.data['reviews']), 1)
        self.assertEqual(len(response.data['availability']), 7)

    def test_incomplete_profile_not_found(self):
        response = self.client.get(f'/api/psychologists/marketplace/{self.incomplete.id}/')

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_available_slots(self):
        target = timezone.localdate() + timedelta(days=1)
        while PsychologistAvailability.weekday_to_day_of_week(target) not in (1, 2, 3, 4):
            target += timedelta(days=1)
        TherapySessionFactory(
            psychologist=self.psychologist,
            patient=self.patient,
            session_timestamp=local_datetime(target, time(10, 0)),
        )

        response = self.client.get(
            f'/api/psychologists/marketplace/{self.psychologist.id}/available-slots/',
            {'date': target.isoformat()}
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['slots']), 8)
        self.assertNotIn('10:00', response.data['slots'])
        self.assertEqual(response.data['slots'][0], '09:00')

    def test_available_slots_requires_valid_date(self):
        url = f'/api/psychologists/marketplace/{self.psychologist.id}/available-slots/'

        self.assertEqual(self.client.get(url).status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(self.client.get(url, {'date': '04/03/2031'}).status_code, status.HTTP_400_BAD_REQUEST)
