from decimal import Decimal

from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from .models import CertificateTrack, Question


class CertificateTrackTestCase(TestCase):
    def setUp(self):
        self.web = CertificateTrack.objects.create(course_name='Web Dev', price=Decimal('110.00'))
        self.retired = CertificateTrack.objects.create(course_name='Flash Games', is_active=False)
        Question.objects.create(
            track=self.web, question='HTML stands for?',
            option_a='Hyper Text Markup Language', option_b='High Tech Modern Language',
            option_c='Home Tool Markup Language', option_d='None of these',
            correct_option='A',
        )
        self.client = APIClient()

    def test_list_only_active_tracks(self):
        response = self.client.get('/api/courses/tracks/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([t['course_name'] for t in response.data], ['Web Dev'])
        self.assertEqual(response.data[0]['question_count'], 1)

    def test_retrieve_inactive_track_is_not_found(self):
        response = self.client.get(f'/api/courses/tracks/{self.retired.id}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertFalse(response.data['success'])

    def test_option_text(self):
        question = self.web.questions.get()
        self.assertEqual(question.option_text('a'), 'Hyper Text Markup Language')
