import random
from datetime import timedelta
from decimal import Decimal

from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APIClient

from admin_panel.models import AdminCredential
from admin_panel.utils import hash_password, open_admin_session
from certification_portal.exceptions import ValidationError
from courses.models import CertificateTrack, Question
from students.models import Application
from students import workflow
from .models import TestAttempt
from . import scoring

PROFILE = {
    'full_name': 'Student A',
    'email': 'a@example.com',
    'mobile': '9000000001',
    'college_name': 'North College',
    'branch': 'IT',
    'year': '2nd Year',
}


def make_bank(track, size=12, correct='A'):
    return [
        Question.objects.create(
            track=track,
            question=f'Question {i}?',
            option_a='first', option_b='second', option_c='third', option_d='fourth',
            correct_option=correct,
        )
        for i in range(size)
    ]


class ScoringTestCase(TestCase):
    def setUp(self):
        self.track = CertificateTrack.objects.create(course_name='Web Dev', price=Decimal('110.00'))
        self.questions = make_bank(self.track, size=10)

    def answers(self, correct_count):
        return {
            str(q.id): ('A' if i < correct_count else 'B')
            for i, q in enumerate(self.questions)
        }

    def test_pass_mark_boundary(self):
        self.assertFalse(scoring.score_answers(self.questions, self.answers(4)).passed)
        result = scoring.score_answers(self.questions, self.answers(5))
        self.assertEqual(result, scoring.ScoreResult(5, 10, True))

    def test_unanswered_and_foreign_answers_score_nothing(self):
        answers = {str(self.questions[0].id): 'a ', 'not-a-question': 'A'}
        result = scoring.score_answers(self.questions, answers)
        self.assertEqual(result.score, 1)
        self.assertLessEqual(result.score, result.total_questions)

    def test_clean_answers(self):
        ids = [str(q.id) for q in self.questions]
        cleaned = scoring.clean_answers({ids[0]: 'b', ids[1]: '', 'stranger': 'C'}, ids)
        self.assertEqual(cleaned, {ids[0]: 'B'})

        with self.assertRaises(ValidationError):
            scoring.clean_answers({ids[0]: 'E'}, ids)
        with self.assertRaises(ValidationError):
            scoring.clean_answers(['A', 'B'], ids)

    def test_draw_is_bounded_by_bank_size(self):
        drawn = scoring.draw_questions(self.track, count=25, rng=random.Random(7))
        self.assertEqual(len(drawn), 10)
        self.assertEqual(len({q.id for q in drawn}), 10)

        make_bank(self.track, size=5)
        self.assertEqual(len(scoring.draw_questions(self.track)), scoring.QUESTIONS_PER_TEST)


class TestFlowAPITestCase(TestCase):
    def setUp(self):
        self.track = CertificateTrack.objects.create(course_name='Web Dev', price=Decimal('110.00'))
        make_bank(self.track, size=15)
        self.application = workflow.register_application(self.track.id, PROFILE)
        self.client = APIClient()

    def start(self):
        response = self.client.post(f'/api/assessments/{self.application.id}/start/')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        return response.data

    def submit(self, attempt_id, answers, **extra):
        return self.client.post(
            f'/api/assessments/attempts/{attempt_id}/submit/',
            {'answers': answers, **extra},
            format='json',
        )

    def test_start_hides_answer_key(self):
        data = self.start()
        self.assertEqual(data['total_questions'], scoring.QUESTIONS_PER_TEST)
        self.assertEqual(data['time_limit_seconds'], 600)
        self.assertNotIn('correct_option', data['questions'][0])

    def test_six_of_ten_passes(self):
        data = self.start()
        ids = [q['id'] for q in data['questions']]
        answers = {qid: ('A' if i < 6 else 'C') for i, qid in enumerate(ids)}

        response = self.submit(data['attempt_id'], answers)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['score'], 6)
        self.assertTrue(response.data['passed'])
        self.assertEqual(response.data['next'], 'payment')

        attempt = TestAttempt.objects.get(pk=data['attempt_id'])
        self.assertEqual((attempt.score, attempt.passed), (6, True))
        self.application.refresh_from_db()
        self.assertIs(self.application.test_passed, True)

    def test_four_of_ten_fails_and_allows_retry(self):
        data = self.start()
        ids = [q['id'] for q in data['questions']]
        answers = {qid: ('A' if i < 4 else 'D') for i, qid in enumerate(ids)}

        response = self.submit(data['attempt_id'], answers)
        self.assertFalse(response.data['passed'])
        self.assertEqual(response.data['next'], 'retry')
        self.application.refresh_from_db()
        self.assertIs(self.application.test_passed, False)
        self.assertEqual(self.application.payment_status, Application.PENDING)

        retry = self.start()
        self.assertNotEqual(retry['attempt_id'], data['attempt_id'])

    def test_second_submit_is_a_conflict(self):
        data = self.start()
        self.submit(data['attempt_id'], {})
        response = self.submit(data['attempt_id'], {})
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertFalse(response.data['success'])

    def test_late_submission_is_still_scored(self):
        data = self.start()
        TestAttempt.objects.filter(pk=data['attempt_id']).update(
            expires_at=timezone.now() - timedelta(minutes=5)
        )
        ids = [q['id'] for q in data['questions']]
        response = self.submit(data['attempt_id'], {qid: 'A' for qid in ids}, auto_submitted=True)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['score'], 10)
        self.assertTrue(TestAttempt.objects.get(pk=data['attempt_id']).auto_submitted)

    def test_start_after_pass_is_a_noop(self):
        workflow.record_test_result(self.application, True)
        response = self.client.post(f'/api/assessments/{self.application.id}/start/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {'test_passed': True, 'next': 'payment'})
        self.assertFalse(TestAttempt.objects.exists())

    def test_submit_after_pass_is_a_noop(self):
        first = self.start()
        second = self.start()
        ids = [q['id'] for q in first['questions']]
        self.submit(first['attempt_id'], {qid: 'A' for qid in ids})

        response = self.submit(second['attempt_id'], {})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {'test_passed': True, 'next': 'payment'})
        attempt = TestAttempt.objects.get(pk=second['attempt_id'])
        self.assertIsNone(attempt.submitted_at)
        self.assertIsNone(attempt.score)

    def test_empty_bank(self):
        empty = CertificateTrack.objects.create(course_name='Cloud', price=Decimal('99.00'))
        application = workflow.register_application(empty.id, PROFILE)
        response = self.client.post(f'/api/assessments/{application.id}/start/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_attempt_history_is_admin_only(self):
        self.start()
        url = f'/api/assessments/{self.application.id}/attempts/'
        self.assertEqual(self.client.get(url).status_code, status.HTTP_401_UNAUTHORIZED)

        admin = AdminCredential.objects.create(username='admin', password_hash=hash_password('pw'))
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {open_admin_session(admin).token}')
        response = self.client.get(url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
