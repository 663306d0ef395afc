from decimal import Decimal
from unittest import mock

from django.contrib.auth import get_user_model
from django.core.files.storage import InMemoryStorage
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from admin_panel.models import AdminCredential
from admin_panel.utils import hash_password, open_admin_session
from certification_portal.exceptions import (
    NotFoundError, StateConflictError, StorageError, ValidationError,
)
from courses.models import CertificateTrack
from .models import Application, ApplicationStage
from . import workflow

User = get_user_model()

PROFILE = {
    'full_name': 'Asha Rao',
    'email': 'asha@example.com',
    'mobile': '9876543210',
    'college_name': 'City Engineering College',
    'branch': 'CSE',
    'year': '3rd Year',
}


def screenshot(name='proof.png', size=128):
    return SimpleUploadedFile(name, b'\x89PNG' + b'0' * size, content_type='image/png')


class ApplicationWorkflowTestCase(TestCase):
    def setUp(self):
        self.track = CertificateTrack.objects.create(course_name='Web Dev', price=Decimal('110.00'))
        self.storage = InMemoryStorage()

    def register(self, **overrides):
        return workflow.register_application(self.track.id, {**PROFILE, **overrides})

    def passed_application(self):
        application = self.register()
        return workflow.record_test_result(application, True)

    def submitted_application(self):
        application = self.passed_application()
        return workflow.submit_payment_proof(application.id, 'UPI123456', screenshot(), storage=self.storage)

    def test_register_starts_pending_with_no_test_result(self):
        application = self.register()
        self.assertEqual(application.payment_status, Application.PENDING)
        self.assertIsNone(application.test_passed)
        self.assertEqual(application.internship_domain, 'Web Dev')
        self.assertEqual(application.stage, ApplicationStage.REGISTERED)

    def test_register_rejects_bad_mobile(self):
        for mobile in ['12345', '98765432101', '98765abcde']:
            with self.assertRaises(ValidationError):
                self.register(mobile=mobile)
        self.assertEqual(Application.objects.count(), 0)

    def test_register_requires_every_profile_field(self):
        with self.assertRaises(ValidationError):
            self.register(college_name='  ')
        self.assertFalse(Application.objects.exists())

    def test_register_unknown_or_inactive_track(self):
        with self.assertRaises(NotFoundError):
            workflow.register_application('1a2b3c4d-0000-0000-0000-000000000000', PROFILE)
        self.track.is_active = False
        self.track.save()
        with self.assertRaises(NotFoundError):
            self.register()

    def test_failed_attempt_never_undoes_a_pass(self):
        application = self.register()
        workflow.record_test_result(application, False)
        self.assertIs(application.test_passed, False)
        self.assertEqual(application.stage, ApplicationStage.TEST_PENDING)

        workflow.record_test_result(application, True)
        workflow.record_test_result(application, False)
        self.assertIs(application.test_passed, True)
        self.assertEqual(application.stage, ApplicationStage.PAYMENT_PENDING)

    def test_payment_requires_passed_test(self):
        application = self.register()
        with self.assertRaises(StateConflictError):
            workflow.submit_payment_proof(application.id, 'UPI1', screenshot(), storage=self.storage)
        application.refresh_from_db()
        self.assertEqual(application.payment_status, Application.PENDING)

    def test_payment_validation_happens_before_upload(self):
        application = self.passed_application()
        self.storage = mock.Mock()
        with self.assertRaises(ValidationError):
            workflow.submit_payment_proof(application.id, '   ', screenshot(), storage=self.storage)
        with self.assertRaises(ValidationError):
            workflow.submit_payment_proof(application.id, 'UPI1', None, storage=self.storage)
        with self.settings(MAX_SCREENSHOT_BYTES=64):
            with self.assertRaises(ValidationError):
                workflow.submit_payment_proof(application.id, 'UPI1', screenshot(size=256), storage=self.storage)
        self.storage.save.assert_not_called()

    def test_submit_payment_moves_to_under_verification(self):
        application = self.submitted_application()
        self.assertEqual(application.payment_status, Application.UNDER_VERIFICATION)
        self.assertEqual(application.transaction_id, 'UPI123456')
        self.assertIn(str(application.id), application.payment_screenshot_url)

    def test_storage_failure_leaves_status_untouched(self):
        application = self.passed_application()
        broken = mock.Mock()
        broken.save.side_effect = OSError('bucket unavailable')
        with self.assertRaises(StorageError):
            workflow.submit_payment_proof(application.id, 'UPI1', screenshot(), storage=broken)
        application.refresh_from_db()
        self.assertEqual(application.payment_status, Application.PENDING)
        self.assertIsNone(application.transaction_id)

    def test_approve_issues_certificate(self):
        application = self.submitted_application()
        approved = workflow.approve_payment(application.id, 'admin')
        self.assertEqual(approved.payment_status, Application.COMPLETED)
        self.assertRegex(approved.certificate_number, r'^CERT-\d{8}-[0-9A-F]{8}$')
        self.assertIsNotNone(approved.certificate_issued_at)
        self.assertEqual(approved.payment_verified_by, 'admin')

    def test_approve_twice_is_a_conflict(self):
        application = self.submitted_application()
        first = workflow.approve_payment(application.id, 'admin')
        with self.assertRaises(StateConflictError):
            workflow.approve_payment(application.id, 'admin')
        application.refresh_from_db()
        self.assertEqual(application.certificate_number, first.certificate_number)

    def test_approve_requires_under_verification(self):
        application = self.passed_application()
        with self.assertRaises(StateConflictError):
            workflow.approve_payment(application.id, 'admin')
        with self.assertRaises(NotFoundError):
            workflow.approve_payment('1a2b3c4d-0000-0000-0000-000000000000', 'admin')

    def test_reject_requires_reason_then_allows_resubmission(self):
        application = self.submitted_application()
        with self.assertRaises(ValidationError):
            workflow.reject_payment(application.id, '  ')

        rejected = workflow.reject_payment(application.id, 'Amount does not match')
        self.assertEqual(rejected.payment_status, Application.FAILED)
        self.assertEqual(rejected.stage, ApplicationStage.REJECTED)
        self.assertIsNone(rejected.certificate_number)

        resubmitted = workflow.submit_payment_proof(application.id, 'UPI999', screenshot(), storage=self.storage)
        self.assertEqual(resubmitted.payment_status, Application.UNDER_VERIFICATION)
        self.assertIsNone(resubmitted.rejection_reason)

    def test_completed_application_cannot_resubmit(self):
        application = self.submitted_application()
        workflow.approve_payment(application.id, 'admin')
        with self.assertRaises(StateConflictError):
            workflow.submit_payment_proof(application.id, 'UPI2', screenshot(), storage=self.storage)

    def test_refunded_application_can_resubmit(self):
        application = self.passed_application()
        Application.objects.filter(pk=application.pk).update(payment_status=Application.REFUNDED)
        resubmitted = workflow.submit_payment_proof(application.id, 'UPI777', screenshot(), storage=self.storage)
        self.assertEqual(resubmitted.payment_status, Application.UNDER_VERIFICATION)
        self.assertEqual(resubmitted.transaction_id, 'UPI777')

    def test_approve_retries_on_certificate_number_collision(self):
        taken = workflow.approve_payment(self.submitted_application().id, 'admin').certificate_number
        application = self.submitted_application()
        numbers = [taken, 'CERT-20250101-ABCDEF12']
        with mock.patch('students.workflow.generate_certificate_number', side_effect=numbers) as generate:
            approved = workflow.approve_payment(application.id, 'admin')
        self.assertEqual(generate.call_count, 2)
        self.assertEqual(approved.payment_status, Application.COMPLETED)
        self.assertEqual(approved.certificate_number, 'CERT-20250101-ABCDEF12')

    def test_approve_gives_up_after_repeated_collisions(self):
        taken = workflow.approve_payment(self.submitted_application().id, 'admin').certificate_number
        application = self.submitted_application()
        with mock.patch('students.workflow.generate_certificate_number', return_value=taken) as generate:
            with self.assertRaises(StorageError):
                workflow.approve_payment(application.id, 'admin')
        self.assertEqual(generate.call_count, workflow.CERTIFICATE_NUMBER_ATTEMPTS)
        application.refresh_from_db()
        self.assertEqual(application.payment_status, Application.UNDER_VERIFICATION)
        self.assertIsNone(application.certificate_number)

    def test_upload_is_removed_when_approval_wins_the_race(self):
        application = self.passed_application()
        saved = []
        real_save = self.storage.save

        def save_then_approve(name, content):
            saved.append(real_save(name, content))
            # an admin approves while the screenshot is uploading
            Application.objects.filter(pk=application.pk).update(
                payment_status=Application.COMPLETED, certificate_number='CERT-20250101-0000BEEF',
            )
            return saved[-1]

        with mock.patch.object(self.storage, 'save', side_effect=save_then_approve):
            with self.assertRaises(StateConflictError):
                workflow.submit_payment_proof(application.id, 'UPI555', screenshot(), storage=self.storage)

        self.assertEqual(len(saved), 1)
        self.assertFalse(self.storage.exists(saved[0]))
        application.refresh_from_db()
        self.assertEqual(application.payment_status, Application.COMPLETED)
        self.assertIsNone(application.transaction_id)

    def test_save_guards_status_invariants(self):
        application = self.register()
        application.payment_status = Application.COMPLETED
        with self.assertRaises(StateConflictError):
            application.save()


class ApplicationAPITestCase(TestCase):
    def setUp(self):
        self.track = CertificateTrack.objects.create(course_name='Data Science', price=Decimal('149.00'))
        self.admin = AdminCredential.objects.create(username='admin', password_hash=hash_password('secret'))
        self.client = APIClient()

    def payload(self, **overrides):
        return {'certificate_id': str(self.track.id), **PROFILE, **overrides}

    def test_register_application(self):
        response = self.client.post('/api/students/applications/', self.payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['payment_status'], 'pending')
        self.assertIsNone(response.data['test_passed'])
        self.assertEqual(response.data['stage'], 'REGISTERED')

    def test_register_invalid_mobile(self):
        response = self.client.post('/api/students/applications/', self.payload(mobile='123'), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(response.data['success'])
        self.assertFalse(Application.objects.exists())

    def test_register_unknown_track(self):
        payload = self.payload(certificate_id='1a2b3c4d-0000-0000-0000-000000000000')
        response = self.client.post('/api/students/applications/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_retrieve_application(self):
        application = workflow.register_application(self.track.id, PROFILE)
        response = self.client.get(f'/api/students/applications/{application.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['course_name'], 'Data Science')

        response = self.client.get('/api/students/applications/not-a-uuid/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_list_requires_admin_session(self):
        response = self.client.get('/api/students/applications/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

        session = open_admin_session(self.admin)
        workflow.register_application(self.track.id, PROFILE)
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {session.token}')
        response = self.client.get('/api/students/applications/', {'payment_status': 'pending'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 1)

    def test_signup_login_and_mine(self):
        response = self.client.post('/api/students/signup/', {
            'email': 'Asha@Example.com', 'password': 'secret123'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

        response = self.client.post('/api/students/login/', {
            'email': 'asha@example.com', 'password': 'secret123'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.client.credentials(HTTP_AUTHORIZATION=f"Token {response.data['token']}")

        self.client.post('/api/students/applications/', self.payload(), format='json')
        response = self.client.get('/api/students/applications/mine/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(Application.objects.get().user.email, 'asha@example.com')

    def test_mine_requires_student_account(self):
        response = self.client.get('/api/students/applications/mine/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_login_with_wrong_password(self):
        User.objects.create_user(username='b@example.com', email='b@example.com', password='right-one')
        response = self.client.post('/api/students/login/', {
            'email': 'b@example.com', 'password': 'wrong-one'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
