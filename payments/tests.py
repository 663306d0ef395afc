import io
from decimal import Decimal
from unittest import mock

from PIL import Image
from django.core import mail
from django.core.files.storage import InMemoryStorage
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase, override_settings
from rest_framework import status
from rest_framework.test import APIClient

from admin_panel.models import AdminActivity, AdminCredential, Notification
from admin_panel.utils import hash_password, open_admin_session
from courses.models import CertificateTrack
from students.models import Application
from students import workflow
from .models import PlatformSetting

PROFILE = {
    'full_name': 'Ravi Kumar',
    'email': 'ravi@example.com',
    'mobile': '9123456780',
    'college_name': 'South College',
    'branch': 'ECE',
    'year': '4th Year',
}


def png_upload(name='proof.png'):
    buffer = io.BytesIO()
    Image.new('RGB', (20, 20), color=(0, 128, 0)).save(buffer, format='PNG')
    return SimpleUploadedFile(name, buffer.getvalue(), content_type='image/png')


@override_settings(ADMIN_EMAIL='admin@portal.test')
class PaymentAPITestCase(TestCase):
    def setUp(self):
        self.track = CertificateTrack.objects.create(course_name='Web Dev', price=Decimal('110.00'))
        self.application = workflow.register_application(self.track.id, PROFILE)
        workflow.record_test_result(self.application, True)

        self.admin = AdminCredential.objects.create(username='admin', password_hash=hash_password('secret'))
        self.admin_token = open_admin_session(self.admin).token
        self.client = APIClient()

        patcher = mock.patch('students.workflow.default_storage', InMemoryStorage())
        self.storage = patcher.start()
        self.addCleanup(patcher.stop)

    def submit(self, transaction_id='UPI4455', screenshot=None):
        data = {'transaction_id': transaction_id}
        if screenshot is not False:
            data['screenshot'] = screenshot or png_upload()
        return self.client.post(f'/api/payments/{self.application.id}/submit/', data, format='multipart')

    def as_admin(self):
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {self.admin_token}')

    def test_submit_payment_proof(self):
        response = self.submit()
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['success'])
        self.assertEqual(response.data['application']['payment_status'], 'under_verification')
        self.assertTrue(Notification.objects.filter(title='Payment Proof Submitted').exists())
        self.assertEqual(mail.outbox[-1].to, ['admin@portal.test'])

    def test_submit_requires_transaction_id_and_screenshot(self):
        response = self.submit(transaction_id='')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.submit(screenshot=False)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.application.refresh_from_db()
        self.assertEqual(self.application.payment_status, Application.PENDING)

    def test_submit_rejects_non_image(self):
        bogus = SimpleUploadedFile('proof.png', b'not an image', content_type='image/png')
        response = self.submit(screenshot=bogus)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    @override_settings(MAX_SCREENSHOT_BYTES=10)
    def test_submit_rejects_oversized_screenshot(self):
        response = self.submit()
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Please upload an image under 5MB')

    def test_upload_failure_is_reported(self):
        with mock.patch.object(self.storage, 'save', side_effect=OSError('disk full')):
            response = self.submit()
        self.assertEqual(response.status_code, status.HTTP_502_BAD_GATEWAY)
        self.application.refresh_from_db()
        self.assertEqual(self.application.payment_status, Application.PENDING)

    def test_approve_requires_admin(self):
        self.submit()
        response = self.client.post(f'/api/payments/{self.application.id}/approve/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_approve_issues_certificate(self):
        self.submit()
        self.as_admin()
        response = self.client.post(f'/api/payments/{self.application.id}/approve/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['application']['payment_status'], 'completed')
        self.assertTrue(response.data['application']['certificate_number'].startswith('CERT-'))
        self.assertEqual(response.data['application']['payment_verified_by'], 'admin')
        self.assertTrue(AdminActivity.objects.filter(action='APPROVE').exists())
        self.assertEqual(mail.outbox[-1].to, ['ravi@example.com'])

        response = self.client.post(f'/api/payments/{self.application.id}/approve/')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_approve_before_submission_is_a_conflict(self):
        self.as_admin()
        response = self.client.post(f'/api/payments/{self.application.id}/approve/')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.application.refresh_from_db()
        self.assertIsNone(self.application.certificate_number)

    def test_reject_and_resubmit(self):
        self.submit()
        self.as_admin()
        url = f'/api/payments/{self.application.id}/reject/'
        response = self.client.post(url, {'reason': ''}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Enter reason to reject')

        response = self.client.post(url, {'reason': 'Screenshot is unreadable'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['application']['payment_status'], 'failed')
        self.assertIn('Screenshot is unreadable', mail.outbox[-1].body)

        self.client.credentials()
        response = self.submit(transaction_id='UPI7788')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIsNone(response.data['application']['rejection_reason'])

    def test_expired_admin_session(self):
        self.submit()
        session = self.admin.sessions.get(token=self.admin_token)
        session.expires_at = session.created_at
        session.save()
        self.as_admin()
        response = self.client.post(f'/api/payments/{self.application.id}/approve/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class PlatformSettingTestCase(TestCase):
    def setUp(self):
        self.client = APIClient()

    def test_missing_setting(self):
        response = self.client.get('/api/payments/settings/upi_id/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_read_and_update_upi_id(self):
        PlatformSetting.objects.create(setting_key='upi_id', setting_value='portal@okaxis')
        response = self.client.get('/api/payments/settings/upi_id/')
        self.assertEqual(response.data['setting_value'], 'portal@okaxis')

        response = self.client.put('/api/payments/settings/upi_id/', {'setting_value': 'new@upi'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

        admin = AdminCredential.objects.create(username='admin', password_hash=hash_password('pw'))
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {open_admin_session(admin).token}')
        response = self.client.put('/api/payments/settings/upi_id/', {'setting_value': 'new@upi'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(PlatformSetting.objects.get(setting_key='upi_id').setting_value, 'new@upi')
