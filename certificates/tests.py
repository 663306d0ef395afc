from decimal import Decimal

from django.core.files.storage import InMemoryStorage
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase, override_settings
from rest_framework import status
from rest_framework.test import APIClient

from courses.models import CertificateTrack
from students import workflow
from .utils import build_verification_url, generate_certificate_number, normalize_certificate_number

PROFILE = {
    'full_name': 'Meera Iyer',
    'email': 'meera@example.com',
    'mobile': '9988776655',
    'college_name': 'Lake View Institute',
    'branch': 'EEE',
    'year': '1st Year',
}


@override_settings(FRONTEND_URL='https://certs.example.com')
class CertificateTestCase(TestCase):
    def setUp(self):
        self.track = CertificateTrack.objects.create(course_name='Machine Learning', price=Decimal('199.00'))
        self.application = workflow.register_application(self.track.id, PROFILE)
        workflow.record_test_result(self.application, True)
        workflow.submit_payment_proof(
            self.application.id,
            'UPI-ML-1',
            SimpleUploadedFile('proof.jpg', b'0' * 64, content_type='image/jpeg'),
            storage=InMemoryStorage(),
        )
        self.client = APIClient()

    def complete(self):
        return workflow.approve_payment(self.application.id, 'admin')

    def test_certificate_number_format(self):
        self.assertRegex(generate_certificate_number(), r'^CERT-\d{8}-[0-9A-F]{8}$')
        self.assertEqual(normalize_certificate_number('  cert-20250101-abcd1234 '), 'CERT-20250101-ABCD1234')

    def test_verify_completed_certificate(self):
        application = self.complete()
        lookup = f'  {application.certificate_number.lower()} '
        response = self.client.get('/api/certificates/verify/', {'id': lookup})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['verified'])
        certificate = response.data['certificate']
        self.assertEqual(certificate['full_name'], 'Meera Iyer')
        self.assertEqual(certificate['internship_domain'], 'Machine Learning')
        self.assertNotIn('email', certificate)

    def test_verify_unknown_and_unpaid_look_the_same(self):
        unknown = self.client.get('/api/certificates/verify/', {'id': 'CERT-20250101-00000000'})
        self.assertEqual(unknown.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(unknown.data, {'success': False, 'message': 'Certificate not found'})

        blank = self.client.get('/api/certificates/verify/', {'id': '   '})
        self.assertEqual(blank.status_code, status.HTTP_400_BAD_REQUEST)

    def test_certificate_requires_completed_payment(self):
        response = self.client.get(f'/api/certificates/{self.application.id}/')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        response = self.client.get(f'/api/certificates/{self.application.id}/download/')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_certificate_detail_has_verification_url(self):
        application = self.complete()
        response = self.client.get(f'/api/certificates/{application.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(
            response.data['verification_url'],
            f'https://certs.example.com/verify?id={application.certificate_number}',
        )
        self.assertEqual(response.data['verification_url'], build_verification_url(application.certificate_number))

    def test_download_pdf(self):
        application = self.complete()
        response = self.client.get(f'/api/certificates/{application.id}/download/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response['Content-Type'], 'application/pdf')
        self.assertIn(application.certificate_number, response['Content-Disposition'])
        self.assertTrue(response.content.startswith(b'%PDF'))

    def test_unknown_application(self):
        response = self.client.get('/api/certificates/6f1c2d3e-0000-4000-8000-000000000000/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
