from datetime import timedelta
from decimal import Decimal
from unittest import mock

from django.db import DatabaseError
from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APIClient

from courses.models import CertificateTrack
from students import workflow
from .models import AdminActivity, AdminCredential, AdminSession, Notification
from .utils import clear_expired_sessions, hash_password, open_admin_session

AUTH_URL = '/api/admin-auth/'


class AdminAuthTestCase(TestCase):
    def setUp(self):
        self.client = APIClient()

    def post(self, **data):
        return self.client.post(AUTH_URL, data, format='json')

    def test_hash_password_is_sha256_hex(self):
        digest = hash_password('admin123')
        self.assertEqual(len(digest), 64)
        self.assertEqual(digest, hash_password('admin123'))
        self.assertEqual(hash_password(''), 'e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855')

    def test_setup_then_login(self):
        response = self.post(action='setup', username='root', password='s3cret')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {'success': True, 'message': 'Admin account created'})
        self.assertEqual(AdminCredential.objects.get().password_hash, hash_password('s3cret'))

        response = self.post(action='login', username='root', password='s3cret')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['success'])
        self.assertTrue(AdminSession.objects.filter(token=response.data['token']).exists())
        self.assertEqual(
            list(AdminActivity.objects.order_by('id').values_list('action', flat=True)),
            ['SETUP', 'LOGIN'],
        )

    def test_setup_only_once(self):
        self.post(action='setup', username='root', password='s3cret')
        response = self.post(action='setup', username='other', password='x')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data, {'success': False, 'message': 'Admin already exists'})
        self.assertEqual(AdminCredential.objects.count(), 1)

    def test_bad_credentials_are_indistinguishable(self):
        AdminCredential.objects.create(username='root', password_hash=hash_password('s3cret'))
        wrong_password = self.post(action='login', username='root', password='nope')
        unknown_user = self.post(action='login', username='ghost', password='s3cret')
        for response in (wrong_password, unknown_user):
            self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
            self.assertEqual(response.data, {'success': False, 'message': 'Invalid credentials'})
        self.assertFalse(AdminSession.objects.exists())

    def test_missing_fields_and_unknown_action(self):
        response = self.post(action='login', username='root')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.post(action='reset', username='root', password='x')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Invalid action')

    def test_non_text_credentials_are_rejected(self):
        for data in ({'username': 123, 'password': 'x'}, {'username': 'root', 'password': ['x']}):
            response = self.post(action='login', **data)
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
            self.assertEqual(response.data, {'success': False, 'message': 'Username and password must be text'})
        self.assertFalse(AdminSession.objects.exists())

    def test_concurrent_setup_keeps_a_single_admin(self):
        AdminCredential.objects.create(username='root', password_hash=hash_password('s3cret'))
        # the other request has already passed its existence check
        with mock.patch.object(AdminCredential.objects, 'exists', return_value=False):
            response = self.post(action='setup', username='other', password='x')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data, {'success': False, 'message': 'Admin already exists'})
        self.assertEqual(list(AdminCredential.objects.values_list('username', flat=True)), ['root'])
        self.assertFalse(AdminActivity.objects.exists())

    def test_database_error(self):
        with mock.patch.object(AdminCredential.objects, 'filter', side_effect=DatabaseError('down')):
            response = self.post(action='login', username='root', password='x')
        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.data, {'success': False, 'message': 'Database error'})

    def test_logout_ends_session(self):
        admin = AdminCredential.objects.create(username='root', password_hash=hash_password('s3cret'))
        session = open_admin_session(admin)
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {session.token}')

        response = self.client.post(f'{AUTH_URL}logout/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(AdminSession.objects.filter(pk=session.pk).exists())

        response = self.client.get('/api/admin-panel/dashboard/stats/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_clear_expired_sessions(self):
        admin = AdminCredential.objects.create(username='root', password_hash=hash_password('s3cret'))
        live = open_admin_session(admin)
        stale = open_admin_session(admin)
        AdminSession.objects.filter(pk=stale.pk).update(expires_at=timezone.now() - timedelta(minutes=1))
        self.assertEqual(clear_expired_sessions(), 1)
        self.assertEqual(list(AdminSession.objects.values_list('pk', flat=True)), [live.pk])


class AdminPanelTestCase(TestCase):
    def setUp(self):
        self.admin = AdminCredential.objects.create(username='root', password_hash=hash_password('s3cret'))
        self.track = CertificateTrack.objects.create(course_name='Web Dev', price=Decimal('110.00'))
        self.client = APIClient()

    def authenticate(self):
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {open_admin_session(self.admin).token}')

    def test_dashboard_stats_authenticated(self):
        """Test dashboard stats endpoint with an admin session"""
        workflow.register_application(self.track.id, {
            'full_name': 'Student B', 'email': 'b@example.com', 'mobile': '9000000002',
            'college_name': 'East College', 'branch': 'ME', 'year': '1st Year',
        })
        self.authenticate()
        response = self.client.get('/api/admin-panel/dashboard/stats/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total_applications'], 1)
        self.assertEqual(response.data['pending_payments'], 1)
        self.assertEqual(response.data['active_tracks'], 1)

    def test_dashboard_stats_unauthenticated(self):
        """Test dashboard stats endpoint without authentication"""
        response = self.client.get('/api/admin-panel/dashboard/stats/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_unknown_bearer_token(self):
        self.client.credentials(HTTP_AUTHORIZATION='Bearer not-a-real-token')
        response = self.client.get('/api/admin-panel/dashboard/stats/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_new_application_creates_notification(self):
        workflow.register_application(self.track.id, {
            'full_name': 'Student C', 'email': 'c@example.com', 'mobile': '9000000003',
            'college_name': 'West College', 'branch': 'CE', 'year': '2nd Year',
        })
        notification = Notification.objects.get()
        self.assertEqual(notification.title, 'New Application')
        self.assertFalse(notification.is_read)

        self.authenticate()
        response = self.client.get('/api/admin-panel/notifications/unread_count/')
        self.assertEqual(response.data['count'], 1)
        self.client.post(f'/api/admin-panel/notifications/{notification.id}/mark_read/')
        notification.refresh_from_db()
        self.assertTrue(notification.is_read)

    def test_activity_log(self):
        AdminActivity.objects.create(
            admin=self.admin,
            action='APPROVE',
            model_name='Application',
            description='Approved payment'
        )
        self.authenticate()
        response = self.client.get('/api/admin-panel/activities/', {'action': 'APPROVE'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 1)
        self.assertEqual(response.data['results'][0]['admin_name'], 'root')
