import hmac
import logging

from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import Count, Q
from django.utils import timezone
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from assessments.models import TestAttempt
from certification_portal.exceptions import AuthError
from courses.models import CertificateTrack
from students.models import Application
from students.serializers import ApplicationSerializer
from .authentication import AdminSessionAuthentication
from .filters import AdminActivityFilter
from .models import AdminActivity, AdminCredential, Notification
from .permissions import IsPlatformAdmin
from .serializers import (
    AdminActivitySerializer, NotificationSerializer,
    DashboardStatsSerializer, TrackStatsSerializer,
)
from .utils import (
    clear_expired_sessions, get_client_ip, hash_password, log_admin_activity, open_admin_session,
)

logger = logging.getLogger(__name__)


def auth_response(success, http_status, **payload):
    return Response({"success": success, **payload}, status=http_status)


class AdminAuthView(APIView):
    """
    Single endpoint for the admin credential handshake:
    {"action": "login" | "setup", "username": ..., "password": ...}
    """
    authentication_classes = []
    permission_classes = [AllowAny]

    def post(self, request):
        data = request.data if isinstance(request.data, dict) else {}
        action_name = data.get("action")
        username = data.get("username") or ""
        password = data.get("password") or ""

        if action_name not in ("login", "setup"):
            return auth_response(False, status.HTTP_400_BAD_REQUEST, message="Invalid action")
        if not isinstance(username, str) or not isinstance(password, str):
            return auth_response(False, status.HTTP_400_BAD_REQUEST, message="Username and password must be text")
        username = username.strip()
        if not username or not password:
            return auth_response(False, status.HTTP_400_BAD_REQUEST, message="Username and password are required")

        try:
            if action_name == "login":
                return self.login(request, username, password)
            return self.create_admin(request, username, password)
        except DatabaseError as e:
            logger.error(f"Admin auth database error during {action_name}: {e}")
            return auth_response(False, status.HTTP_500_INTERNAL_SERVER_ERROR, message="Database error")

    def login(self, request, username, password):
        admin = AdminCredential.objects.filter(username=username).first()
        digest = hash_password(password)

        # same answer for unknown user and wrong password
        if admin is None or not hmac.compare_digest(admin.password_hash, digest):
            logger.warning(f"Failed admin login attempt from {get_client_ip(request)}")
            raise AuthError()

        clear_expired_sessions()
        session = open_admin_session(admin)
        log_admin_activity(
            admin=admin,
            action="LOGIN",
            model_name="AdminCredential",
            object_id=admin.pk,
            description=f"Admin {admin.username} logged in",
            ip_address=get_client_ip(request),
        )
        logger.info(f"Admin {admin.username} logged in")
        return auth_response(True, status.HTTP_200_OK, token=session.token, expires_at=session.expires_at)

    def create_admin(self, request, username, password):
        try:
            with transaction.atomic():
                if AdminCredential.objects.exists():
                    return auth_response(False, status.HTTP_400_BAD_REQUEST, message="Admin already exists")
                admin = AdminCredential.objects.create(username=username, password_hash=hash_password(password))
        except IntegrityError:
            logger.warning(f"Concurrent admin setup for {username} lost to an existing account")
            return auth_response(False, status.HTTP_400_BAD_REQUEST, message="Admin already exists")

        log_admin_activity(
            admin=admin,
            action="SETUP",
            model_name="AdminCredential",
            object_id=admin.pk,
            description=f"Admin account {admin.username} created",
            ip_address=get_client_ip(request),
        )
        logger.info(f"Admin account {admin.username} created")
        return auth_response(True, status.HTTP_200_OK, message="Admin account created")


class AdminLogoutView(APIView):
    authentication_classes = [AdminSessionAuthentication]
    permission_classes = [IsPlatformAdmin]

    def post(self, request):
        admin = request.user
        request.auth.delete()
        log_admin_activity(
            admin=admin,
            action="LOGOUT",
            model_name="AdminCredential",
            object_id=admin.pk,
            description=f"Admin {admin.username} logged out",
            ip_address=get_client_ip(request),
        )
        return Response({"success": True, "message": "Logged out successfully"})


class DashboardViewSet(viewsets.ViewSet):
    """Dashboard statistics and analytics"""
    permission_classes = [IsPlatformAdmin]

    @action(detail=False, methods=['get'])
    def stats(self, request):
        """Get overall dashboard statistics"""
        applications = Application.objects.all()
        by_status = {
            row["payment_status"]: row["count"]
            for row in applications.order_by().values("payment_status").annotate(count=Count("id"))
        }

        attempts = TestAttempt.objects.filter(submitted_at__isnull=False)
        total_attempts = attempts.count()
        passed_attempts = attempts.filter(passed=True).count()

        current_month = timezone.now().replace(day=1, hour=0, minute=0, second=0, microsecond=0)

        stats_data = {
            'total_applications': applications.count(),
            'pending_payments': by_status.get(Application.PENDING, 0),
            'under_verification': by_status.get(Application.UNDER_VERIFICATION, 0),
            'completed': by_status.get(Application.COMPLETED, 0),
            'rejected': by_status.get(Application.FAILED, 0),
            'refunded': by_status.get(Application.REFUNDED, 0),
            'tests_passed': applications.filter(test_passed=True).count(),
            'total_attempts': total_attempts,
            'pass_rate': round(passed_attempts * 100 / total_attempts, 1) if total_attempts else 0,
            'active_tracks': CertificateTrack.objects.filter(is_active=True).count(),
            'new_applications_this_month': applications.filter(created_at__gte=current_month).count(),
            'certificates_this_month': applications.filter(certificate_issued_at__gte=current_month).count(),
        }

        serializer = DashboardStatsSerializer(stats_data)
        return Response(serializer.data)

    @action(detail=False, methods=['get'])
    def recent_applications(self, request):
        """Get recently registered applications"""
        try:
            limit = int(request.query_params.get('limit', 10))
        except ValueError:
            limit = 10
        applications = Application.objects.select_related('track').order_by('-created_at')[:max(1, min(limit, 100))]
        return Response(ApplicationSerializer(applications, many=True).data)

    @action(detail=False, methods=['get'])
    def track_stats(self, request):
        """Get statistics for each certificate track"""
        tracks = CertificateTrack.objects.annotate(
            application_count=Count('applications', distinct=True),
            completed_count=Count(
                'applications', filter=Q(applications__payment_status=Application.COMPLETED), distinct=True
            ),
            question_count=Count('questions', distinct=True),
        ).order_by('course_name')

        track_data = [{
            'track_id': track.id,
            'course_name': track.course_name,
            'application_count': track.application_count,
            'completed_count': track.completed_count,
            'question_count': track.question_count,
            'total_revenue': track.price * track.completed_count,
        } for track in tracks]

        serializer = TrackStatsSerializer(track_data, many=True)
        return Response(serializer.data)


class AdminActivityViewSet(viewsets.ReadOnlyModelViewSet):
    """View admin activity logs"""
    queryset = AdminActivity.objects.select_related('admin').all()
    serializer_class = AdminActivitySerializer
    permission_classes = [IsPlatformAdmin]
    filterset_class = AdminActivityFilter


class NotificationViewSet(viewsets.ReadOnlyModelViewSet):
    """Admin inbox"""
    queryset = Notification.objects.all()
    serializer_class = NotificationSerializer
    permission_classes = [IsPlatformAdmin]
    filterset_fields = ['is_read', 'priority']

    @action(detail=True, methods=['post'])
    def mark_read(self, request, pk=None):
        """Mark notification as read"""
        notification = self.get_object()
        notification.is_read = True
        notification.save(update_fields=['is_read'])
        return Response({'message': 'Notification marked as read'})

    @action(detail=False, methods=['post'])
    def mark_all_read(self, request):
        """Mark all notifications as read"""
        self.get_queryset().update(is_read=True)
        return Response({'message': 'All notifications marked as read'})

    @action(detail=False, methods=['get'])
    def unread_count(self, request):
        """Get count of unread notifications"""
        count = self.get_queryset().filter(is_read=False).count()
        return Response({'count': count})
