import hashlib
import logging
import secrets
from datetime import timedelta

from django.conf import settings
from django.utils import timezone

from .models import AdminActivity, AdminSession, Notification

logger = logging.getLogger(__name__)


def hash_password(password):
    """SHA-256 hex digest: deterministic and fixed length (64 chars)."""
    return hashlib.sha256((password or "").encode("utf-8")).hexdigest()


def generate_token():
    return secrets.token_hex(32)


def open_admin_session(admin):
    return AdminSession.objects.create(
        admin=admin,
        token=generate_token(),
        expires_at=timezone.now() + timedelta(hours=settings.ADMIN_SESSION_TTL_HOURS),
    )


def clear_expired_sessions():
    return AdminSession.objects.filter(expires_at__lte=timezone.now()).delete()[0]


def get_client_ip(request):
    """Get client IP address"""
    x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
    if x_forwarded_for:
        ip = x_forwarded_for.split(',')[0].strip()
    else:
        ip = request.META.get('REMOTE_ADDR')
    return ip


def log_admin_activity(admin, action, model_name, object_id=None, description="", ip_address=None):
    """Helper function to log admin activities"""
    try:
        AdminActivity.objects.create(
            admin=admin,
            action=action,
            model_name=model_name,
            object_id=str(object_id) if object_id is not None else None,
            description=description,
            ip_address=ip_address
        )
    except Exception as e:
        logger.error(f"Failed to log admin activity: {str(e)}")


def create_notification(title, message, priority='MEDIUM', object_id=None):
    """Helper function to create notifications"""
    try:
        return Notification.objects.create(
            title=title,
            message=message,
            priority=priority,
            object_id=str(object_id) if object_id is not None else None,
        )
    except Exception as e:
        logger.error(f"Failed to create notification: {str(e)}")
        return None

