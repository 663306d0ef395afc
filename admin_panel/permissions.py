from django.contrib.auth import get_user_model
from rest_framework.permissions import BasePermission

from .models import AdminCredential


class IsPlatformAdmin(BasePermission):
    """Allow access only with a valid admin session token."""
    message = "Admin access required"

    def has_permission(self, request, view):
        return isinstance(request.user, AdminCredential)


class IsStudentAccount(BasePermission):
    """Allow access to signed-in student accounts."""
    def has_permission(self, request, view):
        user = request.user
        return bool(user and isinstance(user, get_user_model()) and user.is_authenticated)
