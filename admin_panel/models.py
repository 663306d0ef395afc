from django.db import models
from django.utils import timezone


class AdminCredential(models.Model):
    """Portal administrator. Separate from student accounts and django.contrib.auth."""
    username = models.CharField(max_length=150, unique=True)
    # one row at most; a second insert fails on this column
    singleton = models.BooleanField(default=True, unique=True, editable=False)
    password_hash = models.CharField(max_length=64)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = "Admin Credential"

    def __str__(self):
        return self.username

    # DRF treats request.user as authenticated once AdminSessionAuthentication returns this object
    @property
    def is_authenticated(self):
        return True

    @property
    def is_anonymous(self):
        return False


class AdminSession(models.Model):
    token = models.CharField(max_length=64, unique=True)
    admin = models.ForeignKey(AdminCredential, on_delete=models.CASCADE, related_name="sessions")
    created_at = models.DateTimeField(auto_now_add=True)
    expires_at = models.DateTimeField()

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.admin.username} - expires {self.expires_at:%Y-%m-%d %H:%M}"

    def is_expired(self):
        return timezone.now() >= self.expires_at


class AdminActivity(models.Model):
    """Track admin actions for audit purposes"""
    ACTION_CHOICES = [
        ('SETUP', 'Setup'),
        ('LOGIN', 'Login'),
        ('LOGOUT', 'Logout'),
        ('APPROVE', 'Approve'),
        ('REJECT', 'Reject'),
    ]

    admin = models.ForeignKey(AdminCredential, on_delete=models.CASCADE, related_name="activities")
    action = models.CharField(max_length=20, choices=ACTION_CHOICES)
    model_name = models.CharField(max_length=100)
    object_id = models.CharField(max_length=64, null=True, blank=True)
    description = models.TextField()
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    timestamp = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-timestamp']
        verbose_name_plural = "Admin Activities"

    def __str__(self):
        return f"{self.admin.username} - {self.action} - {self.model_name}"


class Notification(models.Model):
    """Inbox entries for the admin dashboard"""
    PRIORITY_CHOICES = [
        ('LOW', 'Low'),
        ('MEDIUM', 'Medium'),
        ('HIGH', 'High'),
        ('URGENT', 'Urgent'),
    ]

    title = models.CharField(max_length=200)
    message = models.TextField()
    priority = models.CharField(max_length=10, choices=PRIORITY_CHOICES, default='MEDIUM')
    is_read = models.BooleanField(default=False)
    object_id = models.CharField(max_length=64, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return self.title
