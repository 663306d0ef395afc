import uuid

from django.db import models


class CertificateTrack(models.Model):
    """A certificate course a student can apply for (e.g. "Web Development")."""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    course_name = models.CharField(max_length=150, unique=True)
    description = models.TextField(blank=True, null=True)
    icon = models.CharField(max_length=50, blank=True, null=True)
    price = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['course_name']
        verbose_name = "Certificate Track"
        verbose_name_plural = "Certificate Tracks"

    def __str__(self):
        return self.course_name


class Question(models.Model):
    OPTION_CHOICES = [
        ("A", "A"),
        ("B", "B"),
        ("C", "C"),
        ("D", "D"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    track = models.ForeignKey(CertificateTrack, related_name='questions', on_delete=models.CASCADE)
    question = models.TextField()
    option_a = models.CharField(max_length=500)
    option_b = models.CharField(max_length=500)
    option_c = models.CharField(max_length=500)
    option_d = models.CharField(max_length=500)
    correct_option = models.CharField(max_length=1, choices=OPTION_CHOICES)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['created_at']
        verbose_name = "MCQ Question"
        verbose_name_plural = "MCQ Questions"

    def __str__(self):
        return f"{self.track.course_name} - {self.question[:60]}"

    def option_text(self, option):
        return getattr(self, f"option_{option.lower()}", None)
