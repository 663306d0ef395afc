import uuid

from django.db import models
from django.utils import timezone


class TestAttempt(models.Model):
    """One sitting of the MCQ test. Opened on start, finalised once on submit."""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    application = models.ForeignKey(
        "students.Application", on_delete=models.CASCADE, related_name="attempts"
    )
    question_ids = models.JSONField(default=list)
    answers = models.JSONField(default=dict, blank=True)
    score = models.PositiveIntegerField(null=True, blank=True)
    total_questions = models.PositiveIntegerField(default=0)
    passed = models.BooleanField(null=True, blank=True)
    auto_submitted = models.BooleanField(default=False)
    started_at = models.DateTimeField(auto_now_add=True)
    expires_at = models.DateTimeField()
    submitted_at = models.DateTimeField(null=True, blank=True)

    # keep pytest from collecting this model as a test class
    __test__ = False

    class Meta:
        ordering = ["-started_at"]

    def __str__(self):
        result = "open" if self.submitted_at is None else f"{self.score}/{self.total_questions}"
        return f"{self.application_id} - {result}"

    def is_late(self, grace, when=None):
        return (when or timezone.now()) > self.expires_at + grace
