import uuid

from django.conf import settings
from django.db import models

from certification_portal.exceptions import StateConflictError


class ApplicationStage(models.TextChoices):
    REGISTERED = "REGISTERED", "Registered"
    TEST_PENDING = "TEST_PENDING", "Test Pending"
    TEST_PASSED = "TEST_PASSED", "Test Passed"
    PAYMENT_PENDING = "PAYMENT_PENDING", "Payment Pending"
    UNDER_VERIFICATION = "UNDER_VERIFICATION", "Under Verification"
    COMPLETED = "COMPLETED", "Completed"
    REJECTED = "REJECTED", "Payment Rejected"


class Application(models.Model):
    """One student's end-to-end record against one certificate track."""
    BRANCH_CHOICES = [
        ("CSE", "CSE"),
        ("IT", "IT"),
        ("ECE", "ECE"),
        ("EEE", "EEE"),
        ("ME", "ME"),
        ("CE", "CE"),
        ("Other", "Other"),
    ]

    YEAR_CHOICES = [
        ("1st Year", "1st Year"),
        ("2nd Year", "2nd Year"),
        ("3rd Year", "3rd Year"),
        ("4th Year", "4th Year"),
    ]

    PENDING = "pending"
    UNDER_VERIFICATION = "under_verification"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"

    PAYMENT_STATUS_CHOICES = [
        (PENDING, "Pending"),
        (UNDER_VERIFICATION, "Under Verification"),
        (COMPLETED, "Completed"),
        (FAILED, "Failed"),
        (REFUNDED, "Refunded"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL, related_name="applications"
    )

    # profile
    full_name = models.CharField(max_length=255)
    email = models.EmailField()
    mobile = models.CharField(max_length=10)
    college_name = models.CharField(max_length=255)
    branch = models.CharField(max_length=10, choices=BRANCH_CHOICES)
    year = models.CharField(max_length=10, choices=YEAR_CHOICES)

    # track
    track = models.ForeignKey("courses.CertificateTrack", on_delete=models.PROTECT, related_name="applications")
    internship_domain = models.CharField(max_length=150, blank=True, null=True)
    completion_date = models.DateField(blank=True, null=True)

    # test outcome
    test_passed = models.BooleanField(null=True, blank=True, default=None)

    # payment
    payment_status = models.CharField(
        max_length=30, choices=PAYMENT_STATUS_CHOICES, default=PENDING, db_index=True
    )
    transaction_id = models.CharField(max_length=100, blank=True, null=True)
    payment_screenshot_url = models.CharField(max_length=500, blank=True, null=True)
    payment_verified_at = models.DateTimeField(blank=True, null=True)
    payment_verified_by = models.CharField(max_length=150, blank=True, null=True)
    rejection_reason = models.TextField(blank=True, null=True)

    # certificate
    certificate_number = models.CharField(max_length=50, unique=True, blank=True, null=True)
    certificate_issued_at = models.DateTimeField(blank=True, null=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["user", "payment_status"], name="application_user_status_idx"),
        ]

    def __str__(self):
        return f"{self.full_name} - {self.internship_domain or self.track_id} ({self.payment_status})"

    @property
    def stage(self):
        if self.payment_status == self.COMPLETED:
            return ApplicationStage.COMPLETED
        if self.payment_status == self.FAILED:
            return ApplicationStage.REJECTED
        if self.payment_status == self.UNDER_VERIFICATION:
            return ApplicationStage.UNDER_VERIFICATION
        if self.test_passed:
            return ApplicationStage.PAYMENT_PENDING
        if self.test_passed is False:
            return ApplicationStage.TEST_PENDING
        return ApplicationStage.REGISTERED

    def check_invariants(self):
        if self.payment_status == self.COMPLETED and not self.certificate_number:
            raise StateConflictError("A completed application must carry a certificate number.")
        if self.certificate_number and self.payment_status != self.COMPLETED:
            raise StateConflictError("Only completed applications can carry a certificate number.")
        if self.payment_status != self.PENDING and self.test_passed is not True:
            raise StateConflictError("The assessment test must be passed before payment is submitted.")

    def save(self, *args, **kwargs):
        self.check_invariants()
        super().save(*args, **kwargs)
