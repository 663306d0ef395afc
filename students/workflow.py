"""
Application state machine.

Every change to ``Application.test_passed`` and ``Application.payment_status``
goes through this module. Each transition is a single guarded ``UPDATE``
(``WHERE payment_status = <expected>``) so a stale read can never apply a
transition twice or approve a payment that was already decided.

    REGISTERED -> TEST_PENDING -> TEST_PASSED/PAYMENT_PENDING
        -> UNDER_VERIFICATION -> COMPLETED | REJECTED
    REJECTED -> UNDER_VERIFICATION   (resubmission)
"""
import logging
import os
import re

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.files.storage import default_storage
from django.core.validators import validate_email
from django.db import IntegrityError, transaction
from django.db.models import Q
from django.utils import timezone

from certification_portal.exceptions import (
    NotFoundError, StateConflictError, StorageError, ValidationError,
)
from certificates.utils import generate_certificate_number
from courses.models import CertificateTrack
from .models import Application

logger = logging.getLogger(__name__)

MOBILE_PATTERN = re.compile(r"^\d{10}$")
PROFILE_FIELDS = ("full_name", "email", "mobile", "college_name", "branch", "year")
CERTIFICATE_NUMBER_ATTEMPTS = 3
TRANSACTION_ID_MAX_LENGTH = 100


def validate_mobile(mobile):
    mobile = (mobile or "").strip()
    if not MOBILE_PATTERN.match(mobile):
        raise ValidationError("Please enter a valid 10-digit mobile number")
    return mobile


def get_application(application_id):
    try:
        return Application.objects.select_related("track").get(pk=application_id)
    except (Application.DoesNotExist, ValueError, DjangoValidationError):
        raise NotFoundError("Application not found.")


def _raise_transition_error(application_id, action):
    current = Application.objects.filter(pk=application_id).values_list("payment_status", flat=True).first()
    if current is None:
        raise NotFoundError("Application not found.")
    raise StateConflictError(f"Cannot {action} while payment status is '{current}'.")


# ----------------------------------------------------------
# Create
# ----------------------------------------------------------
def register_application(track_id, profile, user=None):
    """Create an application in REGISTERED / pending. Nothing is written on failure."""
    cleaned = {}
    for field in PROFILE_FIELDS:
        value = profile.get(field)
        value = value.strip() if isinstance(value, str) else value
        if not value:
            raise ValidationError("Please fill in all fields")
        cleaned[field] = value

    cleaned["mobile"] = validate_mobile(cleaned["mobile"])
    try:
        validate_email(cleaned["email"])
    except DjangoValidationError:
        raise ValidationError("Please enter a valid email address")
    if cleaned["branch"] not in dict(Application.BRANCH_CHOICES):
        raise ValidationError(f"Unknown branch '{cleaned['branch']}'")
    if cleaned["year"] not in dict(Application.YEAR_CHOICES):
        raise ValidationError(f"Unknown year '{cleaned['year']}'")

    try:
        track = CertificateTrack.objects.get(pk=track_id, is_active=True)
    except (CertificateTrack.DoesNotExist, ValueError, DjangoValidationError):
        raise NotFoundError("The internship domain you're looking for doesn't exist.")

    application = Application.objects.create(
        user=user,
        track=track,
        internship_domain=track.course_name,
        completion_date=profile.get("completion_date"),
        payment_status=Application.PENDING,
        test_passed=None,
        **cleaned,
    )
    logger.info(f"Application {application.id} registered for {track.course_name}")
    return application


# ----------------------------------------------------------
# Test outcome
# ----------------------------------------------------------
def record_test_result(application, passed):
    """Reflect a scored attempt onto the application. A failed attempt never undoes a pass."""
    now = timezone.now()
    if passed:
        Application.objects.filter(
            Q(test_passed__isnull=True) | Q(test_passed=False), pk=application.pk
        ).update(test_passed=True, updated_at=now)
    else:
        Application.objects.filter(pk=application.pk, test_passed__isnull=True).update(
            test_passed=False, updated_at=now
        )
    application.refresh_from_db(fields=["test_passed", "updated_at"])
    return application


# ----------------------------------------------------------
# Payment proof
# ----------------------------------------------------------
def screenshot_path(application, filename):
    ext = os.path.splitext(filename or "")[1].lstrip(".").lower() or "png"
    owner = str(application.user_id) if application.user_id else "anonymous"
    stamp = int(timezone.now().timestamp() * 1000)
    return f"{settings.PAYMENT_SCREENSHOT_DIR}/{owner}/{application.id}_{stamp}.{ext}"


def submit_payment_proof(application_id, transaction_id, screenshot, storage=None):
    """
    Store the screenshot, then move the application to under_verification.

    The status is only written after the upload succeeded; if the row was
    approved in the meantime the uploaded file is removed again.
    """
    storage = storage or default_storage

    transaction_id = (transaction_id or "").strip()
    if not transaction_id:
        raise ValidationError("Please enter your transaction ID")
    if len(transaction_id) > TRANSACTION_ID_MAX_LENGTH:
        raise ValidationError(f"Transaction ID must be at most {TRANSACTION_ID_MAX_LENGTH} characters")
    if screenshot is None:
        raise ValidationError("Please upload payment screenshot")
    if screenshot.size > settings.MAX_SCREENSHOT_BYTES:
        raise ValidationError("Please upload an image under 5MB")

    application = get_application(application_id)
    if application.test_passed is not True:
        raise StateConflictError("Pass the assessment test before submitting payment.")
    if application.payment_status == Application.COMPLETED:
        raise StateConflictError(f"Cannot submit payment while payment status is '{application.payment_status}'.")

    try:
        saved_name = storage.save(screenshot_path(application, screenshot.name), screenshot)
        locator = storage.url(saved_name)
    except Exception as e:
        logger.error(f"Screenshot upload failed for application {application.id}: {e}", exc_info=True)
        raise StorageError("Failed to upload payment screenshot. Please try again.")

    updated = Application.objects.filter(
        pk=application.pk, test_passed=True
    ).exclude(payment_status=Application.COMPLETED).update(
        transaction_id=transaction_id,
        payment_screenshot_url=locator,
        payment_status=Application.UNDER_VERIFICATION,
        rejection_reason=None,
        updated_at=timezone.now(),
    )
    if not updated:
        try:
            storage.delete(saved_name)
        except Exception as e:
            logger.warning(f"Could not remove orphaned screenshot {saved_name}: {e}")
        _raise_transition_error(application.pk, "submit payment")

    logger.info(f"Payment proof submitted for application {application.id}")
    application.refresh_from_db()
    return application


# ----------------------------------------------------------
# Admin decision
# ----------------------------------------------------------
def approve_payment(application_id, verified_by):
    """under_verification -> completed, issuing the certificate number in the same update."""
    for attempt in range(1, CERTIFICATE_NUMBER_ATTEMPTS + 1):
        now = timezone.now()
        try:
            with transaction.atomic():
                updated = Application.objects.filter(
                    pk=application_id, payment_status=Application.UNDER_VERIFICATION
                ).update(
                    payment_status=Application.COMPLETED,
                    payment_verified_at=now,
                    payment_verified_by=verified_by,
                    rejection_reason=None,
                    certificate_number=generate_certificate_number(now),
                    certificate_issued_at=now,
                    updated_at=now,
                )
        except IntegrityError:
            logger.warning(f"Certificate number collision for application {application_id} (attempt {attempt})")
            continue

        if not updated:
            _raise_transition_error(application_id, "approve payment")

        application = get_application(application_id)
        logger.info(
            f"Payment approved for application {application_id} by {verified_by}; "
            f"certificate {application.certificate_number} issued"
        )
        return application

    raise StorageError("Could not issue a unique certificate number. Please try again.")


def reject_payment(application_id, reason, rejected_by=None):
    """under_verification -> failed. The student may resubmit afterwards."""
    reason = (reason or "").strip()
    if not reason:
        raise ValidationError("Enter reason to reject")

    updated = Application.objects.filter(
        pk=application_id, payment_status=Application.UNDER_VERIFICATION
    ).update(
        payment_status=Application.FAILED,
        rejection_reason=reason,
        updated_at=timezone.now(),
    )
    if not updated:
        _raise_transition_error(application_id, "reject payment")

    logger.info(f"Payment rejected for application {application_id} by {rejected_by or 'admin'}")
    return get_application(application_id)
