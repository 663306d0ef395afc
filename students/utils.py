import logging

from django.conf import settings
from django.core.mail import send_mail

from certificates.utils import build_verification_url

logger = logging.getLogger(__name__)


def _send(subject, message, recipient_list):
    recipient_list = [r for r in recipient_list if r]
    if not recipient_list:
        return 0
    return send_mail(
        subject=subject,
        message=message,
        from_email=f"{settings.PORTAL_NAME} <{settings.DEFAULT_FROM_EMAIL}>",
        recipient_list=recipient_list,
        fail_silently=True,
    )


def send_payment_submitted_email(application):
    """Let the admin inbox know a proof is waiting for review."""
    message = (
        f"{application.full_name} ({application.email}) submitted payment proof "
        f"for {application.internship_domain}.\n\n"
        f"Transaction ID: {application.transaction_id}\n"
        f"Application: {application.id}\n"
    )
    sent = _send("New payment proof to verify", message, [settings.ADMIN_EMAIL])
    logger.info(f"Payment submitted email for {application.id} sent={bool(sent)}")
    return sent


def send_payment_approved_email(application):
    message = f"""
    Hello {application.full_name},

    Your payment for {application.internship_domain} has been verified.
    Certificate number: {application.certificate_number}

    Download your certificate from your dashboard. Anyone can verify it at:
    {build_verification_url(application.certificate_number)}

    {settings.PORTAL_NAME} Team
    """
    return _send("Your certificate is ready", message, [application.email])


def send_payment_rejected_email(application):
    message = f"""
    Hello {application.full_name},

    We could not verify your payment for {application.internship_domain}.
    Reason: {application.rejection_reason}

    You can submit a new payment proof from your dashboard.

    {settings.PORTAL_NAME} Team
    """
    return _send("Payment verification failed", message, [application.email])
