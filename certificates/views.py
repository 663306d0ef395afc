import logging

from django.http import HttpResponse
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from certification_portal.exceptions import NotFoundError, StateConflictError, ValidationError
from students.models import Application
from students.workflow import get_application
from .serializers import CertificateSerializer, CertificateVerificationSerializer
from .utils import generate_certificate_pdf, normalize_certificate_number

logger = logging.getLogger(__name__)


def get_issued_application(application_id):
    application = get_application(application_id)
    if application.payment_status != Application.COMPLETED or not application.certificate_number:
        raise StateConflictError("Payment required: the certificate is issued once payment is approved.")
    return application


@api_view(["GET"])
@permission_classes([AllowAny])
def verify_certificate(request):
    """
    Look up a certificate number. Only completed applications are visible;
    an unpaid application and an unknown number give the same answer.
    """
    number = normalize_certificate_number(request.query_params.get("id"))
    if not number:
        raise ValidationError("Please enter a certificate ID")

    application = Application.objects.filter(
        certificate_number=number, payment_status=Application.COMPLETED
    ).first()
    if application is None:
        logger.info(f"Verification miss for {number}")
        raise NotFoundError("Certificate not found")

    return Response({
        "success": True,
        "verified": True,
        "certificate": CertificateVerificationSerializer(application).data,
    })


@api_view(["GET"])
@permission_classes([AllowAny])
def certificate_detail(request, application_id):
    application = get_issued_application(application_id)
    return Response(CertificateSerializer(application).data)


@api_view(["GET"])
@permission_classes([AllowAny])
def download_certificate(request, application_id):
    application = get_issued_application(application_id)
    pdf_bytes = generate_certificate_pdf(application)

    response = HttpResponse(pdf_bytes, content_type="application/pdf")
    response["Content-Disposition"] = f'attachment; filename="{application.certificate_number}.pdf"'
    return response
