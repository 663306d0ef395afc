import logging

from rest_framework.decorators import api_view, parser_classes, permission_classes
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from admin_panel.permissions import IsPlatformAdmin
from admin_panel.utils import create_notification, get_client_ip, log_admin_activity
from certification_portal.exceptions import NotFoundError
from students import workflow
from students.serializers import ApplicationSerializer
from students.utils import (
    send_payment_approved_email, send_payment_rejected_email, send_payment_submitted_email,
)
from .models import PlatformSetting
from .serializers import PaymentDecisionSerializer, PaymentProofSerializer, PlatformSettingSerializer

logger = logging.getLogger(__name__)


# ==========================================================
# PAYMENT PROOF (student)
# ==========================================================
@api_view(['POST'])
@permission_classes([AllowAny])
@parser_classes([MultiPartParser, FormParser])
def submit_payment(request, application_id):
    serializer = PaymentProofSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    application = workflow.submit_payment_proof(
        application_id,
        serializer.validated_data.get('transaction_id'),
        serializer.validated_data.get('screenshot'),
    )

    create_notification(
        title="Payment Proof Submitted",
        message=(
            f"{application.full_name} submitted transaction {application.transaction_id} "
            f"for {application.internship_domain}"
        ),
        priority="HIGH",
        object_id=application.id,
    )
    send_payment_submitted_email(application)

    return Response({
        'success': True,
        'message': 'Payment submitted for verification.',
        'application': ApplicationSerializer(application).data,
    })


# ==========================================================
# PAYMENT REVIEW (admin)
# ==========================================================
@api_view(['POST'])
@permission_classes([IsPlatformAdmin])
def approve_payment(request, application_id):
    admin = request.user
    application = workflow.approve_payment(application_id, admin.username)

    log_admin_activity(
        admin=admin,
        action='APPROVE',
        model_name='Application',
        object_id=application.id,
        description=f"Approved payment for {application.full_name}; issued {application.certificate_number}",
        ip_address=get_client_ip(request),
    )
    send_payment_approved_email(application)

    return Response({
        'success': True,
        'message': 'Payment approved and certificate issued.',
        'application': ApplicationSerializer(application).data,
    })


@api_view(['POST'])
@permission_classes([IsPlatformAdmin])
@parser_classes([JSONParser, FormParser])
def reject_payment(request, application_id):
    admin = request.user
    serializer = PaymentDecisionSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    application = workflow.reject_payment(
        application_id, serializer.validated_data.get('reason'), rejected_by=admin.username
    )

    log_admin_activity(
        admin=admin,
        action='REJECT',
        model_name='Application',
        object_id=application.id,
        description=f"Rejected payment for {application.full_name}: {application.rejection_reason}",
        ip_address=get_client_ip(request),
    )
    send_payment_rejected_email(application)

    return Response({
        'success': True,
        'message': 'Payment rejected.',
        'application': ApplicationSerializer(application).data,
    })


# ==========================================================
# PLATFORM SETTINGS
# ==========================================================
class PlatformSettingView(APIView):
    """Public read of a setting such as the UPI id; admins may update it."""

    def get_permissions(self):
        if self.request.method == 'GET':
            return [AllowAny()]
        return [IsPlatformAdmin()]

    def get(self, request, key):
        try:
            setting = PlatformSetting.objects.get(setting_key=key)
        except PlatformSetting.DoesNotExist:
            raise NotFoundError(f"Setting '{key}' is not configured.")
        return Response(PlatformSettingSerializer(setting).data)

    def put(self, request, key):
        serializer = PlatformSettingSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        setting, created = PlatformSetting.objects.update_or_create(
            setting_key=key,
            defaults={'setting_value': serializer.validated_data['setting_value']},
        )
        logger.info(f"Platform setting '{key}' {'created' if created else 'updated'} by {request.user.username}")
        return Response(PlatformSettingSerializer(setting).data)
