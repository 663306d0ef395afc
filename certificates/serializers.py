from rest_framework import serializers
from students.models import Application
from .utils import build_verification_url


class CertificateVerificationSerializer(serializers.ModelSerializer):
    """Public subset shown on the verification page."""

    class Meta:
        model = Application
        fields = [
            "full_name", "college_name", "internship_domain",
            "certificate_number", "certificate_issued_at",
        ]


class CertificateSerializer(serializers.ModelSerializer):
    application_id = serializers.UUIDField(source="id", read_only=True)
    course_name = serializers.CharField(source="track.course_name", read_only=True)
    verification_url = serializers.SerializerMethodField()

    class Meta:
        model = Application
        fields = [
            "application_id", "full_name", "college_name", "internship_domain", "course_name",
            "completion_date", "certificate_number", "certificate_issued_at", "verification_url",
        ]

    def get_verification_url(self, obj):
        return build_verification_url(obj.certificate_number)
