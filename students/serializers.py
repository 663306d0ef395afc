from django.contrib.auth import authenticate, get_user_model
from rest_framework import serializers

from .models import Application
from certification_portal.exceptions import ValidationError as PortalValidationError
from . import workflow

User = get_user_model()


# -------------------------------
# APPLICATION SERIALIZERS
# -------------------------------
class ApplicationRegistrationSerializer(serializers.Serializer):
    certificate_id = serializers.UUIDField()
    full_name = serializers.CharField(max_length=255)
    email = serializers.EmailField()
    mobile = serializers.CharField(max_length=10)
    college_name = serializers.CharField(max_length=255)
    branch = serializers.ChoiceField(choices=Application.BRANCH_CHOICES)
    year = serializers.ChoiceField(choices=Application.YEAR_CHOICES)
    completion_date = serializers.DateField(required=False, allow_null=True)

    def validate_mobile(self, value):
        try:
            return workflow.validate_mobile(value)
        except PortalValidationError as e:
            raise serializers.ValidationError(str(e.detail))


class ApplicationSerializer(serializers.ModelSerializer):
    certificate_id = serializers.UUIDField(source="track_id", read_only=True)
    course_name = serializers.CharField(source="track.course_name", read_only=True)
    price = serializers.DecimalField(source="track.price", max_digits=10, decimal_places=2, read_only=True)
    stage = serializers.CharField(read_only=True)

    class Meta:
        model = Application
        fields = [
            "id", "user", "full_name", "email", "mobile", "college_name", "branch", "year",
            "certificate_id", "course_name", "price", "internship_domain", "completion_date",
            "test_passed", "payment_status", "stage", "transaction_id", "payment_screenshot_url",
            "payment_verified_at", "payment_verified_by", "rejection_reason",
            "certificate_number", "certificate_issued_at", "created_at", "updated_at",
        ]
        read_only_fields = fields


# -------------------------------
# STUDENT ACCOUNT SERIALIZERS
# -------------------------------
class SignUpSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, min_length=6)
    full_name = serializers.CharField(max_length=150, required=False, allow_blank=True)

    def validate_email(self, value):
        value = value.strip().lower()
        if User.objects.filter(username=value).exists():
            raise serializers.ValidationError("A user with that email already exists.")
        return value

    def create(self, validated_data):
        return User.objects.create_user(
            username=validated_data["email"],
            email=validated_data["email"],
            password=validated_data["password"],
            first_name=validated_data.get("full_name", "")[:150],
        )


class EmailAuthTokenSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)

    def validate(self, attrs):
        user = authenticate(
            request=self.context.get("request"),
            username=attrs["email"].strip().lower(),
            password=attrs["password"],
        )
        if user is None:
            raise serializers.ValidationError("Invalid email or password")
        attrs["user"] = user
        return attrs
