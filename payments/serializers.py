from rest_framework import serializers
from .models import PlatformSetting


class PaymentProofSerializer(serializers.Serializer):
    """Multipart payload for a payment proof. Blank values are rejected by the workflow."""
    transaction_id = serializers.CharField(required=False, allow_blank=True, trim_whitespace=True)
    screenshot = serializers.ImageField(required=False)


class PaymentDecisionSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True)


class PlatformSettingSerializer(serializers.ModelSerializer):
    class Meta:
        model = PlatformSetting
        fields = ['setting_key', 'setting_value', 'updated_at']
        read_only_fields = ['setting_key', 'updated_at']
