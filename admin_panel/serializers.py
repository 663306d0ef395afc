from rest_framework import serializers
from .models import AdminActivity, Notification


class AdminActivitySerializer(serializers.ModelSerializer):
    admin_name = serializers.CharField(source='admin.username', read_only=True)

    class Meta:
        model = AdminActivity
        fields = ['id', 'admin', 'admin_name', 'action', 'model_name',
                  'object_id', 'description', 'ip_address', 'timestamp']


class NotificationSerializer(serializers.ModelSerializer):
    class Meta:
        model = Notification
        fields = ['id', 'title', 'message', 'priority', 'is_read',
                  'object_id', 'created_at']
        read_only_fields = fields


class DashboardStatsSerializer(serializers.Serializer):
    """Dashboard statistics"""
    total_applications = serializers.IntegerField()
    pending_payments = serializers.IntegerField()
    under_verification = serializers.IntegerField()
    completed = serializers.IntegerField()
    rejected = serializers.IntegerField()
    refunded = serializers.IntegerField()
    tests_passed = serializers.IntegerField()
    total_attempts = serializers.IntegerField()
    pass_rate = serializers.FloatField()
    active_tracks = serializers.IntegerField()
    new_applications_this_month = serializers.IntegerField()
    certificates_this_month = serializers.IntegerField()


class TrackStatsSerializer(serializers.Serializer):
    """Per-track statistics"""
    track_id = serializers.UUIDField()
    course_name = serializers.CharField()
    application_count = serializers.IntegerField()
    completed_count = serializers.IntegerField()
    question_count = serializers.IntegerField()
    total_revenue = serializers.DecimalField(max_digits=12, decimal_places=2)
