from rest_framework import serializers
from .models import TestAttempt


class SubmitAnswersSerializer(serializers.Serializer):
    answers = serializers.JSONField(required=False, default=dict)
    auto_submitted = serializers.BooleanField(required=False, default=False)


class TestAttemptSerializer(serializers.ModelSerializer):
    application_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = TestAttempt
        fields = [
            'id', 'application_id', 'score', 'total_questions', 'passed', 'answers',
            'question_ids', 'auto_submitted', 'started_at', 'expires_at', 'submitted_at',
        ]
        read_only_fields = fields
