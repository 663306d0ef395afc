from rest_framework import serializers
from .models import CertificateTrack, Question


class CertificateTrackSerializer(serializers.ModelSerializer):
    question_count = serializers.SerializerMethodField(read_only=True)

    class Meta:
        model = CertificateTrack
        fields = ['id', 'course_name', 'description', 'icon', 'price', 'is_active', 'question_count']
        read_only_fields = ['id']

    def get_question_count(self, obj):
        return obj.questions.count()


class QuestionSerializer(serializers.ModelSerializer):
    """Question as shown to a candidate: the answer key is never exposed."""

    class Meta:
        model = Question
        fields = ['id', 'question', 'option_a', 'option_b', 'option_c', 'option_d']
