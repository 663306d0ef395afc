import logging

from django.utils import timezone
from rest_framework import generics, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from admin_panel.permissions import IsPlatformAdmin
from certification_portal.exceptions import NotFoundError, StateConflictError
from courses.models import Question
from courses.serializers import QuestionSerializer
from students import workflow
from .models import TestAttempt
from .serializers import SubmitAnswersSerializer, TestAttemptSerializer
from . import scoring

logger = logging.getLogger(__name__)


def get_attempt(attempt_id):
    try:
        return TestAttempt.objects.select_related('application').get(pk=attempt_id)
    except (TestAttempt.DoesNotExist, ValueError):
        raise NotFoundError("Test attempt not found.")


@api_view(['POST'])
@permission_classes([AllowAny])
def start_test(request, application_id):
    """Draw a fresh question set and open a timed attempt."""
    application = workflow.get_application(application_id)

    if application.test_passed:
        return Response({"test_passed": True, "next": "payment"})

    questions = scoring.draw_questions(application.track)
    if not questions:
        raise NotFoundError("No questions available for this domain yet.")

    attempt = TestAttempt.objects.create(
        application=application,
        question_ids=[str(question.id) for question in questions],
        total_questions=len(questions),
        expires_at=timezone.now() + scoring.TEST_DURATION,
    )
    logger.info(f"Test attempt {attempt.id} started for application {application.id}")

    return Response({
        "attempt_id": attempt.id,
        "questions": QuestionSerializer(questions, many=True).data,
        "total_questions": attempt.total_questions,
        "pass_mark": scoring.PASS_MARK,
        "time_limit_seconds": int(scoring.TEST_DURATION.total_seconds()),
        "expires_at": attempt.expires_at,
    }, status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([AllowAny])
def submit_test(request, attempt_id):
    """Score an open attempt exactly once and reflect the outcome on the application."""
    attempt = get_attempt(attempt_id)
    if attempt.application.test_passed:
        return Response({"test_passed": True, "next": "payment"})

    serializer = SubmitAnswersSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    answers = scoring.clean_answers(serializer.validated_data['answers'], attempt.question_ids)
    # questions removed from the bank since the draw simply score nothing
    questions = list(Question.objects.filter(id__in=attempt.question_ids))
    result = scoring.score_answers(questions, answers)
    passed = result.passed

    now = timezone.now()
    if attempt.is_late(scoring.SUBMIT_GRACE, now):
        logger.warning(f"Late submission for attempt {attempt.id} ({now - attempt.expires_at} past the limit)")

    updated = TestAttempt.objects.filter(pk=attempt.pk, submitted_at__isnull=True).update(
        answers=answers,
        score=result.score,
        passed=passed,
        auto_submitted=serializer.validated_data['auto_submitted'],
        submitted_at=now,
    )
    if not updated:
        raise StateConflictError("This test has already been submitted.")

    application = workflow.record_test_result(attempt.application, passed)
    logger.info(
        f"Attempt {attempt.id} scored {result.score}/{attempt.total_questions} "
        f"({'passed' if passed else 'failed'})"
    )

    return Response({
        "score": result.score,
        "total_questions": attempt.total_questions,
        "passed": passed,
        "pass_mark": scoring.PASS_MARK,
        "test_passed": application.test_passed,
        "next": "payment" if application.test_passed else "retry",
    })


class AttemptHistoryView(generics.ListAPIView):
    """Attempt history for one application (admin only)"""
    serializer_class = TestAttemptSerializer
    permission_classes = [IsPlatformAdmin]
    pagination_class = None

    def get_queryset(self):
        application = workflow.get_application(self.kwargs['application_id'])
        return application.attempts.all()
