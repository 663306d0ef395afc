"""
MCQ scoring.

A test draws up to ``QUESTIONS_PER_TEST`` questions from the track's bank.
The score is the number of drawn questions answered with the correct
option; the attempt passes at ``PASS_MARK`` correct answers or more.
"""
import random
from collections import namedtuple
from datetime import timedelta

from certification_portal.exceptions import ValidationError

QUESTIONS_PER_TEST = 10
PASS_MARK = 5
TEST_DURATION = timedelta(minutes=10)
SUBMIT_GRACE = timedelta(seconds=30)
VALID_OPTIONS = ("A", "B", "C", "D")

ScoreResult = namedtuple("ScoreResult", ["score", "total_questions", "passed"])


def draw_questions(track, count=QUESTIONS_PER_TEST, rng=None):
    """Uniform random sample of ``min(count, bank size)`` questions."""
    rng = rng or random.SystemRandom()
    bank = list(track.questions.all())
    return rng.sample(bank, min(count, len(bank)))


def normalize_option(option):
    if option is None:
        return None
    option = str(option).strip().upper()
    return option or None


def clean_answers(answers, question_ids):
    """
    Validate a submitted ``{question_id: option}`` map.
    Unanswered questions are dropped, as are ids outside the drawn set.
    """
    if answers is None:
        return {}
    if not isinstance(answers, dict):
        raise ValidationError("Answers must be an object of question id to option.")

    drawn = {str(question_id) for question_id in question_ids}
    cleaned = {}
    for question_id, option in answers.items():
        option = normalize_option(option)
        if option is None or str(question_id) not in drawn:
            continue
        if option not in VALID_OPTIONS:
            raise ValidationError(f"Invalid option '{option}'. Choose one of A, B, C or D.")
        cleaned[str(question_id)] = option
    return cleaned


def score_answers(questions, answers, pass_mark=PASS_MARK):
    answers = answers or {}
    score = 0
    for question in questions:
        chosen = normalize_option(answers.get(str(question.id)))
        if chosen is not None and chosen == question.correct_option.upper():
            score += 1
    return ScoreResult(score=score, total_questions=len(questions), passed=score >= pass_mark)
