# quizzes/services.py
import logging

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Max

from .models import Option, Question, Quiz

logger = logging.getLogger(__name__)

MIN_OPTIONS = 2
MAX_OPTIONS = 6


def validate_option_flags(flags):
    """
    flags: iterable of is_correct booleans for one question's options.
    Raises ValidationError unless there are 2-6 options with exactly one correct.
    """
    flags = list(flags)
    if len(flags) < MIN_OPTIONS:
        raise ValidationError(f"Question must have at least {MIN_OPTIONS} options.")
    if len(flags) > MAX_OPTIONS:
        raise ValidationError(f"Question cannot have more than {MAX_OPTIONS} options.")
    if sum(1 for f in flags if f) != 1:
        raise ValidationError("Exactly one option must be marked as correct.")


def create_quiz(instructor, title: str, description: str = "", duration_minutes=None) -> Quiz:
    title = (title or "").strip()
    if len(title) < 3:
        raise ValidationError("Title must be at least 3 characters.")
    if duration_minutes is not None and duration_minutes <= 0:
        raise ValidationError("Duration must be at least 1 minute.")

    quiz = Quiz.objects.create(
        instructor=instructor,
        title=title,
        description=(description or "").strip(),
        duration_minutes=duration_minutes,
    )
    logger.info("Quiz %s created by %s", quiz.id, instructor)
    return quiz


@transaction.atomic
def add_question(quiz: Quiz, text: str, points: int, options, order=None) -> Question:
    """
    options: list of (text, is_correct) tuples, in display order.
    Appends at the end of the quiz unless an explicit order is given.
    """
    if points is None or points < 1:
        raise ValidationError("Points must be at least 1.")
    validate_option_flags(is_correct for _, is_correct in options)

    if order is None:
        current = quiz.questions.aggregate(m=Max("order"))["m"] or 0
        order = current + 1

    question = Question.objects.create(quiz=quiz, text=text.strip(), points=points, order=order)
    Option.objects.bulk_create([
        Option(question=question, text=opt_text.strip(), is_correct=bool(is_correct), order=i)
        for i, (opt_text, is_correct) in enumerate(options)
    ])
    return question


def publish_quiz(quiz: Quiz) -> Quiz:
    """A quiz can only be published once it has at least one question."""
    if not quiz.questions.exists():
        raise ValidationError("Cannot publish a quiz without questions.")

    if not quiz.is_published:
        quiz.is_published = True
        quiz.save(update_fields=["is_published", "updated_at"])
        logger.info("Quiz %s published", quiz.id)
    return quiz


def unpublish_quiz(quiz: Quiz) -> Quiz:
    if quiz.is_published:
        quiz.is_published = False
        quiz.save(update_fields=["is_published", "updated_at"])
        logger.info("Quiz %s unpublished", quiz.id)
    return quiz
