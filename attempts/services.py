# attempts/services.py
"""
Attempt ledger: the lifecycle of a student's attempt at a quiz.

    in_progress --submit/expire--> completed   (terminal)
    in_progress --abandon--------> deleted

Every mutation runs inside ``transaction.atomic()`` and locks the attempt row
first, so answers and finalization for one attempt are serialized.
"""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Optional

from django.conf import settings
from django.db import IntegrityError, transaction

from quizzes.catalog import Catalog

from .clock import SystemClock
from .exceptions import (
    ConflictError,
    ForbiddenError,
    InvalidStateError,
    NotFoundError,
    NotPublishedError,
    ValidationError,
)
from .models import Answer, Attempt
from .scoring import elapsed_seconds, score_attempt

logger = logging.getLogger(__name__)


@dataclass
class AnswerDetail:
    """A recorded answer joined with what the review screen needs."""
    id: str
    question_id: str
    question_text: str
    question_points: int
    question_order: int
    selected_option_id: Optional[str]
    selected_option_text: Optional[str]
    correct_option_id: Optional[str]
    correct_option_text: Optional[str]
    is_correct: bool
    points_earned: int
    answered_at: datetime


@dataclass
class AttemptReview:
    attempt: Attempt
    quiz_title: str
    quiz_description: str
    answers: list[AnswerDetail] = field(default_factory=list)


def _coerce_id(value, label: str) -> str:
    # A malformed id cannot reference anything.
    try:
        return str(uuid.UUID(str(value)))
    except (TypeError, ValueError, AttributeError):
        raise NotFoundError(f"{label} not found.") from None


class AttemptLedger:
    def __init__(self, catalog=None, clock=None):
        self.catalog = catalog or Catalog()
        self.clock = clock or SystemClock()

    # -------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------

    def get_attempt(self, attempt_id, student_id=None) -> Attempt:
        """Fetch an attempt; when ``student_id`` is given it must own the attempt."""
        attempt = Attempt.objects.filter(pk=_coerce_id(attempt_id, "Attempt")).first()
        return self._check_owner(attempt, student_id)

    def _lock_attempt(self, attempt_id, student_id=None) -> Attempt:
        # Must be called inside transaction.atomic()
        attempt = Attempt.objects.select_for_update().filter(pk=_coerce_id(attempt_id, "Attempt")).first()
        return self._check_owner(attempt, student_id)

    @staticmethod
    def _check_owner(attempt: Optional[Attempt], student_id) -> Attempt:
        if attempt is None:
            raise NotFoundError("Attempt not found.")
        if student_id is not None and str(attempt.student_id) != str(student_id):
            logger.warning("Student %s tried to access attempt %s owned by %s", student_id, attempt.pk, attempt.student_id)
            raise ForbiddenError()
        return attempt

    # -------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------

    def start_attempt(self, student_id, quiz_id) -> Attempt:
        quiz_id = _coerce_id(quiz_id, "Quiz")

        state = self.catalog.get_quiz_publication_state(quiz_id)
        if not state.exists:
            raise NotFoundError("Quiz not found.")
        if not state.published:
            raise NotPublishedError()

        # Snapshot the question set so later edits to the quiz can't change this attempt's scoring.
        weights = {q.id: q.points for q in self.catalog.get_questions_for_quiz(quiz_id)}

        try:
            with transaction.atomic():
                if Attempt.objects.filter(
                    student_id=student_id, quiz_id=quiz_id, status=Attempt.Status.IN_PROGRESS
                ).exists():
                    raise ConflictError()

                attempt = Attempt.objects.create(
                    student_id=student_id,
                    quiz_id=quiz_id,
                    status=Attempt.Status.IN_PROGRESS,
                    started_at=self.clock.now(),
                    question_weights=weights,
                )
        except IntegrityError:
            # Lost the race against a concurrent start: the partial unique constraint fired.
            if Attempt.objects.filter(
                student_id=student_id, quiz_id=quiz_id, status=Attempt.Status.IN_PROGRESS
            ).exists():
                raise ConflictError() from None
            raise

        logger.info("Attempt %s started by student %s on quiz %s", attempt.pk, student_id, quiz_id)
        return attempt

    def record_answer(self, attempt_id, question_id, selected_option_id=None, *, student_id) -> Answer:
        """
        Insert or overwrite ``student_id``'s answer for (attempt, question).
        ``selected_option_id=None`` records a skip: incorrect, zero points.
        """
        with transaction.atomic():
            attempt = self._lock_attempt(attempt_id, student_id)
            if attempt.is_completed:
                raise InvalidStateError("Cannot modify a completed attempt.")

            question = self.catalog.get_question(_coerce_id(question_id, "Question"))
            if question is None:
                raise NotFoundError("Question not found.")
            if question.quiz_id != str(attempt.quiz_id) or question.id not in attempt.question_weights:
                raise ValidationError("Question does not belong to this quiz.")

            is_correct = False
            points = 0
            option_id = None
            if selected_option_id is not None:
                option = self.catalog.get_option_for_question(_coerce_id(selected_option_id, "Option"))
                if option is None:
                    raise NotFoundError("Option not found.")
                if option.question_id != question.id:
                    raise ValidationError("Option does not belong to this question.")
                option_id = uuid.UUID(option.id)
                is_correct = option.is_correct
                points = attempt.question_weights[question.id] if is_correct else 0

            answer, created = Answer.objects.update_or_create(
                attempt=attempt,
                question_id=uuid.UUID(question.id),
                defaults={
                    "selected_option_id": option_id,
                    "is_correct": is_correct,
                    "points_earned": points,
                    "answered_at": self.clock.now(),
                },
            )

        logger.debug(
            "Attempt %s: %s answer for question %s", attempt.pk, "recorded" if created else "overwrote", question.id
        )
        return answer

    def submit_attempt(self, attempt_id, student_id) -> AttemptReview:
        """Finalize and score. Single-shot: a second call fails with InvalidStateError."""
        with transaction.atomic():
            attempt = self._lock_attempt(attempt_id, student_id)
            if attempt.is_completed:
                raise InvalidStateError("Attempt already completed.")
            self._finalize(attempt)
            review = self._build_review(attempt)

        logger.info(
            "Attempt %s submitted: %s/%s points (%.2f%%)",
            attempt.pk, attempt.points_earned, attempt.total_points, attempt.score,
        )
        return review

    def expire_attempt(self, attempt_id) -> AttemptReview:
        """
        Forced finalization for attempts past their time limit (timer/cron driven).
        Same scoring as submit_attempt, without the ownership check.
        """
        with transaction.atomic():
            attempt = self._lock_attempt(attempt_id)
            if attempt.is_completed:
                raise InvalidStateError("Attempt already completed.")
            self._finalize(attempt)
            review = self._build_review(attempt)

        logger.info("Attempt %s expired and auto-submitted (%.2f%%)", attempt.pk, attempt.score)
        return review

    def abandon_attempt(self, attempt_id, student_id) -> None:
        with transaction.atomic():
            attempt = self._lock_attempt(attempt_id, student_id)
            if attempt.is_completed:
                raise InvalidStateError("Cannot abandon a completed attempt.")
            attempt_pk = attempt.pk
            attempt.delete()  # answers cascade

        logger.info("Attempt %s abandoned by student %s", attempt_pk, student_id)

    def _finalize(self, attempt: Attempt) -> None:
        now = self.clock.now()
        correctness = {
            str(question_id): is_correct
            for question_id, is_correct in attempt.answers.values_list("question_id", "is_correct")
        }
        result = score_attempt(attempt.question_weights, correctness)

        attempt.status = Attempt.Status.COMPLETED
        attempt.submitted_at = now
        attempt.duration_seconds = elapsed_seconds(attempt.started_at, now)
        attempt.score = result.score
        attempt.points_earned = result.points_earned
        attempt.total_points = result.total_points
        attempt.save(update_fields=[
            "status", "submitted_at", "duration_seconds", "score", "points_earned", "total_points",
        ])

    # -------------------------------------------------------------------
    # Review
    # -------------------------------------------------------------------

    def get_attempt_review(self, attempt_id, student_id) -> AttemptReview:
        attempt = self.get_attempt(attempt_id, student_id)
        if not attempt.is_completed:
            # Correct options are only revealed after submission.
            raise InvalidStateError("Attempt has not been submitted yet.")
        return self._build_review(attempt)

    def _build_review(self, attempt: Attempt) -> AttemptReview:
        answers = (
            attempt.answers
            .select_related("question", "selected_option")
            .order_by("question__order", "question__created_at")
        )

        details = []
        for a in answers:
            correct = self.catalog.get_correct_option(a.question_id)
            correct_text = None
            if correct is not None:
                correct_text = a.question.options.filter(pk=correct.id).values_list("text", flat=True).first()
            details.append(AnswerDetail(
                id=str(a.pk),
                question_id=str(a.question_id),
                question_text=a.question.text,
                question_points=attempt.question_weights.get(str(a.question_id), a.question.points),
                question_order=a.question.order,
                selected_option_id=str(a.selected_option_id) if a.selected_option_id else None,
                selected_option_text=a.selected_option.text if a.selected_option else None,
                correct_option_id=correct.id if correct else None,
                correct_option_text=correct_text,
                is_correct=a.is_correct,
                points_earned=a.points_earned,
                answered_at=a.answered_at,
            ))

        quiz = attempt.quiz
        return AttemptReview(
            attempt=attempt,
            quiz_title=quiz.title,
            quiz_description=quiz.description,
            answers=details,
        )

    # -------------------------------------------------------------------
    # Time-limit policy helpers (the ledger never expires attempts on its own)
    # -------------------------------------------------------------------

    def deadline_for(self, attempt: Attempt) -> Optional[datetime]:
        limit = self.catalog.get_duration_limit(attempt.quiz_id)
        if limit is None:
            return None
        grace = timedelta(seconds=getattr(settings, "QUIZ_TIME_LIMIT_GRACE_SECONDS", 0))
        return attempt.started_at + limit + grace

    def is_time_expired(self, attempt: Attempt, now: Optional[datetime] = None) -> bool:
        if attempt.is_completed:
            return False
        deadline = self.deadline_for(attempt)
        if deadline is None:
            return False
        return (now or self.clock.now()) > deadline

    def find_expired(self, now: Optional[datetime] = None) -> list[Attempt]:
        now = now or self.clock.now()
        candidates = (
            Attempt.objects
            .filter(status=Attempt.Status.IN_PROGRESS, quiz__duration_minutes__isnull=False)
            .order_by("started_at")
        )
        return [a for a in candidates if self.is_time_expired(a, now)]
