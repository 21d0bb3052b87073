import uuid

from django.conf import settings
from django.db import models
from django.db.models import Q

from quizzes.models import Option, Question, Quiz


class Attempt(models.Model):
    """
    One student's run at one quiz.

    ``status`` is the source of truth for the lifecycle; the scoring fields are
    all null while in progress and all set once completed (enforced in the DB).
    """

    class Status(models.TextChoices):
        IN_PROGRESS = "in_progress", "In progress"
        COMPLETED = "completed", "Completed"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    student = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="quiz_attempts")
    quiz = models.ForeignKey(Quiz, on_delete=models.PROTECT, related_name="attempts")

    status = models.CharField(max_length=20, choices=Status.choices, default=Status.IN_PROGRESS)

    started_at = models.DateTimeField()
    submitted_at = models.DateTimeField(null=True, blank=True)
    duration_seconds = models.PositiveIntegerField(null=True, blank=True)

    score = models.FloatField(null=True, blank=True)  # 0-100, unrounded
    points_earned = models.PositiveIntegerField(null=True, blank=True)
    total_points = models.PositiveIntegerField(null=True, blank=True)

    # {question_id: points} for every question in the quiz when the attempt started
    question_weights = models.JSONField(default=dict)

    class Meta:
        ordering = ["-started_at"]
        indexes = [
            models.Index(fields=["student", "quiz"]),
            models.Index(fields=["quiz", "status"]),
            models.Index(fields=["submitted_at"]),
        ]
        constraints = [
            # At most one resumable attempt per (student, quiz)
            models.UniqueConstraint(
                fields=["student", "quiz"],
                condition=Q(status="in_progress"),
                name="attempt_one_in_progress_per_student_quiz",
            ),
            models.CheckConstraint(
                condition=(
                    Q(
                        status="in_progress",
                        submitted_at__isnull=True,
                        duration_seconds__isnull=True,
                        score__isnull=True,
                        points_earned__isnull=True,
                        total_points__isnull=True,
                    )
                    | Q(
                        status="completed",
                        submitted_at__isnull=False,
                        duration_seconds__isnull=False,
                        score__isnull=False,
                        points_earned__isnull=False,
                        total_points__isnull=False,
                    )
                ),
                name="attempt_status_matches_scoring_fields",
            ),
            models.CheckConstraint(
                condition=Q(score__isnull=True) | Q(score__gte=0, score__lte=100),
                name="attempt_score_range",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.student} attempt on {self.quiz} ({self.status})"

    @property
    def is_completed(self) -> bool:
        return self.status == self.Status.COMPLETED


class Answer(models.Model):
    """
    The recorded answer for one question of an attempt. A null option means skipped.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    attempt = models.ForeignKey(Attempt, on_delete=models.CASCADE, related_name="answers")
    question = models.ForeignKey(Question, on_delete=models.PROTECT, related_name="answers")
    selected_option = models.ForeignKey(Option, on_delete=models.SET_NULL, null=True, blank=True, related_name="+")

    is_correct = models.BooleanField(default=False)
    points_earned = models.PositiveIntegerField(default=0)
    answered_at = models.DateTimeField()

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["attempt", "question"], name="answer_one_per_attempt_question"),
        ]

    def __str__(self) -> str:
        return f"{self.attempt_id} / {self.question_id}"
