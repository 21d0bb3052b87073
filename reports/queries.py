# reports/queries.py
"""
Read-side aggregates over attempts for dashboards and leaderboards.

Nothing here writes. Only completed attempts carry a score, so score/duration
aggregates filter on status before averaging.
"""
from datetime import timedelta

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db.models import Avg, Count, F, Max, Min, Q
from django.utils import timezone

from accounts.models import Role, UserProfile
from attempts.models import Answer, Attempt
from quizzes.models import Option, Question, Quiz

User = get_user_model()

COMPLETED = Attempt.Status.COMPLETED

_completed = Q(quiz_attempts__status=COMPLETED)


def _student_users():
    # Users without a profile default to the student role (see accounts.roles.get_role).
    return User.objects.filter(is_active=True, is_superuser=False).filter(
        Q(userprofile__role=Role.STUDENT) | Q(userprofile__isnull=True)
    )


def _display_name(user) -> str:
    return (user.get_full_name() or "").strip() or user.email or user.username


def dashboard_stats():
    active = User.objects.filter(is_active=True)
    admins = active.filter(Q(is_superuser=True) | Q(userprofile__role=Role.ADMIN)).count()
    instructors = active.filter(is_superuser=False, userprofile__role=Role.INSTRUCTOR).count()
    students = _student_users().count()

    quizzes = Quiz.objects.aggregate(
        total=Count("id"),
        published=Count("id", filter=Q(is_published=True)),
    )
    attempts = Attempt.objects.aggregate(
        total=Count("id"),
        completed=Count("id", filter=Q(status=COMPLETED)),
        average_score=Avg("score", filter=Q(status=COMPLETED)),
    )

    return {
        "total_users": students + instructors + admins,
        "total_students": students,
        "total_instructors": instructors,
        "total_admins": admins,
        "total_quizzes": quizzes["total"],
        "published_quizzes": quizzes["published"],
        "total_attempts": attempts["total"],
        "completed_attempts": attempts["completed"],
        "average_score": attempts["average_score"],
    }


def quiz_statistics(quiz_id=None):
    """Per published quiz (or one quiz, published or not, when quiz_id is given)."""
    done = Q(attempts__status=COMPLETED)
    qs = Quiz.objects.all() if quiz_id else Quiz.objects.filter(is_published=True)
    if quiz_id:
        qs = qs.filter(pk=quiz_id)

    rows = (
        qs.annotate(
            total_attempts=Count("attempts"),
            completed_attempts=Count("attempts", filter=done),
            average_score=Avg("attempts__score", filter=done),
            highest_score=Max("attempts__score", filter=done),
            lowest_score=Min("attempts__score", filter=done),
            average_duration_seconds=Avg("attempts__duration_seconds", filter=done),
        )
        .order_by("-total_attempts", "title")
    )

    return [
        {
            "quiz_id": str(q.id),
            "quiz_title": q.title,
            "total_attempts": q.total_attempts,
            "completed_attempts": q.completed_attempts,
            "average_score": q.average_score,
            "highest_score": q.highest_score,
            "lowest_score": q.lowest_score,
            "average_duration_seconds": q.average_duration_seconds,
        }
        for q in rows
    ]


def user_statistics():
    pass_score = settings.QUIZ_PASS_SCORE

    instructors = (
        User.objects
        .filter(is_active=True, is_superuser=False, userprofile__role=Role.INSTRUCTOR)
        .annotate(total_quizzes_created=Count("quizzes"))
        .order_by("username")
    )
    students = (
        _student_users()
        .annotate(
            total_attempts=Count("quiz_attempts"),
            average_score=Avg("quiz_attempts__score", filter=_completed),
            quizzes_passed=Count(
                "quiz_attempts", filter=_completed & Q(quiz_attempts__score__gte=pass_score)
            ),
        )
        .order_by("username")
    )

    rows = [
        {
            "user_id": u.id,
            "user_name": _display_name(u),
            "user_email": u.email,
            "role": Role.INSTRUCTOR,
            "total_quizzes_created": u.total_quizzes_created,
        }
        for u in instructors
    ]
    rows += [
        {
            "user_id": u.id,
            "user_name": _display_name(u),
            "user_email": u.email,
            "role": Role.STUDENT,
            "total_attempts": u.total_attempts,
            "average_score": u.average_score,
            "quizzes_passed": u.quizzes_passed,
        }
        for u in students
    ]
    return rows


def quiz_leaderboard(quiz_id, limit=None):
    limit = limit or settings.QUIZ_LEADERBOARD_LIMIT
    qs = (
        Attempt.objects
        .filter(quiz_id=quiz_id, status=COMPLETED)
        .select_related("student")
        .order_by("-score", "duration_seconds", "submitted_at")[:limit]
    )
    return [
        {
            "student_id": a.student_id,
            "student_name": _display_name(a.student),
            "score": a.score,
            "duration_seconds": a.duration_seconds,
            "submitted_at": a.submitted_at.isoformat(),
        }
        for a in qs
    ]


def _attempt_row(a: Attempt):
    return {
        "id": str(a.id),
        "quiz_id": str(a.quiz_id),
        "quiz_title": a.quiz.title,
        "student_id": a.student_id,
        "student_name": _display_name(a.student),
        "student_email": a.student.email,
        "status": a.status,
        "is_completed": a.is_completed,
        "score": a.score,
        "points_earned": a.points_earned,
        "total_points": a.total_points,
        "started_at": a.started_at.isoformat(),
        "submitted_at": a.submitted_at.isoformat() if a.submitted_at else None,
        "duration_seconds": a.duration_seconds,
    }


def student_attempts(student_id, quiz_id=None):
    """All of a student's attempts, newest first (in-progress included)."""
    qs = Attempt.objects.filter(student_id=student_id).select_related("quiz", "student")
    if quiz_id:
        qs = qs.filter(quiz_id=quiz_id)
    return [_attempt_row(a) for a in qs.order_by("-started_at")]


def quiz_attempts(quiz_id):
    """Completed attempts on one quiz, most recently submitted first."""
    qs = (
        Attempt.objects
        .filter(quiz_id=quiz_id, status=COMPLETED)
        .select_related("quiz", "student")
        .order_by("-submitted_at")
    )
    return [_attempt_row(a) for a in qs]


def top_students(limit=10, min_attempts=None):
    min_attempts = settings.QUIZ_TOP_STUDENT_MIN_ATTEMPTS if min_attempts is None else min_attempts
    pass_score = settings.QUIZ_PASS_SCORE

    qs = (
        _student_users()
        .annotate(
            total_attempts=Count("quiz_attempts", filter=_completed),
            average_score=Avg("quiz_attempts__score", filter=_completed),
            quizzes_passed=Count(
                "quiz_attempts", filter=_completed & Q(quiz_attempts__score__gte=pass_score)
            ),
        )
        .filter(total_attempts__gte=max(min_attempts, 1))
        .order_by("-average_score", "-total_attempts", "username")[:limit]
    )
    return [
        {
            "student_id": u.id,
            "student_name": _display_name(u),
            "student_email": u.email,
            "total_attempts": u.total_attempts,
            "average_score": u.average_score,
            "quizzes_passed": u.quizzes_passed,
        }
        for u in qs
    ]


def popular_quizzes(limit=10):
    done = Q(attempts__status=COMPLETED)
    qs = (
        Quiz.objects
        .filter(is_published=True)
        .select_related("instructor")
        .annotate(
            total_attempts=Count("attempts"),
            completed_count=Count("attempts", filter=done),
            average_score=Avg("attempts__score", filter=done),
        )
        .filter(total_attempts__gt=0)
        .order_by("-total_attempts", F("average_score").desc(nulls_last=True))[:limit]
    )
    return [
        {
            "quiz_id": str(q.id),
            "quiz_title": q.title,
            "instructor_name": _display_name(q.instructor),
            "total_attempts": q.total_attempts,
            "average_score": q.average_score,
            "completion_rate": q.completed_count * 100.0 / q.total_attempts,
        }
        for q in qs
    ]


def recent_activity(limit=20):
    """Quiz creations, completed attempts and sign-ups, merged newest first."""
    events = []

    for q in Quiz.objects.select_related("instructor").order_by("-created_at")[:limit]:
        events.append({
            "timestamp": q.created_at,
            "user_id": q.instructor_id,
            "user_name": _display_name(q.instructor),
            "action": "created",
            "resource_type": "quiz",
            "resource_id": str(q.id),
            "details": q.title,
        })

    completed = (
        Attempt.objects
        .filter(status=COMPLETED)
        .select_related("student", "quiz")
        .order_by("-submitted_at")[:limit]
    )
    for a in completed:
        events.append({
            "timestamp": a.submitted_at,
            "user_id": a.student_id,
            "user_name": _display_name(a.student),
            "action": "completed",
            "resource_type": "quiz_attempt",
            "resource_id": str(a.id),
            "details": f"{a.quiz.title} (Score: {a.score:.1f}%)",
        })

    for u in User.objects.order_by("-date_joined")[:limit]:
        events.append({
            "timestamp": u.date_joined,
            "user_id": u.id,
            "user_name": _display_name(u),
            "action": "registered",
            "resource_type": "user",
            "resource_id": str(u.id),
            "details": u.email,
        })

    events.sort(key=lambda e: e["timestamp"], reverse=True)
    for e in events:
        e["timestamp"] = e["timestamp"].isoformat()
    return events[:limit]


def system_health(now=None):
    now = now or timezone.now()
    since = now - timedelta(days=7)

    recent = Attempt.objects.filter(started_at__gte=since)
    totals = Attempt.objects.aggregate(
        total=Count("id"),
        completed=Count("id", filter=Q(status=COMPLETED)),
    )
    completion_rate = (totals["completed"] * 100.0 / totals["total"]) if totals["total"] else 0.0

    row_counts = {
        "users": User.objects.count(),
        "user_profiles": UserProfile.objects.count(),
        "quizzes": Quiz.objects.count(),
        "questions": Question.objects.count(),
        "options": Option.objects.count(),
        "attempts": totals["total"],
        "answers": Answer.objects.count(),
    }

    return {
        "active_users_last_7_days": recent.order_by().values("student_id").distinct().count(),
        "quizzes_created_last_7_days": Quiz.objects.filter(created_at__gte=since).count(),
        "attempts_last_7_days": recent.count(),
        "average_completion_rate": completion_rate,
        "database_size_estimate": sum(row_counts.values()),
        "row_counts": row_counts,
    }
