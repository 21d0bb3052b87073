# reports/views.py
from __future__ import annotations

import csv
import uuid

from django.conf import settings
from django.http import Http404, HttpResponse, JsonResponse
from django.shortcuts import get_object_or_404
from django.views.decorators.http import require_GET

from accounts.models import Role
from accounts.roles import get_role, role_required
from quizzes.models import Quiz

from . import queries


def _int_param(request, name: str, default: int, maximum: int = 100) -> int:
    try:
        value = int(request.GET.get(name, default))
    except (TypeError, ValueError):
        return default
    return max(1, min(maximum, value))


# -------------------------------------------------------------------
# Admin dashboard
# -------------------------------------------------------------------

@require_GET
@role_required(Role.ADMIN)
def dashboard(request):
    return JsonResponse(queries.dashboard_stats())


@require_GET
@role_required(Role.ADMIN)
def quiz_stats(request):
    return JsonResponse({"results": queries.quiz_statistics()})


@require_GET
@role_required(Role.ADMIN)
def user_stats(request):
    return JsonResponse({"results": queries.user_statistics()})


@require_GET
@role_required(Role.ADMIN)
def top_students(request):
    return JsonResponse({"results": queries.top_students(limit=_int_param(request, "limit", 10))})


@require_GET
@role_required(Role.ADMIN)
def popular_quizzes(request):
    return JsonResponse({"results": queries.popular_quizzes(limit=_int_param(request, "limit", 10))})


@require_GET
@role_required(Role.ADMIN)
def recent_activity(request):
    return JsonResponse({"results": queries.recent_activity(limit=_int_param(request, "limit", 20))})


@require_GET
@role_required(Role.ADMIN)
def system_health(request):
    return JsonResponse(queries.system_health())


# -------------------------------------------------------------------
# Student / instructor views
# -------------------------------------------------------------------

@require_GET
@role_required()
def leaderboard(request, quiz_id):
    quiz = get_object_or_404(Quiz, pk=quiz_id, is_published=True)
    limit = _int_param(request, "limit", settings.QUIZ_LEADERBOARD_LIMIT)
    return JsonResponse({"quiz_id": str(quiz.id), "results": queries.quiz_leaderboard(quiz.id, limit)})


@require_GET
@role_required(Role.STUDENT)
def my_attempts(request):
    quiz_id = (request.GET.get("quiz") or "").strip() or None
    if quiz_id:
        try:
            quiz_id = uuid.UUID(quiz_id)
        except ValueError:
            raise Http404("Quiz not found")
        quiz_id = get_object_or_404(Quiz, pk=quiz_id).pk
    return JsonResponse({"results": queries.student_attempts(request.user.pk, quiz_id)})


@require_GET
@role_required(Role.INSTRUCTOR, Role.ADMIN)
def quiz_attempts_csv(request, quiz_id):
    """Completed attempts for one quiz as CSV. Instructors only see their own quizzes."""
    quiz = get_object_or_404(Quiz, pk=quiz_id)
    if get_role(request.user) != Role.ADMIN and quiz.instructor_id != request.user.pk:
        return JsonResponse(
            {"error": {"code": "forbidden", "message": "You do not have access to this quiz."}},
            status=403,
        )

    resp = HttpResponse(content_type="text/csv")
    resp["Content-Disposition"] = f'attachment; filename="quiz_{quiz.id}_attempts.csv"'
    w = csv.writer(resp)
    w.writerow(["Student", "Email", "Score", "Points", "Total Points", "Duration (s)", "Started", "Submitted"])
    for r in queries.quiz_attempts(quiz.id):
        w.writerow([
            r["student_name"],
            r["student_email"],
            f"{r['score']:.2f}",
            r["points_earned"],
            r["total_points"],
            r["duration_seconds"],
            r["started_at"],
            r["submitted_at"],
        ])
    return resp
