# quizzes/views.py
import json
import logging

from django.core.exceptions import ValidationError
from django.db.models import Count, Prefetch, Sum
from django.http import JsonResponse
from django.shortcuts import get_object_or_404
from django.views.decorators.http import require_GET, require_http_methods

from accounts.models import Role
from accounts.roles import get_role, role_required

from .models import Option, Question, Quiz
from .serializers import CreateQuizSerializer
from .services import create_quiz

logger = logging.getLogger(__name__)


def _visible_quizzes(user):
    """Students see published quizzes, instructors their own in any state, admins everything."""
    role = get_role(user)
    if role == Role.ADMIN:
        return Quiz.objects.all()
    if role == Role.INSTRUCTOR:
        return Quiz.objects.filter(instructor=user)
    return Quiz.objects.filter(is_published=True)


def _quiz_row(q):
    return {
        "id": str(q.id),
        "title": q.title,
        "description": q.description,
        "instructor_name": q.instructor.get_full_name() or q.instructor.username,
        "duration_minutes": q.duration_minutes,
        "is_published": q.is_published,
        "question_count": q.question_count,
        "total_points": q.total_points or 0,
    }


@require_http_methods(["GET", "POST"])
@role_required()
def quiz_list(request):
    if request.method == "POST":
        return _create_quiz(request)

    quizzes = (
        _visible_quizzes(request.user)
        .select_related("instructor")
        .annotate(question_count=Count("questions"), total_points=Sum("questions__points"))
        .order_by("-created_at")
    )
    return JsonResponse({"results": [_quiz_row(q) for q in quizzes]})


def _create_quiz(request):
    if get_role(request.user) not in (Role.INSTRUCTOR, Role.ADMIN):
        return JsonResponse(
            {"error": {"code": "forbidden", "message": "Only instructors and admins can create quizzes."}},
            status=403,
        )

    try:
        payload = json.loads(request.body or b"{}")
    except ValueError:
        payload = None
    if not isinstance(payload, dict):
        return JsonResponse(
            {"error": {"code": "validation_error", "message": "Request body must be a JSON object."}},
            status=400,
        )

    serializer = CreateQuizSerializer(data=payload)
    if not serializer.is_valid():
        return JsonResponse(
            {"error": {"code": "validation_error", "message": "Invalid quiz.", "details": serializer.errors}},
            status=400,
        )

    try:
        quiz = create_quiz(request.user, **serializer.validated_data)
    except ValidationError as exc:
        return JsonResponse(
            {"error": {"code": "validation_error", "message": " ".join(exc.messages)}},
            status=400,
        )

    quiz.question_count, quiz.total_points = 0, 0
    return JsonResponse(_quiz_row(quiz), status=201)


@require_GET
@role_required()
def quiz_for_student(request, quiz_id):
    """
    A published quiz as a student sees it while answering: options without correctness.
    """
    questions = Question.objects.order_by("order", "created_at").prefetch_related(
        Prefetch("options", queryset=Option.objects.order_by("order", "created_at"))
    )
    quiz = get_object_or_404(
        Quiz.objects.prefetch_related(Prefetch("questions", queryset=questions)),
        pk=quiz_id,
        is_published=True,
    )

    return JsonResponse({
        "id": str(quiz.id),
        "title": quiz.title,
        "description": quiz.description,
        "duration_minutes": quiz.duration_minutes,
        "questions": [
            {
                "id": str(q.id),
                "text": q.text,
                "points": q.points,
                "order": q.order,
                "options": [{"id": str(o.id), "text": o.text, "order": o.order} for o in q.options.all()],
            }
            for q in quiz.questions.all()
        ],
    })
