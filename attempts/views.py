# attempts/views.py
import json
import logging

from django.http import HttpResponse, JsonResponse
from django.views.decorators.http import require_http_methods, require_POST

from accounts.models import Role
from accounts.roles import role_required

from .exceptions import AttemptError, InvalidStateError
from .models import Attempt
from .serializers import (
    AttemptReviewSerializer,
    AttemptSerializer,
    RecordAnswerSerializer,
    StudentAnswerSerializer,
)
from .services import AttemptLedger

logger = logging.getLogger(__name__)

ledger = AttemptLedger()

# -------------------------------------------------------------------
# Helpers
# -------------------------------------------------------------------

def _error_response(exc: AttemptError):
    return JsonResponse({"error": {"code": exc.code, "message": exc.message}}, status=exc.status_code)


def _json_body(request):
    if not request.body:
        return {}
    try:
        payload = json.loads(request.body)
    except ValueError:
        return None
    return payload if isinstance(payload, dict) else None


def _in_progress_payload(attempt: Attempt):
    deadline = ledger.deadline_for(attempt)
    data = dict(AttemptSerializer(attempt).data)
    data["deadline"] = deadline.isoformat() if deadline else None
    data["answers"] = StudentAnswerSerializer(
        attempt.answers.order_by("question__order", "question__created_at"), many=True
    ).data
    return data

# -------------------------------------------------------------------
# Attempt lifecycle
# -------------------------------------------------------------------

@require_POST
@role_required(Role.STUDENT)
def start_attempt(request, quiz_id):
    try:
        attempt = ledger.start_attempt(request.user.pk, quiz_id)
    except AttemptError as exc:
        return _error_response(exc)
    return JsonResponse(_in_progress_payload(attempt), status=201)


@require_http_methods(["GET", "DELETE"])
@role_required()
def attempt_detail(request, attempt_id):
    """
    GET: the open attempt (with the student's selections) or, once submitted, the full review.
    DELETE: abandon an open attempt.
    """
    try:
        if request.method == "DELETE":
            ledger.abandon_attempt(attempt_id, request.user.pk)
            return HttpResponse(status=204)

        attempt = ledger.get_attempt(attempt_id, request.user.pk)
        if attempt.is_completed:
            review = ledger.get_attempt_review(attempt_id, request.user.pk)
            return JsonResponse(AttemptReviewSerializer(review).data)
        return JsonResponse(_in_progress_payload(attempt))
    except AttemptError as exc:
        return _error_response(exc)


@require_http_methods(["PUT", "POST"])
@role_required()
def record_answer(request, attempt_id):
    payload = _json_body(request)
    if payload is None:
        return JsonResponse(
            {"error": {"code": "validation_error", "message": "Request body must be a JSON object."}},
            status=400,
        )

    serializer = RecordAnswerSerializer(data=payload)
    if not serializer.is_valid():
        return JsonResponse(
            {"error": {"code": "validation_error", "message": "Invalid answer.", "details": serializer.errors}},
            status=400,
        )

    try:
        attempt = ledger.get_attempt(attempt_id, request.user.pk)
        if ledger.is_time_expired(attempt):
            # Out of time: lock in what was answered before the deadline.
            ledger.expire_attempt(attempt.pk)
            raise InvalidStateError("Time limit exceeded; the attempt has been submitted.")

        answer = ledger.record_answer(
            attempt_id,
            serializer.validated_data["question_id"],
            serializer.validated_data["selected_option_id"],
            student_id=request.user.pk,
        )
    except AttemptError as exc:
        return _error_response(exc)

    return JsonResponse(StudentAnswerSerializer(answer).data)


@require_POST
@role_required()
def submit_attempt(request, attempt_id):
    try:
        review = ledger.submit_attempt(attempt_id, request.user.pk)
    except AttemptError as exc:
        return _error_response(exc)
    return JsonResponse(AttemptReviewSerializer(review).data)
