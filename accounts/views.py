# accounts/views.py
import json
import logging

from django.contrib.auth import authenticate, login, logout
from django.http import JsonResponse
from django.views.decorators.http import require_POST

from .forms import RegisterForm
from .roles import get_role

logger = logging.getLogger(__name__)


def _request_data(request):
    """JSON object bodies and form-encoded posts are both accepted; None means unparseable."""
    if request.content_type != "application/json":
        return request.POST
    try:
        payload = json.loads(request.body or b"{}")
    except ValueError:
        return None
    return payload if isinstance(payload, dict) else None


def _malformed_body():
    return JsonResponse(
        {"error": {"code": "validation_error", "message": "Request body must be a JSON object."}},
        status=400,
    )


def _user_payload(user):
    return {
        "id": user.id,
        "username": user.username,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "role": get_role(user),
    }


@require_POST
def register(request):
    data = _request_data(request)
    if data is None:
        return _malformed_body()

    form = RegisterForm(data)
    if not form.is_valid():
        return JsonResponse(
            {"error": {"code": "validation_error", "message": "Please correct the errors below.", "details": form.errors}},
            status=400,
        )

    user = form.save()
    login(request, user)
    logger.info("Registered student account %s", user.username)
    return JsonResponse(_user_payload(user), status=201)


@require_POST
def login_view(request):
    data = _request_data(request)
    if data is None:
        return _malformed_body()

    username = str(data.get("username") or "").strip().lower()
    password = str(data.get("password") or "")

    user = authenticate(request, username=username, password=password)
    if user is None:
        return JsonResponse(
            {"error": {"code": "invalid_credentials", "message": "Invalid username or password."}},
            status=400,
        )

    login(request, user)
    return JsonResponse(_user_payload(user))


@require_POST
def logout_view(request):
    logout(request)
    return JsonResponse({"ok": True})
