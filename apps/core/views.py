from django.http import JsonResponse
from django.views.decorators.csrf import ensure_csrf_cookie

from accounts.roles import get_role


def me(request):
    """
    Session-auth JSON endpoint for the SPA.
    IMPORTANT: must always return JSON, never redirect.
    """
    if not request.user.is_authenticated:
        return JsonResponse(
            {"detail": "Authentication credentials were not provided."},
            status=401,
        )

    u = request.user
    return JsonResponse(
        {
            "id": u.id,
            "username": u.username,
            "first_name": u.first_name,
            "last_name": u.last_name,
            "role": get_role(u),
            "is_staff": u.is_staff,
            "is_superuser": u.is_superuser,
        }
    )


@ensure_csrf_cookie
def csrf(request):
    """Ensures the csrftoken cookie exists on the backend origin (no login required)."""
    return JsonResponse({"ok": True})
