# accounts/roles.py
from functools import wraps

from django.http import JsonResponse

from .models import Role, UserProfile


def get_role(user) -> str:
    """
    Resolve the effective role of a user.
    Superusers are always admins; users without a profile are treated as students.
    """
    if user.is_superuser:
        return Role.ADMIN
    try:
        return user.userprofile.role
    except UserProfile.DoesNotExist:
        return Role.STUDENT


def set_role(user, role: str) -> UserProfile:
    profile, _ = UserProfile.objects.update_or_create(user=user, defaults={"role": role})
    return profile


def role_required(*roles):
    """
    JSON-only guard for API views: 401 when anonymous, 403 when the role doesn't match.
    Never redirects (the SPA expects JSON).
    """
    def decorator(view):
        @wraps(view)
        def wrapper(request, *args, **kwargs):
            if not request.user.is_authenticated:
                return JsonResponse(
                    {"error": {"code": "unauthenticated", "message": "Authentication credentials were not provided."}},
                    status=401,
                )
            if roles and get_role(request.user) not in roles:
                return JsonResponse(
                    {"error": {"code": "forbidden", "message": "You do not have access to this resource."}},
                    status=403,
                )
            return view(request, *args, **kwargs)
        return wrapper
    return decorator
