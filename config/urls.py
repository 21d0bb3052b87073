# config/urls.py
from django.contrib import admin
from django.urls import include, path

from apps.core import views as core_views
from accounts import views as accounts_views


urlpatterns = [
    # Session / identity
    path("api/me/", core_views.me, name="api-me"),
    path("api/csrf/", core_views.csrf, name="api-csrf"),

    # Auth
    path("api/auth/register/", accounts_views.register, name="register"),
    path("api/auth/login/", accounts_views.login_view, name="login"),
    path("api/auth/logout/", accounts_views.logout_view, name="logout"),

    # Admin
    path("admin/", admin.site.urls),

    # Apps
    path("", include("quizzes.urls")),
    path("", include("attempts.urls")),
    path("", include("reports.urls")),
]
