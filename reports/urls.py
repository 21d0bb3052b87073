from django.urls import path

from . import views

urlpatterns = [
    path("api/admin/dashboard/", views.dashboard, name="api-admin-dashboard"),
    path("api/admin/quizzes/", views.quiz_stats, name="api-admin-quiz-stats"),
    path("api/admin/quizzes/popular/", views.popular_quizzes, name="api-admin-popular-quizzes"),
    path("api/admin/users/", views.user_stats, name="api-admin-user-stats"),
    path("api/admin/students/top/", views.top_students, name="api-admin-top-students"),
    path("api/admin/activity/", views.recent_activity, name="api-admin-activity"),
    path("api/admin/health/", views.system_health, name="api-admin-health"),

    path("api/quizzes/<uuid:quiz_id>/leaderboard/", views.leaderboard, name="api-quiz-leaderboard"),
    path("api/me/attempts/", views.my_attempts, name="api-my-attempts"),
    path("reports/quizzes/<uuid:quiz_id>/attempts.csv", views.quiz_attempts_csv, name="report-quiz-attempts-csv"),
]
