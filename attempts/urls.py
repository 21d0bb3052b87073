from django.urls import path

from . import views

urlpatterns = [
    path("api/quizzes/<uuid:quiz_id>/attempts/", views.start_attempt, name="api-start-attempt"),
    path("api/attempts/<uuid:attempt_id>/", views.attempt_detail, name="api-attempt-detail"),
    path("api/attempts/<uuid:attempt_id>/answers/", views.record_answer, name="api-record-answer"),
    path("api/attempts/<uuid:attempt_id>/submit/", views.submit_attempt, name="api-submit-attempt"),
]
