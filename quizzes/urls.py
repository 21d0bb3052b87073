from django.urls import path

from . import views

urlpatterns = [
    path("api/quizzes/", views.quiz_list, name="api-quizzes"),
    path("api/quizzes/<uuid:quiz_id>/", views.quiz_for_student, name="api-quiz-detail"),
]
