from datetime import datetime, timezone as dt_timezone

from quizzes.models import Option

START = datetime(2026, 3, 2, 9, 0, 0, tzinfo=dt_timezone.utc)


def questions_of(quiz):
    return list(quiz.questions.order_by("order"))


def option(question, text):
    return Option.objects.get(question=question, text=text)
