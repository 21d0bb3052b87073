"""
Pytest configuration and shared fixtures.

Database-backed tests use pytest-django's ``django_db`` marker; the helpers
here build users with roles, quizzes through the authoring services, and a
ledger wired to a manually advanced clock.
"""
import pytest

from accounts.models import Role
from accounts.roles import set_role
from attempts.clock import FixedClock
from attempts.services import AttemptLedger
from quizzes.services import add_question, create_quiz, publish_quiz

from helpers import START


@pytest.fixture
def clock():
    return FixedClock(START)


@pytest.fixture
def ledger(clock):
    return AttemptLedger(clock=clock)


@pytest.fixture
def make_user(django_user_model):
    def _make(username, role=Role.STUDENT, **extra):
        user = django_user_model.objects.create_user(
            username=username,
            email=f"{username}@example.com",
            password="correct-horse-battery",
            **extra,
        )
        set_role(user, role)
        return user
    return _make


@pytest.fixture
def student(make_user):
    return make_user("stu", first_name="Sam", last_name="Student")


@pytest.fixture
def other_student(make_user):
    return make_user("stu2", first_name="Alex", last_name="Other")


@pytest.fixture
def instructor(make_user):
    return make_user("teach", role=Role.INSTRUCTOR, first_name="Ida", last_name="Instructor")


@pytest.fixture
def admin_user(make_user):
    return make_user("boss", role=Role.ADMIN)


@pytest.fixture
def make_quiz(instructor):
    """
    questions: list of (points, [(option_text, is_correct), ...]).
    """
    def _make(questions, title="General knowledge", published=True, duration_minutes=None):
        quiz = create_quiz(instructor, title, duration_minutes=duration_minutes)
        for i, (points, options) in enumerate(questions, start=1):
            add_question(quiz, f"Question number {i}?", points, options)
        if published:
            publish_quiz(quiz)
        return quiz
    return _make


@pytest.fixture
def scenario_quiz(make_quiz):
    """q1 (10 pts, o1a correct) and q2 (20 pts, o2b correct)."""
    return make_quiz(
        [
            (10, [("o1a", True), ("o1b", False)]),
            (20, [("o2a", False), ("o2b", True), ("o2c", False)]),
        ],
        title="Quiz Q1",
    )


@pytest.fixture
def two_by_five_quiz(make_quiz):
    return make_quiz(
        [
            (5, [("a-right", True), ("a-wrong", False)]),
            (5, [("b-right", True), ("b-wrong", False)]),
        ],
        title="Two by five",
    )
