"""
Quiz time limits: deadlines, expiry detection and forced submission.
"""
from datetime import timedelta
from io import StringIO

import pytest
from django.core.management import call_command
from django.utils import timezone

from attempts.clock import FixedClock
from attempts.exceptions import InvalidStateError
from attempts.models import Attempt
from attempts.services import AttemptLedger

from helpers import START, option, questions_of

pytestmark = pytest.mark.django_db


@pytest.fixture
def timed_quiz(make_quiz):
    return make_quiz(
        [
            (5, [("a-right", True), ("a-wrong", False)]),
            (5, [("b-right", True), ("b-wrong", False)]),
        ],
        title="Ten minute drill",
        duration_minutes=10,
    )


class TestDeadline:
    def test_deadline_is_start_plus_duration(self, ledger, student, timed_quiz):
        attempt = ledger.start_attempt(student.pk, timed_quiz.pk)
        assert ledger.deadline_for(attempt) == START + timedelta(minutes=10)

    def test_grace_period_extends_deadline(self, ledger, settings, student, timed_quiz):
        settings.QUIZ_TIME_LIMIT_GRACE_SECONDS = 30
        attempt = ledger.start_attempt(student.pk, timed_quiz.pk)
        assert ledger.deadline_for(attempt) == START + timedelta(minutes=10, seconds=30)

    def test_untimed_quiz_has_no_deadline(self, ledger, clock, student, scenario_quiz):
        attempt = ledger.start_attempt(student.pk, scenario_quiz.pk)
        assert ledger.deadline_for(attempt) is None

        clock.advance(days=30)
        assert ledger.is_time_expired(attempt) is False


class TestIsTimeExpired:
    def test_boundary(self, ledger, clock, student, timed_quiz):
        attempt = ledger.start_attempt(student.pk, timed_quiz.pk)

        clock.advance(minutes=10)
        assert ledger.is_time_expired(attempt) is False

        clock.advance(seconds=1)
        assert ledger.is_time_expired(attempt) is True

    def test_explicit_now_overrides_clock(self, ledger, student, timed_quiz):
        attempt = ledger.start_attempt(student.pk, timed_quiz.pk)
        assert ledger.is_time_expired(attempt, now=START + timedelta(hours=1)) is True

    def test_completed_attempt_never_expires(self, ledger, clock, student, timed_quiz):
        attempt = ledger.start_attempt(student.pk, timed_quiz.pk)
        ledger.submit_attempt(attempt.pk, student.pk)

        clock.advance(hours=2)
        assert ledger.is_time_expired(Attempt.objects.get(pk=attempt.pk)) is False


class TestExpireAttempt:
    def test_scores_what_was_answered(self, ledger, clock, student, timed_quiz):
        attempt = ledger.start_attempt(student.pk, timed_quiz.pk)
        first, _ = questions_of(timed_quiz)
        ledger.record_answer(attempt.pk, first.pk, option(first, "a-right").pk, student_id=student.pk)

        clock.advance(minutes=15)
        review = ledger.expire_attempt(attempt.pk)

        done = Attempt.objects.get(pk=attempt.pk)
        assert done.is_completed
        assert (done.points_earned, done.total_points, done.score) == (5, 10, 50.0)
        assert done.duration_seconds == 15 * 60
        assert len(review.answers) == 1

    def test_cannot_expire_twice(self, ledger, student, timed_quiz):
        attempt = ledger.start_attempt(student.pk, timed_quiz.pk)
        ledger.expire_attempt(attempt.pk)

        with pytest.raises(InvalidStateError):
            ledger.expire_attempt(attempt.pk)

    def test_find_expired(self, ledger, clock, student, other_student, timed_quiz, scenario_quiz):
        late = ledger.start_attempt(student.pk, timed_quiz.pk)
        ledger.start_attempt(student.pk, scenario_quiz.pk)
        clock.advance(minutes=8)
        ledger.start_attempt(other_student.pk, timed_quiz.pk)

        clock.advance(minutes=5)
        assert [a.pk for a in ledger.find_expired()] == [late.pk]


class TestExpireAttemptsCommand:
    @pytest.fixture
    def stale_attempt(self, student, timed_quiz):
        past = AttemptLedger(clock=FixedClock(timezone.now() - timedelta(hours=1)))
        return past.start_attempt(student.pk, timed_quiz.pk)

    def test_submits_overdue_attempts(self, stale_attempt, other_student, timed_quiz):
        fresh = AttemptLedger().start_attempt(other_student.pk, timed_quiz.pk)
        out = StringIO()

        call_command("expire_attempts", stdout=out)

        assert "Expired attempts submitted: 1" in out.getvalue()
        assert Attempt.objects.get(pk=stale_attempt.pk).is_completed
        assert not Attempt.objects.get(pk=fresh.pk).is_completed

    def test_dry_run_writes_nothing(self, stale_attempt):
        out = StringIO()

        call_command("expire_attempts", "--dry-run", stdout=out)

        assert "[DRY] Would submit attempt" in out.getvalue()
        assert "Expired attempts submitted: 0" in out.getvalue()
        assert not Attempt.objects.get(pk=stale_attempt.pk).is_completed
