"""
Unit tests for the scoring engine (no database).
"""
from datetime import datetime, timedelta, timezone

import pytest

from attempts.scoring import ScoreResult, elapsed_seconds, score_attempt

pytestmark = pytest.mark.unit


class TestScoreAttempt:
    def test_unanswered_question_counts_against_the_student(self):
        """Two 5-point questions, only the first correct -> 5/10 = 50%."""
        result = score_attempt({"q1": 5, "q2": 5}, {"q1": True})
        assert result == ScoreResult(points_earned=5, total_points=10, score=50.0)

    def test_weighted_scenario_is_not_rounded(self):
        result = score_attempt({"q1": 10, "q2": 20}, {"q1": True, "q2": False})
        assert result.points_earned == 10
        assert result.total_points == 30
        assert result.score == pytest.approx(100 / 3)
        assert result.score != round(result.score, 2)

    def test_skip_is_incorrect(self):
        result = score_attempt({"q1": 4}, {"q1": False})
        assert result == ScoreResult(points_earned=0, total_points=4, score=0.0)

    def test_perfect_score(self):
        result = score_attempt({"q1": 3, "q2": 7}, {"q1": True, "q2": True})
        assert result.score == 100.0

    def test_zero_total_points_does_not_divide_by_zero(self):
        assert score_attempt({}, {}) == ScoreResult(points_earned=0, total_points=0, score=0.0)

    def test_answers_outside_the_weight_map_are_ignored(self):
        result = score_attempt({"q1": 2}, {"q1": True, "stray": True})
        assert result == ScoreResult(points_earned=2, total_points=2, score=100.0)

    @pytest.mark.parametrize(
        "correctness",
        [{}, {"a": True}, {"b": True}, {"a": True, "b": True, "c": True}, {"a": False, "c": False}],
    )
    def test_score_always_within_bounds(self, correctness):
        result = score_attempt({"a": 1, "b": 6, "c": 100}, correctness)
        assert 0 <= result.score <= 100
        assert 0 <= result.points_earned <= result.total_points


class TestElapsedSeconds:
    def test_floors_partial_seconds(self):
        start = datetime(2026, 1, 1, tzinfo=timezone.utc)
        assert elapsed_seconds(start, start + timedelta(seconds=59, milliseconds=999)) == 59

    def test_never_negative(self):
        start = datetime(2026, 1, 1, tzinfo=timezone.utc)
        assert elapsed_seconds(start, start - timedelta(seconds=3)) == 0
