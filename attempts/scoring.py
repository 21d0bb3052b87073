"""
Attempt scoring.

Pure functions over data the ledger has already loaded: a question->weight map
for the quiz and a question->correctness map for the recorded answers.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Mapping


@dataclass(frozen=True)
class ScoreResult:
    points_earned: int
    total_points: int
    score: float


def score_attempt(weights: Mapping[str, int], correctness: Mapping[str, bool]) -> ScoreResult:
    """
    weights: every question in the quiz -> its point weight.
    correctness: question -> whether the recorded answer was correct.

    Unanswered questions count fully toward total_points and add nothing to
    points_earned. Answers for questions outside ``weights`` are ignored.
    The score is a percentage kept at full precision.
    """
    total_points = sum(weights.values())
    points_earned = sum(w for qid, w in weights.items() if correctness.get(qid, False))

    if total_points <= 0:
        return ScoreResult(points_earned=0, total_points=0, score=0.0)

    score = points_earned / total_points * 100
    return ScoreResult(points_earned=points_earned, total_points=total_points, score=score)


def elapsed_seconds(started_at: datetime, finished_at: datetime) -> int:
    """Whole seconds between two instants, floored; never negative."""
    seconds = (finished_at - started_at).total_seconds()
    return max(0, math.floor(seconds))
