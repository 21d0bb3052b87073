"""
Read-only view of the quiz catalog, shaped for the attempt ledger.

The ledger never touches quiz/question/option models directly; it goes through
a ``Catalog`` so the authoring side can change without touching attempt logic.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from .models import Option, Question, Quiz


@dataclass(frozen=True)
class PublicationState:
    exists: bool
    published: bool


@dataclass(frozen=True)
class QuestionRef:
    id: str
    quiz_id: str
    points: int


@dataclass(frozen=True)
class OptionRef:
    id: str
    question_id: str
    is_correct: bool


class Catalog:
    """ORM-backed catalog lookups. Ids are accepted as UUIDs or strings and returned as strings."""

    def get_quiz_publication_state(self, quiz_id) -> PublicationState:
        row = Quiz.objects.filter(pk=quiz_id).values("is_published").first()
        if row is None:
            return PublicationState(exists=False, published=False)
        return PublicationState(exists=True, published=row["is_published"])

    def get_questions_for_quiz(self, quiz_id) -> list[QuestionRef]:
        rows = (
            Question.objects
            .filter(quiz_id=quiz_id)
            .order_by("order", "created_at")
            .values("id", "quiz_id", "points")
        )
        return [QuestionRef(id=str(r["id"]), quiz_id=str(r["quiz_id"]), points=r["points"]) for r in rows]

    def get_question(self, question_id) -> Optional[QuestionRef]:
        row = Question.objects.filter(pk=question_id).values("id", "quiz_id", "points").first()
        if row is None:
            return None
        return QuestionRef(id=str(row["id"]), quiz_id=str(row["quiz_id"]), points=row["points"])

    def get_option_for_question(self, option_id) -> Optional[OptionRef]:
        row = Option.objects.filter(pk=option_id).values("id", "question_id", "is_correct").first()
        if row is None:
            return None
        return OptionRef(id=str(row["id"]), question_id=str(row["question_id"]), is_correct=row["is_correct"])

    def get_correct_option(self, question_id) -> Optional[OptionRef]:
        # Catalog guarantees exactly one; a broken question with none simply yields None.
        row = (
            Option.objects
            .filter(question_id=question_id, is_correct=True)
            .order_by("order", "created_at")
            .values("id", "question_id", "is_correct")
            .first()
        )
        if row is None:
            return None
        return OptionRef(id=str(row["id"]), question_id=str(row["question_id"]), is_correct=True)

    def get_duration_limit(self, quiz_id) -> Optional[timedelta]:
        minutes = Quiz.objects.filter(pk=quiz_id).values_list("duration_minutes", flat=True).first()
        if not minutes:
            return None
        return timedelta(minutes=minutes)
