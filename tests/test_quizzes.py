"""
Quiz authoring services and the read-only catalog the ledger consumes.
"""
import uuid
from datetime import timedelta

import pytest
from django.core.exceptions import ValidationError

from quizzes.catalog import Catalog, PublicationState
from quizzes.models import Quiz
from quizzes.services import (
    add_question,
    create_quiz,
    publish_quiz,
    unpublish_quiz,
    validate_option_flags,
)

from helpers import option, questions_of

pytestmark = pytest.mark.django_db


@pytest.fixture
def catalog():
    return Catalog()


class TestValidateOptionFlags:
    @pytest.mark.parametrize("flags", [[True, False], [False, True, False, False, False, False]])
    def test_accepts_exactly_one_correct(self, flags):
        validate_option_flags(flags)

    @pytest.mark.parametrize(
        "flags, message",
        [
            ([True], "at least 2"),
            ([True] + [False] * 6, "more than 6"),
            ([False, False], "Exactly one"),
            ([True, True, False], "Exactly one"),
        ],
    )
    def test_rejects(self, flags, message):
        with pytest.raises(ValidationError, match=message):
            validate_option_flags(flags)


class TestAuthoring:
    def test_create_quiz_trims_and_validates(self, instructor):
        quiz = create_quiz(instructor, "  Algebra  ", "  basics ", duration_minutes=15)
        assert (quiz.title, quiz.description, quiz.duration_minutes) == ("Algebra", "basics", 15)
        assert quiz.is_published is False

        with pytest.raises(ValidationError):
            create_quiz(instructor, "ab")
        with pytest.raises(ValidationError):
            create_quiz(instructor, "Zero minutes", duration_minutes=0)

    def test_questions_append_in_order(self, instructor):
        quiz = create_quiz(instructor, "Ordering")
        first = add_question(quiz, "First?", 1, [("y", True), ("n", False)])
        second = add_question(quiz, "Second?", 2, [("y", True), ("n", False)])

        assert (first.order, second.order) == (1, 2)
        assert [o.text for o in second.options.order_by("order")] == ["y", "n"]

    def test_add_question_rejects_bad_input(self, instructor):
        quiz = create_quiz(instructor, "Broken")
        with pytest.raises(ValidationError):
            add_question(quiz, "No points?", 0, [("y", True), ("n", False)])
        with pytest.raises(ValidationError):
            add_question(quiz, "Two right?", 1, [("y", True), ("n", True)])
        assert not quiz.questions.exists()

    def test_publish_requires_questions(self, instructor):
        quiz = create_quiz(instructor, "Empty quiz")
        with pytest.raises(ValidationError):
            publish_quiz(quiz)

        add_question(quiz, "Now?", 1, [("y", True), ("n", False)])
        publish_quiz(quiz)
        assert Quiz.objects.get(pk=quiz.pk).is_published

        unpublish_quiz(quiz)
        assert not Quiz.objects.get(pk=quiz.pk).is_published


class TestCatalog:
    def test_publication_state(self, catalog, scenario_quiz, make_quiz):
        draft = make_quiz([(1, [("y", True), ("n", False)])], published=False)

        assert catalog.get_quiz_publication_state(scenario_quiz.pk) == PublicationState(exists=True, published=True)
        assert catalog.get_quiz_publication_state(draft.pk) == PublicationState(exists=True, published=False)
        assert catalog.get_quiz_publication_state(uuid.uuid4()) == PublicationState(exists=False, published=False)

    def test_questions_for_quiz(self, catalog, scenario_quiz):
        refs = catalog.get_questions_for_quiz(scenario_quiz.pk)

        assert [r.points for r in refs] == [10, 20]
        assert {r.quiz_id for r in refs} == {str(scenario_quiz.pk)}
        assert [r.id for r in refs] == [str(q.pk) for q in questions_of(scenario_quiz)]

    def test_question_and_option_lookup(self, catalog, scenario_quiz):
        q1, _ = questions_of(scenario_quiz)
        o1b = option(q1, "o1b")

        assert catalog.get_question(q1.pk).points == 10
        assert catalog.get_question(uuid.uuid4()) is None

        ref = catalog.get_option_for_question(o1b.pk)
        assert (ref.question_id, ref.is_correct) == (str(q1.pk), False)
        assert catalog.get_option_for_question(uuid.uuid4()) is None

    def test_correct_option(self, catalog, scenario_quiz):
        _, q2 = questions_of(scenario_quiz)
        assert catalog.get_correct_option(q2.pk).id == str(option(q2, "o2b").pk)

        q2.options.update(is_correct=False)
        assert catalog.get_correct_option(q2.pk) is None

    def test_duration_limit(self, catalog, scenario_quiz, make_quiz):
        timed = make_quiz([(1, [("y", True), ("n", False)])], duration_minutes=20)

        assert catalog.get_duration_limit(timed.pk) == timedelta(minutes=20)
        assert catalog.get_duration_limit(scenario_quiz.pk) is None
