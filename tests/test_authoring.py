import pytest
from sqlalchemy import func, select

from quizbox.core.errors import ValidationFailed
from quizbox.models.orm import Question, QuestionType, Quiz, Response
from quizbox.schemas import QuestionIn
from quizbox.services import authoring


def text_q(text="Name?", required=True):
    return QuestionIn(text=text, type=QuestionType.TEXT, required=required)


def choice_q(text="Color?", options=("Red", "Blue"), required=False):
    return QuestionIn(text=text, type=QuestionType.SINGLE_CHOICE, options=list(options), required=required)


def quiz_rows(db):
    return db.scalar(select(func.count(Quiz.id)))


def test_create_quiz_assigns_dense_order(repo, owner):
    questions = [text_q("A"), choice_q("B"), text_q("C", required=False)]
    quiz = authoring.create_quiz(repo, owner, "  Survey  ", "about you", questions)
    assert quiz.title == "Survey"
    assert quiz.creator_id == owner.user_id
    assert [q.order for q in quiz.questions] == [0, 1, 2]
    assert [q.text for q in quiz.questions] == ["A", "B", "C"]


def test_caller_supplied_order_is_ignored(repo, owner):
    raw = [
        {"text": "First", "type": "TEXT", "order": 7},
        {"text": "Second", "type": "TEXT", "order": 3},
    ]
    quiz = authoring.create_quiz(repo, owner, "Ordered", None, [QuestionIn.model_validate(q) for q in raw])
    assert [(q.text, q.order) for q in quiz.questions] == [("First", 0), ("Second", 1)]


@pytest.mark.parametrize("count", [0, 1])
def test_fewer_than_two_questions(repo, owner, db, count):
    with pytest.raises(ValidationFailed) as exc:
        authoring.create_quiz(repo, owner, "Too short", None, [text_q()] * count)
    assert exc.value.reason == "too-few-questions"
    assert quiz_rows(db) == 0


def test_single_choice_with_one_real_option(repo, owner, db):
    with pytest.raises(ValidationFailed) as exc:
        authoring.create_quiz(repo, owner, "Quiz", None, [text_q(), choice_q("Pick one", options=["Only", "  ", ""])])
    assert exc.value.reason == "too-few-options"
    assert exc.value.detail == {"index": 1, "text": "Pick one"}
    assert quiz_rows(db) == 0
    assert db.scalar(select(func.count(Question.id))) == 0


def test_duplicate_options(repo, owner):
    with pytest.raises(ValidationFailed) as exc:
        authoring.create_quiz(repo, owner, "Quiz", None, [text_q(), choice_q(options=["Yes", " Yes "])])
    assert exc.value.reason == "duplicate-options"


def test_blank_options_are_dropped_and_text_options_cleared(repo, owner):
    text_with_options = QuestionIn(text="Why?", type=QuestionType.TEXT, options=["stray"])
    quiz = authoring.create_quiz(repo, owner, "Quiz", None, [text_with_options, choice_q(options=[" Red ", "", "Blue"])])
    assert quiz.questions[0].options == []
    assert quiz.questions[1].options == ["Red", "Blue"]


@pytest.mark.parametrize("title", ["", "   ", "x" * 201])
def test_invalid_title(repo, owner, title):
    with pytest.raises(ValidationFailed) as exc:
        authoring.create_quiz(repo, owner, title, None, [text_q(), text_q()])
    assert exc.value.reason == "invalid-title"


@pytest.mark.parametrize("title", ["x", "x" * 200])
def test_title_length_bounds_are_inclusive(repo, owner, title):
    quiz = authoring.create_quiz(repo, owner, title, None, [text_q(), text_q()])
    assert quiz.title == title


def test_write_failure_leaves_no_quiz_or_questions(repo, owner, db, monkeypatch):
    def add_then_fail(quiz, questions):
        quiz.questions = list(questions)
        db.add(quiz)
        db.flush()
        raise RuntimeError("store went away")

    monkeypatch.setattr(repo, "add_quiz", add_then_fail)
    with pytest.raises(RuntimeError):
        authoring.create_quiz(repo, owner, "Doomed", None, [text_q(), choice_q()])
    assert quiz_rows(db) == 0
    assert db.scalar(select(func.count(Question.id))) == 0


def test_parse_quiz_reports_shape_errors():
    with pytest.raises(ValidationFailed) as exc:
        authoring.parse_quiz({"title": "T", "questions": [{"type": "TEXT"}, {"text": "B", "type": "TEXT"}]})
    assert exc.value.reason == "malformed-quiz"
    assert exc.value.detail[0]["field"] == "questions.0.text"

    with pytest.raises(ValidationFailed) as exc:
        authoring.parse_quiz({"title": None, "questions": []})
    assert exc.value.reason == "malformed-quiz"

    parsed = authoring.parse_quiz({"title": "T", "questions": [{"text": "A", "type": "TEXT"}]})
    assert parsed.questions[0].required is True


def test_blank_question_text(repo, owner):
    with pytest.raises(ValidationFailed) as exc:
        authoring.create_quiz(repo, owner, "Quiz", None, [text_q(), text_q("  ")])
    assert exc.value.reason == "empty-question-text"
    assert exc.value.detail["index"] == 1


def test_list_quizzes_for_owner_only_with_counts(repo, owner, stranger, db):
    first = authoring.create_quiz(repo, owner, "First", None, [text_q(), choice_q()])
    second = authoring.create_quiz(repo, owner, "Second", None, [text_q(), text_q(), text_q()])
    authoring.create_quiz(repo, stranger, "Not mine", None, [text_q(), text_q()])
    db.add(Response(quiz_id=first.id))
    db.commit()

    summaries = authoring.list_quizzes_for(repo, owner)
    assert [s.title for s in summaries] == ["Second", "First"]
    assert [(s.question_count, s.response_count) for s in summaries] == [(3, 0), (2, 1)]
    assert second.id == summaries[0].id


def test_public_listing_uses_name_or_email(repo, owner, stranger):
    authoring.create_quiz(repo, owner, "By owner", None, [text_q(), text_q()])
    authoring.create_quiz(repo, stranger, "By stranger", None, [text_q(), text_q()])
    names = {s.title: s.creator_name for s in authoring.list_public_quizzes(repo)}
    assert names == {"By owner": "Owner", "By stranger": "stranger@example.com"}


def test_public_quiz_read(repo, owner):
    quiz = authoring.create_quiz(repo, owner, "Public", "desc", [text_q(), choice_q()])
    public = authoring.get_public_quiz(repo, quiz.id)
    assert public.creator_name == "Owner"
    assert public.response_count == 0
    assert [q.order for q in public.questions] == [0, 1]
    assert public.questions[1].options == ["Red", "Blue"]
