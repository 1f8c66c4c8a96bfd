"""
Tests for the interview workflow service: creation with compensating
rollback, owner scoping and answer routing.
"""
import pytest
from sqlalchemy.exc import IntegrityError

from prepcoach.core.exceptions import (
    ConflictError,
    InterviewCreationError,
    NotFoundError,
    PermissionDeniedError,
    ValidationFailedError,
)
from prepcoach.db.models.interview import Interview, InterviewStatus
from prepcoach.db.models.question import Question
from prepcoach.schemas.evaluation import EvaluationResult
from prepcoach.services.evaluation_service import EvaluationService
from prepcoach.services.interview_service import InterviewService
from prepcoach.services.question_service import QuestionGenerationService, TEMPLATE_QUESTIONS
from prepcoach.services.repository import QuestionRepository


class RecordingEvaluator:
    """External evaluator that remembers which question text it was given."""

    def __init__(self, score: int = 7):
        self.score = score
        self.questions = []

    def evaluate(self, question, answer):
        self.questions.append(question)
        return EvaluationResult(score=self.score, feedback="Recorded", source="llm")


@pytest.fixture
def service(db, scorer):
    return InterviewService(
        db,
        QuestionGenerationService(provider=None),
        EvaluationService(fallback=scorer),
    )


def test_create_without_llm_uses_templates(db, service, test_user):
    created = service.create_interview(test_user, "Practice", "Backend Engineer", "Python developer")

    assert created.question_source == "template"
    assert created.interview.status == InterviewStatus.IN_PROGRESS.value
    assert created.interview.cv_text == "Python developer"
    assert [q.order_num for q in created.questions] == [1, 2, 3, 4, 5]
    assert [q.question_text for q in created.questions] == TEMPLATE_QUESTIONS
    assert db.query(Question).filter(Question.interview_id == created.interview.id).count() == 5


def test_create_with_llm_questions(db, scorer, test_user, fake_llm):
    provider = fake_llm('["Q one?", "Q two?", "Q three?", "Q four?", "Q five?"]')
    service = InterviewService(db, QuestionGenerationService(provider=provider), EvaluationService(fallback=scorer))

    created = service.create_interview(test_user, "Practice", "Backend Engineer", "cv")
    assert created.question_source == "llm"
    assert created.questions[0].question_text == "Q one?"


def test_question_insert_failure_removes_interview(db, service, test_user, monkeypatch):
    def failing_create_many(self, interview_id, texts):
        raise IntegrityError("INSERT INTO questions", {}, Exception("constraint failed"))

    monkeypatch.setattr(QuestionRepository, "create_many", failing_create_many)

    with pytest.raises(InterviewCreationError) as exc_info:
        service.create_interview(test_user, "Practice", "Backend Engineer", "cv")

    assert exc_info.value.status_code == 500
    assert exc_info.value.message == "Failed to save interview questions"
    assert db.query(Interview).count() == 0
    assert db.query(Question).count() == 0


def test_short_question_set_removes_interview(db, service, test_user, monkeypatch):
    monkeypatch.setattr(QuestionRepository, "create_many", lambda self, interview_id, texts: [])

    with pytest.raises(InterviewCreationError):
        service.create_interview(test_user, "Practice", "Backend Engineer", "cv")
    assert db.query(Interview).count() == 0


@pytest.mark.parametrize("title,position", [("", "Dev"), ("Practice", "   ")])
def test_create_requires_title_and_position(service, test_user, title, position):
    with pytest.raises(ValidationFailedError):
        service.create_interview(test_user, title, position, "cv")


def test_owner_scoping(service, test_user, other_user):
    created = service.create_interview(test_user, "Practice", "Dev", "cv")

    with pytest.raises(PermissionDeniedError):
        service.get_owned_interview(other_user, created.interview.id)
    with pytest.raises(NotFoundError):
        service.get_owned_interview(test_user, 9999)
    with pytest.raises(PermissionDeniedError):
        service.delete_interview(other_user, created.interview.id)


def test_list_interviews_stats(db, service, test_user, other_user):
    first = service.create_interview(test_user, "First", "Dev", "cv")
    second = service.create_interview(test_user, "Second", "Dev", "cv")
    service.create_interview(other_user, "Not mine", "Dev", "cv")

    for question in first.questions:
        service.submit_answer(test_user, first.interview.id, question.id, " ".join(["answer"] * 60))

    stats = service.list_interviews(test_user)
    assert [i.id for i in stats.interviews] == [second.interview.id, first.interview.id]
    assert stats.total == 2
    assert stats.completed == 1
    assert stats.average_score == 90


def test_submit_answer_evaluates_stored_question_text(db, scorer, test_user):
    evaluator = RecordingEvaluator(score=6)
    service = InterviewService(
        db,
        QuestionGenerationService(provider=None),
        EvaluationService(external=evaluator, fallback=scorer),
    )
    created = service.create_interview(test_user, "Practice", "Dev", "cv")
    question = created.questions[2]

    result = service.submit_answer(test_user, created.interview.id, question.id, "my answer")

    assert evaluator.questions == [question.question_text]
    assert result.evaluation.source == "llm"
    assert result.question.score == 6
    assert result.interview.status == InterviewStatus.IN_PROGRESS.value


def test_rejected_submission_never_reaches_evaluator(db, scorer, test_user):
    evaluator = RecordingEvaluator()
    service = InterviewService(
        db,
        QuestionGenerationService(provider=None),
        EvaluationService(external=evaluator, fallback=scorer),
    )
    created = service.create_interview(test_user, "Practice", "Dev", "cv")
    question_id = created.questions[0].id
    service.submit_answer(test_user, created.interview.id, question_id, "first")

    with pytest.raises(ConflictError):
        service.submit_answer(test_user, created.interview.id, question_id, "again")
    assert len(evaluator.questions) == 1


def test_last_answer_completes_interview(service, test_user):
    created = service.create_interview(test_user, "Practice", "Dev", "cv")
    statuses = []
    for question in created.questions:
        result = service.submit_answer(test_user, created.interview.id, question.id, " ".join(["answer"] * 60))
        statuses.append((result.interview.status, result.interview.score))

    assert statuses[:4] == [(InterviewStatus.IN_PROGRESS.value, None)] * 4
    assert statuses[-1] == (InterviewStatus.COMPLETED.value, 90)


def test_delete_removes_questions(db, service, test_user):
    created = service.create_interview(test_user, "Practice", "Dev", "cv")
    service.delete_interview(test_user, created.interview.id)

    assert db.query(Interview).count() == 0
    assert db.query(Question).count() == 0
