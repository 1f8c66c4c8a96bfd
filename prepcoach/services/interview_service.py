"""
Interview workflow service.

Creates interviews with their generated question set, scopes reads and
deletes to the owner, and routes answers through evaluation and the state
machine.
"""
import logging
from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from prepcoach.core.exceptions import (
    InterviewCreationError,
    NotFoundError,
    PermissionDeniedError,
    ValidationFailedError,
)
from prepcoach.db.models.interview import Interview
from prepcoach.db.models.question import Question
from prepcoach.db.models.user import User
from prepcoach.schemas.evaluation import EvaluationResult
from prepcoach.services.evaluation_service import EvaluationService
from prepcoach.services.interview_state import InterviewStateMachine
from prepcoach.services.question_service import QuestionGenerationService
from prepcoach.services.repository import InterviewRepository, QuestionRepository

logger = logging.getLogger(__name__)


@dataclass
class CreatedInterview:
    interview: Interview
    questions: List[Question]
    question_source: str


@dataclass
class SubmittedAnswer:
    question: Question
    evaluation: EvaluationResult
    interview: Interview


@dataclass
class InterviewStats:
    interviews: List[Interview]
    total: int
    completed: int
    average_score: int


class InterviewService:
    def __init__(
        self,
        db: Session,
        question_service: QuestionGenerationService,
        evaluation_service: EvaluationService,
        state_machine: Optional[InterviewStateMachine] = None,
    ):
        self.db = db
        self.question_service = question_service
        self.evaluation_service = evaluation_service
        self.state_machine = state_machine or InterviewStateMachine(db)
        self.interviews = InterviewRepository(db)
        self.questions = QuestionRepository(db)

    def create_interview(self, owner: User, title: str, position: str, cv_text: str) -> CreatedInterview:
        """
        Generate questions and persist the interview with them.

        The interview row is committed first; if the question set cannot be
        stored the row is deleted again and InterviewCreationError is raised.
        """
        title = (title or "").strip()
        position = (position or "").strip()
        if not title or not position:
            raise ValidationFailedError("Title and position are required")

        generated = self.question_service.generate(cv_text, position)
        logger.info(f"Generated {len(generated.questions)} questions for user_id={owner.id} (source={generated.source})")

        try:
            interview = self.interviews.create(owner.id, title, position, cv_text)
        except SQLAlchemyError as e:
            logger.error(f"Failed to save interview for user_id={owner.id}: {e}", exc_info=True)
            raise InterviewCreationError("Failed to save interview") from e

        try:
            questions = self.questions.create_many(interview.id, generated.texts)
            if len(questions) != len(generated.questions):
                raise InterviewCreationError("Failed to save interview questions")
            self.state_machine.start(interview)
        except (SQLAlchemyError, InterviewCreationError) as e:
            logger.error(f"Failed to save questions for interview_id={interview.id}, rolling back: {e}", exc_info=True)
            self._discard(interview)
            raise InterviewCreationError("Failed to save interview questions") from e

        return CreatedInterview(interview=interview, questions=questions, question_source=generated.source)

    def _discard(self, interview: Interview) -> None:
        """Remove an interview row whose question set could not be stored."""
        interview_id = interview.id
        self.db.rollback()
        try:
            self.db.query(Question).filter(Question.interview_id == interview_id).delete(synchronize_session=False)
            self.db.query(Interview).filter(Interview.id == interview_id).delete(synchronize_session=False)
            self.db.commit()
            logger.info(f"Rolled back interview_id={interview_id}")
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Could not remove orphaned interview_id={interview_id}: {e}", exc_info=True)

    def list_interviews(self, owner: User) -> InterviewStats:
        interviews = self.interviews.list_for_owner(owner.id)
        scores = [i.score for i in interviews if i.is_completed and i.score is not None]
        average = round(sum(scores) / len(scores)) if scores else 0
        return InterviewStats(
            interviews=interviews,
            total=len(interviews),
            completed=len(scores),
            average_score=average,
        )

    def get_owned_interview(self, owner: User, interview_id: int) -> Interview:
        interview = self.interviews.get(interview_id)
        if not interview:
            raise NotFoundError("Interview not found")
        if interview.user_id != owner.id:
            logger.warning(f"User {owner.id} attempted to access interview {interview_id}")
            raise PermissionDeniedError("You do not have access to this interview")
        return interview

    def get_interview_detail(self, owner: User, interview_id: int):
        interview = self.get_owned_interview(owner, interview_id)
        return interview, self.questions.list_for_interview(interview.id)

    def delete_interview(self, owner: User, interview_id: int) -> None:
        interview = self.get_owned_interview(owner, interview_id)
        self.interviews.delete(interview)

    def submit_answer(self, owner: User, interview_id: int, question_id: int, answer: str) -> SubmittedAnswer:
        """
        Evaluate and record one answer.

        The stored question text is what gets evaluated. Validation runs before
        evaluation so rejected submissions never reach the language model.
        """
        interview = self.get_owned_interview(owner, interview_id)
        question = self.state_machine.get_answerable_question(interview, question_id)

        evaluation = self.evaluation_service.evaluate(question.question_text, answer)
        question = self.state_machine.record_answer(interview.id, question.id, answer, evaluation)

        self.db.refresh(interview)
        return SubmittedAnswer(question=question, evaluation=evaluation, interview=interview)

    def complete_interview(self, owner: User, interview_id: int) -> Interview:
        """Retry the completion check for an interview left in progress."""
        interview = self.get_owned_interview(owner, interview_id)
        return self.state_machine.check_completion(interview.id)
