"""
Persistence boundary for interviews and their questions.

Repositories wrap a SQLAlchemy session. Writes commit immediately; on a
database error the session is rolled back and the error re-raised so the
caller can decide how to compensate.
"""
import logging
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from prepcoach.db.models.interview import Interview, InterviewStatus
from prepcoach.db.models.question import Question
from prepcoach.schemas.evaluation import EvaluationResult

logger = logging.getLogger(__name__)


def _commit(db: Session, *instances) -> None:
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    for instance in instances:
        db.refresh(instance)


class InterviewRepository:
    def __init__(self, db: Session):
        self.db = db

    def create(self, user_id: int, title: str, position: str, cv_text: Optional[str] = None) -> Interview:
        interview = Interview(
            user_id=user_id,
            title=title,
            position=position,
            cv_text=cv_text,
            status=InterviewStatus.PENDING.value,
        )
        self.db.add(interview)
        _commit(self.db, interview)
        logger.info(f"Interview created: interview_id={interview.id}, user_id={user_id}")
        return interview

    def get(self, interview_id: int) -> Optional[Interview]:
        return self.db.query(Interview).filter(Interview.id == interview_id).first()

    def list_for_owner(self, user_id: int) -> List[Interview]:
        """Owner's interviews, newest first."""
        return (
            self.db.query(Interview)
            .filter(Interview.user_id == user_id)
            .order_by(Interview.created_at.desc(), Interview.id.desc())
            .all()
        )

    def list_by_status(self, status: str) -> List[Interview]:
        return (
            self.db.query(Interview)
            .filter(Interview.status == status)
            .order_by(Interview.id)
            .all()
        )

    def save(self, interview: Interview) -> Interview:
        self.db.add(interview)
        _commit(self.db, interview)
        return interview

    def delete(self, interview: Interview) -> None:
        interview_id = interview.id
        self.db.delete(interview)
        _commit(self.db)
        logger.info(f"Interview deleted: interview_id={interview_id}")


class QuestionRepository:
    def __init__(self, db: Session):
        self.db = db

    def create_many(self, interview_id: int, texts: Iterable[str]) -> List[Question]:
        """Insert the question set in one commit, numbered 1..N in the given order."""
        questions = [
            Question(interview_id=interview_id, question_text=text, order_num=order_num)
            for order_num, text in enumerate(texts, start=1)
        ]
        self.db.add_all(questions)
        _commit(self.db, *questions)
        return questions

    def list_for_interview(self, interview_id: int) -> List[Question]:
        return (
            self.db.query(Question)
            .filter(Question.interview_id == interview_id)
            .order_by(Question.order_num)
            .all()
        )

    def get(self, question_id: int) -> Optional[Question]:
        return self.db.query(Question).filter(Question.id == question_id).first()

    def save_answer(self, question: Question, answer_text: str, evaluation: EvaluationResult) -> Question:
        """Write the answer and its whole evaluation in a single update."""
        question.answer_text = answer_text
        question.score = evaluation.score
        question.feedback = evaluation.feedback
        question.strengths = list(evaluation.strengths)
        question.improvements = list(evaluation.improvements)
        question.answered_at = datetime.now(timezone.utc)
        self.db.add(question)
        _commit(self.db, question)
        return question
