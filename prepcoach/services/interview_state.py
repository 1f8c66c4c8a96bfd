"""
Interview lifecycle: pending -> in_progress -> completed.

COMPLETED is terminal. The aggregate score (0-100) is written exactly once,
when every question carries an answer and a score.
"""
import logging
import math
from datetime import datetime, timezone
from typing import Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from prepcoach.core import config
from prepcoach.core.exceptions import ConflictError, NotFoundError
from prepcoach.db.models.interview import Interview, InterviewStatus
from prepcoach.db.models.question import Question
from prepcoach.schemas.evaluation import EvaluationResult
from prepcoach.services.repository import InterviewRepository, QuestionRepository

logger = logging.getLogger(__name__)


def aggregate_score(scores: Sequence[int]) -> int:
    """Mean of 0-10 question scores mapped to 0-100, rounded half up."""
    if not scores:
        raise ValueError("Cannot aggregate an empty score list")
    return int(math.floor(sum(scores) / len(scores) * 10 + 0.5))


class InterviewStateMachine:
    def __init__(self, db: Session, allow_overwrite: Optional[bool] = None):
        self.db = db
        self.interviews = InterviewRepository(db)
        self.questions = QuestionRepository(db)
        self.allow_overwrite = config.ALLOW_ANSWER_OVERWRITE if allow_overwrite is None else allow_overwrite

    def _get_interview(self, interview_id: int) -> Interview:
        interview = self.interviews.get(interview_id)
        if not interview:
            raise NotFoundError("Interview not found")
        return interview

    def start(self, interview: Interview) -> Interview:
        """Move a pending interview with a persisted question set to in_progress."""
        if interview.status != InterviewStatus.PENDING.value:
            raise ConflictError(f"Interview is already {interview.status}")
        if not self.questions.list_for_interview(interview.id):
            raise ConflictError("Interview has no questions")
        interview.status = InterviewStatus.IN_PROGRESS.value
        self.interviews.save(interview)
        logger.info(f"Interview started: interview_id={interview.id}")
        return interview

    def get_answerable_question(self, interview: Interview, question_id: int) -> Question:
        """
        Return the question if it may receive an answer now.

        Raises:
            NotFoundError: Unknown question or one belonging to another interview
            ConflictError: Interview not in progress, or question already answered
                while overwriting is disabled
        """
        question = self.questions.get(question_id)
        if not question or question.interview_id != interview.id:
            raise NotFoundError("Question not found")
        if interview.status == InterviewStatus.COMPLETED.value:
            raise ConflictError("Interview is already completed")
        if interview.status != InterviewStatus.IN_PROGRESS.value:
            raise ConflictError("Interview is not accepting answers")
        if question.is_answered and not self.allow_overwrite:
            raise ConflictError("Question has already been answered")
        return question

    def record_answer(
        self,
        interview_id: int,
        question_id: int,
        answer_text: str,
        evaluation: EvaluationResult,
    ) -> Question:
        """
        Store the answer with its evaluation, then run the completion check.

        The answer stays persisted if the completion check fails; the interview
        is left in_progress and the check can be retried.
        """
        interview = self._get_interview(interview_id)
        question = self.get_answerable_question(interview, question_id)
        if question.is_answered:
            logger.info(f"Overwriting answer: interview_id={interview_id}, question_id={question_id}")
        question = self.questions.save_answer(question, answer_text, evaluation)
        logger.info(
            f"Answer recorded: interview_id={interview_id}, question_id={question_id}, "
            f"score={evaluation.score}, source={evaluation.source}"
        )

        try:
            self.check_completion(interview_id)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Completion check failed for interview_id={interview_id}: {e}", exc_info=True)
        return question

    def check_completion(self, interview_id: int) -> Interview:
        """
        Finalise the interview once every question is answered. Idempotent.

        An already completed interview is returned untouched; an incomplete one
        is returned unchanged.
        """
        interview = self._get_interview(interview_id)
        if interview.is_completed:
            return interview

        questions = self.questions.list_for_interview(interview_id)
        if not questions or not all(q.is_answered for q in questions):
            return interview

        interview.score = aggregate_score([q.score for q in questions])
        interview.status = InterviewStatus.COMPLETED.value
        interview.updated_at = datetime.now(timezone.utc)
        self.interviews.save(interview)
        logger.info(f"Interview completed: interview_id={interview_id}, score={interview.score}")
        return interview
