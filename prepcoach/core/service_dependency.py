"""
FastAPI dependencies that build the AI-backed services.

The LLM provider is created once per process; tests replace these
dependencies through app.dependency_overrides.
"""
from fastapi import Depends
from sqlalchemy.orm import Session

from prepcoach.core.auth_dependency import get_db
from prepcoach.llm.factory import get_llm_provider
from prepcoach.services.cv_analysis_service import CVAnalysisService
from prepcoach.services.evaluation_service import EvaluationService
from prepcoach.services.interview_evaluation_service import InterviewEvaluationService
from prepcoach.services.interview_service import InterviewService
from prepcoach.services.question_service import QuestionGenerationService


def get_question_service() -> QuestionGenerationService:
    return QuestionGenerationService(provider=get_llm_provider())


def get_evaluation_service() -> EvaluationService:
    return EvaluationService.from_provider(get_llm_provider())


def get_cv_analysis_service() -> CVAnalysisService:
    return CVAnalysisService(provider=get_llm_provider())


def get_interview_service(
    db: Session = Depends(get_db),
    question_service: QuestionGenerationService = Depends(get_question_service),
    evaluation_service: EvaluationService = Depends(get_evaluation_service),
) -> InterviewService:
    return InterviewService(db, question_service, evaluation_service)


def get_interview_evaluation_service() -> InterviewEvaluationService:
    return InterviewEvaluationService(provider=get_llm_provider())
