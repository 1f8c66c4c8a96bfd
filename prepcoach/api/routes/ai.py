"""
Stateless AI endpoints: question generation, answer and whole-interview
evaluation, and CV analysis.

Nothing here is persisted. Each endpoint degrades to its local fallback when
the language model is unconfigured or fails.
"""
import logging

from fastapi import APIRouter, Depends

from prepcoach.core.auth_dependency import get_current_user
from prepcoach.core.service_dependency import (
    get_cv_analysis_service,
    get_evaluation_service,
    get_interview_evaluation_service,
    get_question_service,
)
from prepcoach.schemas.evaluation import (
    CVAnalysisRequest,
    CVAnalysisResponse,
    EvaluateAnswerRequest,
    EvaluateAnswerResponse,
    GeneratedQuestionResponse,
    GenerateQuestionsRequest,
    GenerateQuestionsResponse,
    InterviewEvaluationRequest,
    InterviewEvaluationResponse,
)
from prepcoach.services.cv_analysis_service import CVAnalysisService
from prepcoach.services.evaluation_service import EvaluationService
from prepcoach.services.interview_evaluation_service import InterviewEvaluationService
from prepcoach.services.question_service import QuestionGenerationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ai", tags=["AI"])


@router.post("/generate-questions", response_model=GenerateQuestionsResponse)
def generate_questions(
    request: GenerateQuestionsRequest,
    email: str = Depends(get_current_user),
    service: QuestionGenerationService = Depends(get_question_service),
):
    generated = service.generate(request.cv_text, request.position)
    return GenerateQuestionsResponse(
        questions=[
            GeneratedQuestionResponse(order_num=q.order_num, question_text=q.question_text)
            for q in generated.questions
        ],
        source=generated.source,
    )


@router.post("/evaluate-answer", response_model=EvaluateAnswerResponse)
def evaluate_answer(
    request: EvaluateAnswerRequest,
    email: str = Depends(get_current_user),
    service: EvaluationService = Depends(get_evaluation_service),
):
    result = service.evaluate(request.question, request.answer)
    return EvaluateAnswerResponse(**result.model_dump(), question_id=request.question_id)


@router.post("/analyze-cv", response_model=CVAnalysisResponse)
def analyze_cv(
    request: CVAnalysisRequest,
    email: str = Depends(get_current_user),
    service: CVAnalysisService = Depends(get_cv_analysis_service),
):
    result = service.analyze(request.cv_text, request.position)
    logger.info(f"CV analyzed: source={result.source}, skills={len(result.skills)}")
    return result


@router.post("/evaluate-interview", response_model=InterviewEvaluationResponse)
def evaluate_interview(
    request: InterviewEvaluationRequest,
    email: str = Depends(get_current_user),
    service: InterviewEvaluationService = Depends(get_interview_evaluation_service),
):
    result = service.evaluate(request.cv_text, request.questions_and_answers)
    logger.info(f"Interview evaluated: source={result.source}, score={result.score}")
    return result
