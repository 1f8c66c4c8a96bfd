"""
Interview endpoints: create from a résumé, list, fetch, delete, answer and complete.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Response, UploadFile, status

from prepcoach.core.auth_dependency import get_current_user_obj
from prepcoach.core.exceptions import ValidationFailedError
from prepcoach.core.service_dependency import get_interview_service
from prepcoach.db.models.user import User
from prepcoach.schemas.interview import (
    AnswerSubmitRequest,
    AnswerSubmitResponse,
    InterviewCreateResponse,
    InterviewDetailResponse,
    InterviewListResponse,
    InterviewResponse,
    QuestionResponse,
)
from prepcoach.services.interview_service import InterviewService
from prepcoach.services.resume_parser import parse_resume, validate_cv_upload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/interviews", tags=["Interviews"])


def _read_cv_text(cv: Optional[UploadFile], resume_text: Optional[str]) -> str:
    """PDF upload wins over pasted text; one of the two is required."""
    if cv is not None and cv.filename:
        data = cv.file.read()
        validate_cv_upload(cv.filename, cv.content_type or "", data)
        return parse_resume(data)

    if resume_text and resume_text.strip():
        return resume_text.strip()

    raise ValidationFailedError("A CV file (PDF) or resume_text is required")


@router.post("", status_code=status.HTTP_201_CREATED, response_model=InterviewCreateResponse)
def create_interview(
    title: str = Form(...),
    position: str = Form(...),
    cv: Optional[UploadFile] = File(None),
    resume_text: Optional[str] = Form(None),
    user: User = Depends(get_current_user_obj),
    service: InterviewService = Depends(get_interview_service),
):
    """
    Create an interview from a résumé and generate its question set.

    Accepts multipart form data with a PDF `cv` and/or plain `resume_text`.
    """
    cv_text = _read_cv_text(cv, resume_text)
    created = service.create_interview(user, title, position, cv_text)

    logger.info(
        f"Interview created via API: interview_id={created.interview.id}, user_id={user.id}, "
        f"question_source={created.question_source}"
    )
    return InterviewCreateResponse(
        id=created.interview.id,
        interview=InterviewResponse.model_validate(created.interview),
        questions=[QuestionResponse.model_validate(q) for q in created.questions],
        question_source=created.question_source,
    )


@router.get("", response_model=InterviewListResponse)
def list_interviews(
    user: User = Depends(get_current_user_obj),
    service: InterviewService = Depends(get_interview_service),
):
    stats = service.list_interviews(user)
    return InterviewListResponse(
        interviews=[InterviewResponse.model_validate(i) for i in stats.interviews],
        total=stats.total,
        completed=stats.completed,
        average_score=stats.average_score,
    )


@router.get("/{interview_id}", response_model=InterviewDetailResponse)
def get_interview(
    interview_id: int,
    user: User = Depends(get_current_user_obj),
    service: InterviewService = Depends(get_interview_service),
):
    interview, questions = service.get_interview_detail(user, interview_id)
    return InterviewDetailResponse(
        interview=InterviewResponse.model_validate(interview),
        questions=[QuestionResponse.model_validate(q) for q in questions],
    )


@router.delete("/{interview_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_interview(
    interview_id: int,
    user: User = Depends(get_current_user_obj),
    service: InterviewService = Depends(get_interview_service),
):
    service.delete_interview(user, interview_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{interview_id}/answers", response_model=AnswerSubmitResponse)
def submit_answer(
    interview_id: int,
    payload: AnswerSubmitRequest,
    user: User = Depends(get_current_user_obj),
    service: InterviewService = Depends(get_interview_service),
):
    """
    Evaluate and store an answer. The interview completes automatically once
    every question has been answered.
    """
    result = service.submit_answer(user, interview_id, payload.question_id, payload.answer)
    return AnswerSubmitResponse(
        question_id=result.question.id,
        evaluation=result.evaluation,
        interview_status=result.interview.status,
        interview_score=result.interview.score,
    )


@router.post("/{interview_id}/complete", response_model=InterviewResponse)
def complete_interview(
    interview_id: int,
    user: User = Depends(get_current_user_obj),
    service: InterviewService = Depends(get_interview_service),
):
    """Re-run the completion check, e.g. after a failure following the last answer."""
    interview = service.complete_interview(user, interview_id)
    return InterviewResponse.model_validate(interview)
