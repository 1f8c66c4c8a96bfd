"""
Pydantic schemas for interview endpoints.
"""
from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, Field, field_validator

from prepcoach.schemas.evaluation import EvaluationResult


class QuestionResponse(BaseModel):
    """Schema for a question with its (optional) evaluation."""
    id: int
    interview_id: int
    question_text: str
    order_num: int
    answer_text: Optional[str] = None
    score: Optional[int] = None
    feedback: Optional[str] = None
    strengths: Optional[List[str]] = None
    improvements: Optional[List[str]] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class InterviewResponse(BaseModel):
    """Schema for interview response."""
    id: int = Field(..., description="Interview ID")
    user_id: int = Field(..., description="Owner user ID")
    title: str
    position: str
    status: str = Field(..., description="pending, in_progress or completed")
    score: Optional[int] = Field(None, description="Aggregate score 0-100, only when completed")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
        json_schema_extra = {
            "example": {
                "id": 1,
                "user_id": 1,
                "title": "Backend practice",
                "position": "Backend Engineer",
                "status": "completed",
                "score": 80,
                "created_at": "2026-10-19T10:30:00Z",
                "updated_at": "2026-10-19T10:45:00Z"
            }
        }


class InterviewDetailResponse(BaseModel):
    interview: InterviewResponse
    questions: List[QuestionResponse]


class InterviewCreateResponse(BaseModel):
    id: int
    interview: InterviewResponse
    questions: List[QuestionResponse]
    question_source: str = Field(..., description="llm, parsed or template")


class InterviewListResponse(BaseModel):
    """Owner's interviews (newest first) with dashboard stats."""
    interviews: List[InterviewResponse]
    total: int
    completed: int
    average_score: int = Field(0, description="Mean aggregate score of completed interviews")


class AnswerSubmitRequest(BaseModel):
    question_id: int = Field(..., description="Question being answered")
    answer: str = Field(..., description="Free-text answer")
    question_text: Optional[str] = Field(None, description="Ignored; the stored question text is evaluated")

    @field_validator("answer")
    @classmethod
    def answer_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Answer must not be empty")
        return v


class AnswerSubmitResponse(BaseModel):
    question_id: int
    evaluation: EvaluationResult
    interview_status: str
    interview_score: Optional[int] = None
