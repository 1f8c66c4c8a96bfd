"""
Pydantic schemas for answer evaluation, question generation and CV analysis.
"""
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator


class EvaluationResult(BaseModel):
    """Normalized evaluation of one answer, whichever evaluator produced it."""
    score: int = Field(..., ge=0, le=10, description="Answer score 0-10")
    feedback: str = Field(..., min_length=1, description="Short feedback for the candidate")
    strengths: List[str] = Field(default_factory=list, description="What the answer did well")
    improvements: List[str] = Field(default_factory=list, description="What to improve")
    source: str = Field("heuristic", pattern="^(llm|heuristic)$", description="Evaluator that produced the result")


class EvaluateAnswerRequest(BaseModel):
    question: str = Field(..., min_length=1, description="Question text")
    answer: str = Field(..., description="Candidate's answer")
    question_id: Optional[int] = Field(None, description="Client-side question reference, echoed back")

    @field_validator("answer")
    @classmethod
    def answer_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Answer must not be empty")
        return v


class EvaluateAnswerResponse(EvaluationResult):
    question_id: Optional[int] = None


class GenerateQuestionsRequest(BaseModel):
    cv_text: str = Field(..., min_length=1, description="Extracted resume text")
    position: str = Field(..., min_length=1, max_length=200, description="Target job title")


class GeneratedQuestionResponse(BaseModel):
    order_num: int = Field(..., ge=1)
    question_text: str


class GenerateQuestionsResponse(BaseModel):
    questions: List[GeneratedQuestionResponse]
    source: str = Field(..., description="llm, parsed or template")


class CVAnalysisRequest(BaseModel):
    cv_text: str = Field(..., min_length=1, description="Extracted resume text")
    position: str = Field(..., min_length=1, max_length=200, description="Target job title")


class CVAnalysisResponse(BaseModel):
    """Structured CV analysis."""
    skills: List[str] = Field(default_factory=list)
    experience: List[str] = Field(default_factory=list)
    education: List[str] = Field(default_factory=list)
    summary: str = ""
    source: str = Field("heuristic", pattern="^(llm|heuristic)$")


class QuestionAnswerPair(BaseModel):
    question: str = Field(..., min_length=1)
    answer: str = Field("", description="Candidate's answer; may be empty if skipped")


class InterviewEvaluationRequest(BaseModel):
    cv_text: str = Field(..., min_length=1, description="Extracted resume text")
    questions_and_answers: List[QuestionAnswerPair] = Field(..., min_length=1)


class InterviewEvaluationResponse(BaseModel):
    """Holistic evaluation of a whole interview."""
    score: int = Field(..., ge=0, le=100, description="Overall score 0-100")
    feedback: str
    source: str = Field("heuristic", pattern="^(llm|heuristic)$")
