"""
Holistic interview evaluation: one 0-100 score and feedback for a whole
question/answer transcript, judged against the candidate's CV.

Stateless. Without an LLM (or when it fails) the per-answer heuristic is
aggregated instead; a transcript with no answers at all scores 0.
"""
import json
import logging
from typing import List, Optional

from prepcoach.llm.provider import LLMProvider
from prepcoach.llm.parsing import parse_json_payload
from prepcoach.llm.router import get_model_for_feature, get_temperature_for_feature
from prepcoach.schemas.evaluation import InterviewEvaluationResponse, QuestionAnswerPair
from prepcoach.services.evaluation_service import coerce_score
from prepcoach.services.heuristic_scorer import HeuristicScorer
from prepcoach.services.interview_state import aggregate_score

logger = logging.getLogger(__name__)

FEATURE = "interview_evaluation"

UNANSWERED_FEEDBACK = "The interview could not be evaluated: none of the questions were answered."

INTERVIEW_EVALUATION_SYSTEM_PROMPT = (
    "You are an expert technical interviewer. Evaluate the candidate's answers to the interview "
    "questions as a whole, taking their CV into account. "
    'Respond with JSON only, no markdown, using exactly these keys: "score" (integer 0-100) and '
    '"feedback" (technical, constructive feedback for the candidate in 2-4 sentences).'
)


class InterviewEvaluationService:
    def __init__(self, provider: Optional[LLMProvider] = None, fallback: Optional[HeuristicScorer] = None):
        self.provider = provider
        self.fallback = fallback or HeuristicScorer()

    def build_messages(self, cv_text: str, qa: List[QuestionAnswerPair]) -> List[dict]:
        transcript = json.dumps([pair.model_dump() for pair in qa], ensure_ascii=False)
        return [
            {"role": "system", "content": INTERVIEW_EVALUATION_SYSTEM_PROMPT},
            {
                "role": "user",
                "content": f"CV summary:\n{cv_text[:1000]}\n\nQuestions and answers:\n{transcript[:8000]}",
            },
        ]

    def evaluate(self, cv_text: str, qa: List[QuestionAnswerPair]) -> InterviewEvaluationResponse:
        """Evaluate the transcript. Never raises on LLM failure."""
        if not any(pair.answer.strip() for pair in qa):
            logger.info("Interview evaluation requested with no answers")
            return InterviewEvaluationResponse(score=0, feedback=UNANSWERED_FEEDBACK, source="heuristic")

        if self.provider is not None:
            try:
                return self._evaluate_with_llm(cv_text, qa)
            except Exception as e:
                logger.warning(f"LLM interview evaluation failed, using heuristic fallback: {type(e).__name__}: {e}")

        return self._evaluate_heuristic(qa)

    def _evaluate_with_llm(self, cv_text: str, qa: List[QuestionAnswerPair]) -> InterviewEvaluationResponse:
        response = self.provider.chat(
            messages=self.build_messages(cv_text, qa),
            model=get_model_for_feature(FEATURE),
            temperature=get_temperature_for_feature(FEATURE),
            max_tokens=600,
        )
        data = parse_json_payload(response.content, expect=dict)
        if "score" not in data:
            raise ValueError("score missing from evaluation")
        feedback = data.get("feedback")
        if not isinstance(feedback, str) or not feedback.strip():
            raise ValueError("feedback must be a non-empty string")

        return InterviewEvaluationResponse(
            score=coerce_score(data["score"], upper=100),
            feedback=feedback.strip(),
            source="llm",
        )

    def _evaluate_heuristic(self, qa: List[QuestionAnswerPair]) -> InterviewEvaluationResponse:
        scores = [self.fallback.score(pair.answer) if pair.answer.strip() else 0 for pair in qa]
        score = aggregate_score(scores)
        answered = sum(1 for pair in qa if pair.answer.strip())
        logger.info(f"Interview evaluated by heuristic: score={score}, answered={answered}/{len(qa)}")
        return InterviewEvaluationResponse(
            score=score,
            feedback=(
                f"Estimated from answer length and detail: {answered} of {len(qa)} questions answered. "
                "Longer answers with concrete examples score higher."
            ),
            source="heuristic",
        )
