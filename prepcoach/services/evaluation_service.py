"""
Answer evaluation service.

Two interchangeable evaluators share the `evaluate(question, answer)` shape:
LLMAnswerEvaluator (external, may raise) and HeuristicScorer (local, never
raises). EvaluationService tries the external one when it is configured and
allowed, and demotes to the heuristic on any failure, so callers always get a
usable EvaluationResult.
"""
import logging
import math
from typing import Any, Dict, List, Optional

from prepcoach.llm.provider import LLMProvider
from prepcoach.llm.parsing import parse_json_payload
from prepcoach.llm.router import get_model_for_feature, get_temperature_for_feature
from prepcoach.schemas.evaluation import EvaluationResult
from prepcoach.services.heuristic_scorer import HeuristicScorer

logger = logging.getLogger(__name__)

FEATURE = "answer_evaluation"

EVALUATION_SYSTEM_PROMPT = (
    "You are a strict technical interviewer grading a candidate's answer. "
    "Score from 0 to 10. Be strict: very short, vague, off-topic or low-content answers "
    "must score 3 or lower, and only complete, specific, well-reasoned answers may score 8 or higher. "
    "Respond with JSON only, no markdown, using exactly these keys: "
    '"score" (integer 0-10), "feedback" (2-3 sentences), '
    '"strengths" (array of 2-3 short strings), "improvements" (array of 2-3 short strings).'
)


def coerce_score(value: Any, upper: int = 10) -> int:
    """Validate a model-provided score, round it half up and clamp it to 0..upper."""
    if isinstance(value, bool):
        raise ValueError("score must be a number")
    if isinstance(value, str):
        value = float(value.strip())
    if not isinstance(value, (int, float)) or math.isnan(value) or math.isinf(value):
        raise ValueError("score must be a finite number")
    return max(0, min(upper, int(math.floor(value + 0.5))))


def _coerce_string_list(value: Any, key: str) -> List[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"{key} must be a list")
    items = []
    for item in value:
        if not isinstance(item, str):
            raise ValueError(f"{key} must contain strings only")
        if item.strip():
            items.append(item.strip())
    return items


def normalize_llm_evaluation(data: Dict[str, Any]) -> EvaluationResult:
    """
    Validate an LLM evaluation payload and build an EvaluationResult.

    Raises:
        ValueError / pydantic.ValidationError: If required fields are missing or mistyped
    """
    if "score" not in data:
        raise ValueError("score missing from evaluation")
    feedback = data.get("feedback")
    if not isinstance(feedback, str) or not feedback.strip():
        raise ValueError("feedback must be a non-empty string")

    return EvaluationResult(
        score=coerce_score(data["score"]),
        feedback=feedback.strip(),
        strengths=_coerce_string_list(data.get("strengths"), "strengths"),
        improvements=_coerce_string_list(data.get("improvements"), "improvements"),
        source="llm",
    )


class LLMAnswerEvaluator:
    """External evaluator backed by an LLM provider. Raises on any failure."""

    def __init__(self, provider: LLMProvider):
        self.provider = provider

    def build_messages(self, question: str, answer: str) -> List[Dict[str, str]]:
        return [
            {"role": "system", "content": EVALUATION_SYSTEM_PROMPT},
            {
                "role": "user",
                "content": f"Question:\n{question[:2000]}\n\nCandidate answer:\n{answer[:6000]}",
            },
        ]

    def evaluate(self, question: str, answer: str) -> EvaluationResult:
        response = self.provider.chat(
            messages=self.build_messages(question, answer),
            model=get_model_for_feature(FEATURE),
            temperature=get_temperature_for_feature(FEATURE),
            max_tokens=500,
        )
        data = parse_json_payload(response.content, expect=dict)
        return normalize_llm_evaluation(data)


class EvaluationService:
    """Scores answers, preferring the external evaluator and falling back to the heuristic."""

    def __init__(
        self,
        external: Optional[LLMAnswerEvaluator] = None,
        fallback: Optional[HeuristicScorer] = None,
    ):
        self.external = external
        self.fallback = fallback or HeuristicScorer()

    @classmethod
    def from_provider(cls, provider: Optional[LLMProvider], fallback: Optional[HeuristicScorer] = None) -> "EvaluationService":
        return cls(external=LLMAnswerEvaluator(provider) if provider else None, fallback=fallback)

    @property
    def has_external(self) -> bool:
        return self.external is not None

    def evaluate(self, question: str, answer: str, use_external: Optional[bool] = None) -> EvaluationResult:
        """
        Evaluate an answer. Never raises.

        Args:
            question: Question text
            answer: Candidate's answer
            use_external: False forces the heuristic; None/True use the external
                evaluator when one is configured
        """
        if use_external is None:
            use_external = self.has_external

        if use_external and self.has_external:
            try:
                result = self.external.evaluate(question, answer)
                logger.info(f"Answer evaluated by LLM: score={result.score}")
                return result
            except Exception as e:
                logger.warning(f"LLM evaluation failed, using heuristic fallback: {type(e).__name__}: {e}")

        result = self.fallback.evaluate(question, answer)
        logger.info(f"Answer evaluated by heuristic: score={result.score}")
        return result
