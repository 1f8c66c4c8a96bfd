"""
Heuristic answer scorer.

Used when no language model is configured, or when the model call fails.
Scores an answer from its character length and meaningful word count using
the bands in prepcoach.core.scoring_bands, then adds a small random jitter so
near-identical answers don't always get identical scores.
"""
import logging
import random
import re
from typing import Optional, Sequence

from prepcoach.core import config
from prepcoach.core.scoring_bands import (
    HEURISTIC_BANDS,
    MIN_SCORE,
    MAX_SCORE,
    ScoreBand,
    get_band_for,
    get_feedback_for,
)
from prepcoach.schemas.evaluation import EvaluationResult

logger = logging.getLogger(__name__)

# Two consecutive letters (any script); digits and underscore excluded
_MEANINGFUL_TOKEN_RE = re.compile(r"[^\W\d_]{2}")


def count_meaningful_words(text: str) -> int:
    """Count whitespace-delimited tokens containing at least two consecutive letters."""
    if not text:
        return 0
    return sum(1 for token in text.split() if _MEANINGFUL_TOKEN_RE.search(token))


def clamp_score(score: int) -> int:
    return max(MIN_SCORE, min(MAX_SCORE, score))


class HeuristicScorer:
    """Length/word-count based evaluator. Never raises."""

    def __init__(
        self,
        bands: Optional[Sequence[ScoreBand]] = None,
        jitter: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ):
        self.bands = list(bands) if bands is not None else HEURISTIC_BANDS
        self.jitter = config.HEURISTIC_JITTER if jitter is None else jitter
        self.rng = rng or random.Random()

    def base_band(self, answer: str) -> int:
        """Band for an answer before jitter is applied."""
        text = (answer or "").strip()
        return get_band_for(len(text), count_meaningful_words(text), self.bands)

    def score(self, answer: str) -> int:
        band = self.base_band(answer)
        if self.jitter:
            band += self.rng.randint(-self.jitter, self.jitter)
        return clamp_score(band)

    def evaluate(self, question: str, answer: str) -> EvaluationResult:
        """Score an answer; the question text is not used by the heuristic."""
        score = self.score(answer)
        tier = get_feedback_for(score)
        logger.debug(f"Heuristic evaluation: chars={len((answer or '').strip())}, score={score}, tier={tier['label']}")
        return EvaluationResult(
            score=score,
            feedback=tier["feedback"],
            strengths=list(tier["strengths"]),
            improvements=list(tier["improvements"]),
            source="heuristic",
        )
