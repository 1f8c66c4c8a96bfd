"""
Heuristic scoring configuration.

Single source of truth for the answer-length bands used when no language
model is available. Rows are ascending; an answer gets the highest band whose
character AND meaningful-word minimums it meets.
"""
from typing import Dict, List, NamedTuple, Sequence


class ScoreBand(NamedTuple):
    min_chars: int
    min_words: int
    band: int


# (min characters, min meaningful words, band)
HEURISTIC_BANDS: List[ScoreBand] = [
    ScoreBand(0, 0, 1),
    ScoreBand(20, 3, 2),
    ScoreBand(40, 6, 3),
    ScoreBand(70, 10, 4),
    ScoreBand(110, 16, 5),
    ScoreBand(160, 24, 6),
    ScoreBand(220, 34, 7),
    ScoreBand(280, 45, 8),
    ScoreBand(350, 60, 9),
]

MIN_SCORE = 1
MAX_SCORE = 10

# Feedback tiers keyed by the lowest score they apply to, highest first.
FEEDBACK_BANDS: List[Dict] = [
    {
        "min_score": 8,
        "label": "excellent",
        "feedback": "Excellent answer. It is detailed, well developed and covers the question thoroughly.",
        "strengths": [
            "Thorough and well-developed answer",
            "Gives enough detail to judge your experience",
        ],
        "improvements": [
            "Keep the structure tight so the key point stays clear",
            "Quantify results where you can",
        ],
    },
    {
        "min_score": 6,
        "label": "good",
        "feedback": "Good answer. It addresses the question, but concrete examples would make it stronger.",
        "strengths": [
            "Addresses the question directly",
            "Reasonable level of detail",
        ],
        "improvements": [
            "Add a specific example from your own work",
            "Explain the outcome and your role in it",
        ],
    },
    {
        "min_score": 4,
        "label": "adequate",
        "feedback": "Adequate but shallow. The answer touches the topic without going into depth.",
        "strengths": [
            "Relevant to the question",
        ],
        "improvements": [
            "Go deeper into the technical details",
            "Use the STAR format: situation, task, action, result",
        ],
    },
    {
        "min_score": 2,
        "label": "too_short",
        "feedback": "Too short. The answer does not give enough information to evaluate your experience.",
        "strengths": [
            "You attempted the question",
        ],
        "improvements": [
            "Write at least a few full sentences",
            "Describe what you did and why",
        ],
    },
    {
        "min_score": MIN_SCORE,
        "label": "insufficient",
        "feedback": "Insufficient answer. Please provide a complete response to the question.",
        "strengths": [],
        "improvements": [
            "Answer the question in full sentences",
            "Include at least one concrete example",
        ],
    },
]


def get_band_for(length: int, meaningful_words: int, bands: Sequence[ScoreBand] = HEURISTIC_BANDS) -> int:
    """Return the highest band whose minimums are met by the answer metrics."""
    band = bands[0].band
    for row in bands:
        if length >= row.min_chars and meaningful_words >= row.min_words:
            band = row.band
    return band


def get_feedback_for(score: int) -> Dict:
    """Return the feedback tier for a final (post-jitter) score."""
    for tier in FEEDBACK_BANDS:
        if score >= tier["min_score"]:
            return tier
    return FEEDBACK_BANDS[-1]
