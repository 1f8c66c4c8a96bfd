"""
Tests for the length/word-count heuristic used when no LLM is available.
"""
import random

import pytest

from prepcoach.core.scoring_bands import HEURISTIC_BANDS, ScoreBand, get_band_for, get_feedback_for
from prepcoach.services.heuristic_scorer import HeuristicScorer, count_meaningful_words


class FixedRandom:
    """Stand-in RNG whose randint always returns the same offset."""

    def __init__(self, offset: int):
        self.offset = offset

    def randint(self, a, b):
        assert a <= self.offset <= b
        return self.offset


def words(n: int, word: str = "answer") -> str:
    return " ".join([word] * n)


def test_count_meaningful_words():
    assert count_meaningful_words("") == 0
    assert count_meaningful_words("a 1 22 x9y") == 0
    assert count_meaningful_words("ab çğ über a") == 3
    assert count_meaningful_words("I built it, in 2021!") == 3


@pytest.mark.parametrize("answer", ["", "   ", "\n\t"])
def test_empty_answer_is_band_one(answer):
    assert HeuristicScorer(jitter=0).base_band(answer) == 1


def test_short_answer_is_band_one():
    scorer = HeuristicScorer(jitter=0)
    # 19 characters with plenty of words
    assert scorer.base_band("ok so we did it ok") == 1
    # Long enough but only two meaningful words
    assert scorer.base_band("supercalifragilistic 1234567890 expialidocious") == 1


def test_long_answer_is_band_nine():
    answer = words(60)
    assert len(answer) >= 350
    assert HeuristicScorer(jitter=0).base_band(answer) == 9


def test_both_minimums_must_be_met():
    scorer = HeuristicScorer(jitter=0)
    # 79 chars, 10 words -> band 4
    assert scorer.base_band(words(10, "abcdefg")) == 4
    # 400+ chars but only 5 words -> capped by word count at band 2
    assert scorer.base_band(words(5, "a" * 80)) == 2


def test_band_is_monotonic_in_length():
    scorer = HeuristicScorer(jitter=0)
    bands = [scorer.base_band(words(n)) for n in range(0, 80)]
    assert bands == sorted(bands)


def test_jitter_offsets_and_clamps():
    assert HeuristicScorer(jitter=1, rng=FixedRandom(1)).score(words(60)) == 10
    assert HeuristicScorer(jitter=1, rng=FixedRandom(-1)).score(words(60)) == 8
    assert HeuristicScorer(jitter=1, rng=FixedRandom(-1)).score("") == 1


def test_score_always_within_range():
    scorer = HeuristicScorer(jitter=3, rng=random.Random(42))
    for n in range(0, 100, 3):
        assert 1 <= scorer.score(words(n)) <= 10


def test_custom_bands():
    bands = [ScoreBand(0, 0, 1), ScoreBand(5, 1, 5)]
    scorer = HeuristicScorer(bands=bands, jitter=0)
    assert scorer.base_band("hello") == 5
    assert get_band_for(5, 1) == 1
    assert get_band_for(5, 1, bands) == 5


def test_evaluate_excellent_answer():
    result = HeuristicScorer(jitter=0).evaluate("Tell me about yourself", words(60))
    assert result.score == 9
    assert result.source == "heuristic"
    assert result.feedback == get_feedback_for(9)["feedback"]
    assert result.strengths
    assert result.improvements


def test_evaluate_insufficient_answer():
    result = HeuristicScorer(jitter=0).evaluate("Tell me about yourself", "no")
    assert result.score == 1
    assert result.strengths == []
    assert "Insufficient" in result.feedback


@pytest.mark.parametrize("score,label", [
    (10, "excellent"), (8, "excellent"), (7, "good"), (6, "good"),
    (5, "adequate"), (4, "adequate"), (3, "too_short"), (2, "too_short"), (1, "insufficient"),
])
def test_feedback_tiers(score, label):
    assert get_feedback_for(score)["label"] == label


def test_bands_are_ascending():
    assert [row.band for row in HEURISTIC_BANDS] == list(range(1, 10))
    assert HEURISTIC_BANDS[0] == ScoreBand(0, 0, 1)
