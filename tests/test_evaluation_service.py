"""
Tests for answer evaluation: LLM first, heuristic on any failure.
"""
import json

import pytest

from prepcoach.services.evaluation_service import (
    EvaluationService,
    LLMAnswerEvaluator,
    normalize_llm_evaluation,
)

QUESTION = "Describe a difficult bug you fixed."
ANSWER = "I tracked down a race condition in our job queue by adding tracing around the lock handling."


def llm_payload(**overrides) -> str:
    payload = {
        "score": 7,
        "feedback": "Clear and specific answer.",
        "strengths": ["Concrete example", "Explains the root cause"],
        "improvements": ["Mention the impact"],
    }
    payload.update(overrides)
    return json.dumps(payload)


def test_llm_evaluation_used_when_configured(fake_llm, scorer):
    provider = fake_llm(llm_payload())
    service = EvaluationService.from_provider(provider, fallback=scorer)

    result = service.evaluate(QUESTION, ANSWER)

    assert result.source == "llm"
    assert result.score == 7
    assert result.strengths == ["Concrete example", "Explains the root cause"]
    assert len(provider.calls) == 1
    assert QUESTION in provider.calls[0]["messages"][1]["content"]


def test_fenced_json_is_accepted(fake_llm, scorer):
    provider = fake_llm(f"Here you go:\n```json\n{llm_payload(score=9)}\n```")
    result = EvaluationService.from_provider(provider, fallback=scorer).evaluate(QUESTION, ANSWER)
    assert result.source == "llm"
    assert result.score == 9


def test_invalid_json_falls_back_to_heuristic(fake_llm, scorer):
    provider = fake_llm("Great answer, I would give it an eight.")
    result = EvaluationService.from_provider(provider, fallback=scorer).evaluate(QUESTION, ANSWER)

    assert result.source == "heuristic"
    assert result.score == scorer.score(ANSWER)


def test_provider_error_falls_back_to_heuristic(fake_llm, scorer):
    provider = fake_llm(TimeoutError("request timed out"))
    result = EvaluationService.from_provider(provider, fallback=scorer).evaluate(QUESTION, ANSWER)
    assert result.source == "heuristic"


@pytest.mark.parametrize("payload", [
    llm_payload(score=True),
    llm_payload(score="great"),
    llm_payload(feedback=""),
    llm_payload(strengths="one long string"),
    llm_payload(improvements=[1, 2]),
    json.dumps({"feedback": "no score"}),
])
def test_malformed_evaluation_falls_back(fake_llm, scorer, payload):
    result = EvaluationService.from_provider(fake_llm(payload), fallback=scorer).evaluate(QUESTION, ANSWER)
    assert result.source == "heuristic"


def test_no_provider_uses_heuristic(scorer):
    service = EvaluationService.from_provider(None, fallback=scorer)
    assert not service.has_external
    assert service.evaluate(QUESTION, ANSWER).source == "heuristic"


def test_use_external_false_skips_llm(fake_llm, scorer):
    provider = fake_llm(llm_payload())
    result = EvaluationService.from_provider(provider, fallback=scorer).evaluate(QUESTION, ANSWER, use_external=False)
    assert result.source == "heuristic"
    assert provider.calls == []


@pytest.mark.parametrize("raw,expected", [
    (7, 7), (7.5, 8), (6.49, 6), ("8", 8), (" 3.5 ", 4), (15, 10), (-2, 0),
])
def test_score_normalization(raw, expected):
    assert normalize_llm_evaluation({"score": raw, "feedback": "ok"}).score == expected


def test_missing_lists_default_to_empty():
    result = normalize_llm_evaluation({"score": 5, "feedback": "  Fine.  "})
    assert result.feedback == "Fine."
    assert result.strengths == []
    assert result.improvements == []


def test_llm_evaluator_raises_on_bad_output(fake_llm):
    with pytest.raises(ValueError):
        LLMAnswerEvaluator(fake_llm("not json")).evaluate(QUESTION, ANSWER)
