"""
Tests for LLM backend selection and the Gemini message mapping.
"""
from types import SimpleNamespace

import pytest

from prepcoach.core import config
from prepcoach.llm import gemini_provider
from prepcoach.llm.factory import build_llm_provider
from prepcoach.llm.gemini_provider import GeminiProvider, to_gemini_contents
from prepcoach.llm.router import get_model_for_feature


@pytest.fixture
def llm_env(monkeypatch):
    def configure(provider="", openai_key=None, gemini_key=None):
        monkeypatch.setattr(config, "LLM_PROVIDER", provider)
        monkeypatch.setattr(config, "OPENAI_API_KEY", openai_key)
        monkeypatch.setattr(config, "GEMINI_API_KEY", gemini_key)
    return configure


@pytest.mark.parametrize("provider,openai_key,gemini_key,expected", [
    ("", None, None, None),
    ("", "sk-test", None, "openai"),
    ("", None, "g-test", "gemini"),
    ("", "sk-test", "g-test", "openai"),
    ("gemini", "sk-test", "g-test", "gemini"),
    ("gemini", "sk-test", None, None),
    ("openai", None, "g-test", None),
])
def test_provider_name_selection(llm_env, provider, openai_key, gemini_key, expected):
    llm_env(provider, openai_key, gemini_key)
    assert config.get_llm_provider_name() == expected


def test_default_model_follows_provider(llm_env):
    llm_env("gemini", None, "g-test")
    assert get_model_for_feature("interview_evaluation") == config.GEMINI_MODEL

    llm_env("", "sk-test", None)
    assert get_model_for_feature("interview_evaluation") == config.OPENAI_MODEL


def test_unknown_provider_rejected(llm_env):
    llm_env("anthropic", None, None)
    with pytest.raises(ValueError):
        config.validate_config()


def test_build_without_provider_returns_none():
    assert build_llm_provider(None) is None


def test_build_gemini_without_key_returns_none(llm_env):
    llm_env("gemini", None, None)
    assert build_llm_provider("gemini") is None


def test_build_gemini_with_key(llm_env):
    llm_env("gemini", None, "g-test")
    assert isinstance(build_llm_provider("gemini"), GeminiProvider)


def test_to_gemini_contents():
    system, contents = to_gemini_contents([
        {"role": "system", "content": "You are an interviewer."},
        {"role": "user", "content": "Ask me something."},
        {"role": "assistant", "content": "Why Python?"},
    ])

    assert system == "You are an interviewer."
    assert contents == [
        {"role": "user", "parts": ["Ask me something."]},
        {"role": "model", "parts": ["Why Python?"]},
    ]


def test_to_gemini_contents_without_system():
    system, contents = to_gemini_contents([{"role": "user", "content": "Hi"}])
    assert system is None
    assert len(contents) == 1


class FakeGenerativeModel:
    instances = []

    def __init__(self, model_name, system_instruction=None):
        self.model_name = model_name
        self.system_instruction = system_instruction
        self.calls = []
        FakeGenerativeModel.instances.append(self)

    def generate_content(self, contents, generation_config=None, request_options=None):
        self.calls.append({
            "contents": contents,
            "generation_config": generation_config,
            "request_options": request_options,
        })
        return SimpleNamespace(
            text='{"score": 80}',
            usage_metadata=SimpleNamespace(prompt_token_count=12, candidates_token_count=4),
        )


def test_gemini_chat(monkeypatch):
    FakeGenerativeModel.instances = []
    monkeypatch.setattr(gemini_provider.genai, "GenerativeModel", FakeGenerativeModel)
    provider = GeminiProvider(api_key="g-test", timeout=5)

    response = provider.chat(
        [{"role": "system", "content": "Be brief."}, {"role": "user", "content": "Score this."}],
        model="gemini-test",
        temperature=0.2,
        max_tokens=300,
    )

    assert response.content == '{"score": 80}'
    assert response.tokens_in == 12
    assert response.tokens_out == 4
    assert response.model == "gemini-test"

    gmodel = FakeGenerativeModel.instances[0]
    assert gmodel.model_name == "gemini-test"
    assert gmodel.system_instruction == "Be brief."
    call = gmodel.calls[0]
    assert call["contents"] == [{"role": "user", "parts": ["Score this."]}]
    assert call["request_options"] == {"timeout": 5}
    assert call["generation_config"].max_output_tokens == 300
