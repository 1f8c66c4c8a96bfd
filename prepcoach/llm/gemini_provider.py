"""
Google Gemini provider implementation.
"""
import logging
from typing import Optional, Dict, List

import google.generativeai as genai
from google.api_core.exceptions import GoogleAPIError

from prepcoach.core import config
from prepcoach.llm.provider import LLMProvider, LLMResponse

logger = logging.getLogger(__name__)


def to_gemini_contents(messages: List[Dict[str, str]]):
    """
    Split chat messages into a system instruction and Gemini contents.

    Gemini has no "system" role; system messages become the model's
    system_instruction and "assistant" maps to "model".
    """
    system_parts = [m["content"] for m in messages if m.get("role") == "system"]
    contents = [
        {"role": "model" if m.get("role") == "assistant" else "user", "parts": [m["content"]]}
        for m in messages
        if m.get("role") != "system"
    ]
    return ("\n\n".join(system_parts) or None), contents


class GeminiProvider(LLMProvider):
    """Gemini provider using the google-generativeai SDK."""

    def __init__(self, api_key: Optional[str] = None, timeout: Optional[float] = None):
        self.api_key = api_key or config.GEMINI_API_KEY
        if not self.api_key:
            raise ValueError("GEMINI_API_KEY not configured")
        genai.configure(api_key=self.api_key)
        self.timeout = timeout if timeout is not None else config.LLM_TIMEOUT_SECONDS
        logger.info("Gemini provider initialized")

    def chat(
        self,
        messages: list[Dict[str, str]],
        model: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: Optional[int] = None,
        **kwargs
    ) -> LLMResponse:
        model_name = model or config.GEMINI_MODEL
        system_instruction, contents = to_gemini_contents(messages)
        gmodel = genai.GenerativeModel(model_name, system_instruction=system_instruction)

        try:
            response = gmodel.generate_content(
                contents,
                generation_config=genai.types.GenerationConfig(
                    temperature=temperature,
                    max_output_tokens=max_tokens or 1000,
                ),
                request_options={"timeout": self.timeout},
            )
        except GoogleAPIError as e:
            logger.error(f"Gemini API error: {e}")
            raise

        # .text raises ValueError when the candidate was blocked or empty
        content = response.text or ""
        usage = getattr(response, "usage_metadata", None)
        tokens_in = getattr(usage, "prompt_token_count", 0) or 0
        tokens_out = getattr(usage, "candidates_token_count", 0) or 0
        logger.debug(f"Gemini completion: model={model_name}, tokens_in={tokens_in}, tokens_out={tokens_out}")

        return LLMResponse(
            content=content,
            tokens_in=tokens_in,
            tokens_out=tokens_out,
            model=model_name,
        )
