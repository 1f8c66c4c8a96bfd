"""
OpenAI provider implementation.
"""
import logging
from typing import Optional, Dict
from openai import OpenAI, APIError

from prepcoach.core import config
from prepcoach.llm.provider import LLMProvider, LLMResponse

logger = logging.getLogger(__name__)


class OpenAIProvider(LLMProvider):
    """OpenAI provider using the official OpenAI SDK."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
    ):
        """Initialize OpenAI client with a bounded timeout."""
        self.api_key = api_key or config.OPENAI_API_KEY
        if not self.api_key:
            raise ValueError("OPENAI_API_KEY not configured")
        self.client = OpenAI(
            api_key=self.api_key,
            timeout=timeout if timeout is not None else config.LLM_TIMEOUT_SECONDS,
            max_retries=max_retries if max_retries is not None else config.LLM_MAX_RETRIES,
        )
        logger.info("OpenAI provider initialized")

    def chat(
        self,
        messages: list[Dict[str, str]],
        model: str = "gpt-4o-mini",
        temperature: float = 0.7,
        max_tokens: Optional[int] = None,
        **kwargs
    ) -> LLMResponse:
        """Generate a chat completion."""
        try:
            response = self.client.chat.completions.create(
                model=model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens or 1000,
                **kwargs
            )
        except APIError as e:
            logger.error(f"OpenAI API error: {e}")
            raise

        content = response.choices[0].message.content or ""
        usage = response.usage
        logger.debug(
            f"OpenAI completion: model={model}, "
            f"tokens_in={usage.prompt_tokens if usage else 0}, "
            f"tokens_out={usage.completion_tokens if usage else 0}"
        )

        return LLMResponse(
            content=content,
            tokens_in=usage.prompt_tokens if usage else 0,
            tokens_out=usage.completion_tokens if usage else 0,
            model=model,
            metadata={
                "finish_reason": response.choices[0].finish_reason,
            }
        )

