"""
Process-wide LLM provider selection.
"""
import logging
from functools import lru_cache
from typing import Optional

from prepcoach.core import config
from prepcoach.llm.provider import LLMProvider

logger = logging.getLogger(__name__)


def build_llm_provider(name: Optional[str]) -> Optional[LLMProvider]:
    """Instantiate the named provider; None when unconfigured or initialisation fails."""
    if name is None:
        logger.info("No LLM key configured - LLM features use fallbacks")
        return None
    try:
        if name == "gemini":
            from prepcoach.llm.gemini_provider import GeminiProvider
            return GeminiProvider()
        from prepcoach.llm.openai_provider import OpenAIProvider
        return OpenAIProvider()
    except Exception as e:
        logger.warning(f"Failed to initialize {name} provider: {e}, falling back to rule-based")
        return None


@lru_cache(maxsize=1)
def get_llm_provider() -> Optional[LLMProvider]:
    """
    Process-wide LLM provider handle, chosen by LLM_PROVIDER or by whichever
    API key is configured. Returns None when there is none; callers then use
    their rule-based fallbacks.
    """
    return build_llm_provider(config.get_llm_provider_name())
