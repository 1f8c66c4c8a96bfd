import os
import logging
from typing import Optional

logger = logging.getLogger(__name__)

DEV_SECRET_KEY = "prepcoach-dev-secret-change-me"


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# ✅ Database
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./prepcoach.db")
RUN_MIGRATIONS = _env_bool("RUN_MIGRATIONS")

# ✅ Security
SECRET_KEY = os.getenv("SECRET_KEY", DEV_SECRET_KEY)
ALGORITHM = os.getenv("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))
LOGIN_RATE_LIMIT = int(os.getenv("LOGIN_RATE_LIMIT", "10"))
LOGIN_RATE_WINDOW_SECONDS = int(os.getenv("LOGIN_RATE_WINDOW_SECONDS", "60"))

# ✅ OpenAI
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
LLM_TIMEOUT_SECONDS = float(os.getenv("LLM_TIMEOUT_SECONDS", "20"))
LLM_MAX_RETRIES = int(os.getenv("LLM_MAX_RETRIES", "1"))

# ✅ Gemini
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-flash-latest")

# "openai" or "gemini"; unset picks whichever key is configured, OpenAI first
LLM_PROVIDER = os.getenv("LLM_PROVIDER", "").strip().lower()
SUPPORTED_LLM_PROVIDERS = ("openai", "gemini")

# ✅ Interview workflow
QUESTION_COUNT = 5
HEURISTIC_JITTER = int(os.getenv("HEURISTIC_JITTER", "1"))
ALLOW_ANSWER_OVERWRITE = _env_bool("ALLOW_ANSWER_OVERWRITE")
MAX_CV_SIZE_BYTES = int(os.getenv("MAX_CV_SIZE_BYTES", str(5 * 1024 * 1024)))

# ✅ Logging / HTTP
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE")
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000").split(",")
    if origin.strip()
]


def has_openai() -> bool:
    """Check if OpenAI is configured."""
    return bool(OPENAI_API_KEY)


def has_gemini() -> bool:
    return bool(GEMINI_API_KEY)


def get_llm_provider_name() -> Optional[str]:
    """Name of the LLM backend to use, or None when no key is configured."""
    if LLM_PROVIDER == "openai":
        return "openai" if has_openai() else None
    if LLM_PROVIDER == "gemini":
        return "gemini" if has_gemini() else None
    if has_openai():
        return "openai"
    if has_gemini():
        return "gemini"
    return None


def get_default_model() -> str:
    return GEMINI_MODEL if get_llm_provider_name() == "gemini" else OPENAI_MODEL


def validate_config() -> None:
    """Log configuration problems that degrade the service without stopping it."""
    if LLM_PROVIDER and LLM_PROVIDER not in SUPPORTED_LLM_PROVIDERS:
        raise ValueError(f"LLM_PROVIDER must be one of {SUPPORTED_LLM_PROVIDERS}, got {LLM_PROVIDER!r}")
    provider = get_llm_provider_name()
    if provider is None:
        logger.info("No LLM key configured - using template questions and heuristic scoring")
    else:
        logger.info(f"LLM provider: {provider} (default model {get_default_model()})")
    if SECRET_KEY == DEV_SECRET_KEY:
        logger.warning("SECRET_KEY not set - using development secret, do not run like this in production")
    if HEURISTIC_JITTER < 0:
        raise ValueError("HEURISTIC_JITTER must be >= 0")
