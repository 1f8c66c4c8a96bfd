import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from prepcoach.core import config
from prepcoach.core.exceptions import PrepCoachError, prepcoach_exception_handler
from prepcoach.core.logging_config import setup_logging, sanitize_log_data
from prepcoach.api.routes import auth, interviews, ai, health

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(config.LOG_LEVEL, config.LOG_FILE)
    config.validate_config()

    startup_settings = sanitize_log_data({
        "database_url": config.DATABASE_URL,
        "openai_api_key": config.OPENAI_API_KEY,
        "llm_provider": config.get_llm_provider_name(),
        "default_model": config.get_default_model(),
        "gemini_api_key": config.GEMINI_API_KEY,
        "heuristic_jitter": config.HEURISTIC_JITTER,
        "allow_answer_overwrite": config.ALLOW_ANSWER_OVERWRITE,
        "run_migrations": config.RUN_MIGRATIONS,
    })
    logger.info(f"Starting PrepCoach API with settings: {startup_settings}")

    if config.RUN_MIGRATIONS:
        from prepcoach.db.migrate import run_migrations
        run_migrations()
    else:
        from prepcoach.db.init_db import init_db
        init_db()

    yield

    logger.info("PrepCoach API shutting down")


# ============================================
# FASTAPI APP INIT
# ============================================

app = FastAPI(title="PrepCoach API", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "DELETE"],
    allow_headers=["Authorization", "Content-Type"],
)

app.add_exception_handler(PrepCoachError, prepcoach_exception_handler)


# ============================================
# REGISTER ALL ROUTERS
# ============================================

app.include_router(health.router)
app.include_router(auth.router)
app.include_router(interviews.router)
app.include_router(ai.router)


@app.get("/")
def root():
    return {"status": "PrepCoach API running"}
