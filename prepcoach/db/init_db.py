import logging

from prepcoach.db.session import engine
from prepcoach.db.base import Base

logger = logging.getLogger(__name__)


def init_db():
    """Create any missing tables for all registered models."""
    import prepcoach.db.models  # noqa: F401  registers models on Base.metadata

    Base.metadata.create_all(bind=engine)
    logger.info("Database tables ensured")
