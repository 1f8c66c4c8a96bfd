"""
Re-run the completion check for interviews left in progress.

An answer can be stored while the completion check that follows it fails; such
interviews stay "in_progress" with every question answered. The check is
idempotent, so running this repeatedly is safe.

Run: python -m scripts.recompute_completion [--interview-id ID]
"""
import argparse
import logging
import sys

from sqlalchemy.exc import SQLAlchemyError

from prepcoach.core.exceptions import NotFoundError
from prepcoach.db.session import SessionLocal
from prepcoach.db.models.interview import InterviewStatus
from prepcoach.services.interview_state import InterviewStateMachine
from prepcoach.services.repository import InterviewRepository

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def recompute_completion(interview_id: int = None) -> int:
    """Return the number of interviews that became completed."""
    db = SessionLocal()
    try:
        state_machine = InterviewStateMachine(db)
        if interview_id is not None:
            ids = [interview_id]
        else:
            ids = [i.id for i in InterviewRepository(db).list_by_status(InterviewStatus.IN_PROGRESS.value)]

        logger.info(f"Checking {len(ids)} interview(s)")
        completed = 0
        for current_id in ids:
            try:
                interview = state_machine.check_completion(current_id)
            except SQLAlchemyError as e:
                db.rollback()
                logger.error(f"Completion check failed for interview_id={current_id}: {e}", exc_info=True)
                continue
            if interview.is_completed:
                completed += 1
        logger.info(f"{completed} interview(s) completed")
        return completed
    finally:
        db.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--interview-id", type=int, default=None)
    args = parser.parse_args()

    try:
        recompute_completion(args.interview_id)
    except NotFoundError as e:
        logger.error(e.message)
        sys.exit(1)
    except SQLAlchemyError as e:
        logger.error(f"Database error: {e}", exc_info=True)
        sys.exit(1)
