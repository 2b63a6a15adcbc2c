"""Celery tasks for the scheduled cat visit check."""

import logging

from src.celery_app import app as celery_app
from src.database import SessionLocal
from src.services.visit_simulator import VisitSimulator

logger = logging.getLogger(__name__)


@celery_app.task
def process_cat_visits() -> dict:
    """Roll cat visits for every yard with food placed.

    This task runs on the celery-beat schedule (CAT_VISIT_INTERVAL_SECONDS).
    Individual user failures are handled inside the simulator; only a failure
    to load the work itself ends up here.

    Returns:
        dict with processing statistics
    """
    db = SessionLocal()
    try:
        return VisitSimulator(db).run()
    except Exception as e:
        logger.error(f"Error processing cat visits: {e}", exc_info=True)
        db.rollback()
        return {"error": str(e)}
    finally:
        db.close()


@celery_app.task
def check_user_cat_visits(user_id: int) -> dict:
    """Run one visit check for a single user's yard."""
    db = SessionLocal()
    try:
        outcomes = VisitSimulator(db).simulate_user(user_id)
        return {
            "user_id": user_id,
            "visits": len(outcomes),
            "items_consumed": sum(1 for o in outcomes if o.consumed),
        }
    except Exception as e:
        logger.error(f"Error checking cat visits for user {user_id}: {e}", exc_info=True)
        db.rollback()
        return {"error": str(e)}
    finally:
        db.close()
