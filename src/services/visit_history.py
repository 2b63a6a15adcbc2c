"""Cat visit history queries."""

import logging

from sqlalchemy import func, update
from sqlalchemy.orm import Session, joinedload

from src.models.cat_visit import CatVisit

logger = logging.getLogger(__name__)


class VisitHistoryService:
    """Service for reading and acknowledging a user's cat visits."""

    def __init__(self, db: Session):
        self.db = db

    def list_history(self, user_id: int, limit: int = 20, offset: int = 0) -> list[CatVisit]:
        """Newest visits first, paginated in the database."""
        return (
            self.db.query(CatVisit)
            .options(joinedload(CatVisit.cat))
            .filter(CatVisit.user_id == user_id)
            .order_by(CatVisit.visited_at.desc(), CatVisit.id.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )

    def count(self, user_id: int) -> int:
        return (
            self.db.query(func.count(CatVisit.id)).filter(CatVisit.user_id == user_id).scalar() or 0
        )

    def unread_count(self, user_id: int) -> int:
        return (
            self.db.query(func.count(CatVisit.id))
            .filter(CatVisit.user_id == user_id, CatVisit.read.is_(False))
            .scalar()
            or 0
        )

    def mark_all_read(self, user_id: int) -> int:
        """Flip every unread visit to read in a single statement.

        Returns:
            Number of visits that were unread
        """
        result = self.db.execute(
            update(CatVisit)
            .where(CatVisit.user_id == user_id, CatVisit.read.is_(False))
            .values(read=True)
            .execution_options(synchronize_session="fetch")
        )
        self.db.commit()
        logger.info(f"Marked {result.rowcount} cat visits read for user {user_id}")
        return result.rowcount
