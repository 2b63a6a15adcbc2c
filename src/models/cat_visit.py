"""Cat visit history model."""

from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from src.database import Base
from src.models.mixins import TimestampMixin


class CatVisit(Base, TimestampMixin):
    """A cat visiting the user's yard. Append-only except for the read flag."""

    __tablename__ = "cat_visits"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    cat_id = Column(Integer, ForeignKey("cats.id"), nullable=False)
    food_item_id = Column(String(100), nullable=False)  # placement key of the food eaten
    toy_item_ids = Column(JSON, nullable=False, default=list)
    spoon_reward = Column(Integer, nullable=False)
    visited_at = Column(DateTime(timezone=True), nullable=False, index=True)
    read = Column(Boolean, default=False, nullable=False, index=True)

    # Relationships
    cat = relationship("Cat")
