"""Spoon point balance and transaction models."""

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from src.database import Base
from src.models.mixins import TimestampMixin


class SpoonAccount(Base, TimestampMixin):
    """Current spoon balance of a user."""

    __tablename__ = "spoon_accounts"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)
    total_points = Column(Integer, nullable=False, default=0)

    # Relationships
    user = relationship("User", backref="spoon_account")


class SpoonTransaction(Base):
    """Append-only record of one balance change."""

    __tablename__ = "spoon_transactions"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    action_type = Column(String(50), nullable=False, index=True)
    points = Column(Integer, nullable=False)
    target_id = Column(String(255), nullable=True, index=True)  # caller supplied key
    details = Column(Text, nullable=True)
    context = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, index=True)
