"""Placed yard item model."""

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Integer, String, UniqueConstraint

from src.database import Base
from src.models.enums import ItemCategory, Rarity
from src.models.mixins import TimestampMixin


class PlacedItem(Base, TimestampMixin):
    """An inventory item sitting in one of the user's yard slots."""

    __tablename__ = "placed_items"
    __table_args__ = (UniqueConstraint("user_id", "slot_id", name="uq_placed_user_slot"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    slot_id = Column(String(20), nullable=False)  # "food1", "toy1".."toy5"
    placement_key = Column(String(100), nullable=False, index=True)  # "{goodie_id}-{epoch ms}"
    goodie_id = Column(Integer, ForeignKey("goodies.id"), nullable=True)
    name = Column(String(255), nullable=False)
    description = Column(String, nullable=True)
    image_url = Column(String(500), nullable=True)
    category = Column(
        Enum(ItemCategory, name="itemcategory", values_callable=lambda x: [e.value for e in x]),
        nullable=False,
    )
    rarity = Column(
        Enum(Rarity, name="rarity", values_callable=lambda x: [e.value for e in x]),
        nullable=False,
    )
    cost = Column(Integer, nullable=False, default=0)
    placed_at = Column(DateTime(timezone=True), nullable=False)

    # Food only
    max_visits = Column(Integer, nullable=True)
    remaining_visits = Column(Integer, nullable=True)
