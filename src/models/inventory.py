"""Inventory item model."""

from datetime import UTC, datetime

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from src.database import Base
from src.models.enums import ItemCategory, Rarity
from src.models.mixins import TimestampMixin


class InventoryItem(Base, TimestampMixin):
    """One owned unit of a goodie. Food can appear several times per user."""

    __tablename__ = "inventory_items"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    goodie_id = Column(Integer, ForeignKey("goodies.id"), nullable=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
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
    purchased_at = Column(DateTime(timezone=True), default=lambda: datetime.now(UTC))

    # Relationships
    user = relationship("User", backref="inventory_items")
