"""Marketplace goodie and cat catalog models."""

from sqlalchemy import Boolean, Column, Enum, Float, Integer, String, Text

from src.database import Base
from src.models.enums import ItemCategory, Rarity
from src.models.mixins import TimestampMixin


class Goodie(Base, TimestampMixin):
    """Item offered in the marketplace."""

    __tablename__ = "goodies"

    id = Column(Integer, primary_key=True, index=True)
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
    cost = Column(Integer, nullable=False)
    hidden = Column(Boolean, default=False, nullable=False)


class Cat(Base, TimestampMixin):
    """Cat that can visit a yard. Reference data, never mutated by visits."""

    __tablename__ = "cats"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    image_url = Column(String(500), nullable=True)
    rarity = Column(
        Enum(Rarity, name="rarity", values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        index=True,
    )
    reward_multiplier = Column(Float, nullable=False, default=1.0)
