"""Inventory schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from src.models.enums import ItemCategory, Rarity


class InventoryItemResponse(BaseModel):
    """One owned unit."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    goodie_id: int | None
    name: str
    description: str | None
    image_url: str | None
    category: ItemCategory
    rarity: Rarity
    cost: int
    purchased_at: datetime


class PurchaseResponse(BaseModel):
    """Result of a marketplace purchase."""

    item: InventoryItemResponse
    spent: int
    balance: int
