"""Yard placement schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from src.models.enums import ItemCategory, Rarity, SlotType
from src.schemas.inventory import InventoryItemResponse


class YardSlotResponse(BaseModel):
    """Fixed yard slot."""

    id: str
    type: SlotType
    x: float
    y: float


class PlacedItemResponse(BaseModel):
    """Item sitting in a yard slot."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    slot_id: str
    placement_key: str
    goodie_id: int | None
    name: str
    image_url: str | None
    category: ItemCategory
    rarity: Rarity
    placed_at: datetime
    max_visits: int | None = None
    remaining_visits: int | None = None


class YardResponse(BaseModel):
    """Full yard state for a user."""

    slots: list[YardSlotResponse]
    items: list[PlacedItemResponse]
    visit_probability: float
    unread_visits: int


class PlaceItemRequest(BaseModel):
    """Move an inventory unit into a slot."""

    inventory_item_id: int
    slot_id: str = Field(..., max_length=20)
    replace: bool = False


class PlaceItemResponse(BaseModel):
    """Result of a placement."""

    placed: PlacedItemResponse
    displaced: PlacedItemResponse | None = None
    displaced_returned: bool = False


class ReturnItemResponse(BaseModel):
    """Result of taking an item out of a slot."""

    slot_id: str
    returned_to_inventory: bool
    inventory_item: InventoryItemResponse | None = None
