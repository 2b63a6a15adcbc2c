"""Enums for model fields."""

from enum import Enum


class Rarity(str, Enum):
    """Rarity tiers shared by goodies, placed items and cats."""

    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"


class ItemCategory(str, Enum):
    """Categories of marketplace goodies and inventory items."""

    FOOD = "food"
    TOY = "toy"
    ACCESSORY = "accessory"

    @property
    def is_unique(self) -> bool:
        """Only food may be owned more than once."""
        return self != ItemCategory.FOOD


class SlotType(str, Enum):
    """Kinds of yard placement slots."""

    FOOD = "food"
    TOY = "toy"

    def accepts(self, category: ItemCategory) -> bool:
        """Check if an item of this category can be placed in a slot of this type."""
        if self == SlotType.FOOD:
            return category == ItemCategory.FOOD
        return category in (ItemCategory.TOY, ItemCategory.ACCESSORY)
