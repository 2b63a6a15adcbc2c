"""Goodie and cat catalog schemas."""

from pydantic import BaseModel, ConfigDict, Field

from src.models.enums import ItemCategory, Rarity


class GoodieCreate(BaseModel):
    """Add a goodie to the marketplace."""

    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(None, max_length=2000)
    image_url: str | None = Field(None, max_length=500)
    category: ItemCategory
    rarity: Rarity
    cost: int = Field(..., ge=0)
    hidden: bool = False


class GoodieResponse(BaseModel):
    """Marketplace goodie."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str | None
    image_url: str | None
    category: ItemCategory
    rarity: Rarity
    cost: int


class CatCreate(BaseModel):
    """Add a cat to the catalog."""

    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(None, max_length=2000)
    image_url: str | None = Field(None, max_length=500)
    rarity: Rarity
    reward_multiplier: float = Field(1.0, gt=0)


class CatResponse(BaseModel):
    """Catalog cat."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str | None
    image_url: str | None
    rarity: Rarity
    reward_multiplier: float
