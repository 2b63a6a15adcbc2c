"""SQLAlchemy models."""

from src.models.cat_visit import CatVisit
from src.models.catalog import Cat, Goodie
from src.models.inventory import InventoryItem
from src.models.spoons import SpoonAccount, SpoonTransaction
from src.models.user import User
from src.models.yard import PlacedItem

__all__ = [
    "User",
    "Goodie",
    "Cat",
    "InventoryItem",
    "PlacedItem",
    "CatVisit",
    "SpoonAccount",
    "SpoonTransaction",
]
