"""Placement board: moving inventory items into and out of yard slots."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from src.models.catalog import Goodie
from src.models.enums import ItemCategory, Rarity, SlotType
from src.models.inventory import InventoryItem
from src.models.yard import PlacedItem

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class YardSlot:
    """A fixed spot in the yard. Coordinates are percentages of the yard image."""

    id: str
    type: SlotType
    x: float
    y: float


YARD_SLOTS: dict[str, YardSlot] = {
    slot.id: slot
    for slot in (
        YardSlot("food1", SlotType.FOOD, 50.0, 75.0),
        YardSlot("toy1", SlotType.TOY, 20.0, 60.0),
        YardSlot("toy2", SlotType.TOY, 80.0, 60.0),
        YardSlot("toy3", SlotType.TOY, 35.0, 45.0),
        YardSlot("toy4", SlotType.TOY, 65.0, 45.0),
        YardSlot("toy5", SlotType.TOY, 50.0, 30.0),
    )
}

# Number of cat visits a food item lasts, by rarity
VISIT_CAPACITY: dict[Rarity, int] = {
    Rarity.COMMON: 1,
    Rarity.UNCOMMON: 3,
    Rarity.RARE: 5,
    Rarity.EPIC: 10,
    Rarity.LEGENDARY: 20,
}


def get_slot(slot_id: str) -> YardSlot:
    slot = YARD_SLOTS.get(slot_id)
    if slot is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Yard slot not found")
    return slot


def slot_type(slot_id: str) -> SlotType | None:
    slot = YARD_SLOTS.get(slot_id)
    return slot.type if slot else None


def placement_key(source_id: int, placed_at: datetime) -> str:
    """Identity for a placement, unique across repeated placements of the same food."""
    return f"{source_id}-{int(placed_at.timestamp() * 1000)}"


@dataclass
class PlacementOutcome:
    """Result of placing an item, including whatever it displaced."""

    placed: PlacedItem
    displaced: PlacedItem | None = None
    displaced_returned: bool = False


class PlacementBoard:
    """Service for yard placement operations."""

    def __init__(self, db: Session):
        self.db = db

    def get_placed_items(self, user_id: int) -> list[PlacedItem]:
        return (
            self.db.query(PlacedItem)
            .filter(PlacedItem.user_id == user_id)
            .order_by(PlacedItem.slot_id)
            .all()
        )

    def get_placed_item(self, user_id: int, slot_id: str) -> PlacedItem | None:
        return (
            self.db.query(PlacedItem)
            .filter(PlacedItem.user_id == user_id, PlacedItem.slot_id == slot_id)
            .first()
        )

    def place_item(
        self,
        user_id: int,
        inventory_item_id: int,
        slot_id: str,
        replace: bool = False,
    ) -> PlacementOutcome:
        """Move one inventory unit into a slot.

        An occupied slot needs ``replace=True``. The occupant is then returned
        to inventory if it is a toy or accessory and thrown away if it is food.
        """
        slot = get_slot(slot_id)

        item = (
            self.db.query(InventoryItem)
            .filter(InventoryItem.id == inventory_item_id, InventoryItem.user_id == user_id)
            .first()
        )
        if not item:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Inventory item not found"
            )

        if not slot.type.accepts(item.category):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"A {item.category.value} item cannot be placed in a {slot.type.value} slot",
            )

        occupant = self.get_placed_item(user_id, slot_id)
        restored: InventoryItem | None = None
        if occupant is not None:
            if not replace:
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail=f"Slot {slot_id} is occupied by {occupant.name}; confirm replace",
                )
            if occupant.category != ItemCategory.FOOD:
                # Resolve before mutating anything so a failure leaves the yard untouched
                restored = self._restore_inventory_unit(user_id, occupant)

        now = datetime.now(UTC)
        placed = PlacedItem(
            user_id=user_id,
            slot_id=slot_id,
            placement_key=placement_key(item.goodie_id or item.id, now),
            goodie_id=item.goodie_id,
            name=item.name,
            description=item.description,
            image_url=item.image_url,
            category=item.category,
            rarity=item.rarity,
            cost=item.cost,
            placed_at=now,
        )
        if slot.type == SlotType.FOOD:
            capacity = VISIT_CAPACITY[item.rarity]
            placed.max_visits = capacity
            placed.remaining_visits = capacity

        if occupant is not None:
            if restored is not None:
                self.db.add(restored)
            self.db.delete(occupant)
            # Free the unique (user, slot) pair before inserting the replacement
            self.db.flush()

        self.db.delete(item)
        self.db.add(placed)
        self.db.commit()
        self.db.refresh(placed)

        logger.info(f"User {user_id} placed {placed.name} in {slot_id}")
        return PlacementOutcome(
            placed=placed,
            displaced=occupant,
            displaced_returned=restored is not None,
        )

    def return_item(self, user_id: int, slot_id: str) -> InventoryItem | None:
        """Take an item out of a slot.

        Toys and accessories go back to inventory and the new unit is returned.
        Food is destroyed and None is returned.
        """
        get_slot(slot_id)
        placed = self.get_placed_item(user_id, slot_id)
        if not placed:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No item in this slot")

        restored = None
        if placed.category != ItemCategory.FOOD:
            restored = self._restore_inventory_unit(user_id, placed)
            self.db.add(restored)

        self.db.delete(placed)
        self.db.commit()

        if restored is not None:
            self.db.refresh(restored)
            logger.info(f"User {user_id} returned {placed.name} from {slot_id} to inventory")
        else:
            logger.info(f"User {user_id} removed food {placed.name} from {slot_id}")
        return restored

    def _restore_inventory_unit(self, user_id: int, placed: PlacedItem) -> InventoryItem:
        """Build a new inventory unit from the canonical definition of a placed item.

        The user's own inventory is checked first, then the goodie catalog.
        """
        if placed.goodie_id is not None:
            owned = (
                self.db.query(InventoryItem)
                .filter(
                    InventoryItem.user_id == user_id,
                    InventoryItem.goodie_id == placed.goodie_id,
                )
                .first()
            )
            if owned:
                return InventoryItem(
                    user_id=user_id,
                    goodie_id=owned.goodie_id,
                    name=owned.name,
                    description=owned.description,
                    image_url=owned.image_url,
                    category=owned.category,
                    rarity=owned.rarity,
                    cost=owned.cost,
                    purchased_at=owned.purchased_at,
                )

            goodie = self.db.query(Goodie).filter(Goodie.id == placed.goodie_id).first()
            if goodie:
                return InventoryItem(
                    user_id=user_id,
                    goodie_id=goodie.id,
                    name=goodie.name,
                    description=goodie.description,
                    image_url=goodie.image_url,
                    category=goodie.category,
                    rarity=goodie.rarity,
                    cost=goodie.cost,
                    purchased_at=datetime.now(UTC),
                )

        logger.error(f"Could not resolve item definition for placed item {placed.placement_key}")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Item definition for {placed.name} not found",
        )
