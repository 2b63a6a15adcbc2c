"""Marketplace service for buying goodies with spoons."""

import logging
from datetime import UTC, datetime

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from src.models.catalog import Goodie
from src.models.inventory import InventoryItem
from src.models.yard import PlacedItem
from src.services.spoon_ledger import SpoonLedger

logger = logging.getLogger(__name__)


class MarketplaceService:
    """Service for the goodie catalog and user inventories."""

    def __init__(self, db: Session, ledger: SpoonLedger | None = None):
        self.db = db
        self.ledger = ledger or SpoonLedger(db)

    def list_goodies(self, include_hidden: bool = False) -> list[Goodie]:
        query = self.db.query(Goodie)
        if not include_hidden:
            query = query.filter(Goodie.hidden.is_(False))
        return query.order_by(Goodie.cost, Goodie.name).all()

    def list_inventory(self, user_id: int) -> list[InventoryItem]:
        return (
            self.db.query(InventoryItem)
            .filter(InventoryItem.user_id == user_id)
            .order_by(InventoryItem.purchased_at.desc(), InventoryItem.id.desc())
            .all()
        )

    def owns_goodie(self, user_id: int, goodie_id: int) -> bool:
        """Check inventory and the yard, since placed items leave the inventory."""
        in_inventory = (
            self.db.query(InventoryItem.id)
            .filter(InventoryItem.user_id == user_id, InventoryItem.goodie_id == goodie_id)
            .first()
        )
        if in_inventory:
            return True
        placed = (
            self.db.query(PlacedItem.id)
            .filter(PlacedItem.user_id == user_id, PlacedItem.goodie_id == goodie_id)
            .first()
        )
        return placed is not None

    def purchase(self, user_id: int, goodie_id: int) -> InventoryItem:
        """Spend spoons on a goodie and add one unit to the user's inventory.

        The spend and the new inventory unit are committed together.
        """
        goodie = (
            self.db.query(Goodie).filter(Goodie.id == goodie_id, Goodie.hidden.is_(False)).first()
        )
        if not goodie:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Goodie not found")

        if goodie.category.is_unique and self.owns_goodie(user_id, goodie.id):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="You already own this item! Only food items can be purchased multiple times.",
            )

        now = datetime.now(UTC)
        result = self.ledger.award_points(
            user_id,
            "MARKETPLACE_PURCHASE",
            target_id=f"purchase-{goodie.id}-{int(now.timestamp() * 1000)}",
            context={
                "cost": goodie.cost,
                "itemName": goodie.name,
                "rarity": goodie.rarity.value,
                "details": f"Purchased {goodie.name}",
            },
        )
        if not result.success:
            self.db.rollback()
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=result.error)

        item = InventoryItem(
            user_id=user_id,
            goodie_id=goodie.id,
            name=goodie.name,
            description=goodie.description,
            image_url=goodie.image_url,
            category=goodie.category,
            rarity=goodie.rarity,
            cost=goodie.cost,
            purchased_at=now,
        )
        self.db.add(item)
        self.db.commit()
        self.db.refresh(item)

        logger.info(f"User {user_id} purchased {goodie.name} for {goodie.cost} spoons")
        return item
