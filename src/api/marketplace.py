"""Marketplace and inventory API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from src.api.dependencies import get_current_user, get_marketplace_service
from src.models.user import User
from src.schemas.catalog import GoodieResponse
from src.schemas.inventory import InventoryItemResponse, PurchaseResponse
from src.services.marketplace import MarketplaceService
from src.services.realtime import YardEventType, publish_yard_event

router = APIRouter(prefix="/api/v1", tags=["marketplace"])


@router.get("/marketplace", response_model=list[GoodieResponse])
def list_goodies(
    current_user: Annotated[User, Depends(get_current_user)],
    marketplace: Annotated[MarketplaceService, Depends(get_marketplace_service)],
):
    """List goodies available for purchase."""
    return marketplace.list_goodies()


@router.post(
    "/marketplace/{goodie_id}/purchase",
    response_model=PurchaseResponse,
    status_code=status.HTTP_201_CREATED,
)
def purchase_goodie(
    goodie_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    marketplace: Annotated[MarketplaceService, Depends(get_marketplace_service)],
):
    """Buy a goodie with spoons."""
    item = marketplace.purchase(current_user.id, goodie_id)
    balance = marketplace.ledger.get_balance(current_user.id)

    publish_yard_event(
        current_user.id,
        YardEventType.POINTS_CHANGED,
        {"points": -item.cost, "balance": balance},
    )
    publish_yard_event(
        current_user.id,
        YardEventType.INVENTORY_CHANGED,
        {"added": item.id, "goodie_id": item.goodie_id},
    )

    return PurchaseResponse(
        item=InventoryItemResponse.model_validate(item),
        spent=item.cost,
        balance=balance,
    )


@router.get("/inventory", response_model=list[InventoryItemResponse])
def list_inventory(
    current_user: Annotated[User, Depends(get_current_user)],
    marketplace: Annotated[MarketplaceService, Depends(get_marketplace_service)],
):
    """List the current user's inventory."""
    return marketplace.list_inventory(current_user.id)
