"""Yard API endpoints: placement, visit history and the cat catalog."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from src.api.dependencies import get_current_user, get_placement_board, get_visit_history_service
from src.database import get_db
from src.models.catalog import Cat
from src.models.enums import SlotType
from src.models.user import User
from src.schemas.cat_visit import CatHistoryResponse, MarkReadResponse
from src.schemas.catalog import CatResponse
from src.schemas.inventory import InventoryItemResponse
from src.schemas.yard import (
    PlacedItemResponse,
    PlaceItemRequest,
    PlaceItemResponse,
    ReturnItemResponse,
    YardResponse,
    YardSlotResponse,
)
from src.services.placement_board import YARD_SLOTS, PlacementBoard
from src.services.realtime import YardEventType, publish_yard_event
from src.services.visit_history import VisitHistoryService
from src.services.visit_simulator import visit_probability

router = APIRouter(prefix="/api/v1/yard", tags=["yard"])


@router.get("", response_model=YardResponse)
def get_yard(
    current_user: Annotated[User, Depends(get_current_user)],
    board: Annotated[PlacementBoard, Depends(get_placement_board)],
    history: Annotated[VisitHistoryService, Depends(get_visit_history_service)],
):
    """Get the full yard state.

    Clients receive changes over the yard WebSocket; this endpoint is the
    fallback used to resynchronize after reconnecting.
    """
    items = board.get_placed_items(current_user.id)
    toy_slots = {item.slot_id for item in items if YARD_SLOTS[item.slot_id].type == SlotType.TOY}
    return YardResponse(
        slots=[
            YardSlotResponse(id=slot.id, type=slot.type, x=slot.x, y=slot.y)
            for slot in YARD_SLOTS.values()
        ],
        items=[PlacedItemResponse.model_validate(item) for item in items],
        visit_probability=visit_probability(len(toy_slots)),
        unread_visits=history.unread_count(current_user.id),
    )


@router.post("/place", response_model=PlaceItemResponse)
def place_item(
    request: PlaceItemRequest,
    current_user: Annotated[User, Depends(get_current_user)],
    board: Annotated[PlacementBoard, Depends(get_placement_board)],
):
    """Place an inventory item in a yard slot."""
    outcome = board.place_item(
        current_user.id,
        request.inventory_item_id,
        request.slot_id,
        replace=request.replace,
    )

    if outcome.displaced is not None:
        publish_yard_event(
            current_user.id,
            YardEventType.ITEM_RETURNED if outcome.displaced_returned else YardEventType.ITEM_DISCARDED,
            {"slot_id": request.slot_id, "placement_key": outcome.displaced.placement_key},
        )
    publish_yard_event(
        current_user.id,
        YardEventType.ITEM_PLACED,
        {"slot_id": request.slot_id, "placement_key": outcome.placed.placement_key},
    )

    return PlaceItemResponse(
        placed=PlacedItemResponse.model_validate(outcome.placed),
        displaced=(
            PlacedItemResponse.model_validate(outcome.displaced) if outcome.displaced else None
        ),
        displaced_returned=outcome.displaced_returned,
    )


@router.delete("/slots/{slot_id}", response_model=ReturnItemResponse)
def return_item(
    slot_id: str,
    current_user: Annotated[User, Depends(get_current_user)],
    board: Annotated[PlacementBoard, Depends(get_placement_board)],
):
    """Take an item out of a slot. Toys go back to inventory, food is thrown away."""
    restored = board.return_item(current_user.id, slot_id)

    publish_yard_event(
        current_user.id,
        YardEventType.ITEM_RETURNED if restored else YardEventType.ITEM_DISCARDED,
        {"slot_id": slot_id},
    )

    return ReturnItemResponse(
        slot_id=slot_id,
        returned_to_inventory=restored is not None,
        inventory_item=InventoryItemResponse.model_validate(restored) if restored else None,
    )


@router.get("/history", response_model=CatHistoryResponse)
def get_history(
    current_user: Annotated[User, Depends(get_current_user)],
    history: Annotated[VisitHistoryService, Depends(get_visit_history_service)],
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
):
    """Get a page of cat visits, newest first."""
    return CatHistoryResponse(
        visits=history.list_history(current_user.id, limit=limit, offset=offset),
        total=history.count(current_user.id),
        unread_count=history.unread_count(current_user.id),
        limit=limit,
        offset=offset,
    )


@router.post("/history/read", response_model=MarkReadResponse)
def mark_history_read(
    current_user: Annotated[User, Depends(get_current_user)],
    history: Annotated[VisitHistoryService, Depends(get_visit_history_service)],
):
    """Mark every cat visit as read."""
    marked = history.mark_all_read(current_user.id)
    if marked:
        publish_yard_event(current_user.id, YardEventType.HISTORY_READ, {"marked": marked})
    return MarkReadResponse(marked=marked, unread_count=history.unread_count(current_user.id))


@router.get("/cats", response_model=list[CatResponse])
def list_cats(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """List every cat that can visit."""
    return db.query(Cat).order_by(Cat.reward_multiplier, Cat.name).all()
