"""Cat visit history schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from src.schemas.catalog import CatResponse


class CatVisitResponse(BaseModel):
    """A visit with the cat that made it."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    cat_id: int
    cat: CatResponse
    food_item_id: str
    toy_item_ids: list[str]
    spoon_reward: int
    visited_at: datetime
    read: bool


class CatHistoryResponse(BaseModel):
    """A page of visit history."""

    visits: list[CatVisitResponse]
    total: int
    unread_count: int
    limit: int
    offset: int


class MarkReadResponse(BaseModel):
    """Result of acknowledging visits."""

    marked: int
    unread_count: int
