"""Spoon point schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class BalanceResponse(BaseModel):
    """Current spoon balance."""

    user_id: int
    total_points: int


class SpoonTransactionResponse(BaseModel):
    """One ledger entry."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    action_type: str
    points: int
    target_id: str | None
    details: str | None
    created_at: datetime


class AwardPointsRequest(BaseModel):
    """Request points for an action performed in the app."""

    action_type: str = Field(..., max_length=50)
    target_id: str | None = Field(None, max_length=255)
    context: dict[str, Any] | None = None


class AwardPointsResponse(BaseModel):
    """Outcome of a points request."""

    success: bool
    points: int = 0
    balance: int | None = None
    error: str | None = None


class ActionAvailabilityResponse(BaseModel):
    """Whether an action would earn points right now."""

    available: bool
    reason: str | None = None


class LeaderboardEntry(BaseModel):
    """Leaderboard row."""

    rank: int
    user_id: int
    name: str | None
    username: str | None
    total_points: int


class SetBalanceRequest(BaseModel):
    """Admin override of a balance."""

    total_points: int = Field(..., ge=0)
