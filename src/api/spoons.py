"""Spoon point API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from src.api.dependencies import get_current_user, get_spoon_ledger
from src.models.user import User
from src.schemas.spoons import (
    ActionAvailabilityResponse,
    AwardPointsRequest,
    AwardPointsResponse,
    BalanceResponse,
    LeaderboardEntry,
    SpoonTransactionResponse,
)
from src.services.realtime import YardEventType, publish_yard_event
from src.services.spoon_ledger import POINT_ACTIONS, InvalidPointsContext, SpoonLedger

router = APIRouter(prefix="/api/v1/spoons", tags=["spoons"])

# Actions only the server may record; they carry amounts supplied in the context
SERVER_ONLY_ACTIONS = {"MARKETPLACE_PURCHASE", "CAT_VISIT", "ADMIN_ADJUSTMENT"}


@router.get("", response_model=BalanceResponse)
def get_balance(
    current_user: Annotated[User, Depends(get_current_user)],
    ledger: Annotated[SpoonLedger, Depends(get_spoon_ledger)],
):
    """Get the current user's spoon balance."""
    return BalanceResponse(user_id=current_user.id, total_points=ledger.get_balance(current_user.id))


@router.get("/transactions", response_model=list[SpoonTransactionResponse])
def list_transactions(
    current_user: Annotated[User, Depends(get_current_user)],
    ledger: Annotated[SpoonLedger, Depends(get_spoon_ledger)],
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
):
    """Get the current user's spoon history, newest first."""
    return ledger.list_transactions(current_user.id, limit=limit, offset=offset)


@router.post("/award", response_model=AwardPointsResponse)
def award_points(
    request: AwardPointsRequest,
    current_user: Annotated[User, Depends(get_current_user)],
    ledger: Annotated[SpoonLedger, Depends(get_spoon_ledger)],
):
    """Record a point-earning action.

    Rejections (cooldown, daily limit, already done) come back with
    ``success: false`` rather than an error status.
    """
    if request.action_type not in POINT_ACTIONS or request.action_type in SERVER_ONLY_ACTIONS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid action type: {request.action_type}",
        )

    try:
        result = ledger.award_points(
            current_user.id,
            request.action_type,
            target_id=request.target_id,
            context=request.context,
        )
    except InvalidPointsContext as e:
        ledger.db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    if result.success:
        ledger.db.commit()
        publish_yard_event(
            current_user.id,
            YardEventType.POINTS_CHANGED,
            {"points": result.points, "balance": result.balance},
        )
    else:
        ledger.db.rollback()

    return AwardPointsResponse(
        success=result.success,
        points=result.points if result.success else 0,
        balance=result.balance,
        error=result.error,
    )


@router.get("/availability", response_model=ActionAvailabilityResponse)
def check_availability(
    current_user: Annotated[User, Depends(get_current_user)],
    ledger: Annotated[SpoonLedger, Depends(get_spoon_ledger)],
    action_type: str = Query(..., max_length=50),
    target_id: str | None = Query(default=None, max_length=255),
):
    """Check whether an action would earn points right now."""
    result = ledger.is_action_available(current_user.id, action_type, target_id)
    return ActionAvailabilityResponse(available=result.success, reason=result.error)


@router.get("/leaderboard", response_model=list[LeaderboardEntry])
def leaderboard(
    current_user: Annotated[User, Depends(get_current_user)],
    ledger: Annotated[SpoonLedger, Depends(get_spoon_ledger)],
    limit: int = Query(default=25, ge=1, le=100),
):
    """Top spoon balances."""
    return [
        LeaderboardEntry(
            rank=rank,
            user_id=user.id,
            name=user.name,
            username=user.username,
            total_points=account.total_points,
        )
        for rank, (account, user) in enumerate(ledger.leaderboard(limit), start=1)
    ]
