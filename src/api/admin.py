"""Admin API endpoints for catalog management and troubleshooting."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from src.api.dependencies import get_spoon_ledger, require_admin
from src.database import get_db
from src.models.catalog import Cat, Goodie
from src.models.user import User
from src.schemas.catalog import CatCreate, CatResponse, GoodieCreate, GoodieResponse
from src.schemas.spoons import BalanceResponse, SetBalanceRequest
from src.services.realtime import YardEventType, publish_yard_event
from src.services.spoon_ledger import SpoonLedger
from src.services.visit_simulator import VisitSimulator

router = APIRouter(prefix="/api/v1/admin", tags=["admin"])


class CatVisitRunResponse(BaseModel):
    """Result of a manual cat visit check."""

    user_id: int
    visits: int
    items_consumed: int
    spoons_awarded: int


@router.get("/goodies", response_model=list[GoodieResponse])
def list_all_goodies(
    admin: Annotated[User, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
):
    """List every goodie, hidden ones included."""
    return db.query(Goodie).order_by(Goodie.cost).all()


@router.post("/goodies", response_model=GoodieResponse, status_code=status.HTTP_201_CREATED)
def create_goodie(
    data: GoodieCreate,
    admin: Annotated[User, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
):
    """Add a goodie to the marketplace."""
    goodie = Goodie(**data.model_dump())
    db.add(goodie)
    db.commit()
    db.refresh(goodie)
    return goodie


@router.post("/cats", response_model=CatResponse, status_code=status.HTTP_201_CREATED)
def create_cat(
    data: CatCreate,
    admin: Annotated[User, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
):
    """Add a cat to the catalog."""
    cat = Cat(**data.model_dump())
    db.add(cat)
    db.commit()
    db.refresh(cat)
    return cat


@router.put("/spoons/{user_id}", response_model=BalanceResponse)
def set_balance(
    user_id: int,
    data: SetBalanceRequest,
    admin: Annotated[User, Depends(require_admin)],
    ledger: Annotated[SpoonLedger, Depends(get_spoon_ledger)],
):
    """Set a user's spoon balance. The difference is recorded as a transaction."""
    if not ledger.db.query(User.id).filter(User.id == user_id).first():
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    result = ledger.set_balance(user_id, data.total_points)
    ledger.db.commit()
    if result.points:
        publish_yard_event(
            user_id,
            YardEventType.POINTS_CHANGED,
            {"points": result.points, "balance": result.balance},
        )
    return BalanceResponse(user_id=user_id, total_points=result.balance)


@router.post("/cat-visits/run", response_model=CatVisitRunResponse)
def run_cat_visit_check(
    admin: Annotated[User, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
):
    """Run one visit check on the admin's own yard, outside the schedule."""
    outcomes = VisitSimulator(db).simulate_user(admin.id)
    return CatVisitRunResponse(
        user_id=admin.id,
        visits=len(outcomes),
        items_consumed=sum(1 for o in outcomes if o.consumed),
        spoons_awarded=sum(o.visit.spoon_reward for o in outcomes),
    )
