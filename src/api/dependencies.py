"""FastAPI dependencies for authentication, database and services."""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from src.database import get_db
from src.models.user import User
from src.services.auth import decode_access_token, is_admin
from src.services.marketplace import MarketplaceService
from src.services.placement_board import PlacementBoard
from src.services.spoon_ledger import SpoonLedger
from src.services.visit_history import VisitHistoryService

security = HTTPBearer()


def get_user_from_token(db: Session, token: str) -> User | None:
    """Resolve a bearer token to a user, or None if it is invalid."""
    payload = decode_access_token(token)
    if payload is None:
        return None
    user_id = payload.get("sub")
    if user_id is None:
        return None
    return db.query(User).filter(User.id == int(user_id)).first()


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
) -> User:
    """Get the current authenticated user from JWT token."""
    payload = decode_access_token(credentials.credentials)
    if payload is None or payload.get("sub") is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = db.query(User).filter(User.id == int(payload["sub"])).first()
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return user


def require_admin(
    current_user: Annotated[User, Depends(get_current_user)],
) -> User:
    """Only allow users listed in ADMIN_EMAILS."""
    if not is_admin(current_user):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return current_user


def get_spoon_ledger(
    db: Annotated[Session, Depends(get_db)],
) -> SpoonLedger:
    """Get spoon ledger with dependencies."""
    return SpoonLedger(db)


def get_marketplace_service(
    db: Annotated[Session, Depends(get_db)],
) -> MarketplaceService:
    """Get marketplace service with dependencies."""
    return MarketplaceService(db)


def get_placement_board(
    db: Annotated[Session, Depends(get_db)],
) -> PlacementBoard:
    """Get placement board with dependencies."""
    return PlacementBoard(db)


def get_visit_history_service(
    db: Annotated[Session, Depends(get_db)],
) -> VisitHistoryService:
    """Get visit history service with dependencies."""
    return VisitHistoryService(db)
