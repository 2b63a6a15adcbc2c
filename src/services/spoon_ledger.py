"""Spoon point ledger: balances, transactions and point-earning rules."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any

from sqlalchemy import func
from sqlalchemy.orm import Session

from src.models.spoons import SpoonAccount, SpoonTransaction
from src.models.user import User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PointAction:
    """Rules for one kind of point-earning (or spending) action."""

    type: str
    display_name: str
    points: int = 0
    cooldown_minutes: int = 0
    max_per_day: int | None = None
    requires_unique: bool = False
    get_points: Callable[[dict[str, Any]], int] | None = None


@dataclass
class AwardResult:
    """Outcome of an award attempt. Failures never touch the balance."""

    success: bool
    points: int = 0
    balance: int | None = None
    error: str | None = None
    shortfall: int = 0
    transaction_id: int | None = field(default=None, repr=False)


UPLOAD_IMAGE_MAX_POINTS = 250


class InvalidPointsContext(ValueError):
    """The context of an award cannot be turned into a point amount."""


def _upload_points(context: dict[str, Any]) -> int:
    # Quality score comes from the client; never above the base award
    score = context.get("score")
    if score is None:
        return UPLOAD_IMAGE_MAX_POINTS
    if isinstance(score, bool):
        raise ValueError("score must be a number")
    return max(0, min(UPLOAD_IMAGE_MAX_POINTS, int(score)))


def _purchase_points(context: dict[str, Any]) -> int:
    # Sign in the stored cost is ignored; purchases always spend
    cost = context.get("cost")
    if cost is None:
        return 0
    return -abs(int(str(cost).replace("+", "").replace("-", "")))


POINT_ACTIONS: dict[str, PointAction] = {
    action.type: action
    for action in (
        PointAction("SAVE_RECIPE", "Recipe Saved", points=10, cooldown_minutes=1, requires_unique=True),
        PointAction("GENERATE_RECIPE", "Recipe Generated", points=15, cooldown_minutes=5, max_per_day=30),
        PointAction(
            "GENERATE_SUMMARY", "Summary Generated", points=25, cooldown_minutes=30, requires_unique=True
        ),
        PointAction(
            "GENERATE_NUTRITION",
            "Nutrition Info Generated",
            points=30,
            cooldown_minutes=30,
            requires_unique=True,
        ),
        PointAction(
            "GENERATE_PAIRINGS", "Pairings Generated", points=20, cooldown_minutes=30, requires_unique=True
        ),
        PointAction(
            "GENERATE_IMAGE", "AI Image Generated", points=20, max_per_day=30, requires_unique=True
        ),
        PointAction(
            "UPLOAD_IMAGE",
            "Photo Uploaded",
            points=UPLOAD_IMAGE_MAX_POINTS,
            cooldown_minutes=60,
            requires_unique=True,
            get_points=_upload_points,
        ),
        PointAction("CHAT_INTERACTION", "Chat Interaction", points=10, cooldown_minutes=1, max_per_day=50),
        PointAction("RECIPE_SAVED_BY_OTHER", "Recipe Saved by Another User", points=50, requires_unique=True),
        PointAction("MARKETPLACE_PURCHASE", "Marketplace Purchase", get_points=_purchase_points),
        PointAction("CAT_VISIT", "Cat Visit", get_points=lambda ctx: int(ctx.get("reward", 0))),
        PointAction("ADMIN_ADJUSTMENT", "Admin Adjustment", get_points=lambda ctx: int(ctx.get("delta", 0))),
    )
}


class SpoonLedger:
    """Service for awarding and spending spoon points.

    The ledger flushes but never commits; the caller owns the transaction so
    that a balance change can be committed together with related writes
    (an inventory unit, a cat visit).
    """

    def __init__(self, db: Session):
        self.db = db

    def get_or_create_account(self, user_id: int, lock: bool = False) -> SpoonAccount:
        query = self.db.query(SpoonAccount).filter(SpoonAccount.user_id == user_id)
        if lock:
            query = query.with_for_update()
        account = query.first()
        if account is None:
            account = SpoonAccount(user_id=user_id, total_points=0)
            self.db.add(account)
            self.db.flush()
        return account

    def get_balance(self, user_id: int) -> int:
        account = self.db.query(SpoonAccount).filter(SpoonAccount.user_id == user_id).first()
        return account.total_points if account else 0

    def _action_history(
        self,
        user_id: int,
        action_type: str,
        target_id: str | None = None,
        since: datetime | None = None,
    ) -> int:
        query = self.db.query(func.count(SpoonTransaction.id)).filter(
            SpoonTransaction.user_id == user_id,
            SpoonTransaction.action_type == action_type,
        )
        if target_id:
            query = query.filter(SpoonTransaction.target_id == target_id)
        if since is not None:
            query = query.filter(SpoonTransaction.created_at > since)
        return query.scalar() or 0

    def validate_action(
        self,
        user_id: int,
        action: PointAction,
        target_id: str | None = None,
        now: datetime | None = None,
    ) -> str | None:
        """Return the reason an action is not allowed right now, or None."""
        now = now or datetime.now(UTC)

        if action.cooldown_minutes > 0:
            cooldown_start = now - timedelta(minutes=action.cooldown_minutes)
            if self._action_history(user_id, action.type, target_id, cooldown_start) > 0:
                return "Action on cooldown"

        if action.max_per_day:
            day_start = now.replace(hour=0, minute=0, second=0, microsecond=0)
            if self._action_history(user_id, action.type, since=day_start) >= action.max_per_day:
                return "Daily limit reached"

        if action.requires_unique and target_id:
            if self._action_history(user_id, action.type, target_id) > 0:
                return "Action already performed on this target"

        return None

    def is_action_available(self, user_id: int, action_type: str, target_id: str | None = None) -> AwardResult:
        action = POINT_ACTIONS.get(action_type)
        if action is None:
            return AwardResult(success=False, error="Invalid action type")
        reason = self.validate_action(user_id, action, target_id)
        return AwardResult(success=reason is None, error=reason)

    def award_points(
        self,
        user_id: int,
        action_type: str,
        target_id: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> AwardResult:
        """Apply a point action to a user's balance.

        ``target_id`` doubles as the caller's idempotency key. It is only
        checked for reuse when the action requires uniqueness, so repeating a
        purchase key records a second transaction.

        Raises:
            InvalidPointsContext: if the context cannot produce a point amount
        """
        action = POINT_ACTIONS.get(action_type)
        if action is None:
            logger.warning(f"Invalid spoon action type: {action_type}")
            return AwardResult(success=False, error=f"Invalid action type: {action_type}")

        context = context or {}
        now = datetime.now(UTC)

        reason = self.validate_action(user_id, action, target_id, now)
        if reason:
            logger.debug(f"Spoon award rejected for user {user_id} ({action_type}): {reason}")
            return AwardResult(success=False, error=reason)

        try:
            points = action.get_points(context) if action.get_points else action.points
        except (TypeError, ValueError, OverflowError) as e:
            logger.warning(f"Invalid context for spoon action {action_type}: {e}")
            raise InvalidPointsContext(f"Invalid context for {action_type}: {e}") from e

        account = self.get_or_create_account(user_id, lock=True)
        current = account.total_points or 0

        if points < 0 and current + points < 0:
            shortfall = -(current + points)
            logger.info(
                f"Insufficient spoons for user {user_id}: need {-points}, have {current}"
            )
            return AwardResult(
                success=False,
                points=points,
                balance=current,
                error=f"Not enough spoons! You need {-points} spoons but have {current}.",
                shortfall=shortfall,
            )

        transaction = SpoonTransaction(
            user_id=user_id,
            action_type=action.type,
            points=points,
            target_id=target_id,
            details=self._transaction_details(action, context),
            context=context or None,
            created_at=now,
        )
        account.total_points = current + points
        self.db.add(transaction)
        self.db.flush()

        logger.info(f"Awarded {points} spoons to user {user_id} for {action_type}")
        return AwardResult(
            success=True,
            points=points,
            balance=account.total_points,
            transaction_id=transaction.id,
        )

    def set_balance(self, user_id: int, value: int) -> AwardResult:
        """Force a balance to ``value``, recording the difference. No-op when unchanged."""
        current = self.get_balance(user_id)
        delta = value - current
        if delta == 0:
            return AwardResult(success=True, points=0, balance=current)
        return self.award_points(
            user_id,
            "ADMIN_ADJUSTMENT",
            context={"delta": delta, "details": f"Balance set to {value}"},
        )

    def list_transactions(self, user_id: int, limit: int = 50, offset: int = 0) -> list[SpoonTransaction]:
        return (
            self.db.query(SpoonTransaction)
            .filter(SpoonTransaction.user_id == user_id)
            .order_by(SpoonTransaction.created_at.desc(), SpoonTransaction.id.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )

    def leaderboard(self, limit: int = 25) -> list[tuple[SpoonAccount, User]]:
        return (
            self.db.query(SpoonAccount, User)
            .join(User, SpoonAccount.user_id == User.id)
            .order_by(SpoonAccount.total_points.desc(), SpoonAccount.user_id)
            .limit(limit)
            .all()
        )

    @staticmethod
    def _transaction_details(action: PointAction, context: dict[str, Any]) -> str:
        if action.type in ("MARKETPLACE_PURCHASE", "CAT_VISIT", "ADMIN_ADJUSTMENT") and context.get(
            "details"
        ):
            return context["details"]

        details = action.display_name
        if action.type == "UPLOAD_IMAGE" and context.get("score"):
            details += f" (Quality Score: {context['score']})"
        elif action.type == "RECIPE_SAVED_BY_OTHER" and context.get("savedBy"):
            details += f" by {context['savedBy']}"
        return details
