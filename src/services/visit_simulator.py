"""Cat visit simulation for yards with food placed."""

import logging
import math
import random
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from sqlalchemy import func
from sqlalchemy.orm import Session

from src.config import get_settings
from src.models.cat_visit import CatVisit
from src.models.catalog import Cat
from src.models.enums import Rarity, SlotType
from src.models.mixins import as_utc
from src.models.yard import PlacedItem
from src.services.placement_board import slot_type
from src.services.realtime import YardEventType, publish_yard_event
from src.services.spoon_ledger import SpoonLedger

logger = logging.getLogger(__name__)

BASE_VISIT_CHANCE = 0.4
TOY_BONUS_CHANCE = 0.1  # per distinct occupied toy slot
MAX_VISIT_CHANCE = 0.9

# Base spoons per visit, scaled by the visiting cat's multiplier
SPOON_REWARDS: dict[Rarity, int] = {
    Rarity.COMMON: 25,
    Rarity.UNCOMMON: 35,
    Rarity.RARE: 50,
    Rarity.EPIC: 75,
    Rarity.LEGENDARY: 100,
}


def visit_probability(toy_count: int) -> float:
    """Chance that a cat visits a food slot on one check."""
    return min(MAX_VISIT_CHANCE, round(BASE_VISIT_CHANCE + TOY_BONUS_CHANCE * toy_count, 10))


def compute_reward(food_rarity: Rarity, cat: Cat) -> int:
    return math.floor(SPOON_REWARDS[food_rarity] * (cat.reward_multiplier or 1))


@dataclass
class VisitOutcome:
    """One successful visit."""

    visit: CatVisit
    cat: Cat
    food_name: str
    remaining_visits: int
    consumed: bool


class VisitSimulator:
    """Rolls cat visits for occupied food slots and pays out rewards."""

    def __init__(
        self,
        db: Session,
        rng: random.Random | None = None,
        ledger: SpoonLedger | None = None,
    ):
        self.db = db
        self.rng = rng or random.Random()
        self.ledger = ledger or SpoonLedger(db)
        self.settings = get_settings()

    def load_cats(self) -> list[Cat]:
        return self.db.query(Cat).order_by(Cat.id).all()

    def last_visit_at(self, user_id: int) -> datetime | None:
        last = (
            self.db.query(func.max(CatVisit.visited_at)).filter(CatVisit.user_id == user_id).scalar()
        )
        return as_utc(last)

    def simulate_user(
        self,
        user_id: int,
        cats: list[Cat] | None = None,
        now: datetime | None = None,
    ) -> list[VisitOutcome]:
        """Run one visit check for a user's yard and commit the results.

        Each food slot with visits left gets its own roll. A visiting cat is
        picked among cats of the same rarity as the food.

        Raises:
            RuntimeError: if the ledger rejects a reward. Nothing is committed;
                the caller rolls back.
        """
        now = now or datetime.now(UTC)
        cats = cats if cats is not None else self.load_cats()

        last_visit = self.last_visit_at(user_id)
        min_interval = timedelta(seconds=self.settings.min_visit_interval_seconds)
        if last_visit is not None and now - last_visit < min_interval:
            return []

        placed = (
            self.db.query(PlacedItem)
            .filter(PlacedItem.user_id == user_id)
            .order_by(PlacedItem.slot_id)
            .all()
        )
        foods = [
            item
            for item in placed
            if slot_type(item.slot_id) == SlotType.FOOD and (item.remaining_visits or 0) > 0
        ]
        if not foods:
            return []

        toys = [item for item in placed if slot_type(item.slot_id) == SlotType.TOY]
        toy_slots = {item.slot_id for item in toys}
        toy_keys = [item.placement_key for item in toys]
        probability = visit_probability(len(toy_slots))

        outcomes: list[VisitOutcome] = []
        for food in foods:
            if self.rng.random() >= probability:
                continue

            matching = [cat for cat in cats if cat.rarity == food.rarity]
            if not matching:
                logger.warning(f"No {food.rarity.value} cats available for user {user_id}")
                continue

            cat = self.rng.choice(matching)
            reward = compute_reward(food.rarity, cat)

            food.remaining_visits = max(0, food.remaining_visits - 1)
            remaining = food.remaining_visits
            consumed = remaining == 0

            visit = CatVisit(
                user_id=user_id,
                cat_id=cat.id,
                food_item_id=food.placement_key,
                toy_item_ids=list(toy_keys),
                spoon_reward=reward,
                visited_at=now,
                read=False,
            )
            self.db.add(visit)

            result = self.ledger.award_points(
                user_id,
                "CAT_VISIT",
                target_id=f"visit-{food.placement_key}-{int(now.timestamp() * 1000)}",
                context={
                    "reward": reward,
                    "cat_id": cat.id,
                    "food_item_id": food.placement_key,
                    "details": f"{cat.name} enjoyed your {food.name}!",
                },
            )
            if not result.success:
                raise RuntimeError(f"Cat visit reward rejected for user {user_id}: {result.error}")

            outcomes.append(
                VisitOutcome(
                    visit=visit,
                    cat=cat,
                    food_name=food.name,
                    remaining_visits=remaining,
                    consumed=consumed,
                )
            )
            if consumed:
                self.db.delete(food)

        if not outcomes:
            return []

        self.db.commit()
        for outcome in outcomes:
            self._publish(user_id, outcome)

        logger.info(f"User {user_id} had {len(outcomes)} cat visit(s)")
        return outcomes

    def run(self, now: datetime | None = None) -> dict:
        """Check every yard with food placed, in batches.

        A failure for one user is logged and rolled back; the rest carry on.
        """
        now = now or datetime.now(UTC)
        stats = {"users_checked": 0, "visits": 0, "items_consumed": 0, "errors": 0}

        user_ids = [
            user_id
            for (user_id,) in self.db.query(PlacedItem.user_id)
            .filter(PlacedItem.remaining_visits > 0)
            .distinct()
            .order_by(PlacedItem.user_id)
            .all()
        ]
        if not user_ids:
            return stats

        cats = self.load_cats()
        batch_size = self.settings.cat_visit_batch_size

        for start in range(0, len(user_ids), batch_size):
            for user_id in user_ids[start : start + batch_size]:
                stats["users_checked"] += 1
                try:
                    outcomes = self.simulate_user(user_id, cats=cats, now=now)
                except Exception as e:
                    logger.error(f"Error processing cat visits for user {user_id}: {e}", exc_info=True)
                    self.db.rollback()
                    stats["errors"] += 1
                    continue
                stats["visits"] += len(outcomes)
                stats["items_consumed"] += sum(1 for o in outcomes if o.consumed)

        logger.info(f"Cat visit processing complete: {stats}")
        return stats

    def _publish(self, user_id: int, outcome: VisitOutcome) -> None:
        publish_yard_event(
            user_id,
            YardEventType.CAT_VISITED,
            {
                "visit_id": outcome.visit.id,
                "cat_id": outcome.cat.id,
                "cat_name": outcome.cat.name,
                "food_item_id": outcome.visit.food_item_id,
                "spoon_reward": outcome.visit.spoon_reward,
                "remaining_visits": outcome.remaining_visits,
            },
        )
        if outcome.consumed:
            publish_yard_event(
                user_id,
                YardEventType.ITEM_CONSUMED,
                {"placement_key": outcome.visit.food_item_id, "name": outcome.food_name},
            )
        publish_yard_event(
            user_id,
            YardEventType.POINTS_CHANGED,
            {"points": outcome.visit.spoon_reward, "balance": self.ledger.get_balance(user_id)},
        )
