"""Tests for the scheduled cat visit tasks."""

import random
from unittest.mock import patch

import pytest
from sqlalchemy.orm import sessionmaker

from src.celery_app import app as celery_app
from src.models.cat_visit import CatVisit
from src.models.inventory import InventoryItem
from src.services.placement_board import PlacementBoard
from src.tasks.cat_visits import check_user_cat_visits, process_cat_visits


@pytest.fixture(autouse=True)
def task_sessions(db):
    """Tasks open their own sessions; bind them to the test database."""
    with patch("src.tasks.cat_visits.SessionLocal", sessionmaker(bind=db.get_bind())):
        yield


@pytest.fixture
def yard_with_kibble(db, user, goodies):
    kibble = goodies["kibble"]
    item = InventoryItem(
        user_id=user.id,
        goodie_id=kibble.id,
        name=kibble.name,
        category=kibble.category,
        rarity=kibble.rarity,
        cost=kibble.cost,
    )
    db.add(item)
    db.commit()
    PlacementBoard(db).place_item(user.id, item.id, "food1")
    return user


def test_beat_schedule_registered():
    entry = celery_app.conf.beat_schedule["process-cat-visits"]
    assert entry["task"] == "src.tasks.cat_visits.process_cat_visits"
    assert entry["schedule"] == 300.0


def test_process_cat_visits(db, yard_with_kibble, cats):
    with patch.object(random.Random, "random", lambda self: 0.0):
        stats = process_cat_visits()

    assert stats == {"users_checked": 1, "visits": 1, "items_consumed": 1, "errors": 0}
    db.expire_all()
    assert db.query(CatVisit).count() == 1


def test_process_cat_visits_with_empty_yards(db, cats):
    assert process_cat_visits()["users_checked"] == 0


def test_process_cat_visits_reports_failure(db):
    with patch("src.tasks.cat_visits.VisitSimulator.run", side_effect=RuntimeError("db down")):
        result = process_cat_visits()

    assert result == {"error": "db down"}


def test_check_user_cat_visits(db, yard_with_kibble, cats):
    with patch.object(random.Random, "random", lambda self: 0.99):
        result = check_user_cat_visits(yard_with_kibble.id)

    assert result == {"user_id": yard_with_kibble.id, "visits": 0, "items_consumed": 0}
