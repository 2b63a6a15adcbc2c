"""Tests for cat visit history."""

from datetime import UTC, datetime, timedelta

import pytest

from src.models.cat_visit import CatVisit
from src.models.user import User
from src.services.visit_history import VisitHistoryService

T0 = datetime(2026, 3, 14, 12, 0, tzinfo=UTC)


@pytest.fixture
def add_visits(db, cats):
    """Record ``count`` unread visits for a user, one minute apart."""

    def _add(user_id: int, count: int) -> list[CatVisit]:
        visits = [
            CatVisit(
                user_id=user_id,
                cat_id=cats["whiskers"].id,
                food_item_id=f"1-{i}",
                toy_item_ids=[],
                spoon_reward=25,
                visited_at=T0 + timedelta(minutes=i),
            )
            for i in range(count)
        ]
        db.add_all(visits)
        db.commit()
        return visits

    return _add


class TestVisitHistoryService:
    """Tests for VisitHistoryService."""

    def test_visits_start_unread(self, db, user, add_visits):
        add_visits(user.id, 3)

        history = VisitHistoryService(db)

        assert history.count(user.id) == 3
        assert history.unread_count(user.id) == 3

    def test_mark_all_read(self, db, user, add_visits):
        add_visits(user.id, 5)
        history = VisitHistoryService(db)

        assert history.mark_all_read(user.id) == 5
        assert history.unread_count(user.id) == 0
        assert all(visit.read for visit in history.list_history(user.id))

    def test_mark_all_read_twice(self, db, user, add_visits):
        add_visits(user.id, 2)
        history = VisitHistoryService(db)
        history.mark_all_read(user.id)

        assert history.mark_all_read(user.id) == 0

    def test_mark_all_read_only_touches_own_visits(self, db, user, add_visits):
        other = User(email="neighbour@example.com", password_hash="x")
        db.add(other)
        db.commit()
        add_visits(user.id, 2)
        add_visits(other.id, 4)

        VisitHistoryService(db).mark_all_read(user.id)

        assert VisitHistoryService(db).unread_count(other.id) == 4

    def test_pagination_newest_first(self, db, user, add_visits):
        add_visits(user.id, 5)
        history = VisitHistoryService(db)

        first_page = history.list_history(user.id, limit=2)
        second_page = history.list_history(user.id, limit=2, offset=2)
        last_page = history.list_history(user.id, limit=2, offset=4)

        assert [v.food_item_id for v in first_page] == ["1-4", "1-3"]
        assert [v.food_item_id for v in second_page] == ["1-2", "1-1"]
        assert [v.food_item_id for v in last_page] == ["1-0"]

    def test_history_includes_cat(self, db, user, add_visits):
        add_visits(user.id, 1)

        [visit] = VisitHistoryService(db).list_history(user.id)

        assert visit.cat.name == "Whiskers"


class TestHistoryAPI:
    """Tests for the history endpoints."""

    def test_get_history(self, client, auth_headers, add_visits):
        add_visits(auth_headers.user_id, 3)

        response = client.get("/api/v1/yard/history", headers=auth_headers, params={"limit": 2})

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 3
        assert data["unread_count"] == 3
        assert len(data["visits"]) == 2
        assert data["visits"][0]["cat"]["name"] == "Whiskers"

    def test_mark_read(self, client, auth_headers, add_visits, mock_redis):
        add_visits(auth_headers.user_id, 5)

        response = client.post("/api/v1/yard/history/read", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"marked": 5, "unread_count": 0}
        assert mock_redis.publish.called
        assert client.get("/api/v1/yard", headers=auth_headers).json()["unread_visits"] == 0

    def test_list_cats(self, client, auth_headers, cats):
        response = client.get("/api/v1/yard/cats", headers=auth_headers)

        assert response.status_code == 200
        assert {cat["name"] for cat in response.json()} == {"Whiskers", "Mittens", "Shadow"}
