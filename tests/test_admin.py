"""Tests for the admin endpoints."""

from src.models.spoons import SpoonTransaction


def test_admin_required(client, auth_headers):
    response = client.get("/api/v1/admin/goodies", headers=auth_headers)
    assert response.status_code == 403


def test_list_goodies_includes_hidden(client, admin_headers, goodies):
    response = client.get("/api/v1/admin/goodies", headers=admin_headers)

    assert response.status_code == 200
    assert "Secret Sardines" in [g["name"] for g in response.json()]


def test_create_goodie(client, admin_headers, auth_headers):
    response = client.post(
        "/api/v1/admin/goodies",
        headers=admin_headers,
        json={"name": "Yarn Ball", "category": "toy", "rarity": "common", "cost": 150},
    )

    assert response.status_code == 201
    assert response.json()["category"] == "toy"
    names = [g["name"] for g in client.get("/api/v1/marketplace", headers=auth_headers).json()]
    assert names == ["Yarn Ball"]


def test_create_goodie_rejects_unknown_rarity(client, admin_headers):
    response = client.post(
        "/api/v1/admin/goodies",
        headers=admin_headers,
        json={"name": "Yarn Ball", "category": "toy", "rarity": "mythic", "cost": 150},
    )
    assert response.status_code == 422


def test_create_cat(client, admin_headers):
    response = client.post(
        "/api/v1/admin/cats",
        headers=admin_headers,
        json={"name": "Nimbus", "rarity": "epic", "reward_multiplier": 1.5},
    )

    assert response.status_code == 201
    assert response.json()["reward_multiplier"] == 1.5


def test_set_balance(client, db, admin_headers, auth_headers, mock_redis):
    response = client.put(
        f"/api/v1/admin/spoons/{auth_headers.user_id}",
        headers=admin_headers,
        json={"total_points": 5000},
    )

    assert response.status_code == 200
    assert response.json() == {"user_id": auth_headers.user_id, "total_points": 5000}
    assert client.get("/api/v1/spoons", headers=auth_headers).json()["total_points"] == 5000
    [adjustment] = db.query(SpoonTransaction).filter(SpoonTransaction.action_type == "ADMIN_ADJUSTMENT").all()
    assert adjustment.points == 5000
    mock_redis.publish.assert_called_once()


def test_set_balance_to_same_value_is_a_no_op(client, db, admin_headers, auth_headers, mock_redis):
    url = f"/api/v1/admin/spoons/{auth_headers.user_id}"
    client.put(url, headers=admin_headers, json={"total_points": 700})

    response = client.put(url, headers=admin_headers, json={"total_points": 700})

    assert response.status_code == 200
    assert response.json()["total_points"] == 700
    adjustments = db.query(SpoonTransaction).filter(SpoonTransaction.action_type == "ADMIN_ADJUSTMENT").all()
    assert [a.points for a in adjustments] == [700]
    mock_redis.publish.assert_called_once()


def test_set_balance_unknown_user(client, admin_headers):
    response = client.put(
        "/api/v1/admin/spoons/99999", headers=admin_headers, json={"total_points": 10}
    )
    assert response.status_code == 404


def test_run_cat_visit_check_on_empty_yard(client, admin_headers):
    response = client.post("/api/v1/admin/cat-visits/run", headers=admin_headers)

    assert response.status_code == 200
    assert response.json() == {
        "user_id": admin_headers.user_id,
        "visits": 0,
        "items_consumed": 0,
        "spoons_awarded": 0,
    }
