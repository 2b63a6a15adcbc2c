"""Tests for the marketplace."""

import pytest
from fastapi import HTTPException

from src.models.inventory import InventoryItem
from src.models.spoons import SpoonTransaction
from src.services.marketplace import MarketplaceService
from src.services.placement_board import PlacementBoard
from src.services.spoon_ledger import SpoonLedger


class TestMarketplaceService:
    """Tests for MarketplaceService."""

    def test_hidden_goodies_not_listed(self, db, goodies):
        names = [g.name for g in MarketplaceService(db).list_goodies()]

        assert "Secret Sardines" not in names
        assert names[0] == "Simple Catnip Mouse"  # cheapest first
        assert len(MarketplaceService(db).list_goodies(include_hidden=True)) == len(goodies)

    def test_purchase(self, db, user, goodies, give_spoons):
        give_spoons(user.id, 1000)
        marketplace = MarketplaceService(db)

        item = marketplace.purchase(user.id, goodies["laser"].id)

        assert item.goodie_id == goodies["laser"].id
        assert item.name == "Advanced Laser Pointer"
        assert item.cost == 400
        assert SpoonLedger(db).get_balance(user.id) == 600
        [spend] = (
            db.query(SpoonTransaction)
            .filter(SpoonTransaction.action_type == "MARKETPLACE_PURCHASE")
            .all()
        )
        assert spend.points == -400
        assert spend.target_id.startswith(f"purchase-{goodies['laser'].id}-")

    def test_insufficient_spoons(self, db, user, goodies, give_spoons):
        give_spoons(user.id, 100)

        with pytest.raises(HTTPException) as exc_info:
            MarketplaceService(db).purchase(user.id, goodies["kibble"].id)

        assert exc_info.value.status_code == 400
        assert exc_info.value.detail == "Not enough spoons! You need 250 spoons but have 100."
        assert SpoonLedger(db).get_balance(user.id) == 100
        assert db.query(InventoryItem).count() == 0

    def test_food_can_be_bought_repeatedly(self, db, user, goodies, give_spoons):
        give_spoons(user.id, 1000)
        marketplace = MarketplaceService(db)

        marketplace.purchase(user.id, goodies["kibble"].id)
        marketplace.purchase(user.id, goodies["kibble"].id)

        assert len(marketplace.list_inventory(user.id)) == 2
        assert SpoonLedger(db).get_balance(user.id) == 500

    def test_toy_can_only_be_owned_once(self, db, user, goodies, give_spoons):
        give_spoons(user.id, 1000)
        marketplace = MarketplaceService(db)
        marketplace.purchase(user.id, goodies["mouse"].id)

        with pytest.raises(HTTPException) as exc_info:
            marketplace.purchase(user.id, goodies["mouse"].id)

        assert exc_info.value.status_code == 409
        assert SpoonLedger(db).get_balance(user.id) == 800

    def test_placed_toy_still_counts_as_owned(self, db, user, goodies, give_spoons):
        give_spoons(user.id, 1000)
        marketplace = MarketplaceService(db)
        item = marketplace.purchase(user.id, goodies["mouse"].id)
        PlacementBoard(db).place_item(user.id, item.id, "toy1")

        with pytest.raises(HTTPException) as exc_info:
            marketplace.purchase(user.id, goodies["mouse"].id)

        assert exc_info.value.status_code == 409

    def test_hidden_goodie_cannot_be_bought(self, db, user, goodies, give_spoons):
        give_spoons(user.id, 1000)

        with pytest.raises(HTTPException) as exc_info:
            MarketplaceService(db).purchase(user.id, goodies["secret"].id)

        assert exc_info.value.status_code == 404


class TestMarketplaceAPI:
    """Tests for the marketplace endpoints."""

    def test_list_marketplace(self, client, auth_headers, goodies):
        response = client.get("/api/v1/marketplace", headers=auth_headers)

        assert response.status_code == 200
        assert len(response.json()) == len(goodies) - 1

    def test_purchase_and_inventory(self, client, auth_headers, goodies, give_spoons, mock_redis):
        give_spoons(auth_headers.user_id, 300)

        response = client.post(
            f"/api/v1/marketplace/{goodies['kibble'].id}/purchase", headers=auth_headers
        )

        assert response.status_code == 201
        data = response.json()
        assert data["spent"] == 250
        assert data["balance"] == 50
        assert data["item"]["category"] == "food"
        assert mock_redis.publish.call_count == 2

        inventory = client.get("/api/v1/inventory", headers=auth_headers).json()
        assert [item["name"] for item in inventory] == ["Basic Cat Kibble"]

    def test_purchase_without_spoons(self, client, auth_headers, goodies):
        response = client.post(
            f"/api/v1/marketplace/{goodies['kibble'].id}/purchase", headers=auth_headers
        )

        assert response.status_code == 400
        assert "Not enough spoons" in response.json()["detail"]

    def test_purchase_unknown_goodie(self, client, auth_headers):
        response = client.post("/api/v1/marketplace/9999/purchase", headers=auth_headers)

        assert response.status_code == 404
