"""
Item catalog tests: service validation, seeding, and the admin routes.
"""

import pytest

from hive.exceptions import InvalidInput, NotFound
from hive.models import Item
from hive.services import catalog_service, session_service
from hive.validation import MAX_PRICE_CENTS


class TestCatalogService:
    def test_create_trims_name(self, db_session):
        item = catalog_service.create_item({"name": "  Juice ", "price_cents": 3500})
        assert item.name == "Juice"
        assert item.price_cents == 3500

    @pytest.mark.parametrize("payload", [
        {"name": "", "price_cents": 100},
        {"name": "   ", "price_cents": 100},
        {"name": "Juice", "price_cents": -1},
        {"name": "Juice", "price_cents": 12.5},
        {"name": "Juice", "price_cents": "1e3"},
        {"name": "Juice", "price_cents": MAX_PRICE_CENTS + 1},
        {"name": "Juice"},
        {"price_cents": 100},
        {"name": "Juice", "price_cents": 100, "id": 5},
        {"name": "x" * 129, "price_cents": 100},
    ])
    def test_create_rejects_invalid_payloads(self, db_session, payload):
        with pytest.raises(InvalidInput):
            catalog_service.create_item(payload)
        assert db_session.query(Item).count() == 0

    def test_free_item_allowed(self, db_session):
        assert catalog_service.create_item({"name": "Water", "price_cents": 0}).price_cents == 0

    def test_update(self, coffee):
        item = catalog_service.update_item(coffee.id, {"price_cents": 3200})
        assert item.price_cents == 3200
        assert item.name == "Coffee"

    def test_update_missing(self, db_session):
        with pytest.raises(NotFound):
            catalog_service.update_item(9999, {"price_cents": 1})

    def test_list_sorted_by_name(self, coffee, tea, db_session):
        catalog_service.create_item({"name": "Apple", "price_cents": 100})
        assert [i.name for i in catalog_service.list_items()] == ["Apple", "Coffee", "Tea"]

    def test_delete_keeps_session_snapshots(self, coffee, db_session):
        record = session_service.start_session("Alice")
        session_service.add_item(record.id, coffee.id, 1)

        catalog_service.delete_item(coffee.id)

        assert db_session.query(Item).count() == 0
        assert session_service.get_session(record.id).items[0]["name"] == "Coffee"

    @pytest.mark.parametrize("item_id", [None, "abc", 9999])
    def test_get_missing(self, db_session, item_id):
        with pytest.raises(NotFound):
            catalog_service.get_item(item_id)


class TestSeeding:
    def test_seeds_defaults_into_empty_catalog(self, db_session):
        assert catalog_service.seed_catalog() == 4
        items = {i.name: i.price_cents for i in catalog_service.list_items()}
        assert items == {"Coffee": 3000, "Tea": 2500, "Snack": 4000, "Printing": 500}

    def test_skips_non_empty_catalog(self, coffee):
        assert catalog_service.seed_catalog() == 0
        assert [i.name for i in catalog_service.list_items()] == ["Coffee"]

    def test_seed_route(self, client, admin_headers):
        resp = client.post("/api/items/seed", headers=admin_headers)
        assert resp.status_code == 201
        assert resp.json["created"] == 4

        resp = client.post("/api/items/seed", headers=admin_headers)
        assert resp.status_code == 200
        assert resp.json["created"] == 0


class TestCatalogRoutes:
    def test_create_validation_error(self, client, admin_headers):
        resp = client.post("/api/items", json={"name": "Juice", "price_cents": -5}, headers=admin_headers)
        assert resp.status_code == 400
        assert "price_cents" in resp.json["error"]

    def test_update_and_delete(self, client, admin_headers, coffee):
        resp = client.put(f"/api/items/{coffee.id}", json={"name": "Espresso"}, headers=admin_headers)
        assert resp.status_code == 200
        assert resp.json["item"]["name"] == "Espresso"

        resp = client.delete(f"/api/items/{coffee.id}", headers=admin_headers)
        assert resp.status_code == 200

        resp = client.delete(f"/api/items/{coffee.id}", headers=admin_headers)
        assert resp.status_code == 404
