import json
import math

from dankpos.core.config import settings
from dankpos.modules.orders.service import REQUIRED_FIELDS_MESSAGE, parse_items, parse_price


HOST_URL = "https://host.example"
SHOP_A_URL = "https://shopA.example"

ORDER = {
    "member_uid": "card-77",
    "dealer_id": "dealer-1",
    "items_json": [{"strain": "Lemon Haze", "grams": 2}],
    "total_price": 20.5,
}


class TestParsing:

    def test_items_may_arrive_serialized(self):
        assert parse_items(json.dumps([{"a": 1}])) == [{"a": 1}]
        assert parse_items([{"a": 1}]) == [{"a": 1}]

    def test_price_accepts_strings(self):
        assert parse_price("12.50") == 12.5
        assert math.isnan(parse_price("twelve"))
        assert math.isnan(parse_price(None))


class TestOrderScope:

    def test_without_markers_orders_hit_host(self, client, backend):
        backend.seed(HOST_URL, "orders", [{"id": "o-host"}])

        response = client.get("/api/orders")

        assert response.status_code == 200
        assert response.json() == [{"id": "o-host"}]
        assert response.headers["X-Data-Scope"] == "host"
        (call,) = backend.calls_to("orders")
        assert call.endpoint_url == HOST_URL
        assert call.scope == "host"

    def test_with_markers_orders_hit_shop(self, shop_client, backend):
        backend.seed(HOST_URL, "orders", [{"id": "o-host"}])
        backend.seed(SHOP_A_URL, "orders", [{"id": "o-shop"}])

        response = shop_client.get("/api/orders")

        assert response.json() == [{"id": "o-shop"}]
        (call,) = backend.calls_to("orders")
        assert (call.endpoint_url, call.access_key, call.scope) == (SHOP_A_URL, "keyA", "tenant")

    def test_strict_routing_requires_markers(self, client, backend, monkeypatch):
        monkeypatch.setattr(settings, "STRICT_TENANT_ROUTING", True)

        response = client.get("/api/orders")

        assert response.status_code == 401
        assert response.json() == {"error": "No shop session found. Please log in again."}
        assert backend.calls == []

    def test_strict_routing_allows_shop(self, shop_client, backend, monkeypatch):
        monkeypatch.setattr(settings, "STRICT_TENANT_ROUTING", True)

        assert shop_client.get("/api/orders").status_code == 200


class TestCreateOrder:

    def test_defaults(self, shop_client, backend):
        response = shop_client.post("/api/orders", json=ORDER)

        assert response.status_code == 201
        order = response.json()
        assert order["id"]
        assert order["status"] == "pending"
        assert order["created_at"]
        assert backend.rows(SHOP_A_URL, "orders")[0]["member_uid"] == "card-77"

    def test_serialized_items_and_string_price(self, shop_client, backend):
        payload = {**ORDER, "items_json": json.dumps(ORDER["items_json"]), "total_price": "20.5"}

        response = shop_client.post("/api/orders", json=payload)

        assert response.status_code == 201
        stored = backend.rows(SHOP_A_URL, "orders")[0]
        assert stored["items_json"] == ORDER["items_json"]
        assert stored["total_price"] == 20.5

    def test_missing_fields(self, shop_client, backend):
        response = shop_client.post("/api/orders", json={"member_uid": "card-77"})

        assert response.status_code == 400
        assert response.json() == {"error": REQUIRED_FIELDS_MESSAGE}
        assert backend.calls == []

    def test_unparseable_price(self, shop_client, backend):
        response = shop_client.post("/api/orders", json={**ORDER, "total_price": "free"})

        assert response.status_code == 400

    def test_invalid_items_json(self, shop_client, backend):
        response = shop_client.post("/api/orders", json={**ORDER, "items_json": "[not json"})

        assert response.status_code == 400
        assert response.json() == {"error": "items_json must be valid JSON."}


class TestUpdateOrders:

    def test_entries_without_id_are_skipped(self, shop_client, backend):
        backend.seed(SHOP_A_URL, "orders", [
            {"id": "o1", "status": "pending"},
            {"id": "o2", "status": "pending"},
        ])

        response = shop_client.put("/api/orders", json=[
            {"id": "o1", "status": "fulfilled"},
            {"status": "cancelled"},
            {"id": "o2", "status": "cancelled"},
        ])

        assert response.status_code == 200
        body = response.json()
        assert len(body) == 2
        assert [row["status"] for row in body] == ["fulfilled", "cancelled"]
        assert len(backend.calls_to("orders")) == 2

    def test_requires_array(self, shop_client, backend):
        for payload in ({"id": "o1"}, []):
            response = shop_client.put("/api/orders", json=payload)
            assert response.status_code == 400
            assert response.json() == {"error": "An array of orders is required for PUT operation."}

    def test_unknown_ids_are_not_returned(self, shop_client, backend):
        response = shop_client.put("/api/orders", json=[{"id": "missing", "status": "fulfilled"}])

        assert response.status_code == 200
        assert response.json() == []

    def test_entry_with_only_an_id_is_still_sent(self, shop_client, backend):
        backend.seed(SHOP_A_URL, "orders", [{"id": "o1", "status": "pending"}])

        response = shop_client.put("/api/orders", json=[{"id": "o1"}])

        assert response.status_code == 200
        assert response.json() == [{"id": "o1", "status": "pending"}]
        (call,) = backend.calls_to("orders")
        assert call.method == "PATCH"
        assert call.params["id"] == "eq.o1"
        assert call.json == {}
