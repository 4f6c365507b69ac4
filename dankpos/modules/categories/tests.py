from dankpos.core.exceptions import BackendError
from dankpos.modules.categories.schemas import DEFAULT_ICON

SHOP_A_URL = "https://shopA.example"


class TestCategories:

    def test_create_with_default_icon(self, shop_client, backend):
        response = shop_client.post("/api/categories", json={"name": "  Edibles "})

        assert response.status_code == 201
        assert response.json()["name"] == "Edibles"
        assert response.json()["icon_name"] == DEFAULT_ICON

    def test_create_requires_name(self, shop_client, backend):
        response = shop_client.post("/api/categories", json={"icon_name": "Leaf"})

        assert response.status_code == 400
        assert response.json() == {"error": "Category name is required"}

    def test_delete_by_query_id(self, shop_client, backend):
        backend.seed(SHOP_A_URL, "categories", [{"id": "c1", "name": "Flowers"}, {"id": "c2", "name": "Oils"}])

        response = shop_client.delete("/api/categories", params={"id": "c1"})

        assert response.status_code == 200
        assert [row["id"] for row in backend.rows(SHOP_A_URL, "categories")] == ["c2"]

    def test_delete_requires_id(self, shop_client, backend):
        response = shop_client.delete("/api/categories")

        assert response.status_code == 400
        assert response.json() == {"error": "Category ID is required"}

    def test_backend_error_is_reported(self, shop_client, backend):
        backend.fail("GET", "categories", BackendError("relation categories does not exist", backend_status=404))

        response = shop_client.get("/api/categories")

        assert response.status_code == 500
        assert response.json() == {"error": "relation categories does not exist"}
