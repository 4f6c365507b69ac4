from dankpos.core.exceptions import BackendError

SHOP_A_URL = "https://shopA.example"


def _clear(client, **body):
    return client.request("DELETE", "/api/transactions/clear", json=body)


class TestClearTransactions:

    def test_admin_can_wipe(self, shop_client, backend):
        backend.add_auth_user(SHOP_A_URL, "admin@shop.example", "pw")
        backend.seed(SHOP_A_URL, "transactions", [{"id": "t1"}, {"id": "t2"}])

        response = _clear(shop_client, username="admin@shop.example", password="pw")

        assert response.status_code == 200
        assert response.json() == {"message": "All transactions deleted successfully"}
        assert backend.rows(SHOP_A_URL, "transactions") == []
        paths = [call.path for call in backend.calls]
        assert paths[-1] == "auth/v1/logout"
        assert all(call.endpoint_url == SHOP_A_URL for call in backend.calls)

    def test_wrong_credentials(self, shop_client, backend):
        backend.add_auth_user(SHOP_A_URL, "admin@shop.example", "pw")
        backend.seed(SHOP_A_URL, "transactions", [{"id": "t1"}])

        response = _clear(shop_client, username="admin@shop.example", password="nope")

        assert response.status_code == 401
        assert response.json() == {"error": "Invalid admin credentials."}
        assert backend.rows(SHOP_A_URL, "transactions") == [{"id": "t1"}]

    def test_requires_credentials(self, shop_client, backend):
        response = _clear(shop_client, username="admin@shop.example")

        assert response.status_code == 400
        assert response.json() == {"error": "Username and password are required."}

    def test_signs_out_even_when_delete_fails(self, shop_client, backend):
        backend.add_auth_user(SHOP_A_URL, "admin@shop.example", "pw")
        backend.fail("DELETE", "transactions", BackendError("permission denied", backend_status=403))

        response = _clear(shop_client, username="admin@shop.example", password="pw")

        assert response.status_code == 500
        assert backend.calls[-1].path == "auth/v1/logout"
