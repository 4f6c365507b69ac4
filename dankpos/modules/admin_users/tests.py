from dankpos.modules.auth.utils import verify_password

SHOP_A_URL = "https://shopA.example"


class TestAdminUsers:

    def test_create_hashes_password(self, shop_client, backend):
        response = shop_client.post("/api/admin_users", json={"username": "alice", "password": "s3cret!"})

        assert response.status_code == 201
        body = response.json()
        assert body["role"] == "staff"
        assert body["id"]
        assert "password" not in body and "password_hash" not in body

        (stored,) = backend.rows(SHOP_A_URL, "admin_users")
        assert "password" not in stored
        assert verify_password("s3cret!", stored["password_hash"])

    def test_create_nfc_user_without_password(self, shop_client, backend):
        response = shop_client.post("/api/admin_users", json={"uid": "nfc-9", "role": "admin"})

        assert response.status_code == 201
        assert response.json()["role"] == "admin"

    def test_create_requires_identity(self, shop_client, backend):
        response = shop_client.post("/api/admin_users", json={"role": "admin"})

        assert response.status_code == 400
        assert response.json() == {"error": "Username or UID is required."}

    def test_username_requires_password(self, shop_client, backend):
        response = shop_client.post("/api/admin_users", json={"username": "alice"})

        assert response.status_code == 400
        assert response.json() == {"error": "Password is required for username-based login."}

    def test_list_strips_secrets(self, shop_client, backend):
        backend.seed(SHOP_A_URL, "admin_users", [{"id": "u1", "username": "alice", "password_hash": "h"}])

        assert shop_client.get("/api/admin_users").json() == [{"id": "u1", "username": "alice"}]

    def test_upsert(self, shop_client, backend):
        backend.seed(SHOP_A_URL, "admin_users", [{"id": "u1", "username": "alice", "role": "staff"}])

        response = shop_client.put("/api/admin_users", json=[
            {"id": "u1", "role": "admin"},
            {"id": "u2", "username": "bob", "password": "pw"},
        ])

        assert response.status_code == 200
        assert [user["id"] for user in response.json()] == ["u1", "u2"]
        rows = {row["id"]: row for row in backend.rows(SHOP_A_URL, "admin_users")}
        assert rows["u1"]["role"] == "admin"
        assert verify_password("pw", rows["u2"]["password_hash"])
        (call,) = backend.calls_to("admin_users")
        assert call.params["on_conflict"] == "id"

    def test_upsert_requires_array(self, shop_client, backend):
        response = shop_client.put("/api/admin_users", json={"id": "u1"})

        assert response.status_code == 400
        assert response.json() == {"error": "An array of admin users is required for PUT operation."}
