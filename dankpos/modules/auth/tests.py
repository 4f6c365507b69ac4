"""
Login and logout through the HTTP API.
"""

from dankpos.core.exceptions import BackendError
from dankpos.modules.auth.utils import hash_password, strip_secrets, verify_password


HOST_URL = "https://host.example"
SHOP_A_URL = "https://shopA.example"
SHOP_B_URL = "https://shopB.example"

SHOPS = [
    {"id": "s1", "name": "Shop A", "supabase_url": SHOP_A_URL, "supabase_anon_key": "keyA"},
    {"id": "s2", "name": "Shop B", "supabase_url": SHOP_B_URL, "supabase_anon_key": "keyB"},
]


def _set_cookie_headers(response):
    return response.headers.get_list("set-cookie")


def _seed_users(backend):
    backend.seed(HOST_URL, "shops", SHOPS)
    backend.seed(HOST_URL, "admin_users", [
        {"id": "u1", "uid": "nfc-1", "shop_id": "s1", "password_hash": "x", "role": "admin"},
        {"id": "u2", "username": "bob", "shop_id": "s2", "password_hash": hash_password("hunter22"), "role": "staff"},
        {"id": "u3", "uid": "nfc-orphan", "shop_id": "s-missing", "role": "staff"},
    ])


class TestPasswordUtils:

    def test_hash_roundtrip(self):
        hashed = hash_password("hunter22")
        assert hashed != "hunter22"
        assert verify_password("hunter22", hashed)
        assert not verify_password("wrong", hashed)

    def test_verify_rejects_missing_or_malformed_hash(self):
        assert not verify_password("hunter22", None)
        assert not verify_password("hunter22", "not-a-bcrypt-hash")

    def test_strip_secrets(self):
        user = {"id": "u1", "password": "p", "password_hash": "h"}
        assert strip_secrets(user) == {"id": "u1"}
        assert "password_hash" in user


class TestLogin:

    def test_nfc_login_issues_shop_markers(self, client, backend):
        _seed_users(backend)

        response = client.post("/api/auth/login", json={"uid": "nfc-1"})

        assert response.status_code == 200
        body = response.json()
        assert body["id"] == "u1"
        assert body["shop_name"] == "Shop A"
        assert "password_hash" not in body
        assert "keyA" not in response.text

        cookies = _set_cookie_headers(response)
        assert any(c.startswith("endpointURL=") and SHOP_A_URL in c for c in cookies)
        assert any(c.startswith("accessKey=keyA") for c in cookies)
        assert all("httponly" in c.lower() and "samesite=strict" in c.lower() for c in cookies)

    def test_markers_route_next_request_to_the_shop(self, client, backend):
        _seed_users(backend)
        client.post("/api/auth/login", json={"uid": "nfc-1"})
        backend.calls.clear()

        response = client.get("/api/orders")

        assert response.status_code == 200
        assert response.headers["X-Data-Scope"] == "tenant"
        (call,) = backend.calls_to("orders")
        assert call.endpoint_url == SHOP_A_URL
        assert call.access_key == "keyA"

    def test_username_login(self, client, backend):
        _seed_users(backend)

        response = client.post("/api/auth/login", json={"username": "bob", "password": "hunter22"})

        assert response.status_code == 200
        assert response.json()["shop_name"] == "Shop B"
        assert any(c.startswith("accessKey=keyB") for c in _set_cookie_headers(response))

    def test_wrong_password(self, client, backend):
        _seed_users(backend)

        response = client.post("/api/auth/login", json={"username": "bob", "password": "nope"})

        assert response.status_code == 401
        assert response.json() == {"error": "Invalid username or password."}
        assert _set_cookie_headers(response) == []

    def test_unknown_uid(self, client, backend):
        _seed_users(backend)

        response = client.post("/api/auth/login", json={"uid": "nfc-unknown"})

        assert response.status_code == 401
        assert response.json() == {"error": "Invalid NFC UID."}

    def test_no_identity_given(self, client, backend):
        response = client.post("/api/auth/login", json={"username": "bob"})

        assert response.status_code == 400
        assert response.json() == {"error": "NFC UID or Username and Password are required for login."}
        assert backend.calls == []

    def test_user_without_shop(self, client, backend):
        _seed_users(backend)

        response = client.post("/api/auth/login", json={"uid": "nfc-orphan"})

        assert response.status_code == 404
        assert response.json() == {"error": "Shop not found for this user."}
        assert _set_cookie_headers(response) == []

    def test_user_lookup_failure(self, client, backend):
        backend.fail("GET", "admin_users", BackendError("relation admin_users does not exist", backend_status=404))

        response = client.post("/api/auth/login", json={"uid": "nfc-1"})

        assert response.status_code == 500
        assert response.json() == {"error": "relation admin_users does not exist"}

    def test_shop_lookup_failure(self, client, backend):
        _seed_users(backend)
        backend.fail("GET", "shops", BackendError("permission denied", backend_status=401))

        response = client.post("/api/auth/login", json={"uid": "nfc-1"})

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to retrieve shop details."}
        assert _set_cookie_headers(response) == []

    def test_login_always_uses_host_database(self, shop_client, backend):
        _seed_users(backend)

        shop_client.post("/api/auth/login", json={"uid": "nfc-1"})

        assert {call.endpoint_url for call in backend.calls} == {HOST_URL}


class TestLogout:

    def test_logout_expires_markers(self, shop_client, backend):
        response = shop_client.post("/api/auth/logout")

        assert response.status_code == 200
        assert response.json() == {"message": "Logged out successfully"}
        cookies = _set_cookie_headers(response)
        for name in ("endpointURL", "accessKey"):
            assert any(c.startswith(f"{name}=") and "max-age=0" in c.lower() for c in cookies)
