HOST_URL = "https://host.example"


class TestSessions:

    def test_start_session_records_ip_on_host(self, shop_client, backend):
        response = shop_client.post(
            "/api/sessions",
            json={"userId": "u1", "shopId": "s1", "deviceInfo": {"kiosk": True}},
            headers={"x-forwarded-for": "10.0.0.8"},
        )

        assert response.status_code == 201
        (row,) = backend.rows(HOST_URL, "sessions_log")
        assert row["user_id"] == "u1"
        assert row["ip_address"] == "10.0.0.8"
        assert row["login_time"]
        # shop cookies never redirect the audit log
        assert {call.endpoint_url for call in backend.calls} == {HOST_URL}
        assert response.headers["X-Data-Scope"] == "host"

    def test_ip_falls_back(self, client, backend):
        client.post("/api/sessions", json={"userId": "u1"}, headers={"x-real-ip": "10.0.0.9"})
        client.post("/api/sessions", json={"userId": "u2"})

        assert [row["ip_address"] for row in backend.rows(HOST_URL, "sessions_log")] == ["10.0.0.9", "N/A"]

    def test_end_session(self, shop_client, backend):
        backend.seed(HOST_URL, "sessions_log", [{"session_id": "sess-1", "user_id": "u1"}])

        response = shop_client.put("/api/sessions", json={"sessionId": "sess-1", "logoutTime": "2026-10-19T10:00:00+00:00"})

        assert response.status_code == 200
        assert response.json()["logout_time"] == "2026-10-19T10:00:00+00:00"

    def test_end_unknown_session(self, client, backend):
        response = client.put("/api/sessions", json={"sessionId": "nope"})

        assert response.status_code == 404
        assert response.json() == {"error": "Session not found"}

    def test_end_session_requires_id(self, client, backend):
        response = client.put("/api/sessions", json={})

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid request payload."
