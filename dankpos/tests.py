from fastapi import Response

from dankpos.core.config import Settings
from dankpos.database.resolver import TenantCredentials, set_credential_markers


def _settings(**overrides) -> Settings:
    return Settings(_env_file=None, HOST_ENDPOINT_URL="https://host.example", HOST_ACCESS_KEY="host-key", **overrides)


class TestSettings:

    def test_flag_parsing(self):
        assert _settings(STRICT_TENANT_ROUTING="yes").STRICT_TENANT_ROUTING is True
        assert _settings(STRICT_TENANT_ROUTING="'false'").STRICT_TENANT_ROUTING is False
        assert _settings(EMAIL_USE_TLS="1").EMAIL_USE_TLS is True

    def test_redis_url(self):
        assert _settings(REDIS_HOST="cache", REDIS_PASSWORD=None).redis_url == "redis://cache:6379/0"
        assert _settings(REDIS_HOST="cache", REDIS_PASSWORD="pw").redis_url == "redis://:pw@cache:6379/0"

    def test_cookies_are_secure_in_production(self):
        response = Response()
        set_credential_markers(response, TenantCredentials("https://shopA.example", "keyA"), _settings(ENVIRONMENT="production"))

        cookies = [value.decode() for name, value in response.raw_headers if name == b"set-cookie"]
        assert len(cookies) == 2
        assert all("secure" in cookie.lower() for cookie in cookies)

    def test_cookies_are_not_secure_in_development(self):
        response = Response()
        set_credential_markers(response, TenantCredentials("https://shopA.example", "keyA"), _settings(ENVIRONMENT="development"))

        cookies = [value.decode() for name, value in response.raw_headers if name == b"set-cookie"]
        assert not any("secure" in cookie.lower() for cookie in cookies)
        assert all("max-age=86400" in cookie.lower() for cookie in cookies)


class TestApp:

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_security_headers(self, client):
        response = client.get("/api/orders")

        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"
        assert response.headers["Cache-Control"] == "no-store"

    def test_unknown_route_uses_error_shape(self, client):
        response = client.get("/api/nope")

        assert response.status_code == 404
        assert response.json() == {"error": "Not Found"}

    def test_malformed_json_is_bad_request(self, client):
        response = client.post("/api/auth/login", content="{not json", headers={"Content-Type": "application/json"})

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid request payload."

    def test_routes_without_database_report_no_scope(self, shop_client):
        response = shop_client.get("/health")

        assert "X-Data-Scope" not in response.headers
