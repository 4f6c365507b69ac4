"""
Tests for the data client and the tenant-scoped resolver.

The resolver must bind every request to exactly one database: the shop's
when both credential cookies are present, the host's otherwise. None of it
may touch the network.
"""

import httpx
import pytest

from dankpos.core.config import Settings, settings
from dankpos.core.exceptions import BackendError, ConfigurationError, NotFoundError
from dankpos.database.client import DataClient, eq, ilike, neq
from dankpos.database.resolver import (
    ACCESS_KEY_COOKIE,
    ENDPOINT_URL_COOKIE,
    RequestContext,
    TenantCredentials,
    get_host_client,
    issue_credentials,
    resolve,
)


HOST_URL = "https://host.example"
SHOP_A_URL = "https://shopA.example"


def _settings(**overrides) -> Settings:
    values = {"HOST_ENDPOINT_URL": HOST_URL, "HOST_ACCESS_KEY": "host-key"}
    values.update(overrides)
    return Settings(_env_file=None, **values)


# ===== REQUEST CONTEXT =====

class TestRequestContext:

    def test_reads_both_markers(self):
        context = RequestContext.from_cookies({ENDPOINT_URL_COOKIE: SHOP_A_URL, ACCESS_KEY_COOKIE: "keyA"})
        assert context.has_tenant
        assert context.tenant_credentials() == TenantCredentials(SHOP_A_URL, "keyA")

    @pytest.mark.parametrize("cookies", [
        {},
        {ENDPOINT_URL_COOKIE: SHOP_A_URL},
        {ACCESS_KEY_COOKIE: "keyA"},
        {ENDPOINT_URL_COOKIE: "", ACCESS_KEY_COOKIE: "keyA"},
        {ENDPOINT_URL_COOKIE: SHOP_A_URL, ACCESS_KEY_COOKIE: "   "},
    ])
    def test_incomplete_markers_mean_no_tenant(self, cookies):
        context = RequestContext.from_cookies(cookies)
        assert not context.has_tenant
        assert context.tenant_credentials() is None

    def test_ignores_unrelated_cookies(self):
        context = RequestContext.from_cookies({"supabase_url": SHOP_A_URL, "supabase_anon_key": "keyA"})
        assert not context.has_tenant

    def test_credentials_repr_hides_key(self):
        assert "keyA" not in repr(TenantCredentials(SHOP_A_URL, "keyA"))


# ===== RESOLVE =====

class TestResolve:

    def test_markers_bind_to_the_shop(self):
        client = resolve(RequestContext(SHOP_A_URL, "keyA"), _settings())
        assert client.endpoint_url == SHOP_A_URL
        assert client.access_key == "keyA"
        assert client.scope == "tenant"

    def test_missing_markers_fall_back_to_host(self):
        client = resolve(RequestContext(), _settings())
        assert client.endpoint_url == HOST_URL
        assert client.access_key == "host-key"
        assert client.is_host

    def test_half_a_marker_pair_falls_back_to_host(self):
        client = resolve(RequestContext(endpoint_url=SHOP_A_URL), _settings())
        assert client.is_host
        assert client.access_key == "host-key"

    def test_missing_host_configuration_is_fatal(self):
        config = _settings(HOST_ENDPOINT_URL=None, HOST_ACCESS_KEY=None)
        with pytest.raises(ConfigurationError):
            resolve(RequestContext(), config)

    def test_markers_do_not_need_host_configuration(self):
        config = _settings(HOST_ENDPOINT_URL=None, HOST_ACCESS_KEY=None)
        client = resolve(RequestContext(SHOP_A_URL, "keyA"), config)
        assert client.endpoint_url == SHOP_A_URL

    def test_resolving_twice_gives_identical_configuration(self):
        context = RequestContext(SHOP_A_URL, "keyA")
        first, second = resolve(context, _settings()), resolve(context, _settings())
        assert (first.endpoint_url, first.access_key, first.scope) == (second.endpoint_url, second.access_key, second.scope)

    def test_resolve_does_no_io(self):
        client = resolve(RequestContext(SHOP_A_URL, "keyA"), _settings())
        # httpx client is only created on the first call
        assert client._client is None

    def test_uses_configured_timeout(self):
        client = resolve(RequestContext(SHOP_A_URL, "keyA"), _settings(DATA_CLIENT_TIMEOUT=3.5))
        assert client.timeout == 3.5


# ===== HOST CLIENT =====

class TestHostClient:

    def test_singleton(self):
        get_host_client.cache_clear()
        try:
            assert get_host_client() is get_host_client()
            assert get_host_client().endpoint_url == HOST_URL
            assert get_host_client().is_host
        finally:
            get_host_client.cache_clear()

    def test_unset_configuration_fails(self, monkeypatch):
        monkeypatch.setattr(settings, "HOST_ENDPOINT_URL", None)
        monkeypatch.setattr(settings, "HOST_ACCESS_KEY", None)
        get_host_client.cache_clear()
        try:
            with pytest.raises(ConfigurationError):
                get_host_client()
        finally:
            get_host_client.cache_clear()

    @pytest.mark.asyncio
    async def test_startup_refuses_to_serve_without_host(self, monkeypatch):
        from dankpos.main import startup_event

        monkeypatch.setattr(settings, "HOST_ACCESS_KEY", "")
        get_host_client.cache_clear()
        try:
            with pytest.raises(ConfigurationError):
                await startup_event()
        finally:
            get_host_client.cache_clear()


# ===== ISSUE CREDENTIALS =====

class TestIssueCredentials:

    @pytest.mark.asyncio
    async def test_returns_shop_credentials(self, backend):
        backend.seed(HOST_URL, "shops", [
            {"id": "shop-a", "name": "Shop A", "supabase_url": SHOP_A_URL, "supabase_anon_key": "keyA"},
            {"id": "shop-b", "name": "Shop B", "supabase_url": "https://shopB.example", "supabase_anon_key": "keyB"},
        ])
        credentials = await issue_credentials("shop-a", get_host_client())
        assert credentials == TenantCredentials(SHOP_A_URL, "keyA")
        assert credentials.shop_name == "Shop A"

    @pytest.mark.asyncio
    async def test_unknown_shop_is_not_found(self, backend):
        with pytest.raises(NotFoundError):
            await issue_credentials("missing", get_host_client())

    @pytest.mark.asyncio
    async def test_missing_shop_id_is_not_found(self, backend):
        with pytest.raises(NotFoundError):
            await issue_credentials(None, get_host_client())
        assert backend.calls == []

    @pytest.mark.asyncio
    async def test_backend_failure_propagates(self, backend):
        backend.fail("GET", "shops", BackendError("permission denied for table shops", backend_status=401))
        with pytest.raises(BackendError):
            await issue_credentials("shop-a", get_host_client())

    @pytest.mark.asyncio
    async def test_duplicate_rows_are_a_backend_error(self, backend):
        row = {"id": "shop-a", "supabase_url": SHOP_A_URL, "supabase_anon_key": "keyA"}
        backend.seed(HOST_URL, "shops", [row, row])
        with pytest.raises(BackendError):
            await issue_credentials("shop-a", get_host_client())

    @pytest.mark.asyncio
    async def test_queries_the_host_database(self, backend):
        backend.seed(HOST_URL, "shops", [{"id": "shop-a", "supabase_url": SHOP_A_URL, "supabase_anon_key": "keyA"}])
        await issue_credentials("shop-a", get_host_client())
        assert [call.endpoint_url for call in backend.calls] == [HOST_URL]


# ===== DATA CLIENT =====

def _client_with(handler) -> DataClient:
    return DataClient(SHOP_A_URL, "keyA", transport=httpx.MockTransport(handler))


class TestDataClient:

    def test_requires_endpoint_and_key(self):
        with pytest.raises(ConfigurationError):
            DataClient("", "keyA")
        with pytest.raises(ConfigurationError):
            DataClient(SHOP_A_URL, None)

    def test_repr_hides_key(self):
        assert "keyA" not in repr(DataClient(SHOP_A_URL, "keyA"))

    def test_filter_helpers(self):
        assert eq(5) == "eq.5"
        assert neq("x") == "neq.x"
        assert ilike("*kush*") == "ilike.*kush*"

    @pytest.mark.asyncio
    async def test_select_sends_key_and_filters(self):
        seen = {}

        def handler(request: httpx.Request):
            seen["request"] = request
            return httpx.Response(200, json=[{"id": "1"}])

        client = _client_with(handler)
        rows = await client.select("orders", filters={"id": eq("1")}, order="created_at.desc", limit=5)
        await client.aclose()

        request = seen["request"]
        assert rows == [{"id": "1"}]
        assert request.url.path == "/rest/v1/orders"
        assert request.url.params["id"] == "eq.1"
        assert request.url.params["order"] == "created_at.desc"
        assert request.url.params["limit"] == "5"
        assert request.headers["apikey"] == "keyA"
        assert request.headers["Authorization"] == "Bearer keyA"

    @pytest.mark.asyncio
    async def test_upsert_merges_on_conflict(self):
        seen = {}

        def handler(request: httpx.Request):
            seen["request"] = request
            return httpx.Response(201, json=[{"id": "1", "role": "admin"}])

        client = _client_with(handler)
        await client.upsert("admin_users", [{"id": "1", "role": "admin"}])
        request = seen["request"]
        assert request.method == "POST"
        assert request.url.params["on_conflict"] == "id"
        assert "resolution=merge-duplicates" in request.headers["Prefer"]

    @pytest.mark.asyncio
    async def test_delete_returns_none_on_empty_body(self):
        client = _client_with(lambda request: httpx.Response(204))
        assert await client.delete("members", filters={"id": eq("m1")}) is None

    @pytest.mark.asyncio
    async def test_unfiltered_delete_is_refused(self):
        client = _client_with(lambda request: httpx.Response(204))
        with pytest.raises(ValueError):
            await client.delete("members", filters={})

    @pytest.mark.asyncio
    async def test_error_status_raises_backend_error_with_message(self):
        client = _client_with(lambda request: httpx.Response(409, json={"message": "duplicate key value"}))
        with pytest.raises(BackendError) as exc_info:
            await client.insert("categories", [{"name": "Flowers"}])
        assert exc_info.value.message == "duplicate key value"
        assert exc_info.value.backend_status == 409
        assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    async def test_transport_failure_does_not_leak_credentials(self):
        def handler(request: httpx.Request):
            raise httpx.ConnectError("connection refused", request=request)

        client = _client_with(handler)
        with pytest.raises(BackendError) as exc_info:
            await client.select("orders")
        assert exc_info.value.backend_status is None
        assert "keyA" not in exc_info.value.message

    @pytest.mark.asyncio
    async def test_sign_in_posts_password_grant(self):
        seen = {}

        def handler(request: httpx.Request):
            seen["request"] = request
            return httpx.Response(200, json={"access_token": "abc"})

        client = _client_with(handler)
        session = await client.sign_in_with_password("admin@shop.example", "secret")
        assert session["access_token"] == "abc"
        assert seen["request"].url.path == "/auth/v1/token"
        assert seen["request"].url.params["grant_type"] == "password"

    @pytest.mark.asyncio
    async def test_non_json_success_body_is_a_backend_error(self):
        client = _client_with(lambda request: httpx.Response(200, text="<html>gateway</html>"))
        with pytest.raises(BackendError) as exc_info:
            await client.select("orders")
        assert exc_info.value.message == "Database service returned an invalid response."
