"""
Shared fixtures.

Host configuration is forced into the environment before any dankpos import.
``backend`` replaces DataClient._request with an in-memory database keyed by
endpoint URL, so tests can assert which shop database each call reached.
"""
import os

os.environ["HOST_ENDPOINT_URL"] = "https://host.example"
os.environ["HOST_ACCESS_KEY"] = "host-key"
os.environ["ENVIRONMENT"] = "test"
os.environ["STRICT_TENANT_ROUTING"] = "false"

import re
from collections import defaultdict
from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from dankpos.core.exceptions import BackendError
from dankpos.database.client import DataClient
from dankpos.database.resolver import get_host_client

HOST_URL = "https://host.example"
SHOP_A_URL = "https://shopA.example"
SHOP_A_KEY = "keyA"

RESERVED_PARAMS = {"select", "order", "limit", "on_conflict"}


@dataclass
class Call:
    endpoint_url: str
    access_key: str
    scope: str
    method: str
    path: str
    params: Dict[str, Any] = field(default_factory=dict)
    json: Any = None
    headers: Dict[str, str] = field(default_factory=dict)

    @property
    def table(self) -> str:
        return self.path.rsplit("/", 1)[-1]


def _matches(row: Dict[str, Any], params: Dict[str, Any]) -> bool:
    for column, expression in params.items():
        if column in RESERVED_PARAMS:
            continue
        op, _, value = str(expression).partition(".")
        actual = row.get(column)
        if op == "eq" and str(actual) != value:
            return False
        if op == "neq" and str(actual) == value:
            return False
        if op == "ilike":
            pattern = ".*".join(re.escape(part) for part in value.split("*"))
            if actual is None or not re.fullmatch(pattern, str(actual), re.IGNORECASE):
                return False
    return True


class FakeBackend:
    def __init__(self):
        self.calls: List[Call] = []
        self.tables: Dict[tuple, List[Dict[str, Any]]] = defaultdict(list)
        self.auth_users: Dict[tuple, str] = {}
        self.failures: Dict[tuple, BackendError] = {}

    def seed(self, endpoint_url: str, table: str, rows: List[Dict[str, Any]]) -> None:
        self.tables[(endpoint_url, table)].extend(deepcopy(rows))

    def rows(self, endpoint_url: str, table: str) -> List[Dict[str, Any]]:
        return self.tables[(endpoint_url, table)]

    def fail(self, method: str, table: str, error: BackendError) -> None:
        self.failures[(method, table)] = error

    def add_auth_user(self, endpoint_url: str, email: str, password: str) -> None:
        self.auth_users[(endpoint_url, email)] = password

    def calls_to(self, table: str) -> List[Call]:
        return [call for call in self.calls if call.table == table]

    async def handle(self, client: DataClient, method, path, params=None, json=None, headers=None):
        params = dict(params or {})
        call = Call(client.endpoint_url, client.access_key, client.scope, method, path, params, deepcopy(json), dict(headers or {}))
        self.calls.append(call)

        failure = self.failures.get((method, call.table))
        if failure is not None:
            raise failure

        if path.startswith("auth/v1/"):
            return self._auth(call)

        rows = self.tables[(client.endpoint_url, call.table)]
        if method == "GET":
            found = [row for row in rows if _matches(row, params)]
            if "limit" in params:
                found = found[: int(params["limit"])]
            columns = params.get("select", "*")
            if columns != "*":
                found = [{c: row.get(c) for c in columns.split(",")} for row in found]
            return deepcopy(found)
        if method == "POST":
            incoming = json if isinstance(json, list) else [json]
            stored = []
            for new in incoming:
                existing = next((row for row in rows if "on_conflict" in params and row.get("id") == new.get("id")), None)
                if existing is not None:
                    existing.update(deepcopy(new))
                    stored.append(existing)
                else:
                    rows.append(deepcopy(new))
                    stored.append(new)
            return deepcopy(stored)
        if method == "PATCH":
            updated = []
            for row in rows:
                if _matches(row, params):
                    row.update(deepcopy(json))
                    updated.append(row)
            return deepcopy(updated)
        if method == "DELETE":
            rows[:] = [row for row in rows if not _matches(row, params)]
            return None
        raise AssertionError(f"Unexpected method {method}")

    def _auth(self, call: Call):
        if call.path.endswith("/logout"):
            return None
        body = call.json or {}
        expected = self.auth_users.get((call.endpoint_url, body.get("email")))
        if expected is None or expected != body.get("password"):
            raise BackendError("Invalid login credentials", backend_status=400)
        return {"access_token": f"token-{body['email']}", "token_type": "bearer"}


@pytest.fixture
def backend(monkeypatch):
    fake = FakeBackend()

    async def _request(self, method, path, *, params=None, json=None, headers=None):
        return await fake.handle(self, method, path, params=params, json=json, headers=headers)

    monkeypatch.setattr(DataClient, "_request", _request)
    get_host_client.cache_clear()
    yield fake
    get_host_client.cache_clear()


@pytest.fixture
def client(backend):
    from dankpos.main import app
    return TestClient(app)


@pytest.fixture
def shop_client(client):
    """A client that already carries shop A's credential cookies."""
    client.cookies.set("endpointURL", SHOP_A_URL)
    client.cookies.set("accessKey", SHOP_A_KEY)
    return client
