"""
Async client for the hosted database's REST and auth interfaces.

A ``DataClient`` is bound to exactly one endpoint/key pair. Building one does
not touch the network: the underlying ``httpx.AsyncClient`` is created on the
first call.
"""
from typing import Any, Dict, List, Optional, Union

import httpx
import logging

from dankpos.core.exceptions import BackendError, ConfigurationError

logger = logging.getLogger(__name__)

REST_PREFIX = "rest/v1"
AUTH_PREFIX = "auth/v1"

Rows = Union[Dict[str, Any], List[Dict[str, Any]]]


def eq(value: Any) -> str:
    return f"eq.{value}"


def neq(value: Any) -> str:
    return f"neq.{value}"


def ilike(pattern: str) -> str:
    """Case-insensitive match; ``*`` is the wildcard."""
    return f"ilike.{pattern}"


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or f"Database request failed with status {response.status_code}"
    if isinstance(body, dict):
        for key in ("message", "msg", "error_description", "error"):
            if body.get(key):
                return str(body[key])
    return f"Database request failed with status {response.status_code}"


class DataClient:
    """Client bound to one database endpoint, either a shop's or the host's."""

    def __init__(
        self,
        endpoint_url: str,
        access_key: str,
        *,
        scope: str = "tenant",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not endpoint_url or not access_key:
            raise ConfigurationError("A data client needs both an endpoint URL and an access key")
        self.endpoint_url = endpoint_url.rstrip("/")
        self.access_key = access_key
        self.scope = scope
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    def __repr__(self) -> str:
        return f"DataClient(scope={self.scope!r}, endpoint_url={self.endpoint_url!r})"

    @property
    def is_host(self) -> bool:
        return self.scope == "host"

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=f"{self.endpoint_url}/",
                headers={
                    "apikey": self.access_key,
                    "Authorization": f"Bearer {self.access_key}",
                },
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        client = self._get_client()
        try:
            response = await client.request(method, path, params=params, json=json, headers=headers)
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} on {self.scope} database failed: {e.__class__.__name__}")
            raise BackendError("Database service is unreachable.") from e

        if response.status_code >= 400:
            message = _error_message(response)
            logger.error(f"{method} {path} on {self.scope} database returned {response.status_code}: {message}")
            raise BackendError(message, backend_status=response.status_code)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            logger.error(f"{method} {path} on {self.scope} database returned a non-JSON body")
            raise BackendError("Database service returned an invalid response.") from e

    # ----- table operations -----

    async def select(
        self,
        table: str,
        columns: str = "*",
        filters: Optional[Dict[str, str]] = None,
        order: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        params: Dict[str, Any] = {"select": columns}
        if filters:
            params.update(filters)
        if order:
            params["order"] = order
        if limit is not None:
            params["limit"] = limit
        return await self._request("GET", f"{REST_PREFIX}/{table}", params=params) or []

    async def insert(self, table: str, rows: Rows) -> List[Dict[str, Any]]:
        return await self._request(
            "POST",
            f"{REST_PREFIX}/{table}",
            json=rows,
            headers={"Prefer": "return=representation"},
        ) or []

    async def update(self, table: str, values: Dict[str, Any], filters: Dict[str, str]) -> List[Dict[str, Any]]:
        if not filters:
            raise ValueError("update() requires at least one filter")
        return await self._request(
            "PATCH",
            f"{REST_PREFIX}/{table}",
            params=dict(filters),
            json=values,
            headers={"Prefer": "return=representation"},
        ) or []

    async def upsert(self, table: str, rows: Rows, on_conflict: str = "id") -> List[Dict[str, Any]]:
        return await self._request(
            "POST",
            f"{REST_PREFIX}/{table}",
            params={"on_conflict": on_conflict},
            json=rows,
            headers={"Prefer": "resolution=merge-duplicates,return=representation"},
        ) or []

    async def delete(self, table: str, filters: Dict[str, str]) -> None:
        if not filters:
            raise ValueError("delete() requires at least one filter")
        await self._request(
            "DELETE",
            f"{REST_PREFIX}/{table}",
            params=dict(filters),
            headers={"Prefer": "return=minimal"},
        )

    # ----- auth operations -----

    async def sign_in_with_password(self, email: str, password: str) -> Dict[str, Any]:
        """Returns the session payload; the ``access_token`` is needed for sign_out."""
        return await self._request(
            "POST",
            f"{AUTH_PREFIX}/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        ) or {}

    async def sign_out(self, access_token: str) -> None:
        await self._request(
            "POST",
            f"{AUTH_PREFIX}/logout",
            headers={"Authorization": f"Bearer {access_token}"},
        )
