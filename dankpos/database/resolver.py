"""
Tenant-scoped data client resolution.

Each shop has its own hosted database. After login the shop's endpoint and
access key travel back on every request as two HTTP-only cookies; the
resolver turns those into a ``DataClient`` for that request only. Requests
without the cookies are served by the host database, the same database that
holds users, shops and session logs.
"""
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Mapping, Optional

import logging

from dankpos.core.config import Settings, settings as app_settings
from dankpos.core.exceptions import BackendError, ConfigurationError, NotFoundError
from dankpos.database.client import DataClient, eq

logger = logging.getLogger(__name__)

ENDPOINT_URL_COOKIE = "endpointURL"
ACCESS_KEY_COOKIE = "accessKey"


@dataclass(frozen=True)
class TenantCredentials:
    endpoint_url: str
    access_key: str
    shop_name: Optional[str] = field(default=None, compare=False)

    def __repr__(self) -> str:
        return f"TenantCredentials(endpoint_url={self.endpoint_url!r})"


@dataclass(frozen=True)
class RequestContext:
    """Credential markers carried by one request. Built from cookies only."""
    endpoint_url: Optional[str] = None
    access_key: Optional[str] = None

    @classmethod
    def from_cookies(cls, cookies: Mapping[str, str]) -> "RequestContext":
        return cls(
            endpoint_url=(cookies.get(ENDPOINT_URL_COOKIE) or "").strip() or None,
            access_key=(cookies.get(ACCESS_KEY_COOKIE) or "").strip() or None,
        )

    @property
    def has_tenant(self) -> bool:
        return bool(self.endpoint_url and self.access_key)

    def tenant_credentials(self) -> Optional[TenantCredentials]:
        if not self.has_tenant:
            return None
        return TenantCredentials(endpoint_url=self.endpoint_url, access_key=self.access_key)


def host_credentials(config: Optional[Settings] = None) -> TenantCredentials:
    config = config or app_settings
    if not config.HOST_ENDPOINT_URL or not config.HOST_ACCESS_KEY:
        raise ConfigurationError("HOST_ENDPOINT_URL and HOST_ACCESS_KEY must be set")
    return TenantCredentials(endpoint_url=config.HOST_ENDPOINT_URL, access_key=config.HOST_ACCESS_KEY)


def build_host_client(config: Optional[Settings] = None) -> DataClient:
    config = config or app_settings
    credentials = host_credentials(config)
    return DataClient(
        credentials.endpoint_url,
        credentials.access_key,
        scope="host",
        timeout=config.DATA_CLIENT_TIMEOUT,
    )


def resolve(context: RequestContext, config: Optional[Settings] = None) -> DataClient:
    """
    Build the client for one request.

    Both markers present: a client bound to them. Otherwise a client bound to
    the host credentials. No network I/O happens here.
    """
    config = config or app_settings
    tenant = context.tenant_credentials()
    if tenant is not None:
        return DataClient(
            tenant.endpoint_url,
            tenant.access_key,
            scope="tenant",
            timeout=config.DATA_CLIENT_TIMEOUT,
        )
    logger.debug("No tenant markers on request, using host database")
    return build_host_client(config)


@lru_cache(maxsize=1)
def get_host_client() -> DataClient:
    """Process-wide client for the host database."""
    return build_host_client(app_settings)


async def close_host_client() -> None:
    if get_host_client.cache_info().currsize:
        await get_host_client().aclose()
        get_host_client.cache_clear()


async def issue_credentials(shop_id: Any, host_client: DataClient) -> TenantCredentials:
    """
    Look up the connection info of one shop in the host database.

    Does not write any markers; the login handler owns that.
    """
    if not shop_id:
        raise NotFoundError("Shop not found for this user.")
    try:
        rows = await host_client.select(
            "shops",
            columns="supabase_url,supabase_anon_key,name",
            filters={"id": eq(shop_id)},
            limit=2,
        )
    except BackendError:
        logger.error(f"Failed to look up shop {shop_id} in host database")
        raise

    if not rows:
        raise NotFoundError("Shop not found for this user.")
    if len(rows) > 1:
        raise BackendError(f"Shop lookup for {shop_id} returned more than one row")

    shop = rows[0]
    if not shop.get("supabase_url") or not shop.get("supabase_anon_key"):
        raise BackendError(f"Shop {shop_id} has no database connection configured")
    return TenantCredentials(
        endpoint_url=shop["supabase_url"],
        access_key=shop["supabase_anon_key"],
        shop_name=shop.get("name"),
    )


def set_credential_markers(response, credentials: TenantCredentials, config: Optional[Settings] = None) -> None:
    config = config or app_settings
    for name, value in (
        (ENDPOINT_URL_COOKIE, credentials.endpoint_url),
        (ACCESS_KEY_COOKIE, credentials.access_key),
    ):
        response.set_cookie(
            key=name,
            value=value,
            max_age=config.CREDENTIAL_COOKIE_MAX_AGE,
            path="/",
            httponly=True,
            secure=config.secure_cookies,
            samesite="strict",
        )


def clear_credential_markers(response, config: Optional[Settings] = None) -> None:
    config = config or app_settings
    for name in (ENDPOINT_URL_COOKIE, ACCESS_KEY_COOKIE):
        response.delete_cookie(
            key=name,
            path="/",
            httponly=True,
            secure=config.secure_cookies,
            samesite="strict",
        )
