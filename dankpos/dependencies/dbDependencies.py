from typing import Annotated, AsyncIterator
from fastapi import Depends, Request

from dankpos.core.config import settings
from dankpos.core.exceptions import AuthenticationError
from dankpos.database.client import DataClient
from dankpos.database.resolver import RequestContext, get_host_client, resolve


def get_request_context(request: Request) -> RequestContext:
    """RequestContext set by CredentialContextMiddleware, or built from cookies."""
    context = getattr(request.state, "request_context", None)
    if context is None:
        context = RequestContext.from_cookies(request.cookies)
        request.state.request_context = context
    return context


async def get_tenant_client(
    request: Request,
    context: Annotated[RequestContext, Depends(get_request_context)],
) -> AsyncIterator[DataClient]:
    """
    Client for routes that work on a shop's own data.

    Falls back to the host database when the request carries no markers,
    unless STRICT_TENANT_ROUTING is on.
    """
    if settings.STRICT_TENANT_ROUTING and not context.has_tenant:
        raise AuthenticationError("No shop session found. Please log in again.")
    client = resolve(context)
    request.state.data_scope = client.scope
    try:
        yield client
    finally:
        await client.aclose()


def get_host_db(request: Request) -> DataClient:
    """Client for bootstrap routes that always work on the host database."""
    client = get_host_client()
    request.state.data_scope = client.scope
    return client


# Per-route scope: shop database or host database
tenant_db_dependency = Annotated[DataClient, Depends(get_tenant_client)]
host_db_dependency = Annotated[DataClient, Depends(get_host_db)]
