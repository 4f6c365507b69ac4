"""
Middleware for tenant credential context
"""
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
import logging

from dankpos.database.resolver import RequestContext

logger = logging.getLogger(__name__)


class CredentialContextMiddleware(BaseHTTPMiddleware):
    """
    Reads the tenant credential markers (cookies) once per request and stores
    them on request.state as an immutable RequestContext for the handlers.
    Routes that used a database report its scope in X-Data-Scope.
    """

    async def dispatch(self, request: Request, call_next):
        context = RequestContext.from_cookies(request.cookies)
        request.state.request_context = context

        logger.debug(f"Request to {request.url.path} carries shop markers: {context.has_tenant}")

        response = await call_next(request)

        # Set by the db dependencies: which database served the request, never which credentials
        scope = getattr(request.state, "data_scope", None)
        if scope is not None:
            response.headers["X-Data-Scope"] = scope
        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Middleware to add security headers
    """

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        if request.url.path.startswith("/api/"):
            response.headers["Cache-Control"] = "no-store"

        return response
