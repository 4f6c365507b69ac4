"""
Error taxonomy shared by the resolver, the data client and the route handlers.

Every error carries the HTTP status it maps to; handlers registered in
``dankpos.main`` turn them into ``{"error": message}`` responses.
"""
from typing import Optional


class AppError(Exception):
    status_code: int = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ConfigurationError(AppError):
    """Required process configuration is missing. Never recoverable per request."""
    status_code = 500


class NotFoundError(AppError):
    status_code = 404


class BackendError(AppError):
    """The hosted database rejected or failed a call."""
    status_code = 500

    def __init__(self, message: str, backend_status: Optional[int] = None):
        super().__init__(message)
        # None when the request never reached the backend
        self.backend_status = backend_status


class ValidationError(AppError):
    status_code = 400


class AuthenticationError(AppError):
    status_code = 401
