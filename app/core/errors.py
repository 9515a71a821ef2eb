"""Error kinds surfaced by the portal.

Every failure the core reports is one of four kinds: not found, validation,
unauthorized and unavailable. ``app.main`` renders them all through one
exception handler as ``{"detail": ...}`` with the status code carried here.
"""
from typing import Dict, Optional

from fastapi import status


class PortalError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail: str = "Internal error"
    headers: Optional[Dict[str, str]] = None

    def __init__(self, detail: Optional[str] = None):
        if detail is not None:
            self.detail = detail
        super().__init__(self.detail)


class NotFound(PortalError):
    # The public portal always uses this default message so callers cannot
    # tell a wrong ID from a wrong date of birth or an unpublished exam.
    status_code = status.HTTP_404_NOT_FOUND
    detail = "No result found"


class InvalidInput(PortalError):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    detail = "Invalid input"


class MarkValidationError(InvalidInput):
    detail = "Invalid mark"


class Unauthorized(PortalError):
    status_code = status.HTTP_401_UNAUTHORIZED
    detail = "Not authenticated"
    headers = {"WWW-Authenticate": "Bearer"}


class AccountLocked(PortalError):
    status_code = status.HTTP_403_FORBIDDEN
    detail = "Account locked"


class StoreUnavailable(PortalError):
    """The store timed out or the connection failed. Safe to retry."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    detail = "Service temporarily unavailable, please try again"
