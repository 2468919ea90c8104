"""Exceptions raised across Storefront components."""

from typing import Optional


class DocumentNotFoundError(Exception):
    """Raised when a lookup that must succeed finds no document."""


class GateRejection(Exception):
    """Raised by the auth gate to stop a request before it reaches its handler.

    Rendered by the service's exception handler as a failure envelope
    ``{"success": False, "message": ..., "error": ...}``.
    """

    def __init__(self, status_code: int, message: str, error: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.error = error
