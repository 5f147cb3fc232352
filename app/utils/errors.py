# app/utils/errors.py
"""Domain error kinds raised by the services.

Routers never translate these themselves; the handlers registered in
``main.py`` turn each kind into an HTTP response.
"""
from typing import Any, Dict, Optional


class DomainError(Exception):
    """Base class for errors surfaced to the caller verbatim"""

    status_code = 400
    kind = "error"

    def __init__(self, message: str, reason: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.reason = reason

    def to_dict(self) -> dict:
        body: Dict[str, Any] = {"detail": self.message, "error": self.kind}
        if self.reason:
            body["reason"] = self.reason
        return body


class NotFoundError(DomainError):
    status_code = 404
    kind = "not_found"


class ForbiddenError(DomainError):
    status_code = 403
    kind = "forbidden"


class ConflictError(DomainError):
    status_code = 409
    kind = "conflict"


class ValidationFailedError(DomainError):
    status_code = 400
    kind = "validation_failed"
