"""Typed errors raised by the services.

Each error carries the HTTP status the API layer renders it with, plus a
machine-readable ``code``. Routes never catch these; the handlers registered
in ``app.main`` turn them into ``{"detail": ...}`` responses.

    InventoryError (500)
    +-- InvalidInputError (400)
    +-- StatusConflictError (400)
    +-- RecordNotFoundError (404)
    +-- RecordInUseError (400)
"""
from typing import Iterable, Optional


class InventoryError(Exception):
    """Base class for all domain errors."""

    status_code = 500
    code = "INVENTORY_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInputError(InventoryError):
    """Malformed or missing input."""

    status_code = 400
    code = "INVALID_INPUT"


class StatusConflictError(InventoryError):
    """The item is not in a status the requested operation accepts."""

    status_code = 400
    code = "STATUS_CONFLICT"

    def __init__(
        self,
        message: str,
        current_status: Optional[str] = None,
        allowed: Optional[Iterable[str]] = None,
        item_id: Optional[int] = None,
    ):
        super().__init__(message)
        self.current_status = current_status
        self.allowed = sorted(allowed) if allowed else []
        self.item_id = item_id


class RecordNotFoundError(InventoryError):
    status_code = 404
    code = "NOT_FOUND"


class RecordInUseError(InventoryError):
    """Constraint-style rejection, e.g. deleting a record other rows still need."""

    status_code = 400
    code = "IN_USE"
