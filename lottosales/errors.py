"""Errors raised by services and rendered into the response envelope."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class AppError(Exception):
    """An error with a stable machine code and the HTTP status it maps to."""

    code: str
    message: str
    status_code: int
    details: Any | None = None


class NotFoundError(AppError):
    """Unknown id, or an id that belongs to another shop."""

    def __init__(self, message: str = "Not found", details: Any | None = None) -> None:
        super().__init__(code="not_found", message=message, status_code=404, details=details)


class ValidationError(AppError):
    def __init__(self, message: str = "Validation error", details: Any | None = None) -> None:
        super().__init__(code="validation_error", message=message, status_code=400, details=details)


class UnauthorizedError(AppError):
    """No shop owner identity on the request."""

    def __init__(self, message: str = "Unauthorized", details: Any | None = None) -> None:
        super().__init__(code="unauthorized", message=message, status_code=401, details=details)


class ConflictError(AppError):
    """State forbids the change: taken result slot, paid ticket, closed day."""

    def __init__(self, message: str = "Conflict", details: Any | None = None) -> None:
        super().__init__(code="conflict", message=message, status_code=409, details=details)


class StoreUnavailableError(AppError):
    def __init__(
        self, message: str = "Storage temporarily unavailable, please retry", details: Any | None = None
    ) -> None:
        super().__init__(code="store_unavailable", message=message, status_code=503, details=details)
