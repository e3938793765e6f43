"""Custom exceptions for centralized error handling.

Every failure that can cross the API boundary is an ``AppError`` so the
error handlers can render it with a stable ``code``. The ingestion
orchestrator catches the per-date subclasses and folds them into outcomes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class AppError(Exception):
    """Base application error."""

    code: str
    message: str
    status_code: int
    details: Any | None = None

    def __str__(self) -> str:
        return self.message


class NotFoundError(AppError):
    """Resource not found."""

    def __init__(self, message: str = "Not found", details: Any | None = None) -> None:
        super().__init__(code="not_found", message=message, status_code=404, details=details)


class ValidationError(AppError):
    """Input validation error."""

    def __init__(self, message: str = "Validation error", details: Any | None = None) -> None:
        super().__init__(code="validation_error", message=message, status_code=400, details=details)


class InvalidDateError(AppError):
    """A day/month/year input that does not name a real calendar day."""

    def __init__(self, message: str = "Invalid date", details: Any | None = None) -> None:
        super().__init__(code="invalid_date", message=message, status_code=400, details=details)


class NetworkError(AppError):
    """Transport failure or timeout talking to the remote source."""

    def __init__(self, message: str = "Network error", details: Any | None = None) -> None:
        super().__init__(code="network_error", message=message, status_code=502, details=details)


class UpstreamError(AppError):
    """Remote source answered with a failure status or a malformed envelope."""

    def __init__(self, message: str = "Upstream error", details: Any | None = None) -> None:
        super().__init__(code="upstream_error", message=message, status_code=502, details=details)


class EmptyResult(AppError):
    """Valid envelope, but no draw was published for the requested date."""

    def __init__(self, message: str = "No draw published", details: Any | None = None) -> None:
        super().__init__(code="empty_result", message=message, status_code=404, details=details)


class ParseError(AppError):
    """Payload failed validation; ``field`` is the dotted path of the culprit."""

    def __init__(self, field: str, reason: str) -> None:
        super().__init__(
            code="parse_error",
            message=f"{field}: {reason}",
            status_code=422,
            details={"field": field, "reason": reason},
        )
        self.field = field
        self.reason = reason


class WriteError(AppError):
    """Storage rejected a commit; the transaction was rolled back."""

    def __init__(self, message: str = "Write failed", details: Any | None = None) -> None:
        super().__init__(code="write_error", message=message, status_code=500, details=details)


class StorageUnavailableError(AppError):
    """Storage could not be reached at all. Fatal for a whole batch."""

    def __init__(self, message: str = "Storage unavailable", details: Any | None = None) -> None:
        super().__init__(code="storage_unavailable", message=message, status_code=503, details=details)
