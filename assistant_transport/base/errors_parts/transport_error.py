"""
Structured transport exception types.

Callers of the transport receive one of a small number of typed errors, each
carrying a human-readable message, an HTTP-status-equivalent code and a
normalized :class:`ErrorCode`. Retry bookkeeping never leaks into these
objects.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .classification import classify_status
from .error_code import ErrorCode


@dataclass(eq=False)
class TransportError(Exception):
    """Base class for all errors surfaced by the transport layer.

    Attributes:
        message: Human-readable error message suitable for logging.
        status_code: HTTP status (or status-equivalent) describing the failure.
        code: Normalized :class:`ErrorCode`; derived from ``status_code`` when
            omitted.
    """

    message: str
    status_code: int = 502
    code: Optional[ErrorCode] = None

    def __post_init__(self) -> None:
        super().__init__(self.message)
        if self.code is None:
            self.code = classify_status(self.status_code)

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.message


@dataclass(eq=False)
class ApiResponseValidationError(TransportError):
    """Raised for error statuses, malformed bodies and unrecoverable I/O failures.

    Attributes:
        error_type: Upstream ``error.type`` when the body carried one.
        error_code: Upstream ``error.code`` (stringified) when present.
        param: Upstream ``error.param`` when present.
        request_id: Value of the ``x-request-id`` response header, if any.
    """

    message: str = "API response validation failed."
    status_code: int = 502
    error_type: Optional[str] = None
    error_code: Optional[str] = None
    param: Optional[str] = None
    request_id: Optional[str] = None


@dataclass(eq=False)
class MaxRetryAttemptsExceededError(TransportError):
    """Raised when every attempt failed without producing a response."""

    message: str = "Maximum retry attempts exceeded for OpenAI request."
    status_code: int = 429
    code: Optional[ErrorCode] = ErrorCode.RETRIES_EXHAUSTED


@dataclass(eq=False)
class ResponseCanceledError(TransportError):
    """Raised when a stream reports ``response.canceled``.

    Distinguishes an upstream cancellation from a clean completion so callers
    can route it separately (e.g. skip persistence of partial output).
    """

    message: str = "Response was canceled by the client."
    status_code: int = 499
    code: Optional[ErrorCode] = ErrorCode.CANCELLED


__all__ = [
    "TransportError",
    "ApiResponseValidationError",
    "MaxRetryAttemptsExceededError",
    "ResponseCanceledError",
]
