"""
Classification helpers for HTTP statuses, transport exceptions and error bodies.

Three concerns live here because the retry loop and the error mapper both
depend on them:

- mapping an HTTP status to a normalized :class:`ErrorCode`;
- deciding whether a response status or a transport exception is worth
  retrying;
- extracting a message and upstream details from an API error body.
"""
from __future__ import annotations

import ssl
from typing import Any, Dict, Optional, Tuple

import httpx

from .error_code import ErrorCode

DEFAULT_ERROR_MESSAGE = "OpenAI API error"

_HTTP_STATUS_MAP: Dict[int, ErrorCode] = {
    400: ErrorCode.VALIDATION,
    401: ErrorCode.AUTH,
    403: ErrorCode.AUTH,
    404: ErrorCode.NOT_FOUND,
    408: ErrorCode.TIMEOUT,
    409: ErrorCode.CONFLICT,
    422: ErrorCode.VALIDATION,
    429: ErrorCode.RATE_LIMIT,
    499: ErrorCode.CANCELLED,
    500: ErrorCode.SERVER_ERROR,
    502: ErrorCode.TRANSIENT,
    503: ErrorCode.UNAVAILABLE,
    504: ErrorCode.TIMEOUT,
}

RETRYABLE_STATUSES = frozenset({409, 429, 500, 501, 502, 503, 504, 505})

# Client-side failures that will fail identically on every attempt.
_NON_RETRYABLE_TRANSPORT_ERRORS: Tuple[type, ...] = (
    httpx.UnsupportedProtocol,
    httpx.LocalProtocolError,
)


def classify_status(status: int) -> ErrorCode:
    """Map an HTTP status code to a normalized :class:`ErrorCode`."""
    if status in _HTTP_STATUS_MAP:
        return _HTTP_STATUS_MAP[status]
    if 500 <= status < 600:
        return ErrorCode.SERVER_ERROR
    if 400 <= status < 500:
        return ErrorCode.VALIDATION
    return ErrorCode.UNKNOWN


def is_retryable_status(status: int) -> bool:
    """Return True for 409, 429 and 500-505 inclusive."""
    return status in RETRYABLE_STATUSES


def _caused_by_certificate_failure(exc: BaseException) -> bool:
    seen = set()
    cur: Optional[BaseException] = exc
    while cur is not None and id(cur) not in seen:
        if isinstance(cur, ssl.SSLCertVerificationError):
            return True
        seen.add(id(cur))
        cur = cur.__cause__ or cur.__context__
    return False


def is_retryable_exception(exc: BaseException) -> bool:
    """Decide whether a transport-level exception should be retried.

    Network failures and timeouts are transient. Unsupported URL schemes,
    locally malformed requests and TLS certificate verification failures are
    not, since a retry sends the exact same request to the exact same peer.
    """
    if isinstance(exc, _NON_RETRYABLE_TRANSPORT_ERRORS):
        return False
    if _caused_by_certificate_failure(exc):
        return False
    return isinstance(exc, httpx.TransportError)


def extract_error_details(
    decoded: Any, body: str
) -> Tuple[str, Optional[str], Optional[str], Optional[str]]:
    """Return ``(message, type, code, param)`` from an API error body.

    Shapes checked in order:
        1. ``{"error": {"message", "type", "code", "param"}}``
        2. ``{"message": "..."}``
        3. ``{"error": "..."}``
        4. ``{"errors": [{"message": "..."}]}``
        5. the raw body text
    Falls back to a generic message when the body is empty.
    """
    msg = DEFAULT_ERROR_MESSAGE
    err_type: Optional[str] = None
    err_code: Optional[str] = None
    param: Optional[str] = None

    if not isinstance(decoded, dict):
        return (body if body else msg), None, None, None

    err = decoded.get("error")
    if isinstance(err, dict):
        if isinstance(err.get("message"), str):
            msg = err["message"]
        if isinstance(err.get("type"), str):
            err_type = err["type"]
        code = err.get("code")
        if isinstance(code, (str, int, float)) and not isinstance(code, bool):
            err_code = str(code)
        if isinstance(err.get("param"), str):
            param = err["param"]

    if msg == DEFAULT_ERROR_MESSAGE:
        errors = decoded.get("errors")
        if isinstance(decoded.get("message"), str):
            msg = decoded["message"]
        elif isinstance(err, str):
            msg = err
        elif isinstance(errors, list) and errors and isinstance(errors[0], dict):
            first = errors[0].get("message")
            if isinstance(first, str):
                msg = first
        elif body:
            msg = body
    return msg, err_type, err_code, param


__all__ = [
    "DEFAULT_ERROR_MESSAGE",
    "RETRYABLE_STATUSES",
    "classify_status",
    "is_retryable_status",
    "is_retryable_exception",
    "extract_error_details",
]
