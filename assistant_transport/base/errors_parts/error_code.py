"""Failure categories attached to every transport error.

``classify_status`` derives the category from an HTTP status; errors raised
without a response (transport failures, cancellation, exhausted retries) set
it explicitly. The string values appear in logs.
"""
from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    AUTH = "auth"  # 401, 403
    RATE_LIMIT = "rate_limit"  # 429
    TIMEOUT = "timeout"  # 408, 504
    CANCELLED = "cancelled"  # 499, response.canceled
    TRANSIENT = "transient"  # 502, network failures
    VALIDATION = "validation"  # other 4xx
    NOT_FOUND = "not_found"  # 404
    CONFLICT = "conflict"  # 409
    SERVER_ERROR = "server_error"  # other 5xx
    UNAVAILABLE = "unavailable"  # 503
    RETRIES_EXHAUSTED = "retries_exhausted"
    UNKNOWN = "unknown"


__all__ = ["ErrorCode"]
