"""Unified transport error taxonomy public surface.

This module re-exports the implementations under
``assistant_transport.base.errors_parts`` to maintain a stable import path.
"""

from .errors_parts.error_code import ErrorCode
from .errors_parts.transport_error import (
    ApiResponseValidationError,
    MaxRetryAttemptsExceededError,
    ResponseCanceledError,
    TransportError,
)
from .errors_parts.classification import (
    RETRYABLE_STATUSES,
    classify_status,
    extract_error_details,
    is_retryable_exception,
    is_retryable_status,
)

__all__ = [
    "ErrorCode",
    "TransportError",
    "ApiResponseValidationError",
    "MaxRetryAttemptsExceededError",
    "ResponseCanceledError",
    "RETRYABLE_STATUSES",
    "classify_status",
    "extract_error_details",
    "is_retryable_exception",
    "is_retryable_status",
]
