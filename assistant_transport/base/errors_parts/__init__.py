"""Errors parts package public surface.

Re-exports individual error taxonomy components for optional direct imports.
Prefer importing from `assistant_transport.base.errors` for the stable surface.
"""

from .error_code import ErrorCode
from .transport_error import (
    ApiResponseValidationError,
    MaxRetryAttemptsExceededError,
    ResponseCanceledError,
    TransportError,
)
from .classification import (
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
    "classify_status",
    "extract_error_details",
    "is_retryable_exception",
    "is_retryable_status",
]
