"""Cooperative cancellation primitives (public API facade).

``CancellationToken`` is the client-side stop signal for stream consumption.
Server-side cancellation (a ``response.canceled`` event) is reported
separately through ``ResponseCanceledError``.
"""

from .cancellation_parts.cancellation_token import CancellationToken

__all__ = ["CancellationToken"]
