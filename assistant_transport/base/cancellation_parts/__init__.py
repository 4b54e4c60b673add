"""Cancellation implementation parts; import from ``base.cancellation``."""

from .cancellation_token import CancellationToken

__all__ = ["CancellationToken"]
