"""Typed configuration objects consumed by the transport.

Purpose
-------
Replace ambient configuration lookups inside transport methods with an
explicit object handed over at construction time. Every tunable the retry
loop, idempotency handling and timeout resolution read lives here.

External dependencies
---------------------
- Pydantic v2 ``BaseModel`` for validation and ``.model_copy()`` /
  ``.model_validate()`` convenience.

Notes
-----
- Models are frozen: one ``TransportConfig`` may be shared by any number of
  transports without risk of a call mutating another call's policy.
- Loading from environment variables and files is handled by
  :mod:`assistant_transport.config`.
"""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class RetrySettings(BaseModel):
    """Retry/backoff policy for :func:`request_with_retry`.

    Attributes
    ----------
    enabled:
        When False every call is attempted exactly once.
    max_attempts:
        Upper bound on send operations for one logical call.
    initial_delay:
        Delay in seconds before the second attempt.
    backoff_multiplier:
        Geometric growth factor applied per attempt.
    max_delay:
        Cap in seconds applied before jitter.
    jitter:
        Scale each delay by a uniform factor in ``[0.5, 1.0]``.
    """

    model_config = ConfigDict(frozen=True)

    enabled: bool = True
    max_attempts: int = Field(default=3, ge=1)
    initial_delay: float = Field(default=0.5, ge=0)
    backoff_multiplier: float = Field(default=2.0, ge=1)
    max_delay: float = Field(default=8.0, ge=0)
    jitter: bool = True


class PoolSettings(BaseModel):
    """Connection pool limits forwarded to ``httpx.Limits`` when enabled."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = False
    max_connections: int = Field(default=100, ge=1)
    max_keepalive_connections: int = Field(default=10, ge=0)


class TransportConfig(BaseModel):
    """Complete transport configuration.

    Attributes
    ----------
    base_url:
        API origin used when building pooled clients.
    base_path:
        Prefix applied to relative endpoint paths.
    timeout:
        Default per-request timeout in seconds.
    sse_timeout:
        Timeout for streaming requests; ``None`` falls back to ``timeout``.
    connect_timeout:
        Connection establishment timeout in seconds.
    idempotency_enabled:
        Global switch for ``Idempotency-Key`` handling on idempotent calls.
    idempotency_bucket:
        Time bucket (seconds) used by deterministic key building.
    """

    model_config = ConfigDict(frozen=True)

    base_url: str = "https://api.openai.com"
    base_path: str = "/v1"
    timeout: float = Field(default=120.0, gt=0)
    sse_timeout: Optional[float] = Field(default=120.0, gt=0)
    connect_timeout: float = Field(default=10.0, gt=0)
    idempotency_enabled: bool = True
    idempotency_bucket: int = Field(default=60, ge=1)
    retry: RetrySettings = Field(default_factory=RetrySettings)
    pool: PoolSettings = Field(default_factory=PoolSettings)


__all__ = ["RetrySettings", "PoolSettings", "TransportConfig"]
