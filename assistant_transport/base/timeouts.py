"""Timeout resolution for transport calls.

Every HTTP call carries its own timeout. Resolution order:

1. the explicit per-call value;
2. for streaming calls, ``TransportConfig.sse_timeout``;
3. an endpoint-specific default (audio and image operations are slow);
4. ``TransportConfig.timeout``.

A timed-out attempt surfaces as ``httpx.TimeoutException`` and is handled by
the retry loop like any other transport failure.
"""
from __future__ import annotations

from typing import Mapping, Optional

from .constants import ENDPOINT_TIMEOUTS
from .settings import TransportConfig


def endpoint_timeout(
    path: str,
    config: TransportConfig,
    overrides: Optional[Mapping[str, float]] = None,
) -> float:
    """Return the default timeout for ``path``.

    ``overrides`` maps a path fragment (e.g. ``"/audio/"``) to seconds and
    takes precedence over the built-in table.
    """
    table = dict(ENDPOINT_TIMEOUTS)
    if overrides:
        table.update(overrides)
    for fragment, seconds in table.items():
        if fragment in path:
            return float(seconds)
    return float(config.timeout)


def resolve_timeout(timeout: Optional[float], config: TransportConfig, path: str = "") -> float:
    """Resolve the timeout of a regular (non-streaming) call."""
    if timeout is not None:
        return float(timeout)
    return endpoint_timeout(path, config) if path else float(config.timeout)


def resolve_sse_timeout(timeout: Optional[float], config: TransportConfig) -> float:
    """Resolve the timeout of a streaming call."""
    if timeout is not None:
        return float(timeout)
    if config.sse_timeout is not None:
        return float(config.sse_timeout)
    return float(config.timeout)


__all__ = ["endpoint_timeout", "resolve_timeout", "resolve_sse_timeout"]
