"""Shared HTTP client pool for the transport.

Purpose:
    Provide a centralized, thread-safe pool of reusable ``httpx.Client``
    instances so repositories and transports share connections instead of
    allocating a client per call. Timeouts and pool limits derive from
    :class:`TransportConfig`.

External dependencies:
    - ``httpx`` for the underlying synchronous HTTP client.

Lifecycle & cleanup:
    - Clients are cached by ``(base_url, purpose)``. Purposes allow distinct
      pools (e.g. "responses" vs "files").
    - The first request for a key fixes that client's configuration; later
      calls with a different ``config`` reuse the cached instance.
    - All clients are closed at interpreter exit via ``atexit``. Tests may call
      :func:`close_all_clients` explicitly.

Per-call timeouts are still passed by the transport on every request; the
client-level timeout only applies to requests that do not specify one.
"""

from __future__ import annotations

import atexit
import threading
from typing import Dict, Mapping, Optional, Tuple

import httpx

from ..settings import TransportConfig

_CLIENTS: Dict[Tuple[Optional[str], str], httpx.Client] = {}
_LOCK = threading.RLock()


def build_httpx_client(
    config: TransportConfig,
    *,
    headers: Optional[Mapping[str, str]] = None,
    transport: Optional[httpx.BaseTransport] = None,
) -> httpx.Client:
    """Create (not pool) an ``httpx.Client`` configured from ``config``.

    Error statuses are never raised by the client; the transport maps them.
    """
    kwargs = {
        "base_url": config.base_url,
        "headers": dict(headers or {}),
        "timeout": httpx.Timeout(config.timeout, connect=config.connect_timeout),
    }
    if config.pool.enabled:
        kwargs["limits"] = httpx.Limits(
            max_connections=config.pool.max_connections,
            max_keepalive_connections=config.pool.max_keepalive_connections,
        )
    if transport is not None:
        kwargs["transport"] = transport
    return httpx.Client(**kwargs)


def get_httpx_client(
    base_url: Optional[str],
    purpose: str,
    config: Optional[TransportConfig] = None,
    headers: Optional[Mapping[str, str]] = None,
) -> httpx.Client:
    """Return a pooled ``httpx.Client`` for the given base URL and purpose.

    Parameters:
        base_url: API origin; overrides ``config.base_url`` when given.
        purpose: A short string discriminating separate pools. Keep stable to
            maximize reuse.
        config: Transport configuration used on first creation.
        headers: Default headers set on the client at creation time.

    Thread-safety:
        Safe for concurrent use; per-key creation is guarded by a re-entrant
        lock.
    """
    key = (base_url, purpose)
    client = _CLIENTS.get(key)
    if client is not None:
        return client

    with _LOCK:
        client = _CLIENTS.get(key)
        if client is not None:
            return client
        cfg = config or TransportConfig()
        if base_url:
            cfg = cfg.model_copy(update={"base_url": base_url})
        client = build_httpx_client(cfg, headers=headers)
        _CLIENTS[key] = client
        return client


def close_all_clients() -> None:
    """Close and clear all pooled HTTP clients."""
    with _LOCK:
        for c in _CLIENTS.values():
            c.close()
        _CLIENTS.clear()


atexit.register(close_all_clients)

__all__ = ["build_httpx_client", "get_httpx_client", "close_all_clients"]
