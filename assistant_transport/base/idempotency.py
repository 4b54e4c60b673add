"""Idempotency key generation.

Two strategies are provided:

``generate_idempotency_key``
    A random 32-hex-character key for one logical call. The transport creates
    it once per call and reuses it for every retry of that call.

``build_idempotency_key``
    A deterministic key derived from the request payload and a time bucket so
    identical payloads submitted within the same bucket collapse to one key
    (useful for deduplicating double submits from queue workers).

Failure modes
-------------
If the operating system entropy source is unavailable the random key falls
back to a stack of weaker sources (system random integer, wall clock, pid and
a hash of the hostname) hashed with SHA-256. The result is never a constant.
"""
from __future__ import annotations

import hashlib
import json
import math
import os
import random
import secrets
import socket
import time
import zlib
from typing import Any, Mapping, Optional

from .settings import TransportConfig

IDEMPOTENCY_HEADER = "Idempotency-Key"
IDEMPOTENCY_FIELD = "_idempotency_key"


def _fallback_random_component() -> str:
    try:
        return str(random.SystemRandom().getrandbits(63))
    except (NotImplementedError, OSError):
        time_int = int(round(time.time() * 1_000_000))
        host_crc = zlib.crc32(socket.gethostname().encode("utf-8", "replace"))
        return str((time_int ^ os.getpid()) ^ host_crc)


def generate_idempotency_key() -> str:
    """Return a fresh idempotency key (32 hex chars when entropy is available)."""
    try:
        return secrets.token_hex(16)
    except (NotImplementedError, OSError):
        data = f"{time.time()}|{os.getpid()}|{_fallback_random_component()}"
        return hashlib.sha256(data.encode("utf-8")).hexdigest()


def _stable_json(payload: Mapping[str, Any]) -> str:
    return json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False, default=str)


def build_idempotency_key(
    payload: Mapping[str, Any],
    bucket_seconds: Optional[int] = None,
    *,
    config: Optional[TransportConfig] = None,
    now: Optional[float] = None,
) -> str:
    """Build a deterministic key from ``payload`` and the current time bucket.

    The key has the form ``resp_<bucket>_<sha256 prefix>``. Key order inside
    ``payload`` (at any depth) does not affect the result.
    """
    bucket = bucket_seconds if bucket_seconds is not None else (config or TransportConfig()).idempotency_bucket
    if bucket < 1:
        bucket = 60
    current = time.time() if now is None else now
    now_bucket = int(math.floor(current / bucket))
    digest = hashlib.sha256(f"{_stable_json(payload)}|{now_bucket}".encode("utf-8")).hexdigest()
    return f"resp_{now_bucket}_{digest[:32]}"


__all__ = [
    "IDEMPOTENCY_HEADER",
    "IDEMPOTENCY_FIELD",
    "generate_idempotency_key",
    "build_idempotency_key",
]
