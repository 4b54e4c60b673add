from __future__ import annotations

import re
import secrets

from assistant_transport.base import idempotency
from assistant_transport.base.idempotency import build_idempotency_key, generate_idempotency_key
from assistant_transport.base.settings import TransportConfig


def test_generated_key_is_32_hex_chars_and_unique():
    keys = {generate_idempotency_key() for _ in range(50)}
    assert len(keys) == 50
    assert all(re.fullmatch(r"[0-9a-f]{32}", k) for k in keys)


def test_fallback_when_entropy_unavailable(monkeypatch):
    def broken(_n):
        raise OSError("no entropy")

    monkeypatch.setattr(secrets, "token_hex", broken)

    first = generate_idempotency_key()
    second = generate_idempotency_key()
    assert re.fullmatch(r"[0-9a-f]{64}", first)
    assert first != second


def test_deterministic_key_ignores_key_order():
    a = build_idempotency_key({"model": "m", "input": {"x": 1, "y": 2}}, 60, now=120.0)
    b = build_idempotency_key({"input": {"y": 2, "x": 1}, "model": "m"}, 60, now=179.0)

    assert a == b
    assert a.startswith("resp_2_")
    assert len(a.split("_")[-1]) == 32


def test_deterministic_key_changes_with_bucket_and_payload():
    base = build_idempotency_key({"a": 1}, 60, now=0.0)
    assert build_idempotency_key({"a": 1}, 60, now=60.0) != base
    assert build_idempotency_key({"a": 2}, 60, now=0.0) != base


def test_bucket_defaults_to_config():
    cfg = TransportConfig(idempotency_bucket=10)
    assert build_idempotency_key({}, config=cfg, now=25.0).startswith("resp_2_")


def test_reserved_names():
    assert idempotency.IDEMPOTENCY_HEADER == "Idempotency-Key"
    assert idempotency.IDEMPOTENCY_FIELD == "_idempotency_key"
