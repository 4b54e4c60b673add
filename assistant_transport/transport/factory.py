"""Construct a ready-to-use :class:`HttpxTransport`.

Wires the pooled ``httpx`` client, the merged configuration and the
authorization headers together so callers do not have to.
"""
from __future__ import annotations

import os
from typing import Dict, Mapping, Optional

from ..base.http import get_httpx_client
from ..base.settings import TransportConfig
from ..config import load_transport_config
from ..config.defaults import API_KEY_ENV, ORGANIZATION_ENV
from .httpx_transport import HttpxTransport


def default_headers(
    api_key: Optional[str] = None,
    organization: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Dict[str, str]:
    """Authorization headers from explicit values or the environment."""
    env = os.environ if environ is None else environ
    headers: Dict[str, str] = {}
    key = api_key or env.get(API_KEY_ENV)
    if key:
        headers["Authorization"] = f"Bearer {key}"
    org = organization or env.get(ORGANIZATION_ENV)
    if org:
        headers["OpenAI-Organization"] = org
    return headers


def create_transport(
    config: Optional[TransportConfig] = None,
    *,
    api_key: Optional[str] = None,
    organization: Optional[str] = None,
    purpose: str = "responses",
) -> HttpxTransport:
    """Return a transport backed by the shared client pool.

    ``config`` defaults to :func:`load_transport_config`. The pooled client is
    keyed by ``(config.base_url, purpose)``.
    """
    cfg = config or load_transport_config()
    client = get_httpx_client(cfg.base_url, purpose, config=cfg)
    return HttpxTransport(
        client,
        config=cfg,
        default_headers=default_headers(api_key, organization),
    )


__all__ = ["create_transport", "default_headers"]
