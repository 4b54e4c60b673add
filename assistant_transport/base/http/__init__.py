"""HTTP utilities package for the transport.

Exposes pooled httpx clients.
"""

from .client import build_httpx_client, get_httpx_client, close_all_clients

__all__ = ["build_httpx_client", "get_httpx_client", "close_all_clients"]
