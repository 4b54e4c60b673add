"""assistant_transport.config.defaults
====================================

Central place for small, stable default values used by the configuration
loader. These defaults can be overridden via environment variables, a config
file or in-code overrides.

This module intentionally avoids importing from other packages to prevent
circular dependencies. Only plain constants live here.
"""

from __future__ import annotations

OPENAI_DEFAULT_BASE_URL = "https://api.openai.com"
OPENAI_DEFAULT_BASE_PATH = "/v1"

# Path of an optional JSON or YAML config file.
CONFIG_FILE_ENV = "AI_TRANSPORT_CONFIG_FILE"

# Environment variable -> dotted TransportConfig field.
ENV_FIELD_MAP = {
    "OPENAI_BASE_URL": "base_url",
    "AI_RESPONSES_TIMEOUT": "timeout",
    "AI_STREAMING_SSE_TIMEOUT": "sse_timeout",
    "AI_CONNECT_TIMEOUT": "connect_timeout",
    "AI_RESPONSES_IDEMPOTENCY": "idempotency_enabled",
    "AI_RESPONSES_IDEMPOTENCY_BUCKET": "idempotency_bucket",
    "AI_RESPONSES_RETRY_ENABLED": "retry.enabled",
    "AI_RESPONSES_RETRY_MAX_ATTEMPTS": "retry.max_attempts",
    "AI_RESPONSES_RETRY_INITIAL_DELAY": "retry.initial_delay",
    "AI_RESPONSES_RETRY_BACKOFF_MULTIPLIER": "retry.backoff_multiplier",
    "AI_RESPONSES_RETRY_MAX_DELAY": "retry.max_delay",
    "AI_RESPONSES_RETRY_JITTER": "retry.jitter",
    "AI_CONNECTION_POOL_ENABLED": "pool.enabled",
    "AI_CONNECTION_POOL_MAX_CONNECTIONS": "pool.max_connections",
}

API_KEY_ENV = "OPENAI_API_KEY"
ORGANIZATION_ENV = "OPENAI_ORGANIZATION"

__all__ = [
    "OPENAI_DEFAULT_BASE_URL",
    "OPENAI_DEFAULT_BASE_PATH",
    "CONFIG_FILE_ENV",
    "ENV_FIELD_MAP",
    "API_KEY_ENV",
    "ORGANIZATION_ENV",
]
