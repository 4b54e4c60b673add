"""Unified configuration layer for the transport.

Goals
-----
* Produce one immutable :class:`TransportConfig` that is injected into
  transports instead of being looked up ambiently inside request methods.
* Merge sources in a predictable order (later wins):
    1. Built-in defaults (the model's field defaults)
    2. Optional external config file (JSON or YAML) named by
       ``AI_TRANSPORT_CONFIG_FILE``
    3. Environment variables (see ``ENV_FIELD_MAP``)
    4. In-code overrides passed to :func:`load_transport_config`

External Config File (Optional)
-------------------------------
JSON is attempted first, then YAML. Either a flat mapping of config fields or
a mapping with a ``transport`` section is accepted::

    transport:
      timeout: 60
      retry:
        max_attempts: 5
        jitter: false

Failure modes
-------------
* A missing or unparsable config file is ignored.
* An environment value that cannot be parsed, or that fails validation, is
  skipped with a warning and the previous value is kept.
* Invalid file contents or overrides raise ``pydantic.ValidationError``.

Public API
----------
* load_transport_config(overrides: dict | None = None) -> TransportConfig
"""
from __future__ import annotations

import copy
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from pydantic import ValidationError

from ..base.logging import get_logger, log_event
from ..base.settings import TransportConfig
from .defaults import CONFIG_FILE_ENV, ENV_FIELD_MAP

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


def _parse_bool(raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"not a boolean: {raw!r}")


def _get_path(data: Mapping[str, Any], dotted: str) -> Any:
    cur: Any = data
    for part in dotted.split("."):
        cur = cur[part]
    return cur


def _set_path(data: Dict[str, Any], dotted: str, value: Any) -> None:
    parts = dotted.split(".")
    cur = data
    for part in parts[:-1]:
        cur = cur.setdefault(part, {})
    cur[parts[-1]] = value


def _deep_merge(base: Dict[str, Any], extra: Mapping[str, Any]) -> Dict[str, Any]:
    out = dict(base)
    for key, value in extra.items():
        if isinstance(value, Mapping) and isinstance(out.get(key), dict):
            out[key] = _deep_merge(out[key], value)
        else:
            out[key] = value
    return out


def _coerce(default: Any, raw: str) -> Any:
    """Convert an env string to the type of the field's default value."""
    if isinstance(default, bool):
        return _parse_bool(raw)
    if isinstance(default, int):
        return int(raw.strip())
    if isinstance(default, float):
        return float(raw.strip())
    return raw.strip()


def _load_external_config(path: Optional[str]) -> Dict[str, Any]:
    if not path:
        return {}
    p = Path(path)
    if not p.is_file():
        return {}
    text = p.read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except ValueError:
        try:
            data = yaml.safe_load(text) or {}
        except yaml.YAMLError:
            data = {}
    if not isinstance(data, dict):
        return {}
    section = data.get("transport")
    return dict(section) if isinstance(section, dict) else data


def _env_overrides(
    base: Dict[str, Any], environ: Mapping[str, str], logger: logging.Logger
) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for env_name, field_path in ENV_FIELD_MAP.items():
        raw = environ.get(env_name)
        if raw is None:
            continue
        candidate = copy.deepcopy(merged)
        try:
            _set_path(candidate, field_path, _coerce(_get_path(merged, field_path), raw))
            TransportConfig.model_validate(candidate)
        except (ValueError, ValidationError):
            log_event(logger, "config.env_ignored", level=logging.WARNING, variable=env_name, value=raw)
            continue
        merged = candidate
    return merged


def load_transport_config(
    overrides: Optional[Mapping[str, Any]] = None,
    *,
    environ: Optional[Mapping[str, str]] = None,
) -> TransportConfig:
    """Return the merged transport configuration.

    Parameters:
        overrides: Nested mapping of field values applied last.
        environ: Environment mapping to read; defaults to ``os.environ``.
    """
    env = os.environ if environ is None else environ
    logger = get_logger(__name__)

    data = TransportConfig().model_dump()
    data = _deep_merge(data, _load_external_config(env.get(CONFIG_FILE_ENV)))
    data = _env_overrides(data, env, logger)
    if overrides:
        data = _deep_merge(data, overrides)
    return TransportConfig.model_validate(data)


__all__ = ["load_transport_config", "TransportConfig"]
