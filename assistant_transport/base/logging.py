"""Structured logging for the transport and streaming layers.

Every module logger lives under the ``assistant_transport`` logger, which owns
one stderr handler and does not propagate to the root logger. Applications
that want these lines elsewhere attach handlers to that logger (or call
:func:`configure_logger` for a rotating file).

Events are emitted with :func:`log_event` as a single JSON object per line,
for example::

    {"event": "transport.retry", "method": "POST", "path": "/v1/responses",
     "attempt": 1, "max_attempts": 3, "delay": 0.5, "status": 429}

The level comes from ``AI_TRANSPORT_LOG_LEVEL`` (default INFO).
"""
from __future__ import annotations

import contextlib
import json
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Any, Optional, Union

from .log_support import JsonFormatter, LogContext

BASE_LOGGER_NAME = "assistant_transport"
LOG_LEVEL_ENV = "AI_TRANSPORT_LOG_LEVEL"

_READY_FLAG = "_assistant_transport_ready"
_STDERR_TAG = "_assistant_transport_stderr"
_FILE_TAG = "_assistant_transport_file"
_TEXT_LAYOUT = "%(asctime)s %(levelname)s %(name)s %(message)s"
_FILE_MAX_BYTES = 10 * 1024 * 1024
_FILE_BACKUPS = 5


def _parse_level(value: Union[int, str, None], default: int = logging.INFO) -> int:
    """Turn ``"debug"``, ``"WARN"``, ``20`` ... into a logging level; unknown -> ``default``."""
    if value is None or value == "":
        return default
    if isinstance(value, int):
        return value
    name = value.strip().upper()
    if name == "WARN":
        name = "WARNING"
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else default


def _formatter(json_mode: bool) -> logging.Formatter:
    if json_mode:
        return JsonFormatter()
    return logging.Formatter(_TEXT_LAYOUT)


def _base_logger(json_mode: bool, level: int) -> logging.Logger:
    logger = logging.getLogger(BASE_LOGGER_NAME)
    wanted = _parse_level(os.getenv(LOG_LEVEL_ENV), default=level)
    if logger.level != wanted:
        logger.setLevel(wanted)
    if getattr(logger, _READY_FLAG, False):
        return logger

    stderr = logging.StreamHandler(sys.stderr)
    stderr.setFormatter(_formatter(json_mode))
    setattr(stderr, _STDERR_TAG, True)
    for old in [h for h in logger.handlers if getattr(h, _STDERR_TAG, False)]:
        logger.removeHandler(old)
    logger.addHandler(stderr)
    logger.propagate = False
    setattr(logger, _READY_FLAG, True)
    return logger


def get_logger(
    name: str = BASE_LOGGER_NAME, json_mode: bool = True, level: int = logging.INFO
) -> logging.Logger:
    """Return ``name`` as a logger inside the ``assistant_transport`` tree.

    Foreign names are prefixed (``"x.y"`` becomes ``"assistant_transport.x.y"``).
    Child loggers defer their level to the base logger.
    """
    base = _base_logger(json_mode, level)
    if name == BASE_LOGGER_NAME:
        return base
    if not name.startswith(BASE_LOGGER_NAME + "."):
        name = f"{BASE_LOGGER_NAME}.{name}"
    logger = logging.getLogger(name)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
    return logger


def _drop_file_handlers(logger: logging.Logger, keep: Optional[str]) -> bool:
    """Remove managed file handlers not writing to ``keep``; True if ``keep`` survives."""
    kept = False
    for handler in [h for h in logger.handlers if getattr(h, _FILE_TAG, False)]:
        if keep is not None and getattr(handler, "baseFilename", None) == keep:
            kept = True
            continue
        logger.removeHandler(handler)
        with contextlib.suppress(OSError):
            handler.close()
    return kept


def configure_logger(
    *,
    level: Union[int, str, None] = None,
    file_path: Optional[str] = None,
    json_mode: bool = True,
) -> logging.Logger:
    """Adjust the package logger at runtime.

    ``level`` (name or number) replaces the current level when given.
    ``file_path`` attaches a rotating file handler (10 MiB x 5); passing
    ``None`` detaches a previously attached one.
    """
    logger = get_logger(BASE_LOGGER_NAME, json_mode=json_mode)
    if level is not None:
        logger.setLevel(_parse_level(level, default=logger.level))

    target = os.path.abspath(os.path.expanduser(file_path)) if file_path else None
    if _drop_file_handlers(logger, target) or target is None:
        return logger

    os.makedirs(os.path.dirname(target), exist_ok=True)
    handler = RotatingFileHandler(target, maxBytes=_FILE_MAX_BYTES, backupCount=_FILE_BACKUPS, encoding="utf-8")
    handler.setFormatter(_formatter(json_mode))
    setattr(handler, _FILE_TAG, True)
    logger.addHandler(handler)
    return logger


def log_event(
    logger: logging.Logger,
    event: str,
    ctx: Optional[LogContext] = None,
    *,
    level: int = logging.INFO,
    keep_none: bool = False,
    **fields: Any,
) -> None:
    """Log ``event`` as one JSON object.

    ``ctx`` contributes the request/stream identifiers; ``fields`` follow and
    win on key collisions. ``None`` values are dropped unless ``keep_none``.
    """
    if not logger.isEnabledFor(level):
        return
    payload = {"event": event}
    if ctx is not None:
        payload.update(ctx.to_dict())
    payload.update(fields if keep_none else {k: v for k, v in fields.items() if v is not None})
    logger.log(level, json.dumps(payload, ensure_ascii=False, default=str))


__all__ = [
    "BASE_LOGGER_NAME",
    "LOG_LEVEL_ENV",
    "LogContext",
    "get_logger",
    "configure_logger",
    "log_event",
]
