"""Structured logging context object for transport events.

Defines :class:`LogContext`, a dataclass carrying the fields shared by every
log event of one request or stream (operation, method, path, identifiers). Its
``to_dict`` helper merges the ``extra`` mapping and prunes ``None`` values.
"""
from __future__ import annotations

from dataclasses import dataclass, asdict, field
from typing import Any, Dict, Optional


@dataclass
class LogContext:
    """Structured context for transport logging events."""

    operation: Optional[str] = None
    method: Optional[str] = None
    path: Optional[str] = None
    stream_id: Optional[str] = None
    request_id: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        extra = data.pop("extra", {}) or {}
        data.update({k: v for k, v in extra.items() if v is not None})
        return {k: v for k, v in data.items() if v is not None}


__all__ = ["LogContext"]
