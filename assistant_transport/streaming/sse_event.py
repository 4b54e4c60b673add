"""Event record produced by the SSE parser."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict

from ..base.constants import TERMINAL_EVENT_TYPES


@dataclass(frozen=True)
class SseEvent:
    """One dispatched Server-Sent Event.

    ``is_final`` marks the terminal response states (completed, failed,
    canceled).
    """

    type: str
    data: Dict[str, Any] = field(default_factory=dict)
    is_final: bool = False

    @classmethod
    def of(cls, event_type: str, data: Dict[str, Any]) -> "SseEvent":
        return cls(type=event_type, data=data, is_final=event_type in TERMINAL_EVENT_TYPES)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "data": self.data, "isFinal": self.is_final}


__all__ = ["SseEvent"]
