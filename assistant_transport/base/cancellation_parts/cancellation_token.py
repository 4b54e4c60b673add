"""Cooperative cancellation token.

A consumer hands a token to ``StreamingService.stream_responses`` as its stop
predicate; any other party (a request handler noticing a client disconnect, a
timeout watchdog) calls ``cancel`` and the stream stops after the event being
delivered. Nothing is interrupted mid-read.
"""

from __future__ import annotations

import threading
from typing import List, Optional


class CancellationToken:
    """Stop signal shared between a stream consumer and its controllers.

    Calling the token returns whether cancellation was requested, so it fits
    wherever a ``Callable[[], bool]`` stop predicate is expected. Tokens form a
    tree: cancelling one cancels every token derived from it, never its parent.
    The first reason given wins.
    """

    def __init__(self, *, parent: Optional["CancellationToken"] = None) -> None:
        self._event = threading.Event()
        self._guard = threading.Lock()
        self._reason: Optional[str] = None
        self._derived: List[CancellationToken] = []
        if parent is not None:
            parent.link_child(self)

    def __call__(self) -> bool:
        return self._event.is_set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> Optional[str]:
        return self._reason

    def cancel(self, reason: Optional[str] = None) -> None:
        """Request cancellation of this token and everything derived from it."""
        with self._guard:
            if self._event.is_set():
                return
            self._reason = reason
            self._event.set()
            derived, self._derived = self._derived, []
        for token in derived:
            token.cancel(reason)

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until cancelled or ``timeout`` elapses; returns the flag."""
        return self._event.wait(timeout)

    def link_child(self, token: "CancellationToken") -> "CancellationToken":
        """Make ``token`` follow this one; an already cancelled parent cancels it at once."""
        with self._guard:
            if not self._event.is_set():
                self._derived.append(token)
                return token
            reason = self._reason
        token.cancel(reason)
        return token

    def child(self) -> "CancellationToken":
        return CancellationToken(parent=self)

    def __repr__(self) -> str:
        return f"CancellationToken(cancelled={self.cancelled}, reason={self._reason!r})"


__all__ = ["CancellationToken"]
