"""Resource repositories composed over an injected transport."""

from .responses import ResponsesRepository

__all__ = ["ResponsesRepository"]
