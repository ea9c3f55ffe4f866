"""Typed publish/subscribe channels."""

from __future__ import annotations

from collections.abc import Callable
from typing import Generic, TypeVar

T = TypeVar("T")

Handler = Callable[[T], None]


class EventChannel(Generic[T]):
    """A named event with a fixed payload type.

    Handlers run synchronously in subscription order. Exceptions raised by
    a handler propagate to the emitter.
    """

    def __init__(self, name: str):
        self.name = name
        self._handlers: list[Handler[T]] = []

    def subscribe(self, handler: Handler[T]) -> Callable[[], None]:
        """Register a handler.

        Returns:
            Callable that removes the handler again
        """
        self._handlers.append(handler)
        return lambda: self.unsubscribe(handler)

    def unsubscribe(self, handler: Handler[T]) -> None:
        """Remove a handler (no-op if not registered)."""
        try:
            self._handlers.remove(handler)
        except ValueError:
            pass

    def clear(self) -> None:
        """Remove all handlers."""
        self._handlers.clear()

    def emit(self, value: T) -> bool:
        """Deliver value to every handler.

        Returns:
            True if at least one handler received the value
        """
        handlers = list(self._handlers)
        for handler in handlers:
            handler(value)
        return bool(handlers)

    def __len__(self) -> int:
        return len(self._handlers)

    def __repr__(self) -> str:
        return f"EventChannel({self.name!r}, handlers={len(self._handlers)})"
