"""Minimal observable channel for session lifecycle events."""

import logging
from typing import Callable, Generic, List, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)


class Emitter(Generic[T]):
    """Delivers fired events to every subscribed listener, in subscription order."""

    def __init__(self, name: str = ""):
        self.name = name
        self._listeners: List[Callable[[T], None]] = []

    def subscribe(self, listener: Callable[[T], None]) -> Callable[[], None]:
        """Register *listener* and return a function that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def fire(self, event: T) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                # A broken listener must not stop the poll loop
                logger.exception("Listener for %s event failed", self.name or "unnamed")

    def __len__(self) -> int:
        return len(self._listeners)
