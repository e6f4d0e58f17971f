from __future__ import annotations

import logging
from threading import RLock
from typing import Callable, Generic, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)


class Signal(Generic[T]):
    """
    Framework-agnostic observer primitive for domain events.
    Subscribers are called in connection order with the emitted payload.
    """

    def __init__(self, name: str = "") -> None:
        self.name = name
        self._subscribers: list[Callable[[T], None]] = []
        self._lock: RLock = RLock()

    def connect(self, callback: Callable[[T], None]) -> None:
        with self._lock:
            if callback not in self._subscribers:
                self._subscribers.append(callback)

    def disconnect(self, callback: Callable[[T], None]) -> None:
        with self._lock:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def emit(self, payload: T) -> None:
        with self._lock:
            subscribers = list(self._subscribers)
        dead: list[Callable[[T], None]] = []
        for callback in subscribers:
            try:
                callback(payload)
            except ReferenceError:
                # weakref.proxy subscriber whose referent is gone
                dead.append(callback)
        if dead:
            logger.debug("Signal %s: pruning %d dead subscribers", self.name, len(dead))
            with self._lock:
                for callback in dead:
                    if callback in self._subscribers:
                        self._subscribers.remove(callback)


__all__ = ["Signal"]
