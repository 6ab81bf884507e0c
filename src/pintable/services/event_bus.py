"""Synchronous publish/subscribe for table notifications.

The controller publishes row-order, sort and expansion changes here; host
callbacks and the Qt view subscribe. A failing handler is recorded in
``EventBus.errors`` (a ring buffer of the most recent failures) and does
not stop delivery to the remaining handlers or abort the sort cycle that
published the event.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum
from threading import RLock
from time import perf_counter
from typing import Any, Deque, Dict, List, Protocol

__all__ = [
    "TableEvent",
    "Event",
    "EventBus",
    "EventHandler",
    "Subscription",
]

_log = logging.getLogger(__name__)


class TableEvent(str, Enum):
    ROWS_CHANGED = "rows_changed"
    SORT_CHANGED = "sort_changed"
    EXPANSION_TOGGLED = "expansion_toggled"
    DPI_SCALE_CHANGED = "dpi_scale_changed"


@dataclass
class Event:
    name: str
    payload: Any
    timestamp: float


class EventHandler(Protocol):  # noqa: D401 - protocol signature docs implicit
    def __call__(self, event: Event) -> None: ...  # pragma: no cover - structural


@dataclass
class Subscription:
    event: str
    handler: EventHandler
    once: bool
    active: bool = True

    def cancel(self) -> None:
        self.active = False


def _key(name: str | TableEvent) -> str:
    return name.value if isinstance(name, TableEvent) else name


class EventBus:
    """Synchronous event dispatcher.

    Handlers run outside the lock (subscribers are snapshotted first) so a
    handler may subscribe or unsubscribe while being dispatched.
    """

    DEFAULT_ERROR_CAPACITY = 50

    def __init__(self, *, error_capacity: int = DEFAULT_ERROR_CAPACITY) -> None:
        self._lock = RLock()
        self._subs: Dict[str, List[Subscription]] = {}
        self._errors: Deque[tuple[Event, BaseException]] = deque(maxlen=max(1, error_capacity))

    def subscribe(
        self, name: str | TableEvent, handler: EventHandler, *, once: bool = False
    ) -> Subscription:
        sub = Subscription(event=_key(name), handler=handler, once=once)
        with self._lock:
            self._subs.setdefault(sub.event, []).append(sub)
        return sub

    def unsubscribe(self, sub: Subscription) -> None:
        with self._lock:
            bucket = self._subs.get(sub.event, [])
            remaining = [s for s in bucket if s is not sub]
            if remaining:
                self._subs[sub.event] = remaining
            else:
                self._subs.pop(sub.event, None)
        sub.active = False

    def publish(self, name: str | TableEvent, payload: Any = None) -> Event:
        evt = Event(name=_key(name), payload=payload, timestamp=perf_counter())
        with self._lock:
            subs = list(self._subs.get(evt.name, ()))
        for sub in subs:
            if not sub.active:
                continue
            try:
                sub.handler(evt)
            except Exception as exc:  # noqa: BLE001 - isolate subscriber failures
                _log.exception("Handler for %s failed", evt.name)
                with self._lock:
                    self._errors.append((evt, exc))
            if sub.once:
                self.unsubscribe(sub)
        return evt

    def subscriber_count(self, name: str | TableEvent) -> int:
        with self._lock:
            return len(self._subs.get(_key(name), ()))

    @property
    def errors(self) -> list[tuple[Event, BaseException]]:
        with self._lock:
            return list(self._errors)

    def clear(self) -> None:
        with self._lock:
            self._subs.clear()
            self._errors.clear()
