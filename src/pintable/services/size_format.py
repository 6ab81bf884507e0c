"""Unit conversion from layout units to device units.

Numbers are layout magnitudes and get scaled; strings are treated as already
formatted sizes (``"30%"``, ``"4rem"``) and pass through unchanged.

Views that paint converted sizes register with :meth:`SizeFormatter.on_scale_changed`
rather than listening for ``DPI_SCALE_CHANGED`` themselves: listeners run
after the new scale is stored, whatever order the bus subscribers were added.
"""

from __future__ import annotations

from typing import Callable, List, Optional

from pintable.config import settings
from pintable.models import Size
from pintable.services.event_bus import Event, EventBus, Subscription, TableEvent

__all__ = ["SizeFormatter"]


class SizeFormatter:
    def __init__(
        self, scale: float = settings.SIZE_SCALE, multiplier: float = settings.SIZE_MULTIPLIER
    ) -> None:
        self._scale = scale
        self.multiplier = multiplier
        self._subscription: Subscription | None = None
        self._listeners: List[Callable[[float], None]] = []

    @property
    def scale(self) -> float:
        return self._scale

    @scale.setter
    def scale(self, value: float) -> None:
        value = float(value)
        if value == self._scale:
            return
        self._scale = value
        for listener in list(self._listeners):
            listener(value)

    def on_scale_changed(self, listener: Callable[[float], None]) -> None:
        self._listeners.append(listener)

    def format(self, size: Optional[Size]) -> Optional[Size]:
        if size is None:
            return None
        if isinstance(size, str):
            return size
        return round(float(size) * self.multiplier * self._scale, 2)

    __call__ = format

    def follow(self, bus: EventBus) -> None:
        """Track ``DPI_SCALE_CHANGED`` notifications published on ``bus``."""
        if self._subscription is not None:
            self._subscription.cancel()
        self._subscription = bus.subscribe(TableEvent.DPI_SCALE_CHANGED, self._on_scale)

    def _on_scale(self, evt: Event) -> None:
        self.scale = evt.payload["scale"]
