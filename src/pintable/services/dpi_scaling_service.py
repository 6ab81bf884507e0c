"""Device pixel scaling service.

Responsibilities:
 - Query the primary screen logical DPI and expose it as a factor relative to
   a 96 DPI baseline.
 - Listen for screen changes (``QEvent.ScreenChangeInternal`` and
   ``QGuiApplication.primaryScreenChanged``) and debounce bursts of them.
 - Publish ``TableEvent.DPI_SCALE_CHANGED`` when the factor moves by more than
   1%.
 - ``attach(formatter)`` seeds a :class:`SizeFormatter` with the current factor
   and makes it follow later changes; ``PinnedTableView(dpi_service=...)``
   does this for its controller so table widths track the screen.

Note: querying the screen requires a QGuiApplication; tests create a minimal
offscreen instance and inject a fake ``get_scale`` provider.
"""

from __future__ import annotations

from typing import Callable, Optional

from PyQt6.QtCore import QEvent, QObject, QTimer
from PyQt6.QtGui import QGuiApplication

from pintable.config import settings
from pintable.services.event_bus import EventBus, TableEvent
from pintable.services.size_format import SizeFormatter

CHANGE_THRESHOLD = 0.01  # 1%
DEBOUNCE_MS = 120

__all__ = ["DpiScalingService", "current_scale"]


def current_scale() -> float:
    app = QGuiApplication.instance()
    if not app:  # pragma: no cover - no GUI application running
        return 1.0
    screen = app.primaryScreen()
    if not screen:  # pragma: no cover
        return 1.0
    dpi = screen.logicalDotsPerInch() or settings.BASELINE_DPI
    return round(dpi / settings.BASELINE_DPI, 4)


class DpiScalingService(QObject):
    def __init__(
        self,
        event_bus: EventBus,
        get_scale: Callable[[], float] = current_scale,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._bus = event_bus
        self._get_scale = get_scale
        self._last_scale = self._get_scale()
        self._debounce = QTimer(self)
        self._debounce.setInterval(DEBOUNCE_MS)
        self._debounce.setSingleShot(True)
        self._debounce.timeout.connect(self._emit_if_changed)  # type: ignore
        app = QGuiApplication.instance()
        if app:
            app.installEventFilter(self)
            app.primaryScreenChanged.connect(self._on_primary_screen_changed)  # type: ignore

    # Qt hooks -----------------------------------------------------------------
    def eventFilter(self, watched: QObject, event: QEvent):  # noqa: D401
        if event.type() == QEvent.Type.ScreenChangeInternal:
            self._debounce.start()
        return super().eventFilter(watched, event)

    def _on_primary_screen_changed(self, _screen):  # noqa: D401
        self._debounce.start()

    # Public API ---------------------------------------------------------------
    @property
    def event_bus(self) -> EventBus:
        return self._bus

    def current_scale(self) -> float:
        return self._last_scale

    def attach(self, formatter: SizeFormatter) -> None:
        formatter.scale = self._last_scale
        formatter.follow(self._bus)

    # Internal -----------------------------------------------------------------
    def _emit_if_changed(self) -> None:
        new_scale = self._get_scale()
        if abs(new_scale - self._last_scale) / max(self._last_scale, 1e-6) <= CHANGE_THRESHOLD:
            return
        self._last_scale = new_scale
        self._bus.publish(TableEvent.DPI_SCALE_CHANGED, {"scale": new_scale})
