"""pintable public API.

Headless core (models, sort engine, layout engine, controller) is importable
without PyQt6 being initialised; the Qt view lives in ``pintable.views``.
"""

from __future__ import annotations

from .models import (  # noqa: F401
    Align,
    Column,
    ColumnLayout,
    FixedSide,
    ScrollConstraints,
    SortOrder,
    TableProjection,
)
from .services.event_bus import EventBus, TableEvent  # noqa: F401
from .services.multi_column_sort import sort_rows  # noqa: F401
from .viewmodels.table_controller import TableController, TableState  # noqa: F401

__all__ = [
    "Align",
    "Column",
    "ColumnLayout",
    "FixedSide",
    "ScrollConstraints",
    "SortOrder",
    "TableProjection",
    "EventBus",
    "TableEvent",
    "sort_rows",
    "TableController",
    "TableState",
]
