"""Service layer exports.

Responsibilities:
 - Cell comparison and multi-column sorting
 - Width resolution and fixed-column offsets
 - Unit conversion and the EventBus used for change notification

``DpiScalingService`` is not re-exported here because it needs QtGui.
"""

from .comparator import compare_values, resolve_comparator  # noqa: F401
from .event_bus import EventBus, TableEvent  # noqa: F401
from .fixed_offset import fixed_offset  # noqa: F401
from .multi_column_sort import build_sort_spec, sort_rows  # noqa: F401
from .size_format import SizeFormatter  # noqa: F401
from .width_resolver import WidthPolicy, WidthResolver, resolve_width  # noqa: F401

__all__ = [
    "compare_values",
    "resolve_comparator",
    "EventBus",
    "TableEvent",
    "fixed_offset",
    "build_sort_spec",
    "sort_rows",
    "SizeFormatter",
    "WidthPolicy",
    "WidthResolver",
    "resolve_width",
]
