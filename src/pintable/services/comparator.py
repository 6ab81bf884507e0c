"""Direction-aware cell comparison.

Cell values typically arrive from JSON payloads, so numbers are frequently
encoded as strings. Two values compare numerically when both parse as
numbers (``"10"`` sorts after ``"2"``); otherwise both are compared as
strings with a locale-aware ``QCollator``. The collation locale is the
system locale, or ``en_US`` when the process runs in the bare "C" locale
(lower case sorts before upper case: ``a, A, b, B``).

The comparator never raises and never returns a non-finite ordering key.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Any, Callable

from PyQt6.QtCore import QCollator, QLocale

from pintable.models import Column, Row, SortOrder

__all__ = [
    "RowComparator",
    "to_number",
    "compare_values",
    "set_collation_locale",
    "resolve_comparator",
]

_log = logging.getLogger(__name__)

RowComparator = Callable[[Row, Row], int]

_DECIMAL_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")
_HEX_RE = re.compile(r"^0[xX][0-9a-fA-F]+$")
_INFINITY = {"Infinity": math.inf, "+Infinity": math.inf, "-Infinity": -math.inf}


def to_number(value: Any) -> float:
    """Coerce a cell value to a float, returning NaN when it is not numeric.

    ``None``, empty and whitespace-only strings count as ``0``; booleans count
    as ``1`` / ``0``.
    """
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0.0
        if _DECIMAL_RE.match(text):
            return float(text)
        if _HEX_RE.match(text):
            return float(int(text, 16))
        return _INFINITY.get(text, math.nan)
    return math.nan


def _sign(value: float) -> int:
    if math.isnan(value) or value == 0:
        return 0
    return 1 if value > 0 else -1


def _default_locale() -> QLocale:
    loc = QLocale.system()
    if loc.language() == QLocale.Language.C:
        return QLocale("en_US")
    return loc


_collator = QCollator(_default_locale())


def set_collation_locale(name: str | QLocale) -> None:
    """Switch the locale used for text comparison (e.g. ``"de_DE"``)."""
    _collator.setLocale(name if isinstance(name, QLocale) else QLocale(name))


def _collate(a: Any, b: Any) -> int:
    return _sign(_collator.compare(str(a), str(b)))


def compare_values(a: Any, b: Any, order: SortOrder = SortOrder.ASCEND) -> int:
    """Compare two cell values; ``descend`` reverses the operands."""
    order = SortOrder.coerce(order)
    num_a, num_b = to_number(a), to_number(b)
    if math.isnan(num_a) or math.isnan(num_b):
        if order is SortOrder.DESCEND:
            return _collate(b, a)
        return _collate(a, b)
    if order is SortOrder.DESCEND:
        return _sign(num_b - num_a)
    return _sign(num_a - num_b)


def _noop(_a: Row, _b: Row) -> int:
    return 0


def resolve_comparator(column: Column) -> RowComparator:
    """Return the row comparator for one sort pass over ``column``.

    A callable ``sorter`` receives ``(row_a, row_b, order)``; its result is
    normalised to -1/0/1 with NaN treated as equal. A truthy ``sorter`` that
    is not callable makes the pass a no-op rather than failing the sort;
    ``sorter=True`` is the flag form and selects the default comparator.
    """
    order = column.sort_order
    sorter = column.sorter
    if sorter and sorter is not True:
        if not callable(sorter):
            _log.warning(
                "Column %r has a non-callable sorter %r; sort pass skipped",
                column.data_index,
                sorter,
            )
            return _noop

        def _custom(row_a: Row, row_b: Row) -> int:
            result = sorter(row_a, row_b, order)
            try:
                return _sign(float(result))
            except (TypeError, ValueError):
                return 0

        return _custom

    data_index = column.data_index

    def _default(row_a: Row, row_b: Row) -> int:
        return compare_values(row_a.get(data_index), row_b.get(data_index), order)

    return _default
