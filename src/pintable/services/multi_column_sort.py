"""Multi-column sorting (stable, priority ordered).

Every column with an active ``sort_order`` contributes one pass. Passes run
from the weakest ``sort_level`` to the strongest and each pass is a stable
sort over the previous result, so the strongest column decides the final
order while weaker columns survive as tie breakers.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import cmp_to_key
from typing import List, Sequence, Tuple

from pintable.models import Column, Row, SortOrder
from pintable.services.comparator import RowComparator, resolve_comparator

__all__ = [
    "SortDirective",
    "build_sort_spec",
    "sort_rows",
]

_log = logging.getLogger(__name__)


@dataclass(frozen=True)
class SortDirective:
    """One active sort pass derived from a column.

    Directives are totally ordered by ``(level, position)``: a higher
    ``sort_level`` is applied later and dominates; columns that share a level
    are applied left to right, so the right-most of them is the most
    significant.
    """

    data_index: str | None
    sort_order: SortOrder
    level: int
    position: int
    comparator: RowComparator


def _level(column: Column) -> int:
    try:
        return int(column.sort_level or 0)
    except (TypeError, ValueError):
        return 0


def build_sort_spec(columns: Sequence[Column]) -> List[SortDirective]:
    """Return the active directives in application order (weakest first).

    Columns sharing a ``sort_level`` are applied in column order, so the
    right-most of them is the most significant.
    """
    active: List[Tuple[int, int, Column]] = [
        (_level(col), pos, col) for pos, col in enumerate(columns) if col.sort_order.is_set
    ]
    active.sort(key=lambda item: (item[0], item[1]))
    levels = [lvl for lvl, _, _ in active]
    if len(set(levels)) != len(levels):
        _log.warning(
            "Columns share a sort_level %s; priority among them follows column position",
            levels,
        )
    return [
        SortDirective(
            data_index=col.data_index,
            sort_order=col.sort_order,
            level=lvl,
            position=pos,
            comparator=resolve_comparator(col),
        )
        for lvl, pos, col in active
    ]


def sort_rows(columns: Sequence[Column], rows: Sequence[Row]) -> List[Row]:
    """Order ``rows`` by every column with an active sort order.

    Returns a new list; ``rows`` itself is left untouched. With no active
    sort the input order is returned as is.
    """
    spec = build_sort_spec(columns)
    result: List[Row] = list(rows)
    if not spec:
        return result
    for directive in spec:
        result = sorted(result, key=cmp_to_key(directive.comparator))
    _log.debug(
        "Sorted %d rows by %s",
        len(result),
        [(d.data_index, d.sort_order.value, d.level) for d in spec],
    )
    return result
