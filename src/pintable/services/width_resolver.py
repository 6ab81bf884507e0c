"""Column width resolution.

Widths are unit-agnostic layout magnitudes; conversion to device units is the
job of :class:`pintable.services.size_format.SizeFormatter`.

A column without an explicit width gets an automatic width:

    min(cap, max(base / column_count, default_width, len(title) * per_char))

``default_width`` shrinks for dense tables. The automatic width of a column
is memoised per ``data_index`` so header and body cells of the same column
always resolve to the same value.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Sequence

from pintable.config import settings
from pintable.models import Column, Size

__all__ = [
    "WidthPolicy",
    "WidthResolver",
    "resolve_width",
    "numeric_width",
    "table_width",
]


@dataclass(frozen=True)
class WidthPolicy:
    base_width: float = settings.CONTAINER_BASE_WIDTH
    max_auto_width: float = settings.MAX_AUTO_WIDTH
    per_char_width: float = settings.PER_CHAR_WIDTH
    sparse_default: float = settings.SPARSE_DEFAULT_WIDTH
    dense_default: float = settings.DENSE_DEFAULT_WIDTH
    dense_threshold: int = settings.DENSE_COLUMN_THRESHOLD

    def default_width(self, column_count: int) -> float:
        if column_count < self.dense_threshold:
            return self.sparse_default
        return self.dense_default

    def auto_width(self, title: str, column_count: int) -> float:
        share = self.base_width / (column_count or 1)
        by_title = len(title or "") * self.per_char_width
        return min(self.max_auto_width, max(share, self.default_width(column_count), by_title))


DEFAULT_POLICY = WidthPolicy()


class WidthResolver:
    """Memoised width lookup for one column collection."""

    def __init__(self, columns: Sequence[Column], policy: WidthPolicy = DEFAULT_POLICY):
        self._columns = tuple(columns)
        self._policy = policy
        self._auto: Dict[str, float] = {}

    @property
    def policy(self) -> WidthPolicy:
        return self._policy

    @property
    def column_count(self) -> int:
        return len(self._columns)

    def _title_for(self, data_index: str) -> str:
        for col in self._columns:
            if col.data_index == data_index:
                return col.title
        return ""

    def auto_width(self, column: Column) -> float:
        data_index = column.data_index
        if data_index is None:
            return self._policy.auto_width(column.title, self.column_count)
        cached = self._auto.get(data_index)
        if cached is None:
            cached = self._policy.auto_width(self._title_for(data_index), self.column_count)
            self._auto[data_index] = cached
        return cached

    def width(self, column: Column) -> Size:
        if column.width:
            return column.width
        return self.auto_width(column)

    # header and body cells resolve through the same lookup
    header_width = width
    cell_width = width

    def numeric_width(self, column: Column) -> float:
        return numeric_width(self.width(column), self._policy.default_width(self.column_count))

    def widths(self) -> list[float]:
        return [self.numeric_width(col) for col in self._columns]


def numeric_width(width: Size, fallback: float) -> float:
    """Width as a number; pre-formatted strings count as ``fallback``."""
    if isinstance(width, bool) or not isinstance(width, (int, float)):
        return fallback
    return float(width)


def resolve_width(
    column: Column, columns: Sequence[Column], policy: Optional[WidthPolicy] = None
) -> Size:
    return WidthResolver(columns, policy or DEFAULT_POLICY).width(column)


def table_width(columns: Sequence[Column], policy: Optional[WidthPolicy] = None) -> float:
    """Total width using explicit widths or the density default."""
    policy = policy or DEFAULT_POLICY
    fallback = policy.default_width(len(columns))
    return sum(numeric_width(col.width, fallback) if col.width else fallback for col in columns)
