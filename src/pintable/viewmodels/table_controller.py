"""Table controller: sort state, expansion state and the render projection.

State lives in an immutable :class:`TableState`. The module level functions
``apply_external_update``, ``apply_header_click`` and ``apply_cell_click`` are
pure transitions returning a new state (or the same object when nothing
changed). :class:`TableController` holds the current state, publishes changes
on an :class:`EventBus` and builds the :class:`TableProjection` that the
rendering layer paints without further computation.

Row order is always derived from the externally supplied rows, never from a
previously sorted copy, so clearing every sort restores the original order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence, Tuple, Union

from pintable.config import settings
from pintable.models import (
    Align,
    Column,
    ColumnLayout,
    Row,
    ScrollConstraints,
    ScrollLayout,
    SortOrder,
    TableProjection,
)
from pintable.services.event_bus import Event, EventBus, TableEvent
from pintable.services.fixed_offset import fixed_offset
from pintable.services.multi_column_sort import sort_rows
from pintable.services.size_format import SizeFormatter
from pintable.services.width_resolver import DEFAULT_POLICY, WidthPolicy, WidthResolver, table_width

__all__ = [
    "TableState",
    "coerce_columns",
    "initial_state",
    "apply_external_update",
    "apply_header_click",
    "apply_cell_click",
    "render_cell",
    "TableController",
]

_log = logging.getLogger(__name__)

ColumnInput = Union[Column, Mapping[str, Any]]

JUSTIFY_MAP = {
    Align.LEFT: "flex-start",
    Align.CENTER: "center",
    Align.RIGHT: "flex-end",
}


@dataclass(frozen=True)
class TableState:
    source_columns: Tuple[Column, ...]
    source_rows: Tuple[Row, ...]
    columns: Tuple[Column, ...]
    rows: Tuple[Row, ...]
    expanded: bool = False
    loading: bool = False
    multiple_sort: bool = False


def _as_tuple(value: Any, what: str) -> tuple:
    if value is None:
        return ()
    if isinstance(value, (str, bytes, Mapping)) or not isinstance(value, Iterable):
        raise TypeError(f"{what} must be a sequence, got {type(value).__name__}")
    return tuple(value)


def coerce_columns(columns: Optional[Iterable[ColumnInput]]) -> Tuple[Column, ...]:
    """Normalise column input, accepting ``Column`` objects or plain mappings."""
    result = tuple(
        col if isinstance(col, Column) else Column.from_mapping(col)
        for col in _as_tuple(columns, "columns")
    )
    seen: set[str] = set()
    for pos, col in enumerate(result):
        ident = col.identity(pos)
        if ident in seen:
            _log.warning("Duplicate column identity %r at position %d", ident, pos)
        seen.add(ident)
    return result


def initial_state(
    columns: Optional[Iterable[ColumnInput]] = None,
    rows: Optional[Iterable[Row]] = None,
    *,
    loading: bool = False,
    multiple_sort: bool = False,
) -> TableState:
    cols = coerce_columns(columns)
    src_rows = _as_tuple(rows, "rows")
    return TableState(
        source_columns=cols,
        source_rows=src_rows,
        columns=cols,
        rows=tuple(sort_rows(cols, src_rows)),
        loading=loading,
        multiple_sort=multiple_sort,
    )


def apply_external_update(
    state: TableState,
    columns: Optional[Iterable[ColumnInput]] = None,
    rows: Optional[Iterable[Row]] = None,
    *,
    loading: Optional[bool] = None,
    multiple_sort: Optional[bool] = None,
) -> TableState:
    """Fold new host props into ``state``.

    Columns and rows are compared structurally: re-supplying equal values
    keeps the working copy, including any interactive sort state.
    """
    changes: dict[str, Any] = {}
    if columns is not None:
        cols = coerce_columns(columns)
        if cols != state.source_columns:
            changes["source_columns"] = cols
            changes["columns"] = cols
    if rows is not None:
        src_rows = _as_tuple(rows, "rows")
        if list(src_rows) != list(state.source_rows):
            changes["source_rows"] = src_rows
    if loading is not None and loading != state.loading:
        changes["loading"] = loading
    if multiple_sort is not None and multiple_sort != state.multiple_sort:
        changes["multiple_sort"] = multiple_sort
    if not changes:
        return state
    if "columns" in changes or "source_rows" in changes:
        changes["rows"] = tuple(
            sort_rows(
                changes.get("columns", state.columns),
                changes.get("source_rows", state.source_rows),
            )
        )
    return replace(state, **changes)


def apply_header_click(state: TableState, column_index: int) -> TableState:
    """Advance the sort order of one column: unset -> ascend -> descend -> unset.

    Ignored while loading, for non-sortable columns and for unknown indices.
    Without ``multiple_sort`` every other column is reset to unset first.
    """
    if state.loading or not 0 <= column_index < len(state.columns):
        _log.debug("Header click on %d ignored", column_index)
        return state
    target = state.columns[column_index]
    if not target.sort:
        _log.debug("Header click on non-sortable column %d ignored", column_index)
        return state
    next_order = target.sort_order.next()
    columns = []
    for i, col in enumerate(state.columns):
        if i == column_index:
            col = replace(col, sort_order=next_order)
        elif not state.multiple_sort and col.sort_order.is_set:
            col = replace(col, sort_order=SortOrder.UNSET)
        columns.append(col)
    cols = tuple(columns)
    return replace(state, columns=cols, rows=tuple(sort_rows(cols, state.source_rows)))


def apply_cell_click(state: TableState, column_index: int, row_index: int) -> TableState:
    """Flip the table-wide expansion flag when the clicked column is expandable."""
    if not 0 <= column_index < len(state.columns) or not 0 <= row_index < len(state.rows):
        return state
    if not state.columns[column_index].expandable:
        return state
    return replace(state, expanded=not state.expanded)


def render_cell(column: Column, row: Row, row_index: int) -> Any:
    """Display content for one cell.

    ``render`` output that is a plain scalar is cast to text; richer objects
    (widgets, markup trees) are handed to the renderer unchanged.
    """
    value = row.get(column.data_index, "") if column.data_index is not None else ""
    if column.render is None:
        return str(value)
    result = column.render(value, row, row_index)
    if result is None:
        return ""
    if isinstance(result, (str, int, float, bool)):
        return str(result)
    return result


def _same_order(a: Sequence[Row], b: Sequence[Row]) -> bool:
    return len(a) == len(b) and all(x is y for x, y in zip(a, b))


class TableController:
    """Owns the working columns/rows of one table.

    ``on_change`` receives the ordered row list whenever the visible order
    changes (including the initial ordering). It is delivered through the
    event bus, so a failing callback is recorded in ``event_bus.errors``
    instead of breaking the interaction that triggered it.
    """

    def __init__(
        self,
        columns: Optional[Iterable[ColumnInput]] = None,
        rows: Optional[Iterable[Row]] = None,
        *,
        row_key: str = "",
        loading: bool = False,
        multiple_sort: bool = False,
        scroll: Any = None,
        on_change: Optional[Callable[[list], None]] = None,
        event_bus: Optional[EventBus] = None,
        width_policy: WidthPolicy = DEFAULT_POLICY,
        size_formatter: Optional[SizeFormatter] = None,
    ) -> None:
        self.event_bus = event_bus or EventBus()
        self.row_key = row_key
        self.scroll = ScrollConstraints.coerce(scroll)
        self.width_policy = width_policy
        self.size_formatter = size_formatter or SizeFormatter()
        self._view_cache: Optional[Tuple[TableState, tuple, TableProjection]] = None
        if on_change is not None:
            self.event_bus.subscribe(TableEvent.ROWS_CHANGED, lambda evt: on_change(evt.payload))
        self.event_bus.subscribe(TableEvent.SORT_CHANGED, self._dispatch_on_sort)
        self._state = initial_state(columns, rows, loading=loading, multiple_sort=multiple_sort)
        self.event_bus.publish(TableEvent.ROWS_CHANGED, list(self._state.rows))

    # State ------------------------------------------------------------
    @property
    def state(self) -> TableState:
        return self._state

    @property
    def expanded(self) -> bool:
        return self._state.expanded

    def rows(self) -> list[Row]:
        return list(self._state.rows)

    def columns(self) -> list[Column]:
        return list(self._state.columns)

    def _commit(self, new_state: TableState) -> bool:
        old = self._state
        if new_state is old:
            return False
        self._state = new_state
        if not _same_order(old.rows, new_state.rows):
            self.event_bus.publish(TableEvent.ROWS_CHANGED, list(new_state.rows))
        if old.expanded != new_state.expanded:
            self.event_bus.publish(TableEvent.EXPANSION_TOGGLED, {"expanded": new_state.expanded})
        return True

    # Host entry points ------------------------------------------------
    def update(
        self,
        columns: Optional[Iterable[ColumnInput]] = None,
        rows: Optional[Iterable[Row]] = None,
        *,
        loading: Optional[bool] = None,
        multiple_sort: Optional[bool] = None,
        scroll: Any = None,
    ) -> bool:
        if scroll is not None:
            self.scroll = ScrollConstraints.coerce(scroll)
        return self._commit(
            apply_external_update(
                self._state, columns, rows, loading=loading, multiple_sort=multiple_sort
            )
        )

    # Rendering layer entry points -------------------------------------
    def on_header_click(self, column_index: int) -> bool:
        changed = self._commit(apply_header_click(self._state, column_index))
        if changed:
            column = self._state.columns[column_index]
            self.event_bus.publish(
                TableEvent.SORT_CHANGED,
                {
                    "index": column_index,
                    "identity": column.identity(column_index),
                    "sort_order": column.sort_order,
                    "column": column,
                },
            )
        return changed

    def on_cell_click(self, column_index: int, row_index: int) -> bool:
        return self._commit(apply_cell_click(self._state, column_index, row_index))

    def _dispatch_on_sort(self, evt: Event) -> None:
        column: Column = evt.payload["column"]
        if column.on_sort is not None:
            column.on_sort(evt.payload["sort_order"])

    # Projection -------------------------------------------------------
    def row_key_of(self, row: Row, position: int) -> str:
        value = row.get(self.row_key) if self.row_key else None
        return str(value) if value is not None else str(position)

    def view(self) -> TableProjection:
        settings_key = (self.scroll, self.size_formatter.scale, self.width_policy)
        if self._view_cache is not None:
            state, cached_key, projection = self._view_cache
            if state is self._state and cached_key == settings_key:
                return projection
        projection = self._build_view()
        self._view_cache = (self._state, settings_key, projection)
        return projection

    def _build_view(self) -> TableProjection:
        state = self._state
        fmt = self.size_formatter
        resolver = WidthResolver(state.columns, self.width_policy)
        widths = resolver.widths()
        layouts = tuple(
            ColumnLayout(
                column=col,
                index=i,
                identity=col.identity(i),
                width=fmt(resolver.width(col)),
                fixed_offset=fmt(fixed_offset(col.fixed, i, widths)),
                sort_order=col.sort_order,
                justify=JUSTIFY_MAP.get(col.align) if col.align else None,
                text_align=col.align.value if col.align else settings.DEFAULT_CELL_ALIGN,
            )
            for i, col in enumerate(state.columns)
        )
        max_width = fmt(self.scroll.max_width)
        max_height = fmt(self.scroll.max_height)
        return TableProjection(
            columns=layouts,
            rows=state.rows,
            row_keys=tuple(self.row_key_of(row, i) for i, row in enumerate(state.rows)),
            expanded=state.expanded,
            loading=state.loading,
            table_width=fmt(table_width(state.columns, self.width_policy)),
            scroll=ScrollLayout(
                max_width=max_width,
                max_height=max_height,
                scroll_x=bool(state.rows) and bool(max_width),
                scroll_y=bool(max_height),
            ),
        )
