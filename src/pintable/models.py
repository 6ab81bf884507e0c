"""Domain models for the table engine.

Columns are immutable per render cycle: interactive sort changes produce a new
``Column`` through :func:`dataclasses.replace` instead of mutating the one the
host supplied. Rows stay opaque mappings and are never copied or modified.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Mapping, Optional, Tuple, Union

__all__ = [
    "SortOrder",
    "FixedSide",
    "Align",
    "Row",
    "Size",
    "Column",
    "ScrollConstraints",
    "ScrollLayout",
    "ColumnLayout",
    "TableProjection",
]

Row = Mapping[str, Any]
Size = Union[int, float, str]


class SortOrder(str, Enum):
    ASCEND = "ascend"
    DESCEND = "descend"
    UNSET = "unset"

    @classmethod
    def coerce(cls, value: Any) -> "SortOrder":
        if isinstance(value, SortOrder):
            return value
        if not value:
            return cls.UNSET
        try:
            return cls(str(value).lower())
        except ValueError:
            return cls.UNSET

    @property
    def is_set(self) -> bool:
        return self is not SortOrder.UNSET

    def next(self) -> "SortOrder":
        """Header click cycle: unset -> ascend -> descend -> unset."""
        return _SORT_CYCLE[(_SORT_CYCLE.index(self) + 1) % len(_SORT_CYCLE)]


_SORT_CYCLE = (SortOrder.UNSET, SortOrder.ASCEND, SortOrder.DESCEND)


class FixedSide(str, Enum):
    NONE = "none"
    LEFT = "left"
    RIGHT = "right"

    @classmethod
    def coerce(cls, value: Any) -> "FixedSide":
        if isinstance(value, FixedSide):
            return value
        if value is True:
            return cls.LEFT
        if not value:
            return cls.NONE
        try:
            return cls(str(value).lower())
        except ValueError:
            return cls.NONE


class Align(str, Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"

    @classmethod
    def coerce(cls, value: Any) -> Optional["Align"]:
        if value is None or isinstance(value, Align):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            return None


@dataclass(frozen=True)
class Column:
    """User supplied column definition.

    ``sorter`` is either a comparator ``(row_a, row_b, order) -> number`` or a
    flag. ``sort_level`` orders simultaneous sorts: higher levels are applied
    later and therefore dominate ties left by lower levels.
    """

    data_index: Optional[str] = None
    key: Optional[str] = None
    title: str = ""
    width: Optional[Size] = None
    align: Optional[Align] = None
    fixed: FixedSide = FixedSide.NONE
    sort: bool = False
    sorter: Union[Callable[..., Any], bool, None] = None
    sort_order: SortOrder = SortOrder.UNSET
    sort_level: Optional[int] = None
    render: Optional[Callable[[Any, Row, int], Any]] = None
    expandable: bool = True
    on_sort: Optional[Callable[[SortOrder], None]] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        # accept plain strings for the enum fields
        object.__setattr__(self, "align", Align.coerce(self.align))
        object.__setattr__(self, "fixed", FixedSide.coerce(self.fixed))
        object.__setattr__(self, "sort_order", SortOrder.coerce(self.sort_order))

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "Column":
        """Build a column from a plain mapping (camelCase or snake_case keys)."""

        def pick(*names: str, default: Any = None) -> Any:
            for name in names:
                if name in raw:
                    return raw[name]
            return default

        title = pick("title", default="")
        return cls(
            data_index=pick("data_index", "dataIndex"),
            key=pick("key"),
            title="" if title is None else str(title),
            width=pick("width"),
            align=Align.coerce(pick("align")),
            fixed=FixedSide.coerce(pick("fixed")),
            sort=bool(pick("sort", default=False)),
            sorter=pick("sorter"),
            sort_order=SortOrder.coerce(pick("sort_order", "sortOrder")),
            sort_level=pick("sort_level", "sortLevel"),
            render=pick("render"),
            expandable=pick("expandable", default=True) is not False,
            on_sort=pick("on_sort", "onSort"),
        )

    def identity(self, position: int) -> str:
        """Reconciliation identity, falling back to the column position."""
        ident = self.key or self.data_index
        return str(ident) if ident is not None else f"#{position}"

    @property
    def is_fixed(self) -> bool:
        return self.fixed is not FixedSide.NONE


@dataclass(frozen=True)
class ScrollConstraints:
    max_width: Optional[Size] = None
    max_height: Optional[Size] = None

    @classmethod
    def coerce(cls, value: Any) -> "ScrollConstraints":
        if isinstance(value, ScrollConstraints):
            return value
        if not value:
            return cls()
        return cls(
            max_width=value.get("max_width", value.get("x")),
            max_height=value.get("max_height", value.get("y")),
        )


@dataclass(frozen=True)
class ScrollLayout:
    max_width: Optional[Size] = None
    max_height: Optional[Size] = None
    scroll_x: bool = False
    scroll_y: bool = False


@dataclass(frozen=True)
class ColumnLayout:
    """Per-column layout handed to the rendering layer.

    ``fixed_offset`` is ``None`` for columns that are not pinned so a renderer
    can tell "not pinned" apart from "pinned flush against the edge".
    """

    column: Column
    index: int
    identity: str
    width: Size
    fixed_offset: Optional[Size]
    sort_order: SortOrder
    justify: Optional[str]
    text_align: str


@dataclass(frozen=True)
class TableProjection:
    columns: Tuple[ColumnLayout, ...]
    rows: Tuple[Row, ...]
    row_keys: Tuple[str, ...]
    expanded: bool
    loading: bool
    table_width: Size
    scroll: ScrollLayout

    @property
    def columns_empty(self) -> bool:
        return not self.columns

    @property
    def rows_empty(self) -> bool:
        return not self.rows
