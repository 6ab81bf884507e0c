"""PinnedTableView

QTableWidget-based renderer for a :class:`TableController`. The view paints
the controller's projection as is: widths, sort indicators, alignment and the
expansion flag come from the projection, and header/cell clicks are routed
back to the controller instead of touching the rows directly.

Pinning offsets are exposed on each header item under ``FIXED_OFFSET_ROLE``
for delegates or overlays that draw frozen columns.
"""

from __future__ import annotations
from typing import Optional

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtWidgets import QHeaderView, QTableWidget, QTableWidgetItem, QVBoxLayout, QWidget

from pintable.components.empty_state import EmptyStateWidget, template_key_for
from pintable.models import SortOrder, TableProjection
from pintable.services.dpi_scaling_service import DpiScalingService
from pintable.services.event_bus import Event, TableEvent
from pintable.viewmodels.table_controller import TableController, render_cell

__all__ = ["PinnedTableView", "FIXED_OFFSET_ROLE"]

FIXED_OFFSET_ROLE = Qt.ItemDataRole.UserRole.value + 1

_SORT_MARKS = {SortOrder.ASCEND: " ▲", SortOrder.DESCEND: " ▼", SortOrder.UNSET: ""}
_TEXT_ALIGN = {
    "left": Qt.AlignmentFlag.AlignLeft,
    "center": Qt.AlignmentFlag.AlignHCenter,
    "right": Qt.AlignmentFlag.AlignRight,
}
_COLLAPSED_ROW_HEIGHT = 28


class PinnedTableView(QWidget):
    rowsChanged = pyqtSignal(list)

    def __init__(
        self,
        controller: TableController,
        parent: Optional[QWidget] = None,
        *,
        dpi_service: Optional[DpiScalingService] = None,
    ):
        super().__init__(parent)
        self.controller = controller
        self._build_ui()
        bus = controller.event_bus
        bus.subscribe(TableEvent.ROWS_CHANGED, self._on_rows_changed)
        bus.subscribe(TableEvent.EXPANSION_TOGGLED, lambda _evt: self.refresh())
        # repaint once the formatter holds the new scale
        controller.size_formatter.on_scale_changed(lambda _scale: self.refresh())
        if dpi_service is not None:
            dpi_service.attach(controller.size_formatter)
        self.refresh()

    def _build_ui(self):
        root = QVBoxLayout(self)
        self.table = QTableWidget(0, 0)
        header = self.table.horizontalHeader()
        header.setSectionResizeMode(QHeaderView.ResizeMode.Interactive)
        header.sectionClicked.connect(self._on_header_clicked)  # type: ignore
        self.table.cellClicked.connect(self._on_cell_clicked)  # type: ignore
        root.addWidget(self.table)
        self.empty_state = EmptyStateWidget("no_rows")
        self.empty_state.setObjectName("pinnedTableEmptyState")
        root.addWidget(self.empty_state)

    # Controller callbacks ---------------------------------------------
    def _on_rows_changed(self, evt: Event):
        self.refresh()
        self.rowsChanged.emit(list(evt.payload))

    def _on_header_clicked(self, logical_index: int):
        self.controller.on_header_click(logical_index)
        # sort indicator may change without a row order change
        self.refresh()

    def _on_cell_clicked(self, row: int, column: int):
        self.controller.on_cell_click(column, row)

    # Painting ---------------------------------------------------------
    def refresh(self):
        projection = self.controller.view()
        self._populate_header(projection)
        self._populate_body(projection)
        self._apply_scroll(projection)
        placeholder = template_key_for(projection)
        if placeholder is None:
            self.empty_state.hide()
        else:
            self.empty_state.set_template(placeholder)
            self.empty_state.show()
        self.table.setVisible(not projection.columns_empty)

    def _populate_header(self, projection: TableProjection):
        self.table.setColumnCount(len(projection.columns))
        header = self.table.horizontalHeader()
        for layout in projection.columns:
            item = QTableWidgetItem(layout.column.title + _SORT_MARKS[layout.sort_order])
            item.setData(FIXED_OFFSET_ROLE, layout.fixed_offset)
            if layout.justify == "flex-start":
                item.setTextAlignment(Qt.AlignmentFlag.AlignLeft | Qt.AlignmentFlag.AlignVCenter)
            elif layout.justify == "flex-end":
                item.setTextAlignment(Qt.AlignmentFlag.AlignRight | Qt.AlignmentFlag.AlignVCenter)
            self.table.setHorizontalHeaderItem(layout.index, item)
            if isinstance(layout.width, (int, float)):
                header.resizeSection(layout.index, int(layout.width))

    def _populate_body(self, projection: TableProjection):
        self.table.setRowCount(len(projection.rows))
        self.table.setVerticalHeaderLabels(list(projection.row_keys))
        for r, row in enumerate(projection.rows):
            for layout in projection.columns:
                content = render_cell(layout.column, row, r)
                if isinstance(content, QWidget):
                    self.table.setCellWidget(r, layout.index, content)
                    continue
                if self.table.cellWidget(r, layout.index) is not None:
                    self.table.removeCellWidget(r, layout.index)
                item = QTableWidgetItem(str(content))
                item.setTextAlignment(
                    _TEXT_ALIGN.get(layout.text_align, Qt.AlignmentFlag.AlignHCenter)
                    | Qt.AlignmentFlag.AlignVCenter
                )
                item.setFlags(item.flags() & ~Qt.ItemFlag.ItemIsEditable)
                self.table.setItem(r, layout.index, item)
        self.table.setWordWrap(projection.expanded)
        if projection.expanded:
            self.table.resizeRowsToContents()
        else:
            for r in range(len(projection.rows)):
                self.table.setRowHeight(r, _COLLAPSED_ROW_HEIGHT)

    def _apply_scroll(self, projection: TableProjection):
        scroll = projection.scroll
        policy_on = Qt.ScrollBarPolicy.ScrollBarAsNeeded
        policy_off = Qt.ScrollBarPolicy.ScrollBarAlwaysOff
        self.table.setHorizontalScrollBarPolicy(policy_on if scroll.scroll_x else policy_off)
        self.table.setVerticalScrollBarPolicy(policy_on if scroll.scroll_y else policy_off)
        if isinstance(scroll.max_width, (int, float)):
            self.table.setMaximumWidth(int(scroll.max_width))
        if isinstance(scroll.max_height, (int, float)):
            self.table.setMaximumHeight(int(scroll.max_height))

    # Testing helper -------------------------------------------------
    def header_texts(self) -> list[str]:
        return [
            self.table.horizontalHeaderItem(c).text() for c in range(self.table.columnCount())
        ]

    def column_texts(self, column: int) -> list[str]:
        out = []
        for r in range(self.table.rowCount()):
            item = self.table.item(r, column)
            out.append(item.text() if item else "")
        return out

    def is_empty_state_active(self) -> bool:
        return not self.empty_state.isHidden()
