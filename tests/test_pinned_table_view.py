from PyQt6.QtWidgets import QLabel

from pintable.models import Column, FixedSide
from pintable.services.dpi_scaling_service import DpiScalingService
from pintable.services.event_bus import EventBus, TableEvent
from pintable.services.size_format import SizeFormatter
from pintable.viewmodels.table_controller import TableController
from pintable.views.pinned_table_view import FIXED_OFFSET_ROLE, PinnedTableView


def _controller(rows, **kwargs):
    cols = [
        Column(data_index="name", title="Name", width=60, fixed=FixedSide.LEFT, sort=True),
        Column(data_index="score", title="Score", width=40, sort=True),
    ]
    return TableController(
        cols, rows, row_key="id", size_formatter=SizeFormatter(scale=1, multiplier=1), **kwargs
    )


def test_header_click_sorts_rows(qapp, score_rows):
    view = PinnedTableView(_controller(score_rows))
    emitted = []
    view.rowsChanged.connect(emitted.append)
    assert view.column_texts(0) == ["Gamma", "Alpha", "Beta", "Delta"]
    view._on_header_clicked(1)
    assert view.column_texts(1) == ["2", "7", "10", "10"]
    assert view.header_texts() == ["Name", "Score ▲"]
    assert [r["id"] for r in emitted[-1]] == [2, 4, 1, 3]


def test_widths_and_fixed_offsets_applied(qapp, score_rows):
    view = PinnedTableView(_controller(score_rows))
    assert view.table.columnWidth(0) == 60
    assert view.table.horizontalHeaderItem(0).data(FIXED_OFFSET_ROLE) == 0
    assert view.table.horizontalHeaderItem(1).data(FIXED_OFFSET_ROLE) is None


def test_cell_click_toggles_expansion(qapp, score_rows):
    ctl = _controller(score_rows)
    view = PinnedTableView(ctl)
    view._on_cell_clicked(0, 1)
    assert ctl.expanded is True
    assert view.table.wordWrap() is True


def test_empty_rows_show_placeholder(qapp):
    view = PinnedTableView(_controller([]))
    assert view.is_empty_state_active()
    assert view.empty_state.template_key() == "no_rows"


def test_loading_placeholder(qapp, score_rows):
    ctl = _controller(score_rows, loading=True)
    view = PinnedTableView(ctl)
    assert view.empty_state.template_key() == "loading"
    ctl.update(loading=False)
    view.refresh()
    assert not view.is_empty_state_active()


def test_dpi_change_refreshes_widths(qapp, score_rows):
    bus = EventBus()
    fmt = SizeFormatter(scale=1, multiplier=1)
    fmt.follow(bus)
    cols = [Column(data_index="name", title="Name", width=60)]
    ctl = TableController(cols, score_rows, event_bus=bus, size_formatter=fmt)
    view = PinnedTableView(ctl)
    bus.publish(TableEvent.DPI_SCALE_CHANGED, {"scale": 2.0})
    assert view.table.columnWidth(0) == 120


def test_dpi_change_reaches_view_whatever_the_subscription_order(qapp, score_rows):
    bus = EventBus()
    fmt = SizeFormatter(scale=1, multiplier=1)
    cols = [Column(data_index="name", title="Name", width=60)]
    ctl = TableController(cols, score_rows, event_bus=bus, size_formatter=fmt)
    view = PinnedTableView(ctl)
    fmt.follow(bus)
    bus.publish(TableEvent.DPI_SCALE_CHANGED, {"scale": 2.0})
    assert view.table.columnWidth(0) == 120


def test_direct_scale_change_refreshes_widths(qapp, score_rows):
    ctl = _controller(score_rows)
    view = PinnedTableView(ctl)
    ctl.size_formatter.scale = 1.5
    assert view.table.columnWidth(0) == 90
    assert view.table.columnWidth(1) == 60


def test_dpi_service_drives_view_widths(qapp, score_rows):
    scale = {"value": 1.0}
    svc = DpiScalingService(EventBus(), get_scale=lambda: scale["value"])
    ctl = _controller(score_rows)
    view = PinnedTableView(ctl, dpi_service=svc)
    assert view.table.columnWidth(0) == 60
    scale["value"] = 1.5
    svc._emit_if_changed()
    assert view.table.columnWidth(0) == 90
    assert ctl.size_formatter.scale == 1.5


def test_dpi_service_applies_current_scale_on_attach(qapp, score_rows):
    svc = DpiScalingService(EventBus(), get_scale=lambda: 2.0)
    view = PinnedTableView(_controller(score_rows), dpi_service=svc)
    assert view.table.columnWidth(0) == 120


def test_resorting_drops_stale_cell_widgets(qapp, score_rows):
    def badge(value, row, _index):
        return QLabel(value) if row["id"] == 2 else value

    cols = [
        Column(data_index="name", title="Name", width=60, render=badge),
        Column(data_index="score", title="Score", width=40, sort=True),
    ]
    ctl = TableController(
        cols, score_rows, row_key="id", size_formatter=SizeFormatter(scale=1, multiplier=1)
    )
    view = PinnedTableView(ctl)
    assert isinstance(view.table.cellWidget(1, 0), QLabel)
    view._on_header_clicked(1)
    # score ascend puts id 2 first
    assert isinstance(view.table.cellWidget(0, 0), QLabel)
    assert view.table.cellWidget(0, 0).text() == "Alpha"
    for r in range(1, 4):
        assert view.table.cellWidget(r, 0) is None
    assert view.table.item(1, 0).text() == "Delta"
