import logging

from pintable.models import Column, SortOrder
from pintable.services import comparator
from pintable.services.comparator import set_collation_locale
from pintable.services.multi_column_sort import build_sort_spec, sort_rows


def _ids(rows):
    return [r["id"] for r in rows]


def test_numeric_string_scenario():
    rows = [{"id": 1, "score": "10"}, {"id": 2, "score": "2"}]
    cols = [Column(data_index="score", sort=True, sort_order=SortOrder.ASCEND)]
    assert _ids(sort_rows(cols, rows)) == [2, 1]


def test_string_descend_keeps_order():
    rows = [{"name": "b"}, {"name": "a"}]
    cols = [Column(data_index="name", sort=True, sort_order=SortOrder.DESCEND)]
    assert sort_rows(cols, rows) == [{"name": "b"}, {"name": "a"}]


def test_no_active_sort_returns_input_order(score_rows):
    cols = [Column(data_index="score", sort=True), Column(data_index="name")]
    result = sort_rows(cols, score_rows)
    assert result == score_rows
    assert all(a is b for a, b in zip(result, score_rows))


def test_input_is_not_mutated(score_rows):
    before = list(score_rows)
    sort_rows([Column(data_index="score", sort_order=SortOrder.ASCEND)], score_rows)
    assert score_rows == before


def test_empty_rows():
    assert sort_rows([Column(data_index="x", sort_order=SortOrder.ASCEND)], []) == []


def test_stability_on_equal_keys(score_rows):
    cols = [Column(data_index="score", sort_order=SortOrder.DESCEND)]
    # Gamma (id 1) and Beta (id 3) tie on "10"; input order is kept
    assert _ids(sort_rows(cols, score_rows)) == [1, 3, 4, 2]


def test_priority_composition(score_rows):
    a = Column(data_index="score", sort_order=SortOrder.ASCEND, sort_level=0)
    b = Column(data_index="group", sort_order=SortOrder.DESCEND, sort_level=1)
    expected = sort_rows([b], sort_rows([a], score_rows))
    assert sort_rows([a, b], score_rows) == expected
    # group dominates, score breaks ties inside a group
    assert _ids(expected) == [4, 1, 2, 3]


def test_level_not_position_decides_application_order(score_rows):
    strong = Column(data_index="group", sort_order=SortOrder.ASCEND, sort_level=5)
    weak = Column(data_index="score", sort_order=SortOrder.DESCEND, sort_level=1)
    assert _ids(sort_rows([strong, weak], score_rows)) == [3, 2, 1, 4]


def test_equal_levels_apply_in_column_order():
    cols = [
        Column(data_index="a", sort_order=SortOrder.ASCEND, sort_level=1),
        Column(data_index="b", sort_order=SortOrder.ASCEND, sort_level=1),
        Column(data_index="c", sort_order=SortOrder.ASCEND),
    ]
    spec = build_sort_spec(cols)
    assert [d.data_index for d in spec] == ["c", "a", "b"]
    assert [d.position for d in spec] == [2, 0, 1]


def test_noop_sorter_does_not_break_other_passes(score_rows):
    cols = [
        Column(data_index="score", sort_order=SortOrder.ASCEND, sort_level=0),
        Column(data_index="name", sorter=42, sort_order=SortOrder.ASCEND, sort_level=1),
    ]
    assert _ids(sort_rows(cols, score_rows)) == [2, 4, 1, 3]


def test_equal_levels_are_reported(caplog):
    cols = [
        Column(data_index="a", sort_order=SortOrder.ASCEND, sort_level=1),
        Column(data_index="b", sort_order=SortOrder.DESCEND, sort_level=1),
    ]
    with caplog.at_level(logging.WARNING, logger="pintable.services.multi_column_sort"):
        build_sort_spec(cols)
    records = [r for r in caplog.records if "share a sort_level" in r.getMessage()]
    assert len(records) == 1
    assert records[0].levelno == logging.WARNING


def test_distinct_levels_are_not_reported(caplog):
    cols = [
        Column(data_index="a", sort_order=SortOrder.ASCEND, sort_level=1),
        Column(data_index="b", sort_order=SortOrder.ASCEND, sort_level=2),
    ]
    with caplog.at_level(logging.WARNING, logger="pintable.services.multi_column_sort"):
        build_sort_spec(cols)
    assert "share a sort_level" not in caplog.text


def test_mixed_case_names_sort_letter_first():
    previous = comparator._collator.locale()
    set_collation_locale("en_US")
    try:
        rows = [{"n": "b"}, {"n": "B"}, {"n": "a"}, {"n": "A"}]
        cols = [Column(data_index="n", sort=True, sort_order=SortOrder.ASCEND)]
        assert [r["n"] for r in sort_rows(cols, rows)] == ["a", "A", "b", "B"]
    finally:
        set_collation_locale(previous)
