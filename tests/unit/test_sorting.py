from datetime import date

import pytest

from app.datatable.engine.models import SortDirective, TableConfigError
from app.datatable.engine.sorting import compare_values, sort_rows, toggle_sort


def _values(rows, key: str = "v") -> list:
    return [row[key] for row in rows]


def _rows(*values) -> list[dict]:
    return [{"id": index, "v": value} for index, value in enumerate(values)]


def test_numbers_compare_numerically() -> None:
    rows = _rows(10, 9, 100, 1.5)
    assert _values(sort_rows(rows, SortDirective("v"))) == [1.5, 9, 10, 100]
    assert _values(sort_rows(rows, SortDirective("v", "desc"))) == [100, 10, 9, 1.5]


def test_numeric_strings_compare_numerically() -> None:
    rows = _rows("10", "9", "100")
    assert _values(sort_rows(rows, SortDirective("v"))) == ["9", "10", "100"]


def test_dates_compare_by_timestamp() -> None:
    rows = _rows("2024-03-01", "2023-12-31T23:00:00Z", date(2024, 1, 15))
    assert _values(sort_rows(rows, SortDirective("v"))) == ["2023-12-31T23:00:00Z", date(2024, 1, 15), "2024-03-01"]


def test_strings_compare_case_insensitively() -> None:
    rows = _rows("beta", "Alpha", "charlie", "ALPHA2")
    assert _values(sort_rows(rows, SortDirective("v"))) == ["Alpha", "ALPHA2", "beta", "charlie"]


def test_mixed_types_fall_back_to_text() -> None:
    rows = _rows(10, "abc", 2)
    assert _values(sort_rows(rows, SortDirective("v"))) == [2, 10, "abc"]
    assert compare_values(10, "abc") < 0


@pytest.mark.parametrize("direction", ["asc", "desc"])
def test_missing_values_sort_last_in_both_directions(direction) -> None:
    rows = [{"id": 1, "v": None}, {"id": 2, "v": 5}, {"id": 3}, {"id": 4, "v": 1}]
    ordered = sort_rows(rows, SortDirective("v", direction))
    assert [row["id"] for row in ordered][2:] == [1, 3]
    assert compare_values(None, 1, direction) > 0
    assert compare_values(1, None, direction) < 0


def test_ties_keep_input_order_in_both_directions() -> None:
    rows = [
        {"id": "a", "v": 2},
        {"id": "b", "v": 1},
        {"id": "c", "v": 2},
        {"id": "d", "v": 1},
    ]
    ascending = sort_rows(rows, SortDirective("v", "asc"))
    descending = sort_rows(rows, SortDirective("v", "desc"))
    assert [row["id"] for row in ascending] == ["b", "d", "a", "c"]
    assert [row["id"] for row in descending] == ["a", "c", "b", "d"]


def test_sort_without_directive_returns_copy() -> None:
    rows = _rows(3, 1, 2)
    result = sort_rows(rows, None)
    assert result == rows
    assert result is not rows


def test_sort_reads_explicit_field() -> None:
    rows = [{"company": {"name": "x"}, "company_name": "b"}, {"company": {"name": "y"}, "company_name": "a"}]
    ordered = sort_rows(rows, SortDirective("company"), field="company_name")
    assert _values(ordered, "company_name") == ["a", "b"]


def test_sort_does_not_mutate_input() -> None:
    rows = _rows(3, 1, 2)
    sort_rows(rows, SortDirective("v"))
    assert _values(rows) == [3, 1, 2]


def test_toggle_sort_state_machine() -> None:
    first = toggle_sort(None, "amount")
    assert first == SortDirective("amount", "asc")
    second = toggle_sort(first, "amount")
    assert second == SortDirective("amount", "desc")
    third = toggle_sort(second, "amount")
    assert third == SortDirective("amount", "asc")
    other = toggle_sort(second, "name")
    assert other == SortDirective("name", "asc")


def test_sort_directive_rejects_unknown_direction() -> None:
    with pytest.raises(TableConfigError):
        SortDirective("amount", "up")


def test_huge_ints_fall_back_to_text_comparison() -> None:
    rows = [{"v": 10**400}, {"v": 1}]
    assert sort_rows(rows, SortDirective("v")) == [{"v": 1}, {"v": 10**400}]
    assert compare_values(10**400, 2) < 0
