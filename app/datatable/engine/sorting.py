"""Single-key sorting with per-comparison type detection.

Columns do not declare a type. Each pair of values is compared by the first
rule both sides qualify for: numeric, then date, then case-insensitive text.
Missing values (``None`` or an absent field) always sort after present ones in
both directions, and ties keep their input order.
"""
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from functools import cmp_to_key
from typing import Any

from app.datatable.engine.models import Record, SortDirective
from app.datatable.engine.values import parse_datetime, parse_number, to_text


@dataclass(frozen=True)
class _SortValue:
    missing: bool
    number: float | None
    moment: datetime | None
    text: str

    @classmethod
    def classify(cls, value: Any) -> "_SortValue":
        if value is None:
            return cls(missing=True, number=None, moment=None, text="")
        return cls(
            missing=False,
            number=parse_number(value),
            moment=parse_datetime(value),
            text=to_text(value).lower(),
        )


def _cmp(left: Any, right: Any) -> int:
    return (left > right) - (left < right)


def _compare_present(left: _SortValue, right: _SortValue) -> int:
    if left.number is not None and right.number is not None:
        return _cmp(left.number, right.number)
    if left.moment is not None and right.moment is not None:
        return _cmp(left.moment, right.moment)
    return _cmp(left.text, right.text)


def compare_values(left: Any, right: Any, direction: str = "asc") -> int:
    """Compare two field values for display order under ``direction``."""

    return _compare_classified(_SortValue.classify(left), _SortValue.classify(right), direction == "desc")


def _compare_classified(left: _SortValue, right: _SortValue, descending: bool) -> int:
    if left.missing or right.missing:
        return _cmp(left.missing, right.missing)
    result = _compare_present(left, right)
    return -result if descending else result


def sort_rows(rows: Iterable[Record], directive: SortDirective | None, field: str | None = None) -> list[Record]:
    """Return a stably sorted copy of ``rows``.

    ``field`` is the record field to read and defaults to ``directive.key``;
    callers pass a column's source field when the sort key is a column key.
    """

    items = list(rows)
    if directive is None:
        return items
    read = field or directive.key
    descending = directive.direction == "desc"
    keyed = [(_SortValue.classify(row.get(read)), row) for row in items]

    def _compare(left: tuple[_SortValue, Record], right: tuple[_SortValue, Record]) -> int:
        return _compare_classified(left[0], right[0], descending)

    keyed.sort(key=cmp_to_key(_compare))
    return [row for _, row in keyed]


def toggle_sort(current: SortDirective | None, key: str) -> SortDirective:
    """Next directive after a header click on ``key``.

    Clicking the active ascending column flips it to descending; any other
    click sorts ``key`` ascending.
    """

    if current is not None and current.key == key and current.direction == "asc":
        return SortDirective(key=key, direction="desc")
    return SortDirective(key=key, direction="asc")
