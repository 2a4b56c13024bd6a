"""Advanced filters: one typed value per filter kind plus record evaluation.

Each kind is a frozen dataclass that knows how to build itself from a raw
(form/JSON) value, whether it currently constrains anything, and whether a
single field value satisfies it. A raw value of the wrong shape never raises;
it produces an inert filter (or an absent bound for range kinds).
"""
from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any, ClassVar

from app.datatable.engine.models import FilterField, FilterKind, Record, TableSchema
from app.datatable.engine.values import is_blank, is_truthy, parse_datetime, parse_number, to_text


def _strict_equal(left: Any, right: Any) -> bool:
    if isinstance(left, bool) or isinstance(right, bool):
        return left is right
    return left == right


class FilterValue:
    kind: ClassVar[FilterKind]

    @classmethod
    def from_raw(cls, raw: Any) -> "FilterValue":
        raise NotImplementedError

    def is_active(self) -> bool:
        raise NotImplementedError

    def matches(self, value: Any) -> bool:
        raise NotImplementedError


@dataclass(frozen=True)
class TextFilter(FilterValue):
    kind: ClassVar[FilterKind] = FilterKind.TEXT
    text: str = ""

    @classmethod
    def from_raw(cls, raw: Any) -> "TextFilter":
        if raw is None or isinstance(raw, (list, tuple, dict, set)):
            return cls()
        return cls(text=to_text(raw))

    def is_active(self) -> bool:
        return self.text != ""

    def matches(self, value: Any) -> bool:
        return self.text.lower() in to_text(value).lower()


@dataclass(frozen=True)
class SingleSelectFilter(FilterValue):
    kind: ClassVar[FilterKind] = FilterKind.SINGLE_SELECT
    selected: Any = None

    @classmethod
    def from_raw(cls, raw: Any) -> "SingleSelectFilter":
        if isinstance(raw, (list, tuple, dict, set)):
            return cls()
        return cls(selected=raw)

    def is_active(self) -> bool:
        return not is_blank(self.selected)

    def matches(self, value: Any) -> bool:
        return _strict_equal(value, self.selected)


@dataclass(frozen=True)
class MultiSelectFilter(FilterValue):
    kind: ClassVar[FilterKind] = FilterKind.MULTI_SELECT
    selected: tuple[Any, ...] = ()

    @classmethod
    def from_raw(cls, raw: Any) -> "MultiSelectFilter":
        if is_blank(raw) or isinstance(raw, dict):
            return cls()
        if isinstance(raw, (list, tuple, set, frozenset)):
            return cls(selected=tuple(raw))
        return cls(selected=(raw,))

    def is_active(self) -> bool:
        return len(self.selected) > 0

    def matches(self, value: Any) -> bool:
        return any(_strict_equal(value, option) for option in self.selected)


@dataclass(frozen=True)
class DateRangeFilter(FilterValue):
    kind: ClassVar[FilterKind] = FilterKind.DATE_RANGE
    start: datetime | None = None
    end: datetime | None = None

    @classmethod
    def from_raw(cls, raw: Any) -> "DateRangeFilter":
        if not isinstance(raw, Mapping):
            return cls()
        return cls(start=parse_datetime(raw.get("from")), end=parse_datetime(raw.get("to")))

    def is_active(self) -> bool:
        return self.start is not None or self.end is not None

    def matches(self, value: Any) -> bool:
        moment = parse_datetime(value)
        if moment is None:
            return False
        if self.start is not None and moment < self.start:
            return False
        if self.end is not None and moment > self.end:
            return False
        return True


@dataclass(frozen=True)
class NumberRangeFilter(FilterValue):
    kind: ClassVar[FilterKind] = FilterKind.NUMBER_RANGE
    minimum: float | None = None
    maximum: float | None = None

    @classmethod
    def from_raw(cls, raw: Any) -> "NumberRangeFilter":
        if not isinstance(raw, Mapping):
            return cls()
        return cls(minimum=parse_number(raw.get("min")), maximum=parse_number(raw.get("max")))

    def is_active(self) -> bool:
        return self.minimum is not None or self.maximum is not None

    def matches(self, value: Any) -> bool:
        number = parse_number(value)
        if number is None:
            return False
        if self.minimum is not None and number < self.minimum:
            return False
        if self.maximum is not None and number > self.maximum:
            return False
        return True


@dataclass(frozen=True)
class SliderFilter(FilterValue):
    kind: ClassVar[FilterKind] = FilterKind.SLIDER
    threshold: float | None = None

    @classmethod
    def from_raw(cls, raw: Any) -> "SliderFilter":
        return cls(threshold=parse_number(raw))

    def is_active(self) -> bool:
        # a slider resting at 0 is the unset position
        return self.threshold is not None and self.threshold != 0

    def matches(self, value: Any) -> bool:
        number = parse_number(value)
        return number is not None and number >= self.threshold


@dataclass(frozen=True)
class CheckboxFilter(FilterValue):
    kind: ClassVar[FilterKind] = FilterKind.CHECKBOX
    checked: bool = False

    @classmethod
    def from_raw(cls, raw: Any) -> "CheckboxFilter":
        if isinstance(raw, str):
            return cls(checked=raw.strip().lower() in {"true", "1", "yes", "on"})
        if isinstance(raw, (list, tuple, dict, set)):
            return cls()
        return cls(checked=is_truthy(raw))

    def is_active(self) -> bool:
        return self.checked

    def matches(self, value: Any) -> bool:
        return is_truthy(value)


FILTER_VALUE_TYPES: dict[FilterKind, type[FilterValue]] = {
    FilterKind.TEXT: TextFilter,
    FilterKind.SINGLE_SELECT: SingleSelectFilter,
    FilterKind.MULTI_SELECT: MultiSelectFilter,
    FilterKind.DATE_RANGE: DateRangeFilter,
    FilterKind.NUMBER_RANGE: NumberRangeFilter,
    FilterKind.SLIDER: SliderFilter,
    FilterKind.CHECKBOX: CheckboxFilter,
}


def coerce_filter_value(field: FilterField, raw: Any) -> FilterValue:
    """Build the typed value for ``field`` from a raw form/JSON value."""

    value_type = FILTER_VALUE_TYPES[field.kind]
    if isinstance(raw, FilterValue):
        return raw if isinstance(raw, value_type) else value_type()
    return value_type.from_raw(raw)


def coerce_filter_values(schema: TableSchema, raw_values: Mapping[str, Any]) -> dict[str, FilterValue]:
    """Type every raw value that belongs to a declared filter field; others are dropped."""

    coerced: dict[str, FilterValue] = {}
    for key, raw in raw_values.items():
        field = schema.filter_field(key)
        if field is None:
            continue
        coerced[key] = coerce_filter_value(field, raw)
    return coerced


def active_filters(values: Mapping[str, FilterValue]) -> list[tuple[str, FilterValue]]:
    return [(key, value) for key, value in values.items() if value.is_active()]


def record_matches(record: Record, active: Iterable[tuple[str, FilterValue]]) -> bool:
    return all(value.matches(record.get(key)) for key, value in active)


def apply_filters(rows: Iterable[Record], values: Mapping[str, FilterValue]) -> list[Record]:
    active = active_filters(values)
    if not active:
        return list(rows)
    return [row for row in rows if record_matches(row, active)]
