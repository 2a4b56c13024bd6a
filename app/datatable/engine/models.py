"""Descriptors and selection state consumed by the table engine."""
from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal

Record = Mapping[str, Any]
SortDirection = Literal["asc", "desc"]

ALL_COLUMNS = "all"


class TableConfigError(ValueError):
    """Raised when table descriptors or selections are inconsistent."""


class ExportDisabledError(RuntimeError):
    """Raised when an export is requested from a table that is not exportable."""


class FilterKind(str, Enum):
    TEXT = "text"
    SINGLE_SELECT = "singleSelect"
    MULTI_SELECT = "multiSelect"
    DATE_RANGE = "dateRange"
    NUMBER_RANGE = "numberRange"
    SLIDER = "slider"
    CHECKBOX = "checkbox"

    @classmethod
    def from_value(cls, value: str) -> "FilterKind":
        """Create a :class:`FilterKind` from a raw descriptor value.

        ``"select"`` is accepted as an alias of ``singleSelect``.
        """

        if value == "select":
            return cls.SINGLE_SELECT
        try:
            return cls(value)
        except ValueError as exc:
            valid_values = ", ".join(item.value for item in cls)
            raise TableConfigError(f"Invalid filter kind '{value}'. Expected one of: {valid_values}.") from exc


@dataclass(frozen=True)
class ColumnDef:
    """A displayed column.

    ``key`` identifies the column (search scope, sort key, header); ``source``
    names the record field it reads and defaults to ``key``. Two columns that
    present the same field need distinct keys and a shared ``source``.
    ``render`` is opaque to the engine and only ever called by presentation.
    """

    key: str
    label: str
    render: Callable[[Any, Record], Any] | None = None
    source: str | None = None

    @property
    def field(self) -> str:
        return self.source or self.key

    def raw_value(self, record: Record) -> Any:
        return record.get(self.field)


@dataclass(frozen=True)
class FilterOption:
    value: Any
    label: str


@dataclass(frozen=True)
class FilterField:
    key: str
    label: str
    kind: FilterKind
    options: tuple[FilterOption, ...] = ()
    min: float | None = None
    max: float | None = None
    step: float | None = None

    @classmethod
    def from_config(cls, cfg: Mapping[str, Any]) -> "FilterField":
        if "key" not in cfg:
            raise TableConfigError("Filter field configuration requires a 'key' field.")
        kind_raw = cfg.get("kind", cfg.get("type"))
        if not kind_raw:
            raise TableConfigError(f"Filter field '{cfg['key']}' requires a 'kind' field.")
        options = tuple(
            FilterOption(value=item.get("value"), label=str(item.get("label", item.get("value"))))
            for item in cfg.get("options") or []
        )
        return cls(
            key=str(cfg["key"]),
            label=str(cfg.get("label", cfg["key"])),
            kind=FilterKind.from_value(str(kind_raw)),
            options=options,
            min=cfg.get("min"),
            max=cfg.get("max"),
            step=cfg.get("step"),
        )


@dataclass(frozen=True)
class SearchState:
    term: str = ""
    scope: str = ALL_COLUMNS


@dataclass(frozen=True)
class SortDirective:
    key: str
    direction: SortDirection = "asc"

    def __post_init__(self) -> None:
        if self.direction not in ("asc", "desc"):
            raise TableConfigError(f"Invalid sort direction '{self.direction}'. Expected 'asc' or 'desc'.")


@dataclass(frozen=True)
class TableSchema:
    """Validated column and filter descriptors for one table instance."""

    columns: tuple[ColumnDef, ...]
    filter_fields: tuple[FilterField, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        _ensure_unique([column.key for column in self.columns], "column")
        _ensure_unique([item.key for item in self.filter_fields], "filter field")

    def column(self, key: str) -> ColumnDef | None:
        for column in self.columns:
            if column.key == key:
                return column
        return None

    def filter_field(self, key: str) -> FilterField | None:
        for item in self.filter_fields:
            if item.key == key:
                return item
        return None

    def sort_field(self, key: str) -> str:
        column = self.column(key)
        return column.field if column is not None else key


def _ensure_unique(keys: Sequence[str], what: str) -> None:
    seen: set[str] = set()
    for key in keys:
        if key in seen:
            raise TableConfigError(f"Duplicate {what} key '{key}'.")
        seen.add(key)
