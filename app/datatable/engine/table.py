"""Derived table views and the per-page table controller.

``derive_view`` is the whole pipeline (search, filter, sort, paginate) as one
pure function of its inputs. ``DataTable`` only holds the current selections
for a page and calls ``derive_view`` again whenever a view is requested, so
there is never a cached intermediate result to go stale.
"""
from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Literal

from app.datatable.engine.export import ExportArtifact, ExportFormat, build_export
from app.datatable.engine.filters import (
    FilterValue,
    active_filters,
    apply_filters,
    coerce_filter_value,
    coerce_filter_values,
)
from app.datatable.engine.models import (
    ALL_COLUMNS,
    ColumnDef,
    ExportDisabledError,
    FilterField,
    Record,
    SearchState,
    SortDirective,
    TableConfigError,
    TableSchema,
)
from app.datatable.engine.pagination import (
    PageItem,
    PaginationState,
    clamp_page,
    goto_page,
    page_range,
    page_slice,
    total_pages,
    visible_pages,
)
from app.datatable.engine.search import apply_search
from app.datatable.engine.sorting import sort_rows, toggle_sort
from app.datatable.engine.values import display_value

logger = logging.getLogger(__name__)

ViewStatus = Literal["ok", "no_data", "no_results"]


@dataclass(frozen=True)
class DerivedView:
    rows: tuple[Record, ...]
    page_rows: tuple[Record, ...]
    total_count: int
    total_pages: int
    current_page: int
    visible_pages: tuple[PageItem, ...]
    range_start: int
    range_end: int

    @property
    def filtered_count(self) -> int:
        return len(self.rows)

    @property
    def status(self) -> ViewStatus:
        if self.total_count == 0:
            return "no_data"
        if not self.rows:
            return "no_results"
        return "ok"

    @property
    def can_go_prev(self) -> bool:
        return self.current_page > 1

    @property
    def can_go_next(self) -> bool:
        return self.current_page < self.total_pages


def derive_view(
    data: Sequence[Record],
    schema: TableSchema,
    *,
    search: SearchState,
    filters: Mapping[str, FilterValue],
    sort: SortDirective | None,
    page: int,
    page_size: int,
) -> DerivedView:
    searched = apply_search(data, schema.columns, search)
    filtered = apply_filters(searched, filters)
    ordered = sort_rows(filtered, sort, schema.sort_field(sort.key) if sort else None)
    pages = total_pages(len(ordered), page_size)
    current = clamp_page(page, pages)
    first, last = page_range(len(ordered), current, page_size)
    return DerivedView(
        rows=tuple(ordered),
        page_rows=tuple(page_slice(ordered, current, page_size)),
        total_count=len(data),
        total_pages=pages,
        current_page=current,
        visible_pages=tuple(visible_pages(current, pages)),
        range_start=first,
        range_end=last,
    )


def render_cells(record: Record, columns: Sequence[ColumnDef]) -> list[Any]:
    """Presentation output for one row: each column's render callback, or its display text."""

    cells: list[Any] = []
    for column in columns:
        value = column.raw_value(record)
        cells.append(column.render(value, record) if column.render else display_value(value))
    return cells


class DataTable:
    """Search/filter/sort/page selections for one table on one page."""

    def __init__(
        self,
        columns: Iterable[ColumnDef],
        *,
        filter_fields: Iterable[FilterField] = (),
        data: Iterable[Record] = (),
        page_size: int = 15,
        table_name: str = "data",
        exportable: bool = False,
        search_placeholder: str = "Search...",
        now: Callable[[], datetime] | None = None,
    ) -> None:
        self.schema = TableSchema(columns=tuple(columns), filter_fields=tuple(filter_fields))
        self.pagination = PaginationState(page_size=page_size)
        self.table_name = table_name
        self.exportable = exportable
        self.search_placeholder = search_placeholder
        self.search = SearchState()
        self.filters: dict[str, FilterValue] = {}
        self.sort: SortDirective | None = None
        self._data: tuple[Record, ...] = tuple(data)
        self._now = now

    @property
    def data(self) -> tuple[Record, ...]:
        return self._data

    @property
    def page_size(self) -> int:
        return self.pagination.page_size

    def set_data(self, rows: Iterable[Record]) -> None:
        self._data = tuple(rows)

    def _reset_page(self) -> None:
        self.pagination.page = 1
        logger.debug("table_page_reset", extra={"table_name": self.table_name})

    def set_search_term(self, term: str) -> None:
        term = term or ""
        if term == self.search.term:
            return
        self.search = SearchState(term=term, scope=self.search.scope)
        self._reset_page()

    def set_search_scope(self, scope: str) -> None:
        if scope != ALL_COLUMNS and self.schema.column(scope) is None:
            raise TableConfigError(f"Unknown search scope '{scope}'.")
        if scope == self.search.scope:
            return
        self.search = SearchState(term=self.search.term, scope=scope)
        self._reset_page()

    def set_filter(self, key: str, raw: Any) -> None:
        field = self.schema.filter_field(key)
        if field is None:
            raise TableConfigError(f"Unknown filter field '{key}'.")
        value = coerce_filter_value(field, raw)
        if self.filters.get(key) == value:
            return
        self.filters[key] = value
        self._reset_page()

    def set_filters(self, raw_values: Mapping[str, Any]) -> None:
        for key in raw_values:
            if self.schema.filter_field(key) is None:
                raise TableConfigError(f"Unknown filter field '{key}'.")
        coerced = coerce_filter_values(self.schema, raw_values)
        if coerced == self.filters:
            return
        self.filters = coerced
        self._reset_page()

    def reset_filters(self) -> None:
        if not self.filters:
            return
        self.filters = {}
        self._reset_page()

    def active_filters(self) -> list[str]:
        return [key for key, _ in active_filters(self.filters)]

    @property
    def has_active_query(self) -> bool:
        return bool(self.search.term) or bool(self.active_filters())

    def toggle_sort(self, key: str) -> SortDirective:
        if self.schema.column(key) is None:
            raise TableConfigError(f"Unknown sort column '{key}'.")
        self.sort = toggle_sort(self.sort, key)
        self._reset_page()
        return self.sort

    def set_sort(self, directive: SortDirective | None) -> None:
        if directive is not None and self.schema.column(directive.key) is None:
            raise TableConfigError(f"Unknown sort column '{directive.key}'.")
        if directive == self.sort:
            return
        self.sort = directive
        self._reset_page()

    def sort_indicator(self, key: str) -> str | None:
        if self.sort is None or self.sort.key != key:
            return None
        return self.sort.direction

    def view(self) -> DerivedView:
        return derive_view(
            self._data,
            self.schema,
            search=self.search,
            filters=self.filters,
            sort=self.sort,
            page=self.pagination.page,
            page_size=self.pagination.page_size,
        )

    def go_to_page(self, page: int) -> bool:
        return goto_page(self.pagination, page, self.view().total_pages)

    def next_page(self) -> bool:
        current = self.view()
        return goto_page(self.pagination, current.current_page + 1, current.total_pages)

    def prev_page(self) -> bool:
        current = self.view()
        return goto_page(self.pagination, current.current_page - 1, current.total_pages)

    def render_page(self) -> list[list[Any]]:
        return [render_cells(record, self.schema.columns) for record in self.view().page_rows]

    def export(self, format: ExportFormat) -> ExportArtifact:
        if not self.exportable:
            raise ExportDisabledError(f"Table '{self.table_name}' is not exportable.")
        artifact = build_export(
            self.view().rows,
            self.schema.columns,
            format,
            table_name=self.table_name,
            now=self._now,
        )
        logger.info(
            "table_export",
            extra={
                "table_name": self.table_name,
                "format": format,
                "row_count": artifact.row_count,
                "export_filename": artifact.filename,
            },
        )
        return artifact

    def export_csv(self) -> ExportArtifact:
        return self.export("csv")

    def export_json(self) -> ExportArtifact:
        return self.export("json")
