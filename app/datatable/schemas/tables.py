from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from app.datatable.engine.models import ALL_COLUMNS, ColumnDef, FilterField, SortDirective

FilterKindValue = Literal[
    "text",
    "select",
    "singleSelect",
    "multiSelect",
    "dateRange",
    "numberRange",
    "slider",
    "checkbox",
]


class ColumnIn(BaseModel):
    key: str = Field(min_length=1)
    label: str
    source: str | None = None

    def to_column(self) -> ColumnDef:
        return ColumnDef(key=self.key, label=self.label, source=self.source)


class FilterOptionIn(BaseModel):
    value: str | int | float | bool
    label: str


class FilterFieldIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    key: str = Field(min_length=1)
    label: str
    kind: FilterKindValue = Field(alias="type")
    options: list[FilterOptionIn] = Field(default_factory=list)
    min: float | None = None
    max: float | None = None
    step: float | None = None

    def to_field(self) -> FilterField:
        return FilterField.from_config(self.model_dump())


class SearchIn(BaseModel):
    term: str = ""
    scope: str = ALL_COLUMNS


class SortIn(BaseModel):
    key: str = Field(min_length=1)
    direction: Literal["asc", "desc"] = "asc"

    def to_directive(self) -> SortDirective:
        return SortDirective(key=self.key, direction=self.direction)


class TableViewRequest(BaseModel):
    data: list[dict[str, Any]] = Field(default_factory=list)
    columns: list[ColumnIn]
    filter_fields: list[FilterFieldIn] = Field(default_factory=list)
    search: SearchIn = Field(default_factory=SearchIn)
    filters: dict[str, Any] = Field(default_factory=dict)
    sort: SortIn | None = None
    page: int = Field(1, ge=1)
    page_size: int | None = Field(None, ge=1)


class TableExportRequest(TableViewRequest):
    table_name: str | None = None
    exportable: bool = True


class TableViewResponse(BaseModel):
    rows: list[dict[str, Any]]
    total_count: int
    filtered_count: int
    total_pages: int
    current_page: int
    visible_pages: list[int | str]
    range_start: int
    range_end: int
    status: Literal["ok", "no_data", "no_results"]
    active_filters: list[str]
    sort: SortIn | None
