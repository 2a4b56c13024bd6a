from __future__ import annotations

import logging
import time
from typing import Literal

from fastapi import APIRouter, Request
from fastapi.responses import Response

from app.datatable.core.config import settings
from app.datatable.core.error_catalog import AppError, ErrorCatalog
from app.datatable.engine.models import ExportDisabledError
from app.datatable.engine.table import DataTable
from app.datatable.engine.values import json_safe
from app.datatable.schemas.tables import SortIn, TableExportRequest, TableViewRequest, TableViewResponse


router = APIRouter()
logger = logging.getLogger(__name__)


def _resolve_page_size(payload: TableViewRequest) -> int:
    page_size = payload.page_size or settings.DEFAULT_PAGE_SIZE
    if page_size > settings.MAX_PAGE_SIZE:
        raise AppError(
            ErrorCatalog.VALIDATION_ERROR,
            details={"message": "page_size exceeds limit", "max_page_size": settings.MAX_PAGE_SIZE},
        )
    return page_size


def _build_table(payload: TableViewRequest, *, table_name: str | None = None, exportable: bool = False) -> DataTable:
    table = DataTable(
        [column.to_column() for column in payload.columns],
        filter_fields=[item.to_field() for item in payload.filter_fields],
        data=payload.data,
        page_size=_resolve_page_size(payload),
        table_name=table_name or settings.DEFAULT_TABLE_NAME,
        exportable=exportable,
        search_placeholder=settings.DEFAULT_SEARCH_PLACEHOLDER,
    )
    table.set_search_scope(payload.search.scope)
    table.set_search_term(payload.search.term)
    table.set_filters(payload.filters)
    table.set_sort(payload.sort.to_directive() if payload.sort else None)
    # selections above reset the page, so the requested page goes last
    table.pagination.page = payload.page
    return table


@router.post("/datatable/view", response_model=TableViewResponse)
def table_view(request: Request, payload: TableViewRequest):
    start_time = time.perf_counter()
    table = _build_table(payload)
    view = table.view()
    response = TableViewResponse(
        rows=[json_safe(dict(row)) for row in view.page_rows],
        total_count=view.total_count,
        filtered_count=view.filtered_count,
        total_pages=view.total_pages,
        current_page=view.current_page,
        visible_pages=list(view.visible_pages),
        range_start=view.range_start,
        range_end=view.range_end,
        status=view.status,
        active_filters=table.active_filters(),
        sort=SortIn(key=table.sort.key, direction=table.sort.direction) if table.sort else None,
    )
    logger.info(
        "datatable_view",
        extra={
            "trace_id": getattr(request.state, "trace_id", None),
            "endpoint": "/datatable/view",
            "latency_ms": (time.perf_counter() - start_time) * 1000,
            "total_count": view.total_count,
            "filtered_count": view.filtered_count,
        },
    )
    return response


@router.post("/datatable/export/{format}")
def table_export(request: Request, format: Literal["csv", "json"], payload: TableExportRequest):
    start_time = time.perf_counter()
    table = _build_table(payload, table_name=payload.table_name, exportable=payload.exportable)
    row_count = table.view().filtered_count
    if table.exportable and settings.EXPORTS_MAX_ROWS > 0 and row_count > settings.EXPORTS_MAX_ROWS:
        raise AppError(
            ErrorCatalog.EXPORT_ROWS_LIMIT_EXCEEDED,
            details={
                "message": "export rows exceed limit",
                "max_rows": settings.EXPORTS_MAX_ROWS,
                "row_count": row_count,
            },
        )
    try:
        artifact = table.export(format)
    except ExportDisabledError as exc:
        raise AppError(ErrorCatalog.EXPORT_DISABLED, details={"table_name": table.table_name}) from exc
    logger.info(
        "datatable_export",
        extra={
            "trace_id": getattr(request.state, "trace_id", None),
            "endpoint": "/datatable/export/{format}",
            "latency_ms": (time.perf_counter() - start_time) * 1000,
            "row_count": artifact.row_count,
            "export_filename": artifact.filename,
        },
    )
    return Response(
        content=artifact.content,
        media_type=artifact.content_type,
        headers={
            "Content-Disposition": f'attachment; filename="{artifact.filename}"',
            "X-Row-Count": str(artifact.row_count),
            "X-Checksum-SHA256": artifact.checksum_sha256,
        },
    )
