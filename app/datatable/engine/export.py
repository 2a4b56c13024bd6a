from __future__ import annotations

import csv
import hashlib
import io
import json
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Literal

from app.datatable.engine.models import ColumnDef, Record
from app.datatable.engine.values import json_safe, to_text

ExportFormat = Literal["csv", "json"]

CONTENT_TYPES: dict[str, str] = {
    "csv": "text/csv; charset=utf-8",
    "json": "application/json",
}


@dataclass(frozen=True)
class ExportArtifact:
    filename: str
    content_type: str
    content: bytes
    row_count: int

    @property
    def checksum_sha256(self) -> str:
        return hashlib.sha256(self.content).hexdigest()


def render_csv(rows: Sequence[Record], columns: Sequence[ColumnDef]) -> bytes:
    """Header of column labels, then one line per row of raw field values.

    Every field is double-quoted with embedded quotes doubled; lines are joined
    with ``\\n`` and there is no trailing newline.
    """

    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow([column.label for column in columns])
    for row in rows:
        writer.writerow([to_text(column.raw_value(row)) for column in columns])
    return buffer.getvalue().removesuffix("\n").encode("utf-8")


def render_json(rows: Sequence[Record]) -> bytes:
    payload = [json_safe(dict(row)) for row in rows]
    return json.dumps(payload, indent=2, ensure_ascii=False, default=str).encode("utf-8")


def export_filename(table_name: str, format: ExportFormat, *, now: datetime | None = None) -> str:
    moment = now or datetime.now(timezone.utc)
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return f"{table_name}_{moment.date().isoformat()}.{format}"


def build_export(
    rows: Sequence[Record],
    columns: Sequence[ColumnDef],
    format: ExportFormat,
    *,
    table_name: str,
    now: Callable[[], datetime] | None = None,
) -> ExportArtifact:
    if format == "csv":
        content = render_csv(rows, columns)
    elif format == "json":
        content = render_json(rows)
    else:
        raise ValueError(f"Unsupported export format '{format}'")
    return ExportArtifact(
        filename=export_filename(table_name, format, now=now() if now else None),
        content_type=CONTENT_TYPES[format],
        content=content,
        row_count=len(rows),
    )
