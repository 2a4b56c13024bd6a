import json
from datetime import datetime, timedelta, timezone

import pytest

from app.datatable.engine.export import build_export, export_filename, render_csv, render_json
from app.datatable.engine.models import ColumnDef

COLUMNS = [ColumnDef(key="id", label="ID"), ColumnDef(key="name", label='Customer "Name"')]


def test_render_csv_quotes_every_field() -> None:
    rows = [{"id": 1, "name": 'Say "hi"', "extra": "ignored"}, {"id": 2, "name": None}]

    content = render_csv(rows, COLUMNS)

    assert content == b'"ID","Customer ""Name"""\n"1","Say ""hi"""\n"2",""'


def test_render_csv_uses_raw_values_not_render_output() -> None:
    columns = [ColumnDef(key="amount", label="Amount", render=lambda value, row: f"${value:,.2f}")]

    assert render_csv([{"amount": 1234.5}], columns) == b'"Amount"\n"1234.5"'


def test_render_csv_reads_column_source_field() -> None:
    columns = [
        ColumnDef(key="company", label="Company", source="company_name"),
        ColumnDef(key="contact", label="Contact", source="company_name"),
    ]

    assert render_csv([{"company_name": "Acme"}], columns) == b'"Company","Contact"\n"Acme","Acme"'


def test_render_csv_header_only_when_empty() -> None:
    assert render_csv([], COLUMNS) == b'"ID","Customer ""Name"""'


def test_render_json_keeps_full_records() -> None:
    rows = [{"id": 1, "name": "Acme", "notes": None}]

    content = render_json(rows)

    assert content == b'[\n  {\n    "id": 1,\n    "name": "Acme",\n    "notes": null\n  }\n]'


def test_render_json_empty_and_non_ascii() -> None:
    assert render_json([]) == b"[]"
    assert json.loads(render_json([{"name": "서울"}]).decode("utf-8")) == [{"name": "서울"}]
    assert "서울".encode("utf-8") in render_json([{"name": "서울"}])


def test_export_filename_uses_utc_date() -> None:
    assert export_filename("orders", "csv", now=datetime(2026, 10, 17, 12, 0)) == "orders_2026-10-17.csv"
    seoul = timezone(timedelta(hours=9))
    assert export_filename("orders", "json", now=datetime(2026, 10, 17, 1, 0, tzinfo=seoul)) == "orders_2026-10-16.json"


def test_build_export_artifact() -> None:
    artifact = build_export(
        [{"id": 1, "name": "Acme"}],
        COLUMNS,
        "csv",
        table_name="customers",
        now=lambda: datetime(2026, 10, 17, tzinfo=timezone.utc),
    )

    assert artifact.filename == "customers_2026-10-17.csv"
    assert artifact.content_type == "text/csv; charset=utf-8"
    assert artifact.row_count == 1
    assert len(artifact.checksum_sha256) == 64


def test_build_export_rejects_unknown_format() -> None:
    with pytest.raises(ValueError):
        build_export([], COLUMNS, "xlsx", table_name="customers")
