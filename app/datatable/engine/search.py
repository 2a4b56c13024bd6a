from __future__ import annotations

from collections.abc import Iterable, Sequence

from app.datatable.engine.models import ALL_COLUMNS, ColumnDef, Record, SearchState
from app.datatable.engine.values import to_text


def record_matches_search(record: Record, columns: Sequence[ColumnDef], search: SearchState) -> bool:
    if not search.term:
        return True
    needle = search.term.lower()
    if search.scope == ALL_COLUMNS:
        return any(needle in to_text(column.raw_value(record)).lower() for column in columns)
    for column in columns:
        if column.key == search.scope:
            return needle in to_text(column.raw_value(record)).lower()
    return needle in to_text(record.get(search.scope)).lower()


def apply_search(rows: Iterable[Record], columns: Sequence[ColumnDef], search: SearchState) -> list[Record]:
    if not search.term:
        return list(rows)
    return [row for row in rows if record_matches_search(row, columns, search)]
