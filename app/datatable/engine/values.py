"""Value classification shared by the search, filter, sort and export engines.

Records arrive as loosely typed mappings (JSON payloads, ORM dumps, CSV rows),
so every engine reads field values through these helpers instead of relying on
the concrete Python type. None of them raise on unexpected input: a value that
cannot be read as a number or a date simply classifies as "not a number" or
"not a date".
"""
from __future__ import annotations

import math
import re
from datetime import date, datetime, time, timezone
from decimal import Decimal
from typing import Any

MISSING_DISPLAY = "-"

_NUMBER_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


def to_text(value: Any) -> str:
    """Stringify a field value the way it is searched, filtered and exported."""

    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, Decimal):
        return format(value, "f")
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


def display_value(value: Any) -> str:
    text = to_text(value)
    return text if value is not None else MISSING_DISPLAY


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, (list, tuple, set, frozenset, dict)):
        return len(value) == 0
    return False


def is_truthy(value: Any) -> bool:
    if isinstance(value, float) and math.isnan(value):
        return False
    return bool(value)


def parse_number(value: Any) -> float | None:
    """Return ``value`` as a finite float, or ``None`` when it is not numeric.

    Booleans are never numeric. Strings must be a complete decimal literal
    (surrounding whitespace allowed); partial prefixes such as ``"12abc"`` are
    rejected.
    """

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal)):
        try:
            number = float(value)
        except OverflowError:
            return None
        return number if math.isfinite(number) else None
    if isinstance(value, str):
        clean = value.strip()
        if not _NUMBER_RE.fullmatch(clean):
            return None
        number = float(clean)
        return number if math.isfinite(number) else None
    return None


def _ensure_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_datetime(value: Any) -> datetime | None:
    """Return ``value`` as an aware UTC datetime, or ``None`` when it is not a date.

    Accepts ``datetime`` and ``date`` objects and ISO 8601 strings (date-only,
    date-time with ``T`` or space separator, optional ``Z``/offset). Naive
    values are read as UTC.
    """

    if isinstance(value, datetime):
        return _ensure_utc(value)
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    if not isinstance(value, str):
        return None
    normalized = value.strip().replace("Z", "+00:00")
    if not normalized:
        return None
    if "T" in normalized or ":" in normalized:
        try:
            return _ensure_utc(datetime.fromisoformat(normalized))
        except ValueError:
            return None
    try:
        parsed_date = date.fromisoformat(normalized)
    except ValueError:
        return None
    return datetime.combine(parsed_date, time.min, tzinfo=timezone.utc)


def json_safe(value: Any) -> Any:
    """Convert a field value into something ``json.dumps`` emits as standard JSON."""

    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, Decimal):
        return float(value) if value.is_finite() else None
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(key): json_safe(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [json_safe(item) for item in value]
    return value
