from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import date
from typing import Any


def active_filters(filters: Mapping[str, Any]) -> dict[str, Any]:
    """Drop filters the user left blank so the API only sees real criteria."""
    return {k: v for k, v in filters.items() if v is not None and v != ""}


def read_filters(args: Mapping[str, Any], keys: Iterable[str]) -> dict[str, str]:
    """Pull the named filter fields out of a query string, stripped, defaulting to ""."""
    return {k: (args.get(k) or "").strip() for k in keys}


def iso_date_part(value: Any) -> str:
    """'2025-03-01T00:00:00' -> '2025-03-01'. Used to prefill date inputs."""
    if value is None:
        return ""
    if hasattr(value, "strftime"):
        return value.strftime("%Y-%m-%d")
    return str(value).split("T")[0]


def parse_date(s: str | None) -> date | None:
    """Parse YYYY-MM-DD date string."""
    if not s:
        return None
    s = s.strip()
    if not s:
        return None
    return date.fromisoformat(s)


def is_valid_date(s: str | None) -> bool:
    try:
        parse_date(s)
    except ValueError:
        return False
    return True


def to_int(raw: Any, default: int = 0) -> int:
    """Lenient int conversion for select values; blanks and junk become `default`."""
    if raw is None or raw == "":
        return default
    try:
        return int(str(raw).strip())
    except ValueError:
        return default


def to_number(raw: Any, default: float = 0) -> float | int:
    """
    Lenient numeric conversion for amount inputs.

    Whole numbers come back as int so payloads read naturally ("150", not "150.0").
    """
    if raw is None:
        return default
    if isinstance(raw, (int, float)):
        value = float(raw)
    else:
        text = str(raw).strip()
        if not text:
            return default
        try:
            value = float(text)
        except ValueError:
            return default
    if value != value:  # NaN
        return default
    return int(value) if value.is_integer() else value


def is_number(raw: Any) -> bool:
    if raw is None or str(raw).strip() == "":
        return False
    try:
        float(str(raw).strip())
    except ValueError:
        return False
    return True


def format_amount(value: Any) -> str:
    if value is None or value == "":
        return ""
    number = to_number(value)
    return str(number)


def sort_by_amount(rows: list[dict[str, Any]], order: str = "asc") -> list[dict[str, Any]]:
    """
    Sort rows by their `amount`. Rows without an amount keep their relative
    order and always come last.
    """
    priced = [r for r in rows if isinstance(r.get("amount"), (int, float))]
    unpriced = [r for r in rows if not isinstance(r.get("amount"), (int, float))]
    priced.sort(key=lambda r: r["amount"], reverse=(order == "desc"))
    return priced + unpriced


def toggle_sort_order(order: str | None) -> str:
    return "asc" if order == "desc" else "desc"


def find_by_id(rows: Iterable[Mapping[str, Any]], id_field: str, wanted: int) -> dict[str, Any] | None:
    for row in rows:
        if to_int(row.get(id_field), default=-1) == wanted:
            return dict(row)
    return None
