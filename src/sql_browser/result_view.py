"""Client-side filtering and sorting of a query result.

Everything here is pure: the visible rows are always derived again from the
untouched base result whenever the filter or the sort changes.
"""

from __future__ import annotations

from typing import Any, Iterable, Sequence

from .db.models import FilterSpec, QueryResult, Row, SortSpec


def cell_text(value: Any) -> str:
    """String form of a cell, as rendered and as matched by the filter."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def display_columns(rows: Sequence[Row]) -> list[str]:
    """Columns to show for a result set: the keys of its first row."""
    if not rows:
        return []
    return list(rows[0].keys())


def matches(row: Row, needle: str) -> bool:
    needle = needle.lower()
    return any(needle in cell_text(value).lower() for value in row.values())


def filter_rows(rows: Iterable[Row], filter_spec: FilterSpec | None) -> list[Row]:
    rows = list(rows)
    if filter_spec is None or not filter_spec.active or not rows:
        return rows
    return [row for row in rows if matches(row, filter_spec.text)]


def _sort_key(value: Any) -> tuple[int, Any]:
    # numbers (bools included) order before text so mixed columns never compare across types
    if isinstance(value, (bool, int, float)):
        return (0, value)
    if isinstance(value, str):
        return (1, value)
    return (2, cell_text(value))


def sort_rows(rows: Iterable[Row], sort_spec: SortSpec | None) -> list[Row]:
    """Stable sort on one key; rows lacking the key or holding null go last."""
    rows = list(rows)
    if sort_spec is None:
        return rows
    present = [row for row in rows if row.get(sort_spec.key) is not None]
    absent = [row for row in rows if row.get(sort_spec.key) is None]
    ordered = sorted(
        present,
        key=lambda row: _sort_key(row[sort_spec.key]),
        reverse=sort_spec.descending,
    )
    return ordered + absent


def derive(
    result: QueryResult | None,
    filter_spec: FilterSpec | None = None,
    sort_spec: SortSpec | None = None,
) -> list[Row]:
    if result is None:
        return []
    return sort_rows(filter_rows(result.rows, filter_spec), sort_spec)
