"""Data models shared by the catalog, executor, result view and editor.

Tables and columns come from schema discovery and never change afterwards.
Rows are open mappings because their shape is only known at query time.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Union

Scalar = Union[str, int, float, bool, None]
Row = dict[str, Scalar]

SUCCESS_MESSAGE = "Query executed successfully"
ERROR_PREFIX = "Error: "


@dataclass(frozen=True)
class Column:
    name: str
    type: str
    nullable: bool = False
    primary_key: bool = False

    @property
    def badges(self) -> list[str]:
        badges = [self.type]
        if self.primary_key:
            badges.append("PK")
        if not self.nullable:
            badges.append("NOT NULL")
        return badges


@dataclass(frozen=True)
class Table:
    name: str
    columns: tuple[Column, ...] = ()

    @property
    def column_names(self) -> list[str]:
        return [column.name for column in self.columns]

    @property
    def primary_key_columns(self) -> list[Column]:
        return [column for column in self.columns if column.primary_key]

    def column(self, name: str) -> Column | None:
        for column in self.columns:
            if column.name == name:
                return column
        return None


@dataclass(frozen=True)
class QueryResult:
    """Outcome of one execution; a later execution replaces it, never edits it."""

    executed_at: datetime
    message: str
    rows: tuple[Row, ...] = ()
    sql: str = ""

    @property
    def succeeded(self) -> bool:
        return self.message == SUCCESS_MESSAGE

    def to_dict(self) -> dict:
        return {
            "executed_at": self.executed_at.isoformat(),
            "message": self.message,
            "row_count": len(self.rows),
            "rows": [dict(row) for row in self.rows],
        }


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class SortSpec:
    key: str
    direction: SortDirection = SortDirection.ASC

    @property
    def descending(self) -> bool:
        return self.direction is SortDirection.DESC

    @classmethod
    def toggle(cls, current: SortSpec | None, key: str) -> SortSpec:
        """Flip direction when ``key`` is already sorted ascending, else sort ascending."""
        if current is not None and current.key == key and current.direction is SortDirection.ASC:
            return cls(key, SortDirection.DESC)
        return cls(key, SortDirection.ASC)


@dataclass(frozen=True)
class FilterSpec:
    text: str = ""

    @property
    def active(self) -> bool:
        return bool(self.text)


@dataclass
class TransportResponse:
    rows: list[Row] = field(default_factory=list)
    error: str | None = None
