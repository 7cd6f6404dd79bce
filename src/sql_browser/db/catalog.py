from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

from ..errors import SchemaDiscoveryError, TransportError
from ..logging_utils import log_extra
from .models import Column, Table
from .transport import QueryTransport

INTROSPECTION_SQL = """
  SELECT
    t.table_name,
    c.column_name,
    CASE
      WHEN c.character_maximum_length IS NOT NULL
        THEN c.data_type || '(' || c.character_maximum_length || ')'
        ELSE c.data_type
    END AS column_type,
    c.is_nullable,
    CASE WHEN k.column_name IS NOT NULL THEN 'YES' ELSE 'NO' END AS primary_key
  FROM information_schema.tables t
  JOIN information_schema.columns c
    ON t.table_name = c.table_name
  LEFT JOIN (
    SELECT
        tc.table_name,
        kcu.column_name
    FROM information_schema.table_constraints tc
    JOIN information_schema.key_column_usage kcu
        ON tc.constraint_name = kcu.constraint_name
    WHERE tc.constraint_type = 'PRIMARY KEY'
  ) k
    ON t.table_name = k.table_name AND c.column_name = k.column_name
  WHERE t.table_schema = 'public'
    AND t.table_type = 'BASE TABLE'
  ORDER BY t.table_name, c.ordinal_position;
"""


def _flag(value: Any) -> bool:
    return value == "YES"


def fold_introspection_rows(rows: Iterable[Mapping[str, Any]]) -> list[Table]:
    """Group the flat introspection stream into tables.

    The first row naming a table creates it; later rows append columns in
    stream order. Table order is first-seen order.
    """
    grouped: dict[str, list[Column]] = {}
    for row in rows:
        table_name = row.get("table_name")
        columns = grouped.setdefault(table_name, [])
        columns.append(
            Column(
                name=row.get("column_name"),
                type=row.get("column_type"),
                nullable=_flag(row.get("is_nullable")),
                primary_key=_flag(row.get("primary_key")),
            )
        )
    return [Table(name=name, columns=tuple(columns)) for name, columns in grouped.items()]


class SchemaCatalog:
    def __init__(self, transport: QueryTransport) -> None:
        self._transport = transport
        self._log = logging.getLogger(__name__)

    def discover(self, request_id: str | None = None) -> list[Table]:
        """Read tables and columns of the public schema.

        Every call goes to the backend; callers keep the snapshot if they
        need it again.

        Raises:
        SchemaDiscoveryError: If the transport fails or the backend reports an error
        """
        try:
            response = self._transport.post({"sql": INTROSPECTION_SQL}, request_id=request_id)
        except TransportError as exc:
            self._log.warning(
                "Schema discovery failed",
                extra=log_extra(request_id=request_id, error_message=str(exc)),
            )
            raise SchemaDiscoveryError(f"Schema discovery failed: {exc}") from exc

        if response.error:
            self._log.warning(
                "Schema discovery rejected by backend",
                extra=log_extra(request_id=request_id, error_message=response.error),
            )
            raise SchemaDiscoveryError(f"Schema discovery failed: {response.error}")

        tables = fold_introspection_rows(response.rows)
        self._log.info(
            "Schema discovered",
            extra=log_extra(
                request_id=request_id,
                table_count=len(tables),
                column_count=sum(len(table.columns) for table in tables),
            ),
        )
        return tables
