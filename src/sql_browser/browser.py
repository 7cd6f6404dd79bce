"""Operator session state for the database browser.

``DatabaseBrowser`` is the only owner of mutable state: the catalog snapshot,
the selected table, the last result, the filter and sort, and the open edit
session. Visible rows are derived again from the last result on every read.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum

from .db.catalog import SchemaCatalog
from .db.executor import QueryExecutor
from .db.models import FilterSpec, QueryResult, Row, Scalar, SortSpec, Table
from .editor import EditOutcome, EditSession, RecordEditor
from .errors import EditorError, SchemaDiscoveryError, TransportError
from .logging_utils import log_extra
from .result_view import derive, display_columns

NOTICE_HISTORY = 20


class NoticeLevel(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class Notice:
    title: str
    description: str
    level: NoticeLevel = NoticeLevel.SUCCESS


class DatabaseBrowser:
    def __init__(
        self,
        catalog: SchemaCatalog,
        executor: QueryExecutor,
        editor: RecordEditor | None = None,
    ) -> None:
        self._catalog = catalog
        self._executor = executor
        self._editor = editor or RecordEditor()
        self._log = logging.getLogger(__name__)

        self.tables: list[Table] = []
        self.loaded = False
        self.selected_table: Table | None = None
        self.sql_query = ""
        self.result: QueryResult | None = None
        self.filter = FilterSpec()
        self.sort: SortSpec | None = None
        self.edit_session: EditSession | None = None
        self.notices: deque[Notice] = deque(maxlen=NOTICE_HISTORY)

    def _notify(self, title: str, description: str, level: NoticeLevel = NoticeLevel.SUCCESS) -> Notice:
        notice = Notice(title=title, description=description, level=level)
        self.notices.append(notice)
        return notice

    @property
    def last_notice(self) -> Notice | None:
        return self.notices[-1] if self.notices else None

    def load_tables(self, request_id: str | None = None) -> bool:
        """Refresh the catalog snapshot; on failure the previous snapshot stays."""
        try:
            tables = self._catalog.discover(request_id=request_id)
        except SchemaDiscoveryError as exc:
            self._log.error(
                "Failed to load tables",
                extra=log_extra(request_id=request_id, error_message=str(exc)),
            )
            self._notify("Error", "Failed to load tables", NoticeLevel.ERROR)
            return False

        self.tables = tables
        self.loaded = True
        if self.selected_table is not None:
            self.selected_table = self.table(self.selected_table.name)
        return True

    def table(self, name: str) -> Table | None:
        for table in self.tables:
            if table.name == name:
                return table
        return None

    def select_table(self, name: str) -> Table:
        table = self.table(name)
        if table is None:
            raise KeyError(f"Unknown table: {name}")
        self.selected_table = table
        return table

    def run_sql(self, sql: str, request_id: str | None = None) -> QueryResult | None:
        """Execute ``sql`` and make its envelope the current result.

        Blank SQL does nothing. A transport failure keeps the previous result
        and records an error notice.
        """
        self.sql_query = sql
        try:
            result = self._executor.execute(sql, request_id=request_id)
        except TransportError as exc:
            self._log.error(
                "Failed to execute query",
                extra=log_extra(request_id=request_id, error_message=str(exc)),
            )
            self._notify("Error", "Failed to execute query", NoticeLevel.ERROR)
            return None

        if result is None:
            return None
        self.result = result
        self._notify("Success", f"Query executed at {result.executed_at.isoformat()}")
        return result

    def set_filter(self, text: str | None) -> None:
        self.filter = FilterSpec(text or "")

    def toggle_sort(self, key: str) -> SortSpec:
        self.sort = SortSpec.toggle(self.sort, key)
        return self.sort

    @property
    def columns(self) -> list[str]:
        return display_columns(self.result.rows) if self.result is not None else []

    @property
    def visible_rows(self) -> list[Row]:
        return derive(self.result, self.filter, self.sort)

    def open_record(self, row: Row | None = None) -> EditSession:
        if self.selected_table is None:
            raise EditorError("Select a table before opening a record")
        self.edit_session = self._editor.open(self.selected_table, row)
        return self.edit_session

    def open_visible_record(self, index: int) -> EditSession:
        rows = self.visible_rows
        if not 0 <= index < len(rows):
            raise IndexError(f"Row index {index} is out of range for {len(rows)} visible rows")
        return self.open_record(rows[index])

    def submit_record(self, values: dict[str, Scalar] | None = None) -> EditOutcome:
        if self.edit_session is None:
            raise EditorError("No record is open")
        outcome = self._editor.submit(self.edit_session, values)
        self.edit_session = None
        self._notify("Success", outcome.message)
        return outcome

    def cancel_record(self) -> bool:
        """Discard the open record form; returns whether one was open."""
        had_session = self.edit_session is not None
        self.edit_session = None
        return had_session
