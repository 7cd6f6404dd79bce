"""Database browsing tools for the MCP server.

These tools expose the browser session: schema listing, SQL execution,
client-side filter/sort of the last result and the record form.
"""

from __future__ import annotations

import asyncio
import uuid
from typing import Any

from ..browser import DatabaseBrowser
from ..db.models import Column, Table
from ..errors import EditorError
from ..result_view import cell_text


def _request_id(value: str | None = None) -> str:
    """Generate a unique request ID for tracing."""
    return value or str(uuid.uuid4())


def _column_info(column: Column) -> dict[str, Any]:
    return {
        "name": column.name,
        "type": column.type,
        "nullable": column.nullable,
        "primary_key": column.primary_key,
        "badges": column.badges,
    }


def _table_info(table: Table) -> dict[str, Any]:
    return {
        "name": table.name,
        "column_count": len(table.columns),
        "columns": [_column_info(column) for column in table.columns],
    }


def _last_notice(browser: DatabaseBrowser) -> dict[str, Any] | None:
    notice = browser.last_notice
    if notice is None:
        return None
    return {"title": notice.title, "description": notice.description, "level": notice.level.value}


def _view(browser: DatabaseBrowser) -> dict[str, Any]:
    rows = browser.visible_rows
    return {
        "columns": browser.columns,
        "filter": browser.filter.text,
        "sort": (
            {"key": browser.sort.key, "direction": browser.sort.direction.value}
            if browser.sort is not None
            else None
        ),
        "row_count": len(rows),
        "total_rows": len(browser.result.rows) if browser.result is not None else 0,
        "rows": rows,
        "cells": [[cell_text(row.get(column)) for column in browser.columns] for row in rows],
    }


def register_browser_tools(mcp_server: Any, browser: DatabaseBrowser, credentials: Any) -> None:
    """Register the database browser tools with the server.

    Args:
        mcp_server: The FastMCP server instance
        browser: Session controller the tools operate on
        credentials: Writable credential store used by the query transport
    """

    @mcp_server.tool()
    async def set_access_token(token: str) -> dict[str, Any]:
        """Store the access token used for every call to the query endpoint."""
        credentials.set(token.strip())
        return {"authenticated": bool(credentials.get())}

    @mcp_server.tool()
    async def list_tables(refresh: bool = False, request_id: str | None = None) -> dict[str, Any]:
        """List tables of the public schema with their columns.

        The catalog is discovered once and cached; pass refresh to discover again.
        """
        rid = _request_id(request_id)
        loaded = True
        if refresh or not browser.loaded:
            loaded = await asyncio.to_thread(browser.load_tables, rid)
        return {
            "loaded": loaded,
            "table_count": len(browser.tables),
            "tables": [table.name for table in browser.tables],
            "notice": None if loaded else _last_notice(browser),
        }

    @mcp_server.tool()
    async def describe_table(table: str, request_id: str | None = None) -> dict[str, Any]:
        """Select a table and return its columns, types and PK / NOT NULL markers."""
        rid = _request_id(request_id)
        if not browser.loaded and not await asyncio.to_thread(browser.load_tables, rid):
            return {"error": "Failed to load tables", "notice": _last_notice(browser)}
        try:
            selected = browser.select_table(table)
        except KeyError as exc:
            return {"error": str(exc.args[0])}
        return _table_info(selected)

    @mcp_server.tool()
    async def run_sql(sql: str, request_id: str | None = None) -> dict[str, Any]:
        """Execute arbitrary SQL against the backend and return the result envelope.

        Blank SQL is ignored. SQL errors reported by the backend come back as a
        result whose message starts with "Error:".
        """
        rid = _request_id(request_id)
        result = await asyncio.to_thread(browser.run_sql, sql, rid)
        if result is None:
            return {"executed": False, "notice": _last_notice(browser) if sql.strip() else None}
        return {
            "executed": True,
            **result.to_dict(),
            "columns": browser.columns,
            "notice": _last_notice(browser),
        }

    @mcp_server.tool()
    async def view_results(
        filter_text: str | None = None, sort_key: str | None = None
    ) -> dict[str, Any]:
        """Filter and sort the last result.

        filter_text replaces the current filter (empty string clears it).
        sort_key sorts ascending, or flips to descending when already sorted
        ascending on that key.
        """
        if browser.result is None:
            return {"error": "No query has been executed"}
        if filter_text is not None:
            browser.set_filter(filter_text)
        if sort_key:
            browser.toggle_sort(sort_key)
        return _view(browser)

    @mcp_server.tool()
    async def open_record(row_index: int | None = None) -> dict[str, Any]:
        """Open the record form for the selected table.

        Without row_index a blank create form is opened; otherwise the visible
        row at that index is loaded and its primary-key fields are locked.
        """
        try:
            if row_index is None:
                session = browser.open_record()
            else:
                session = browser.open_visible_record(row_index)
        except (IndexError, EditorError) as exc:
            return {"error": str(exc)}
        return {
            "table": session.table,
            "mode": session.mode.value,
            "title": session.title,
            "fields": [descriptor.to_dict() for descriptor in session.fields],
        }

    @mcp_server.tool()
    async def submit_record(values: dict[str, Any] | None = None) -> dict[str, Any]:
        """Submit the open record form. Nothing is written to the database."""
        try:
            outcome = browser.submit_record(values)
        except EditorError as exc:
            return {"error": str(exc)}
        return {
            "created": outcome.created,
            "table": outcome.table,
            "values": outcome.values,
            "message": outcome.message,
        }

    @mcp_server.tool()
    async def cancel_record() -> dict[str, Any]:
        """Close the open record form without submitting it."""
        return {"cancelled": browser.cancel_record()}
