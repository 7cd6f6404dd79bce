from __future__ import annotations

from typing import Any

import pytest

from sql_browser.db.models import TransportResponse
from sql_browser.errors import TransportError


class FakeTransport:
    """Replays queued responses and records every payload it was given."""

    def __init__(self) -> None:
        self.calls: list[dict[str, Any]] = []
        self._responses: list[TransportResponse | Exception] = []

    def queue(self, rows: list[dict[str, Any]] | None = None, error: str | None = None) -> None:
        self._responses.append(TransportResponse(rows=list(rows or []), error=error))

    def fail(self, message: str = "connection refused") -> None:
        self._responses.append(TransportError(message))

    def post(self, payload: dict[str, Any], request_id: str | None = None) -> TransportResponse:
        self.calls.append(payload)
        response = self._responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def users_introspection_rows() -> list[dict[str, Any]]:
    return [
        {
            "table_name": "users",
            "column_name": "id",
            "column_type": "integer",
            "is_nullable": "NO",
            "primary_key": "YES",
        },
        {
            "table_name": "users",
            "column_name": "name",
            "column_type": "character varying(255)",
            "is_nullable": "YES",
            "primary_key": "NO",
        },
        {
            "table_name": "users",
            "column_name": "active",
            "column_type": "boolean",
            "is_nullable": "NO",
            "primary_key": "NO",
        },
    ]
