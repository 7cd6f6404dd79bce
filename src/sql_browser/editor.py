"""Form synthesis for viewing, creating and editing a single row.

Fields are built from the table's column metadata rather than from the row,
so an empty result set still yields a usable create form.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping

from .db.models import Column, Row, Scalar, Table
from .errors import EditorError
from .logging_utils import log_extra


class EditMode(str, Enum):
    CREATE = "create"
    EDIT = "edit"


@dataclass(frozen=True)
class FieldDescriptor:
    name: str
    type: str
    value: Scalar
    primary_key: bool = False
    nullable: bool = True
    disabled: bool = False

    @property
    def placeholder(self) -> str:
        return f"Enter {self.name}..."

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type,
            "value": self.value,
            "primary_key": self.primary_key,
            "nullable": self.nullable,
            "disabled": self.disabled,
            "placeholder": self.placeholder,
        }


@dataclass
class EditSession:
    table: str
    mode: EditMode
    fields: list[FieldDescriptor] = field(default_factory=list)
    closed: bool = False

    @property
    def is_new(self) -> bool:
        return self.mode is EditMode.CREATE

    @property
    def title(self) -> str:
        return "New record" if self.is_new else "View/Edit record"

    def field(self, name: str) -> FieldDescriptor | None:
        for descriptor in self.fields:
            if descriptor.name == name:
                return descriptor
        return None

    def values(self) -> dict[str, Scalar]:
        return {descriptor.name: descriptor.value for descriptor in self.fields}


@dataclass(frozen=True)
class EditOutcome:
    created: bool
    table: str
    values: dict[str, Scalar] = field(default_factory=dict)

    @property
    def message(self) -> str:
        return "Record created" if self.created else "Record updated"


def _field_for(column: Column, row: Row | None) -> FieldDescriptor:
    if row is None:
        return FieldDescriptor(
            name=column.name,
            type=column.type,
            value="",
            primary_key=column.primary_key,
            nullable=column.nullable,
        )
    value = row.get(column.name)
    return FieldDescriptor(
        name=column.name,
        type=column.type,
        value="" if value is None and column.name not in row else value,
        primary_key=column.primary_key,
        nullable=column.nullable,
        disabled=column.primary_key,
    )


class RecordEditor:
    def __init__(self) -> None:
        self._log = logging.getLogger(__name__)

    def open(self, table: Table, existing_row: Row | None = None) -> EditSession:
        """Start a create session (no row) or an edit session on ``existing_row``.

        Primary-key fields are read-only in edit sessions only.
        """
        mode = EditMode.CREATE if existing_row is None else EditMode.EDIT
        session = EditSession(
            table=table.name,
            mode=mode,
            fields=[_field_for(column, existing_row) for column in table.columns],
        )
        self._log.debug(
            "Edit session opened",
            extra=log_extra(table=table.name, mode=mode.value, field_count=len(session.fields)),
        )
        return session

    def submit(self, session: EditSession, values: Mapping[str, Scalar] | None = None) -> EditOutcome:
        """Acknowledge a create or update and close the session.

        Nothing is written to the backend. Read-only fields keep the value the
        session was opened with.

        Raises:
        EditorError: If the session is closed or ``values`` names unknown fields
        """
        if session.closed:
            raise EditorError("Edit session is already closed")

        values = dict(values or {})
        unknown = [name for name in values if session.field(name) is None]
        if unknown:
            raise EditorError(f"Unknown fields for table {session.table}: {', '.join(unknown)}")

        merged: dict[str, Scalar] = {}
        for descriptor in session.fields:
            if descriptor.disabled or descriptor.name not in values:
                merged[descriptor.name] = descriptor.value
            else:
                merged[descriptor.name] = values[descriptor.name]

        session.closed = True
        outcome = EditOutcome(created=session.is_new, table=session.table, values=merged)
        self._log.info(
            outcome.message,
            extra=log_extra(table=session.table, mode=session.mode.value),
        )
        return outcome
