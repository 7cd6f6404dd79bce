import pytest

from sql_browser.db import INTROSPECTION_SQL, SchemaCatalog, fold_introspection_rows
from sql_browser.db.models import Column
from sql_browser.errors import SchemaDiscoveryError, TransportError


def introspection_row(table: str, column: str, **extra: str) -> dict:
    row = {"table_name": table, "column_name": column, "column_type": "text"}
    row.update(extra)
    return row


def test_fold_keeps_first_seen_table_and_stream_column_order() -> None:
    tables = fold_introspection_rows(
        [
            introspection_row("t1", "a"),
            introspection_row("t1", "b"),
            introspection_row("t2", "c"),
        ]
    )

    assert [table.name for table in tables] == ["t1", "t2"]
    assert tables[0].column_names == ["a", "b"]
    assert tables[1].column_names == ["c"]


@pytest.mark.parametrize(
    "value, expected",
    [("YES", True), ("NO", False), ("", False), ("yes", False), (None, False)],
)
def test_only_literal_yes_is_true(value, expected) -> None:
    (table,) = fold_introspection_rows(
        [introspection_row("t", "c", is_nullable=value, primary_key=value)]
    )

    assert table.columns[0].nullable is expected
    assert table.columns[0].primary_key is expected


def test_absent_flags_default_to_false() -> None:
    (table,) = fold_introspection_rows([introspection_row("t", "c")])

    assert table.columns[0] == Column(name="c", type="text", nullable=False, primary_key=False)


def test_discover_sends_introspection_query(transport, users_introspection_rows) -> None:
    transport.queue(rows=users_introspection_rows)

    tables = SchemaCatalog(transport).discover()

    assert transport.calls == [{"sql": INTROSPECTION_SQL}]
    (users,) = tables
    assert users.name == "users"
    assert [column.primary_key for column in users.columns] == [True, False, False]
    assert users.column("name").type == "character varying(255)"
    assert users.column("name").nullable is True
    assert users.primary_key_columns == [users.column("id")]


def test_discover_does_not_cache(transport, users_introspection_rows) -> None:
    transport.queue(rows=users_introspection_rows)
    transport.queue(rows=[])
    catalog = SchemaCatalog(transport)

    assert len(catalog.discover()) == 1
    assert catalog.discover() == []
    assert len(transport.calls) == 2


def test_backend_error_fails_discovery(transport) -> None:
    transport.queue(error="permission denied for schema information_schema")

    with pytest.raises(SchemaDiscoveryError, match="permission denied"):
        SchemaCatalog(transport).discover()


def test_transport_failure_fails_discovery(transport) -> None:
    transport.fail("connection refused")

    with pytest.raises(SchemaDiscoveryError) as excinfo:
        SchemaCatalog(transport).discover()

    assert isinstance(excinfo.value.__cause__, TransportError)


def test_introspection_query_shape() -> None:
    assert "t.table_schema = 'public'" in INTROSPECTION_SQL
    assert "t.table_type = 'BASE TABLE'" in INTROSPECTION_SQL
    assert "tc.constraint_type = 'PRIMARY KEY'" in INTROSPECTION_SQL
    assert "ORDER BY t.table_name, c.ordinal_position" in INTROSPECTION_SQL
    for alias in ("column_type", "primary_key"):
        assert f"AS {alias}" in INTROSPECTION_SQL
