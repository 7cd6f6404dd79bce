"""Backend access: transport, schema discovery and query execution."""

from .catalog import INTROSPECTION_SQL, SchemaCatalog, fold_introspection_rows
from .executor import QueryExecutor
from .transport import HttpQueryTransport, QueryTransport

__all__ = [
    "INTROSPECTION_SQL",
    "HttpQueryTransport",
    "QueryExecutor",
    "QueryTransport",
    "SchemaCatalog",
    "fold_introspection_rows",
]
