"""Schema-driven SQL browser over a db-helper query endpoint."""

# Submodules are imported on demand so the core does not pull in the server stack:
# from sql_browser.db import SchemaCatalog, QueryExecutor, HttpQueryTransport
# from sql_browser.browser import DatabaseBrowser
# from sql_browser.server import main

__all__ = [
    "browser",
    "config",
    "db",
    "editor",
    "result_view",
    "server",
]
