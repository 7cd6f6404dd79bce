"""FastAPI application configuration for the SQL browser MCP server.

This module sets up the application by:
1. Loading the YAML configuration and configuring logging
2. Wiring the operator's credential store, query transport and browser session
3. Registering the browser tools on a FastMCP server
4. Combining the MCP routes with a health-check route

The server works for a single operator: every MCP caller shares one browser
session and one backend token, and inbound request headers are never
forwarded to the backend.
"""

import os
from pathlib import Path

from fastapi import FastAPI
from fastmcp import FastMCP

from ..auth import FileCredentialStore, MemoryCredentialStore
from ..browser import DatabaseBrowser
from ..config import AppConfig, load_config
from ..db import HttpQueryTransport, QueryExecutor, SchemaCatalog
from ..logging_utils import configure_logging
from ..tools import register_browser_tools


def _config_path() -> Path:
    """Get the configuration file path from environment or default."""
    path = os.environ.get("SQL_BROWSER_CONFIG", "config.example.yml")
    return Path(path)


def build_browser(
    config: AppConfig,
) -> tuple[DatabaseBrowser, FileCredentialStore | MemoryCredentialStore]:
    """Create the browser session and the operator credential store its transport reads.

    The token file is used when configured (seeded from the configured token
    if empty); otherwise the configured token is held in memory.
    """
    if config.auth.token_file is not None:
        credentials = FileCredentialStore(config.auth.token_file)
        if config.auth.token and credentials.get() is None:
            credentials.set(config.auth.token)
    else:
        credentials = MemoryCredentialStore(config.auth.token)

    transport = HttpQueryTransport(config.backend, credentials)
    browser = DatabaseBrowser(SchemaCatalog(transport), QueryExecutor(transport))
    return browser, credentials


def create_app(config_path: Path | None = None) -> FastAPI:
    """Create and configure the FastMCP server application.

    Args:
        config_path: Optional path to config file. If None, uses default from environment.

    Returns:
        FastAPI: The combined application
    """
    if config_path is None:
        config_path = _config_path()

    config = load_config(config_path)
    configure_logging(config.observability.log_level)

    browser, credentials = build_browser(config)

    mcp_server = FastMCP(name="sql-browser")
    register_browser_tools(mcp_server, browser, credentials)

    # Convert the MCP server to a streamable HTTP application
    mcp_app = mcp_server.http_app()

    app = FastAPI(
        title="SQL Browser MCP Server",
        description="Schema-driven SQL browsing tools over a db-helper endpoint",
        version="0.1.0",
        lifespan=mcp_app.lifespan,
    )

    @app.get("/", include_in_schema=False)
    async def health_check() -> dict:
        """Health check endpoint."""
        return {
            "message": "SQL Browser MCP Server is running",
            "status": "healthy",
            "tables_loaded": len(browser.tables),
        }

    combined_app = FastAPI(
        title="SQL Browser MCP App",
        routes=[
            *mcp_app.routes,
            *app.routes,
        ],
        lifespan=mcp_app.lifespan,
    )


    return combined_app
