"""Main entry point for the SQL browser MCP server.

It's configured as the ``sql-browser-server`` script in pyproject.toml. The
configuration file is read from ``SQL_BROWSER_CONFIG`` (default
``config.example.yml``) when uvicorn builds the app.
"""

import argparse
import os

import uvicorn


def main() -> None:
    """Start the MCP server using uvicorn.

    Usage:
        sql-browser-server
        sql-browser-server --port 8080 --config config.yml
    """
    parser = argparse.ArgumentParser(description="Start the SQL browser MCP server")
    parser.add_argument(
        "--host", default="0.0.0.0", help="Interface to bind (default: 0.0.0.0)"
    )
    parser.add_argument(
        "--port", type=int, default=8000, help="Port to run the server on (default: 8000)"
    )
    parser.add_argument(
        "--config", default=None, help="Path to the YAML config (overrides SQL_BROWSER_CONFIG)"
    )
    args = parser.parse_args()

    if args.config:
        os.environ["SQL_BROWSER_CONFIG"] = args.config

    uvicorn.run(
        "sql_browser.server.app:create_app",
        factory=True,
        host=args.host,
        port=args.port,
    )


if __name__ == "__main__":
    main()
