"""MCP tool definitions."""

from .browser_tools import register_browser_tools

__all__ = ["register_browser_tools"]
