from __future__ import annotations


class ConfigError(ValueError):
    """Configuration is missing or invalid."""


class TransportError(RuntimeError):
    """The query endpoint could not be reached or answered malformed data."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class SchemaDiscoveryError(RuntimeError):
    """Schema introspection failed; no catalog was produced."""


class EditorError(RuntimeError):
    """An edit session was used in a way it does not allow."""
