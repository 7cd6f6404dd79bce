from __future__ import annotations

import logging
from typing import Any

_SQL_PREVIEW_CHARS = 120


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def log_extra(**kwargs: Any) -> dict[str, Any]:
    return {k: v for k, v in kwargs.items() if v is not None}


def sql_preview(sql: str, limit: int = _SQL_PREVIEW_CHARS) -> str:
    """Collapse a statement onto one line and cut it to ``limit`` characters."""
    flattened = " ".join(sql.split())
    if len(flattened) <= limit:
        return flattened
    return flattened[: limit - 3] + "..."
