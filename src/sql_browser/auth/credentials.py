from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Protocol

_TOKEN_FILE_MODE = 0o600


class CredentialStore(Protocol):
    def get(self) -> str | None: ...


class MemoryCredentialStore:
    """Holds an access token for the lifetime of the process."""

    def __init__(self, token: str | None = None) -> None:
        self._token = token or None

    def get(self) -> str | None:
        return self._token

    def set(self, token: str | None) -> None:
        self._token = token or None

    def clear(self) -> None:
        self._token = None


class FileCredentialStore:
    """Keeps the access token in a file so it survives restarts."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path).expanduser()
        self._log = logging.getLogger(__name__)

    @property
    def path(self) -> Path:
        return self._path

    def get(self) -> str | None:
        try:
            token = self._path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return None
        return token or None

    def set(self, token: str | None) -> None:
        if not token:
            self.clear()
            return
        self._path.parent.mkdir(parents=True, exist_ok=True)
        # created owner-only; an existing file is narrowed before the token is written
        fd = os.open(self._path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, _TOKEN_FILE_MODE)
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            os.fchmod(handle.fileno(), _TOKEN_FILE_MODE)
            handle.write(token)
        self._log.info(f"Access token stored in {self._path}")

    def clear(self) -> None:
        self._path.unlink(missing_ok=True)
