import os
import stat
from pathlib import Path

from sql_browser.auth import FileCredentialStore, MemoryCredentialStore
from sql_browser.auth import credentials as credentials_module


def test_memory_store_round_trip() -> None:
    store = MemoryCredentialStore()
    assert store.get() is None

    store.set("abc")
    assert store.get() == "abc"

    store.set("")
    assert store.get() is None


def test_file_store_persists_token(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "token"
    FileCredentialStore(path).set("abc")

    assert FileCredentialStore(path).get() == "abc"
    assert stat.S_IMODE(path.stat().st_mode) == 0o600


def test_file_store_creates_token_file_owner_only(tmp_path: Path, monkeypatch) -> None:
    opened = []
    real_open = os.open

    def recording_open(path, flags, mode=0o777):
        opened.append((Path(path), flags & os.O_CREAT, mode))
        return real_open(path, flags, mode)

    monkeypatch.setattr(credentials_module.os, "open", recording_open)
    path = tmp_path / "token"

    FileCredentialStore(path).set("abc")

    assert opened == [(path, os.O_CREAT, 0o600)]


def test_file_store_narrows_existing_file(tmp_path: Path) -> None:
    path = tmp_path / "token"
    path.write_text("old")
    path.chmod(0o644)

    FileCredentialStore(path).set("abc")

    assert stat.S_IMODE(path.stat().st_mode) == 0o600
    assert path.read_text() == "abc"


def test_file_store_missing_or_cleared(tmp_path: Path) -> None:
    store = FileCredentialStore(tmp_path / "token")
    assert store.get() is None

    store.set("abc")
    store.clear()
    assert store.get() is None
    assert not store.path.exists()
