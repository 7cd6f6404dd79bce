from pathlib import Path

import pytest

from sql_browser.config import load_config
from sql_browser.errors import ConfigError


def write_config(tmp_path: Path, content: str) -> Path:
    path = tmp_path / "config.yml"
    path.write_text(content)
    return path


def test_env_substitution(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SQL_BROWSER_TOKEN", "secret-token")
    cfg_path = write_config(
        tmp_path,
        """
backend:
  query_url: https://db.example.com/db-helper/query
  timeout_seconds: 5
auth:
  token: ${SQL_BROWSER_TOKEN}
observability:
  log_level: debug
""",
    )

    config = load_config(cfg_path)
    assert config.auth.token == "secret-token"
    assert config.auth.token_file is None
    assert config.backend.timeout_seconds == 5
    assert config.observability.log_level == "debug"


def test_defaults(tmp_path: Path) -> None:
    cfg_path = write_config(
        tmp_path,
        """
backend:
  query_url: http://localhost:8080/query
""",
    )

    config = load_config(cfg_path, env={})
    assert config.backend.timeout_seconds == 30
    assert config.auth.token is None
    assert config.observability.log_level == "info"


def test_token_file_is_expanded(tmp_path: Path) -> None:
    cfg_path = write_config(
        tmp_path,
        f"""
backend:
  query_url: https://db.example.com/db-helper/query
auth:
  token_file: {tmp_path / "token"}
""",
    )

    config = load_config(cfg_path, env={})
    assert config.auth.token_file == tmp_path / "token"


def test_missing_env_variable(tmp_path: Path) -> None:
    cfg_path = write_config(
        tmp_path,
        """
backend:
  query_url: https://db.example.com/db-helper/query
auth:
  token: ${SQL_BROWSER_MISSING_TOKEN}
""",
    )
    with pytest.raises(ConfigError, match="SQL_BROWSER_MISSING_TOKEN"):
        load_config(cfg_path, env={"OTHER": "1"})


def test_missing_required_section(tmp_path: Path) -> None:
    cfg_path = write_config(
        tmp_path,
        """
observability:
  log_level: info
""",
    )
    with pytest.raises(ConfigError, match="backend"):
        load_config(cfg_path)


def test_invalid_query_url(tmp_path: Path) -> None:
    cfg_path = write_config(
        tmp_path,
        """
backend:
  query_url: ftp://db.example.com/query
""",
    )
    with pytest.raises(ConfigError, match="http"):
        load_config(cfg_path)


def test_invalid_timeout(tmp_path: Path) -> None:
    cfg_path = write_config(
        tmp_path,
        """
backend:
  query_url: https://db.example.com/db-helper/query
  timeout_seconds: 0
""",
    )
    with pytest.raises(ConfigError, match="timeout_seconds"):
        load_config(cfg_path)


def test_unlimited_timeout(tmp_path: Path) -> None:
    cfg_path = write_config(
        tmp_path,
        """
backend:
  query_url: https://db.example.com/db-helper/query
  timeout_seconds: -1
""",
    )
    assert load_config(cfg_path).backend.timeout_seconds == -1
