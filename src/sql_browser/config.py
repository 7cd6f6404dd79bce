from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping
from urllib.parse import urlparse

import yaml

from .errors import ConfigError


@dataclass
class BackendConfig:
    query_url: str
    timeout_seconds: int = 30


@dataclass
class AuthConfig:
    token: str | None = None
    token_file: Path | None = None


@dataclass
class ObservabilityConfig:
    log_level: str = "info"


@dataclass
class AppConfig:
    backend: BackendConfig
    auth: AuthConfig
    observability: ObservabilityConfig


def _resolve_env(value: Any, env: Mapping[str, str]) -> Any:
    if isinstance(value, str):
        expanded = os.path.expandvars(value)
        if expanded.startswith("${") and expanded.endswith("}"):
            key = expanded[2:-1]
            if key not in env:
                raise ConfigError(f"Environment variable {key} is required but not set")
            return env[key]
        return expanded
    if isinstance(value, list):
        return [_resolve_env(v, env) for v in value]
    if isinstance(value, dict):
        return {k: _resolve_env(v, env) for k, v in value.items()}
    return value


def _validate_positive_or_unlimited(value: Any, field_name: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{field_name} must be an integer") from exc
    if number == -1:
        return number
    if number <= 0:
        raise ConfigError(f"{field_name} must be greater than 0 or -1 for no limit")
    return number


def _validate_query_url(url: Any) -> str:
    if not url or not isinstance(url, str):
        raise ConfigError("backend.query_url is required")
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ConfigError(f"backend.query_url must be an http(s) URL: {url}")
    return url


def load_config(path: str | Path, env: Mapping[str, str] | None = None) -> AppConfig:
    env = env or os.environ
    raw = yaml.safe_load(Path(path).read_text()) or {}
    resolved = _resolve_env(raw, env)

    try:
        backend_raw = resolved["backend"]
        auth_raw = resolved.get("auth") or {}
        observability_raw = resolved.get("observability") or {}
    except KeyError as exc:
        raise ConfigError(f"Missing config section: {exc.args[0]}") from exc

    if not isinstance(backend_raw, dict):
        raise ConfigError("backend section must be a mapping")

    backend = BackendConfig(
        query_url=_validate_query_url(backend_raw.get("query_url")),
        timeout_seconds=_validate_positive_or_unlimited(
            backend_raw.get("timeout_seconds", 30), "timeout_seconds"
        ),
    )

    token_file = auth_raw.get("token_file")
    auth = AuthConfig(
        token=auth_raw.get("token") or None,
        token_file=Path(token_file).expanduser() if token_file else None,
    )

    observability = ObservabilityConfig(
        log_level=str(observability_raw.get("log_level", "info")),
    )

    return AppConfig(
        backend=backend,
        auth=auth,
        observability=observability,
    )
