from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Iterable

from dotenv import load_dotenv


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class ClientConfig:
    env_name: str
    api_base_url: str
    connect_timeout_seconds: float = 5.0
    read_timeout_seconds: float = 10.0
    retries: int = 3
    retry_delay_seconds: float = 1.0
    retry_backoff_seconds: float = 0.3
    page_size: int = 100
    dashboard_poll_seconds: float = 5.0
    max_connections: int = 10
    verify_ssl: bool = True
    telemetry_enabled: bool = False

    @property
    def normalized_env(self) -> str:
        return self.env_name.lower().strip()


def _require(values: dict[str, str | None], required: Iterable[str]) -> None:
    missing = [key for key in required if not values.get(key)]
    if missing:
        raise ConfigError(f"Missing required config values: {', '.join(missing)}")


def _coerce_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _read_float(name: str, default: str) -> float:
    raw = os.getenv(name, default)
    try:
        return float(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid {name}: expected a number, got {raw!r}") from exc


def _read_int(name: str, default: str) -> int:
    raw = os.getenv(name, default)
    try:
        return int(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid {name}: expected an integer, got {raw!r}") from exc


def _validate(condition: bool, message: str) -> None:
    if not condition:
        raise ConfigError(message)


def load_config(env_file: str | None = None) -> ClientConfig:
    """Load config from environment with optional .env override."""
    load_dotenv(env_file)

    env_name = (os.getenv("SOVAN_ENV") or "dev").strip()
    env_key = env_name.upper()

    api_base_url = (
        (os.getenv(f"SOVAN_API_BASE_URL_{env_key}") or "").strip()
        or (os.getenv("SOVAN_API_BASE_URL") or "").strip()
    )

    timeout_seconds = _read_float("SOVAN_TIMEOUT_SECONDS", "10")
    _validate(
        timeout_seconds > 0,
        f"Invalid SOVAN_TIMEOUT_SECONDS: expected > 0, got {timeout_seconds}",
    )

    connect_timeout_seconds = _read_float(
        "SOVAN_CONNECT_TIMEOUT_SECONDS", str(min(timeout_seconds, 5.0))
    )
    _validate(
        connect_timeout_seconds > 0,
        f"Invalid SOVAN_CONNECT_TIMEOUT_SECONDS: expected > 0, got {connect_timeout_seconds}",
    )

    read_timeout_seconds = _read_float(
        "SOVAN_READ_TIMEOUT_SECONDS",
        str(max(timeout_seconds, connect_timeout_seconds)),
    )
    _validate(
        read_timeout_seconds > 0,
        f"Invalid SOVAN_READ_TIMEOUT_SECONDS: expected > 0, got {read_timeout_seconds}",
    )

    retries = _read_int("SOVAN_RETRIES", "3")
    _validate(retries >= 1, f"Invalid SOVAN_RETRIES: expected >= 1, got {retries}")

    retry_delay_seconds = _read_float("SOVAN_RETRY_DELAY_SECONDS", "1.0")
    _validate(
        retry_delay_seconds >= 0,
        f"Invalid SOVAN_RETRY_DELAY_SECONDS: expected >= 0, got {retry_delay_seconds}",
    )

    retry_backoff_seconds = _read_float("SOVAN_RETRY_BACKOFF_SECONDS", "0.3")
    _validate(
        retry_backoff_seconds >= 0,
        f"Invalid SOVAN_RETRY_BACKOFF_SECONDS: expected >= 0, got {retry_backoff_seconds}",
    )

    page_size = _read_int("SOVAN_PAGE_SIZE", "100")
    _validate(page_size >= 1, f"Invalid SOVAN_PAGE_SIZE: expected >= 1, got {page_size}")

    dashboard_poll_seconds = _read_float("SOVAN_DASHBOARD_POLL_SECONDS", "5")
    _validate(
        dashboard_poll_seconds > 0,
        f"Invalid SOVAN_DASHBOARD_POLL_SECONDS: expected > 0, got {dashboard_poll_seconds}",
    )

    max_connections = _read_int("SOVAN_MAX_CONNECTIONS", "10")
    _validate(
        max_connections >= 1,
        f"Invalid SOVAN_MAX_CONNECTIONS: expected >= 1, got {max_connections}",
    )

    values = {"SOVAN_API_BASE_URL": api_base_url}
    _require(values, ["SOVAN_API_BASE_URL"])

    return ClientConfig(
        env_name=env_name,
        api_base_url=api_base_url.rstrip("/"),
        connect_timeout_seconds=connect_timeout_seconds,
        read_timeout_seconds=read_timeout_seconds,
        retries=retries,
        retry_delay_seconds=retry_delay_seconds,
        retry_backoff_seconds=retry_backoff_seconds,
        page_size=page_size,
        dashboard_poll_seconds=dashboard_poll_seconds,
        max_connections=max_connections,
        verify_ssl=_coerce_bool(os.getenv("SOVAN_VERIFY_SSL"), True),
        telemetry_enabled=_coerce_bool(os.getenv("SOVAN_TELEMETRY_ENABLED"), False),
    )
