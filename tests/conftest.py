from __future__ import annotations

from pathlib import Path

import pytest

from sovan_pos_sdk import ApiSession, AuthStore, LocalStore, load_config
from sovan_pos_sdk.http_client import HttpClient
from sovan_pos_sdk.tracing import TraceContext

BASE_URL = "https://api.example.com"


@pytest.fixture(autouse=True)
def _sovan_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in ("SOVAN_ENV", "SOVAN_API_BASE_URL_DEV", "SOVAN_TELEMETRY_ENABLED"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("SOVAN_API_BASE_URL", BASE_URL)
    monkeypatch.setenv("SOVAN_RETRY_BACKOFF_SECONDS", "0")
    monkeypatch.setenv("SOVAN_RETRY_DELAY_SECONDS", "0")


def make_http(base_url: str = BASE_URL, **overrides: object) -> HttpClient:
    cfg = load_config()
    object.__setattr__(cfg, "api_base_url", base_url)
    for key, value in overrides.items():
        object.__setattr__(cfg, key, value)
    return HttpClient(cfg, trace=TraceContext())


@pytest.fixture
def http() -> HttpClient:
    return make_http()


@pytest.fixture
def http_factory():
    return make_http


@pytest.fixture
def local_store(tmp_path: Path) -> LocalStore:
    return LocalStore(base_dir=tmp_path / "storage")


@pytest.fixture
def auth_store(tmp_path: Path) -> AuthStore:
    return AuthStore(base_dir=tmp_path / "auth")


@pytest.fixture
def api_session(auth_store: AuthStore, local_store: LocalStore) -> ApiSession:
    return ApiSession(load_config(), auth_store=auth_store, local_store=local_store)
