"""Pytest configuration for the genai_providers test suite.

Fixtures:
- ``clean_env``: removes Gemini configuration from the environment and resets
  the config caches so tests never pick up a developer's real key or files.
- ``log_capture``: collects records emitted under the ``genai`` logger tree.
- ``settings``: connection settings pointing at a fake host.
"""

from __future__ import annotations

import logging
from typing import Iterator, List

import pytest

from genai_providers.base.dto.provider_settings import ProviderSettings
from genai_providers.base.http import close_all_clients
from genai_providers.base.logging import BASE_LOGGER_NAME, get_logger
from genai_providers.config import reset_config_cache

_ENV_VARS = (
    "GEMINI_API_KEY",
    "GOOGLE_API_KEY",
    "GEMINI_MODEL",
    "GEMINI_BASE_URL",
    "GEMINI_API_VERSION",
    "PROVIDERS_CONFIG_FILE",
    "GENAI_LOG_LEVEL",
    "PT_TIMEOUT_CONNECT_SECONDS",
    "PT_TIMEOUT_STREAM_SECONDS",
    "PT_TIMEOUT_HTTP_SECONDS",
    "PT_TIMEOUT_UPLOAD_SECONDS",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> Iterator[None]:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("DOTENV_FILE", str(tmp_path / "missing.env"))
    reset_config_cache()
    yield
    reset_config_cache()


@pytest.fixture(scope="session", autouse=True)
def close_clients_after_session() -> Iterator[None]:
    yield
    close_all_clients()


class _ListHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__(level=logging.DEBUG)
        self.records: List[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)


@pytest.fixture()
def log_capture(monkeypatch: pytest.MonkeyPatch) -> Iterator[List[logging.LogRecord]]:
    """Attach a handler to the shared ``genai`` logger (it does not propagate to root).

    ``GENAI_LOG_LEVEL`` is raised to DEBUG because every ``get_logger`` call
    re-applies the level from the environment.
    """
    monkeypatch.setenv("GENAI_LOG_LEVEL", "DEBUG")
    base = get_logger(BASE_LOGGER_NAME)
    handler = _ListHandler()
    base.addHandler(handler)
    try:
        yield handler.records
    finally:
        base.removeHandler(handler)


@pytest.fixture()
def settings() -> ProviderSettings:
    return ProviderSettings(
        api_key="k-unit-123",
        base_url="https://gemini.invalid",
        api_version="v1beta",
        model="gemini-2.0-flash",
    )
