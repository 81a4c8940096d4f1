"""Configuration for the Gemini provider.

Values are merged from four layers, later layers winning:

1. built-in defaults (``config.defaults``)
2. the optional file named by ``PROVIDERS_CONFIG_FILE`` (JSON, else YAML),
   keyed by provider name::

       gemini:
         model: gemini-2.0-flash
         api_version: v1beta

3. environment variables ``GEMINI_MODEL``, ``GEMINI_BASE_URL``,
   ``GEMINI_API_VERSION`` and the key variables (``GEMINI_API_KEY`` or
   ``GOOGLE_API_KEY``)
4. keyword overrides passed by the caller (``None`` values are ignored)

The ``.env`` file named by ``DOTENV_FILE`` (default ``.env``) is applied to
the environment once per process before layer 3 is read. The parsed config
file is cached as well; ``reset_config_cache`` forgets both.
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .defaults import (
    GEMINI_DEFAULT_API_VERSION,
    GEMINI_DEFAULT_BASE_URL,
    GEMINI_DEFAULT_MODEL,
)
from .env import apply_dotenv, is_placeholder, resolve_provider_key

DEFAULTS: Dict[str, Dict[str, Any]] = {
    "gemini": {
        "model": GEMINI_DEFAULT_MODEL,
        "base_url": GEMINI_DEFAULT_BASE_URL,
        "api_version": GEMINI_DEFAULT_API_VERSION,
    },
}

# config field -> environment variable suffix (after "<PROVIDER>_")
ENV_FIELD_MAP = {
    "model": "MODEL",
    "base_url": "BASE_URL",
    "api_version": "API_VERSION",
}

_cache: Dict[str, Any] = {}


def reset_config_cache() -> None:
    _cache.clear()


def _ensure_dotenv() -> None:
    if "dotenv" not in _cache:
        _cache["dotenv"] = apply_dotenv(os.getenv("DOTENV_FILE", ".env"))


def _parse_config_text(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError:
        return None


def _file_layer() -> Dict[str, Any]:
    if "file" not in _cache:
        path = os.getenv("PROVIDERS_CONFIG_FILE")
        data = None
        if path and Path(path).is_file():
            data = _parse_config_text(Path(path).read_text(encoding="utf-8"))
        _cache["file"] = data if isinstance(data, dict) else {}
    return _cache["file"]


def _env_layer(provider: str) -> Dict[str, Any]:
    layer = {
        field: os.environ[f"{provider.upper()}_{suffix}"]
        for field, suffix in ENV_FIELD_MAP.items()
        if os.environ.get(f"{provider.upper()}_{suffix}")
    }
    key, _ = resolve_provider_key(provider)
    if key:
        layer["api_key"] = key
    return layer


def get_provider_config(provider: str = "gemini", overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Merged configuration mapping for ``provider`` (see module docstring)."""
    _ensure_dotenv()
    name = (provider or "").strip().lower()
    merged: Dict[str, Any] = dict(DEFAULTS.get(name, {}))
    from_file = _file_layer().get(name)
    if isinstance(from_file, dict):
        merged.update(from_file)
    merged.update(_env_layer(name))
    merged.update({k: v for k, v in (overrides or {}).items() if v is not None})
    return merged


def get_model(provider: str = "gemini") -> Optional[str]:
    return get_provider_config(provider).get("model")


def load_settings(*, require_api_key: bool = True, **overrides: Any):
    """Resolve :class:`ProviderSettings` for Gemini.

    Raises:
        ConfigurationError: no usable API key and ``require_api_key`` is set.
    """
    from ..base.dto.provider_settings import ProviderSettings
    from ..base.errors import ConfigurationError, ErrorCode

    cfg = get_provider_config("gemini", overrides)
    api_key = cfg.get("api_key")
    if is_placeholder(api_key):
        api_key = None
    if require_api_key and not api_key:
        raise ConfigurationError(
            code=ErrorCode.AUTH,
            message="missing API key: set GEMINI_API_KEY (or GOOGLE_API_KEY)",
        )
    return ProviderSettings(
        api_key=api_key or None,
        base_url=cfg.get("base_url", GEMINI_DEFAULT_BASE_URL),
        api_version=cfg.get("api_version", GEMINI_DEFAULT_API_VERSION),
        model=cfg.get("model", GEMINI_DEFAULT_MODEL),
        headers=dict(cfg.get("headers") or {}),
    )


__all__ = [
    "get_provider_config",
    "get_model",
    "load_settings",
    "reset_config_cache",
    "DEFAULTS",
]
