"""Environment lookups for Gemini credentials and ``.env`` files.

``GEMINI_API_KEY`` is the canonical key variable; ``GOOGLE_API_KEY`` is an
accepted alias consulted second. Nothing here raises for unknown providers
or unset variables: callers decide whether a missing key is fatal.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Iterable, Optional, Tuple

ENV_MAP: Dict[str, str] = {
    "gemini": "GEMINI_API_KEY",
}

ENV_ALIASES: Dict[str, Tuple[str, ...]] = {
    "gemini": ("GEMINI_API_KEY", "GOOGLE_API_KEY"),
}

_PLACEHOLDER_MARKERS = ("placeholder", "changeme", "example")


def is_placeholder(val: Optional[str]) -> bool:
    """True for values such as ``your-key-placeholder`` or ``test_abc``."""
    if val is None:
        return False
    lowered = str(val).strip().lower()
    return lowered.startswith("test_") or any(m in lowered for m in _PLACEHOLDER_MARKERS)


def get_env_var_name(provider: str) -> Optional[str]:
    return ENV_MAP.get(provider.lower()) if provider else None


def get_env_var_candidates(provider: str) -> Iterable[str]:
    """Key variable names for ``provider``, canonical name first."""
    name = (provider or "").lower()
    seen = []
    for candidate in (ENV_MAP.get(name), *ENV_ALIASES.get(name, ())):
        if candidate and candidate not in seen:
            seen.append(candidate)
            yield candidate


def resolve_provider_key(provider: str) -> Tuple[Optional[str], Optional[str]]:
    """Return ``(value, variable)`` for the first non-empty key variable, else ``(None, None)``."""
    for name in get_env_var_candidates(provider):
        value = os.environ.get(name)
        if value:
            return value, name
    return None, None


def parse_dotenv(text: str) -> Dict[str, str]:
    """Parse ``KEY=VALUE`` lines; ``export`` prefixes and surrounding quotes are stripped."""
    values: Dict[str, str] = {}
    for raw in text.splitlines():
        line = raw.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = (part.strip() for part in line.split("=", 1))
        if key.startswith("export "):
            key = key[len("export "):].strip()
        if key:
            values[key] = value.strip("\"'")
    return values


def apply_dotenv(path: str | os.PathLike[str]) -> Dict[str, str]:
    """Copy variables from a ``.env`` file into ``os.environ``.

    Variables already set in the process win unless they hold a placeholder.
    Returns what was applied; a missing file applies nothing.
    """
    file = Path(path)
    if not file.is_file():
        return {}
    applied: Dict[str, str] = {}
    for key, value in parse_dotenv(file.read_text(encoding="utf-8")).items():
        current = os.environ.get(key)
        if current is None or is_placeholder(current):
            os.environ[key] = value
            applied[key] = value
    return applied


__all__ = [
    "ENV_MAP",
    "ENV_ALIASES",
    "is_placeholder",
    "get_env_var_name",
    "get_env_var_candidates",
    "resolve_provider_key",
    "parse_dotenv",
    "apply_dotenv",
]
