"""genai_providers.config.defaults
===============================

Central place for small, stable default values used across the package.
They can be overridden via environment variables or an external config file,
but provide sensible fallbacks for local development and tests.

This module imports nothing from the rest of the package; only plain
constants live here.
"""

from __future__ import annotations

# ---- Generative Language API ----
GEMINI_DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com"
GEMINI_DEFAULT_API_VERSION = "v1beta"
GEMINI_DEFAULT_MODEL = "gemini-2.0-flash"
GEMINI_DEFAULT_EMBEDDING_MODEL = "text-embedding-004"

# ---- Context caching / Files API ----
# TTL sent when a cached content is created without an explicit one.
GEMINI_DEFAULT_CACHE_TTL = "300s"
# Page size used by files listing when the caller passes none.
GEMINI_DEFAULT_FILES_PAGE_SIZE = 10

# ---- Streaming ----
# Capacity of the bounded queue used by push-based streaming.
STREAM_QUEUE_CAPACITY = 32


__all__ = [
    "GEMINI_DEFAULT_BASE_URL",
    "GEMINI_DEFAULT_API_VERSION",
    "GEMINI_DEFAULT_MODEL",
    "GEMINI_DEFAULT_EMBEDDING_MODEL",
    "GEMINI_DEFAULT_CACHE_TTL",
    "GEMINI_DEFAULT_FILES_PAGE_SIZE",
    "STREAM_QUEUE_CAPACITY",
]
