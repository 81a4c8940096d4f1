"""Shared helpers for tests (not fixtures)."""

from __future__ import annotations

import json
import logging
from typing import List


def events_named(records: List[logging.LogRecord], name: str) -> List[dict]:
    """Decode captured JSON records whose ``event`` equals ``name``."""
    out = []
    for r in records:
        try:
            payload = json.loads(r.getMessage())
        except ValueError:
            continue
        if isinstance(payload, dict) and payload.get("event") == name:
            out.append(payload)
    return out
