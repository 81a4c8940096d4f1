"""Structured logging for the ``genai`` logger tree.

Every module logs through ``get_logger(<dotted name>)``; the resulting
children own no handlers and propagate to the shared ``"genai"`` base
logger, which carries one stderr handler (JSON by default) and optionally a
rotating file handler attached by ``configure_logger``.

Events are single JSON messages built by ``log_event``. Lifecycle events of
the stream assembler and the provider facade go through
``normalized_log_event`` so that they always carry the canonical keys in
``REQUIRED_NORMALIZED_KEYS``.

Environment:
    GENAI_LOG_LEVEL  level name applied to the base logger whenever it is set
"""
from __future__ import annotations

import contextlib
import json
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, Iterable, Mapping, Optional

from .log_support import JsonFormatter, LogContext

BASE_LOGGER_NAME = "genai"
LOG_LEVEL_ENV = "GENAI_LOG_LEVEL"

REQUIRED_NORMALIZED_KEYS = ("structured", "phase", "attempt", "error_code", "emitted", "tokens")

_PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}
_LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
_LOG_FILE_BACKUPS = 5

# handler attribute marking handlers this module owns: "console" or "file"
_ROLE_ATTR = "_genai_role"
_READY_ATTR = "_genai_ready"


def _parse_level(value: str | None, default: int = logging.INFO) -> int:
    """Map a level name (case-insensitive) to its constant, else ``default``."""
    if not value:
        return default
    return _LEVELS.get(value.strip().upper(), default)


def _formatter(json_mode: bool) -> logging.Formatter:
    if json_mode:
        return JsonFormatter()
    return logging.Formatter(_PLAIN_FORMAT)


def _role(handler: logging.Handler) -> str | None:
    return getattr(handler, _ROLE_ATTR, None)


def _tag(handler: logging.Handler, role: str) -> logging.Handler:
    setattr(handler, _ROLE_ATTR, role)
    return handler


def _detach(logger: logging.Logger, handlers: Iterable[logging.Handler]) -> None:
    for handler in list(handlers):
        logger.removeHandler(handler)
        with contextlib.suppress(Exception):
            handler.close()


def _stderr_handler(json_mode: bool, level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(_formatter(json_mode))
    return _tag(handler, "console")


def _refresh_console(logger: logging.Logger, json_mode: bool, level: int) -> None:
    """Re-level console handlers and replace any whose stream was closed."""
    stale = []
    for handler in logger.handlers:
        if _role(handler) != "console":
            continue
        stream = getattr(handler, "stream", None)
        if stream is None or getattr(stream, "closed", False):
            stale.append(handler)
        else:
            handler.setLevel(level)
    if stale:
        # pytest capture may close stderr between tests
        _detach(logger, stale)
        logger.addHandler(_stderr_handler(json_mode, level))


def _base_logger(json_mode: bool, level: int) -> logging.Logger:
    logger = logging.getLogger(BASE_LOGGER_NAME)
    env_value = os.getenv(LOG_LEVEL_ENV)

    if not getattr(logger, _READY_ATTR, False):
        effective = _parse_level(env_value, default=level)
        logger.setLevel(effective)
        logger.handlers[:] = [_stderr_handler(json_mode, effective)]
        logger.propagate = False
        setattr(logger, _READY_ATTR, True)
        return logger

    effective = _parse_level(env_value, default=logger.level) if env_value else logger.level
    if effective != logger.level:
        logger.setLevel(effective)
    _refresh_console(logger, json_mode, effective)
    return logger


def get_logger(name: str = BASE_LOGGER_NAME, json_mode: bool = True, level: int = logging.INFO) -> logging.Logger:
    """Return ``genai.<name>`` (or the base logger itself).

    ``level`` and ``json_mode`` only matter the first time the base logger is
    built; afterwards use ``configure_logger``.
    """
    base = _base_logger(json_mode, level)
    if name == BASE_LOGGER_NAME:
        return base
    full_name = name if name.startswith(BASE_LOGGER_NAME + ".") else f"{BASE_LOGGER_NAME}.{name}"
    child = logging.getLogger(full_name)
    child.setLevel(logging.NOTSET)
    child.propagate = True
    return child


def _attach_file(logger: logging.Logger, file_path: str, json_mode: bool) -> None:
    target = os.path.abspath(os.path.expanduser(file_path))
    os.makedirs(os.path.dirname(target), exist_ok=True)

    current = None
    others = []
    for handler in logger.handlers:
        if _role(handler) != "file":
            continue
        if current is None and getattr(handler, "baseFilename", None) == target:
            current = handler
        else:
            others.append(handler)
    _detach(logger, others)

    if current is None:
        current = _tag(
            RotatingFileHandler(target, maxBytes=_LOG_FILE_MAX_BYTES, backupCount=_LOG_FILE_BACKUPS, encoding="utf-8"),
            "file",
        )
        logger.addHandler(current)
    current.setFormatter(_formatter(json_mode))
    current.setLevel(logger.level)


def configure_logger(
    *,
    level: int | str | None = None,
    file_path: Optional[str] = None,
    json_mode: bool = True,
) -> logging.Logger:
    """Adjust the base logger at runtime and return it.

    ``level`` accepts a constant or a name; ``None`` keeps the current level.
    With ``file_path`` a rotating UTF-8 log file is attached (one at a time);
    without it the managed file handler, if any, is removed. Handlers added
    by callers are never touched.
    """
    logger = _base_logger(json_mode, logging.INFO)

    if level is not None:
        numeric = _parse_level(level, default=logger.level) if isinstance(level, str) else int(level)
        logger.setLevel(numeric)
        for handler in logger.handlers:
            handler.setLevel(numeric)

    if file_path is None:
        _detach(logger, [h for h in logger.handlers if _role(h) == "file"])
    else:
        _attach_file(logger, file_path, json_mode)
    return logger


def log_event(
    logger: logging.Logger,
    event: str,
    ctx: LogContext | None = None,
    *,
    level: int = logging.INFO,
    keep_none: bool = False,
    **fields: Any,
) -> None:
    """Log ``{"event": event, **ctx, **fields}`` as one JSON message.

    ``None`` field values are dropped unless ``keep_none`` is set.
    """
    if not logger.isEnabledFor(level):
        return
    payload: Dict[str, Any] = {"event": event}
    if ctx:
        payload.update(ctx.to_dict())
    for key, value in fields.items():
        if value is None and not keep_none:
            continue
        payload[key] = value
    logger.log(level, json.dumps(payload, ensure_ascii=False, default=str))


def _coerce_tokens(tokens: Any) -> Optional[Dict[str, Any]]:
    if tokens is None:
        return None
    if isinstance(tokens, Mapping):
        return dict(tokens)
    if isinstance(tokens, (list, tuple)):
        with contextlib.suppress(TypeError, ValueError):
            return dict(tokens)
    return {"value": repr(tokens)}


def normalized_log_event(  # noqa: PLR0913
    logger: logging.Logger,
    event: str,
    ctx: LogContext | None = None,
    *,
    phase: str,
    attempt: int | None = None,
    error_code: str | None = None,
    emitted: Any = None,
    tokens: Any = None,
    structured: bool = True,
    level: int = logging.INFO,
    **extra_fields: Any,
) -> None:
    """Emit ``event`` with the canonical keys always present.

    ``error_code`` is the exception: it is left out when ``None`` so a record
    without it reads as a success. Extra fields are appended unless they are
    ``None`` or would replace a canonical value that is already set.
    """
    fields: Dict[str, Any] = {
        "structured": structured,
        "phase": phase,
        "attempt": attempt,
        "emitted": emitted,
        "tokens": _coerce_tokens(tokens),
    }
    if error_code is not None:
        fields["error_code"] = error_code
    for key, value in extra_fields.items():
        if value is None or fields.get(key) is not None:
            continue
        fields[key] = value
    log_event(logger, event, ctx, level=level, keep_none=True, **fields)


__all__ = [
    "BASE_LOGGER_NAME",
    "LogContext",
    "get_logger",
    "configure_logger",
    "log_event",
    "normalized_log_event",
    "REQUIRED_NORMALIZED_KEYS",
]
