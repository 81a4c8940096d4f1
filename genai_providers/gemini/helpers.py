"""Gemini helpers module.

Purpose:
- Small, side-effect-free utilities shared by the transport and the provider
  facade (retry configuration with attempt logging, endpoint names).

Retry strategy:
- ``build_retry_config`` reads the optional ``retry`` section of the merged
  provider config (``max_attempts``, ``delay_base``, ``max_delay``) and attaches a logger
  emitting ``retry.attempt`` events. A per-call ``max_attempts`` wins.
"""

from __future__ import annotations

import logging
from typing import Optional

from ..base.errors import ProviderError
from ..base.logging import LogContext, normalized_log_event
from ..base.resilience.retry import RetryConfig
from ..config import get_provider_config

PROVIDER_NAME = "gemini"


def model_path(model: str) -> str:
    """Return ``models/{model}`` unless ``model`` already carries a resource prefix."""
    if model.startswith(("models/", "tunedModels/")):
        return model
    return f"models/{model}"


def build_retry_config(
    logger: logging.Logger,
    ctx: LogContext,
    *,
    phase: Optional[str] = None,
    max_attempts: Optional[int] = None,
) -> RetryConfig:
    """Construct a retry configuration for Gemini HTTP operations.

    Parameters:
        logger: Logger used to emit normalized events.
        ctx: Correlation context for logs.
        phase: Optional phase label for attempt logs.
        max_attempts: Per-call override of the configured attempt count.
    """
    retry_cfg_raw = get_provider_config(PROVIDER_NAME).get("retry", {}) or {}
    attempts = max_attempts if max_attempts is not None else int(retry_cfg_raw.get("max_attempts", 3))
    delay_base = float(retry_cfg_raw.get("delay_base", 2.0))
    max_delay = retry_cfg_raw.get("max_delay")

    def _attempt_logger(*, attempt: int, max_attempts: int, delay, error: ProviderError | None):
        if error is None:
            return
        normalized_log_event(
            logger,
            "retry.attempt",
            ctx,
            phase=(phase or "retry"),
            attempt=attempt,
            max_attempts=max_attempts,
            delay=delay,
            error_code=error.code.value,
            will_retry=bool(delay is not None and error.retryable),
            tokens=None,
            emitted=None,
            level=logging.WARNING,
        )

    return RetryConfig(
        max_attempts=max(1, attempts),
        delay_base=delay_base,
        max_delay=float(max_delay) if max_delay is not None else None,
        attempt_logger=_attempt_logger,
    )


__all__ = ["PROVIDER_NAME", "model_path", "build_retry_config"]
