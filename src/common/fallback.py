"""Retry-then-fallback wrapper for remote AI operations.

Every AI-backed capability (transcription, fault extraction, rollover
reasoning) goes through ``execute_with_fallback``:

1. Call the primary operation up to ``max_attempts`` times. Transient
   failures are retried after ``min(1000 * attempt, 5000)`` ms; a permanent
   failure stops retrying immediately.
2. Call the fallback operation exactly once.
3. If the fallback fails too, return ``None``. Callers treat that as
   "no answer", never as an exception.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

MAX_BACKOFF_MS = 5000
BACKOFF_STEP_MS = 1000

# Rate limiting and server-busy responses
TRANSIENT_STATUS_CODES = frozenset({429, 500, 502, 503, 504, 529})

TRANSIENT_MESSAGE_MARKERS = (
    "econnrefused",
    "etimedout",
    "econnreset",
    "timeout",
    "timed out",
    "connection refused",
    "connection reset",
    "connection error",
    "overloaded",
)


def _status_of(error: BaseException) -> int | None:
    for attr in ("status_code", "status"):
        status = getattr(error, attr, None)
        if isinstance(status, int):
            return status
    response = getattr(error, "response", None)
    status = getattr(response, "status_code", None)
    return status if isinstance(status, int) else None


def is_transient_error(error: BaseException) -> bool:
    """Return True when retrying the same call may succeed."""
    if isinstance(error, (TimeoutError, ConnectionError)):
        return True

    status = _status_of(error)
    if status is not None:
        # Bad request, auth, invalid parameters: permanent
        return status in TRANSIENT_STATUS_CODES

    message = str(error).lower()
    return any(marker in message for marker in TRANSIENT_MESSAGE_MARKERS)


def backoff_delay_ms(attempt: int) -> int:
    """Delay after the given (1-based) failed attempt, capped at 5 s."""
    return min(BACKOFF_STEP_MS * attempt, MAX_BACKOFF_MS)


def execute_with_fallback(
    primary: Callable[[], T],
    fallback: Callable[[], T],
    operation_name: str = "AI operation",
    max_attempts: int = 3,
    is_transient: Callable[[BaseException], bool] = is_transient_error,
    sleep: Callable[[float], None] = time.sleep,
) -> T | None:
    """Run ``primary`` with bounded retries, then ``fallback`` once.

    Args:
        primary: Zero-argument callable for the primary backend.
        fallback: Zero-argument callable for the secondary backend.
        operation_name: Label used in log lines.
        max_attempts: Maximum primary attempts (at least 1).
        is_transient: Error classifier; permanent errors skip to fallback.
        sleep: Sleep function taking seconds (injectable for tests).

    Returns:
        The first successful result, or None if both backends failed.
    """
    max_attempts = max(1, max_attempts)
    last_error: BaseException | None = None

    for attempt in range(1, max_attempts + 1):
        logger.info(
            "Attempt %d/%d - %s (primary)", attempt, max_attempts, operation_name,
        )
        try:
            return primary()
        except Exception as exc:
            last_error = exc
            transient = is_transient(exc)
            logger.warning(
                "Primary attempt %d failed (%s): %s",
                attempt,
                "transient" if transient else "permanent",
                exc,
            )
            if not transient:
                logger.info("Permanent error, skipping to fallback")
                break
            if attempt < max_attempts:
                delay = backoff_delay_ms(attempt)
                logger.info("Waiting %dms before retry", delay)
                sleep(delay / 1000)

    logger.info("Primary failed, switching to fallback (%s)", operation_name)
    try:
        result = fallback()
    except Exception as exc:
        logger.error("Fallback also failed: %s", exc)
        if last_error is not None:
            logger.error("Original error: %s", last_error)
        return None

    logger.info("%s succeeded on fallback", operation_name)
    return result
