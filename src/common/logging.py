"""Logging configuration for Shift Ledger.

CLI entry points print their JSON result to stdout, so log lines go to
stderr. ``SHIFT_LEDGER_LOG_LEVEL`` (e.g. ``DEBUG``) overrides the level.
"""

from __future__ import annotations

import logging
import os
import sys

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _level_from_env(default: int) -> int:
    name = os.getenv("SHIFT_LEDGER_LOG_LEVEL", "").strip().upper()
    if not name:
        return default
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else default


def setup_logging(
    level: int = logging.INFO,
    module_name: str = "shift_ledger",
) -> logging.Logger:
    """Configure and return a CLI logger.

    The handler is attached to the root logger once, so library modules
    that use ``logging.getLogger(__name__)`` (calculator, aggregator,
    fallback wrapper, rollover engine) share the same output.

    Args:
        level: Logging level (default INFO, overridable via environment).
        module_name: Name for the returned logger.

    Returns:
        Logger named ``module_name``.
    """
    level = _level_from_env(level)
    root = logging.getLogger()

    if not any(getattr(h, "_shift_ledger", False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
        handler._shift_ledger = True
        root.addHandler(handler)

    root.setLevel(level)
    logger = logging.getLogger(module_name)
    logger.setLevel(level)
    return logger
