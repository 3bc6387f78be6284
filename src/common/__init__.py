# Common utilities and shared modules
"""
Shared components used by the fault-time and rollover engines:
- Data models (Pydantic schemas)
- Retry/fallback call wrapper
- Reasoning-service clients
- Logging configuration
- Project configuration
"""

from .config import settings, PROJECT_ROOT, Settings
from .fallback import execute_with_fallback, is_transient_error
from .logging import setup_logging

__all__ = [
    "settings",
    "PROJECT_ROOT",
    "Settings",
    "execute_with_fallback",
    "is_transient_error",
    "setup_logging",
]
