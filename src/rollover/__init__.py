"""Rollover Decision Protocol - shortage/surplus redistribution across shifts."""

from .capacity import CapacityPlan, plan_capacity, products_match
from .engine import RolloverEngine, parse_rollover_response
from .offline import offline_rollover_analysis
from .prompts import SYSTEM_PROMPT, build_rollover_prompt

__all__ = [
    "CapacityPlan",
    "plan_capacity",
    "products_match",
    "RolloverEngine",
    "parse_rollover_response",
    "offline_rollover_analysis",
    "SYSTEM_PROMPT",
    "build_rollover_prompt",
]
