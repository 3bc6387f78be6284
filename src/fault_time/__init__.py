"""Fault-Time Accounting Engine - fault debits, shift metrics, scoring."""

from .aggregator import aggregate, aggregate_from_stored, evaluate_faults
from .calculator import compute_extra_time
from .models import (
    ExtraTimeResult,
    FaultOccurrence,
    FaultRule,
    ScoreResult,
    ShiftMetrics,
    StoredFaultRecord,
)
from .rules import FaultRuleTable, default_rule_table
from .scorer import score
from .shift_calendar import ShiftCalendar, shift_duration_minutes, shifts_for_date

__all__ = [
    "aggregate",
    "aggregate_from_stored",
    "evaluate_faults",
    "compute_extra_time",
    "ExtraTimeResult",
    "FaultOccurrence",
    "FaultRule",
    "ScoreResult",
    "ShiftMetrics",
    "StoredFaultRecord",
    "FaultRuleTable",
    "default_rule_table",
    "score",
    "ShiftCalendar",
    "shift_duration_minutes",
    "shifts_for_date",
]
