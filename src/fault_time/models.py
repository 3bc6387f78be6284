"""Data models for fault-time accounting."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class PerUnitRule:
    """Per-unit scaling: unit_minutes x quantity, or a fixed default."""

    unit_minutes: float
    default_if_unspecified: float | None = None
    unit_name: str = ""


@dataclass(frozen=True)
class FaultRule:
    """Static rule for one fault code.

    standard_minutes == 0 marks a variable (open-ended) fault.
    """

    code: str
    name: str
    standard_minutes: float
    is_per_order: bool = False
    per_unit: PerUnitRule | None = None

    @property
    def is_variable(self) -> bool:
        return self.standard_minutes == 0

    @property
    def is_per_unit(self) -> bool:
        return self.per_unit is not None


@dataclass(frozen=True)
class FaultOccurrence:
    """One reported fault within a shift."""

    code: str
    reported_minutes: float
    quantity: int = 1
    active_order_count: int = 1


@dataclass(frozen=True)
class ExtraTimeResult:
    """Allowed time and delay for a single fault occurrence."""

    allowed_minutes: float
    delay_minutes: float
    counts_as_penalty: bool
    reason: str

    def to_dict(self) -> dict:
        return {
            "allowed_minutes": self.allowed_minutes,
            "delay_minutes": self.delay_minutes,
            "counts_as_penalty": self.counts_as_penalty,
            "reason": self.reason,
        }


@dataclass(frozen=True)
class StoredFaultRecord:
    """A persisted evaluation row that already carries allowed/delay values."""

    fault_code: str
    reported_minutes: float
    allowed_minutes: float
    delay_minutes: float


@dataclass(frozen=True)
class FaultEvaluation:
    """An occurrence together with its computed extra-time result."""

    occurrence: FaultOccurrence
    result: ExtraTimeResult
    fault_name: str = ""

    def to_stored_record(self) -> StoredFaultRecord:
        return StoredFaultRecord(
            fault_code=self.occurrence.code,
            reported_minutes=self.occurrence.reported_minutes,
            allowed_minutes=self.result.allowed_minutes,
            delay_minutes=self.result.delay_minutes,
        )

    def to_dict(self) -> dict:
        return {
            "fault_code": self.occurrence.code,
            "fault_name": self.fault_name,
            "reported_minutes": self.occurrence.reported_minutes,
            "quantity": self.occurrence.quantity,
            **self.result.to_dict(),
        }


@dataclass(frozen=True)
class ShiftMetrics:
    """Shift-level fault-time totals. Always recomputed from source."""

    shift_duration_minutes: int
    total_allowed_minutes: float
    total_delay_minutes: float
    effective_working_minutes: float

    @property
    def effective_working_hours(self) -> float:
        return round(self.effective_working_minutes / 60, 2)

    @property
    def total_delay_hours(self) -> float:
        return round(self.total_delay_minutes / 60, 2)

    def to_dict(self) -> dict:
        return {
            "shift_duration_minutes": self.shift_duration_minutes,
            "total_allowed_minutes": self.total_allowed_minutes,
            "total_delay_minutes": self.total_delay_minutes,
            "effective_working_minutes": self.effective_working_minutes,
            "effective_working_hours": self.effective_working_hours,
            "total_delay_hours": self.total_delay_hours,
        }


class PerformanceStatus(str, Enum):
    """Qualitative bucket for an overall score."""
    EXCELLENT = "Excellent"
    VERY_GOOD = "Very Good"
    GOOD = "Good"
    AVERAGE = "Average"
    NEEDS_IMPROVEMENT = "Needs Improvement"


@dataclass(frozen=True)
class DelayRating:
    """Display-only rating of accumulated delay."""

    rating: str
    score: int


@dataclass(frozen=True)
class ScoreResult:
    """Achievement score for one task/shift."""

    overall_score: int
    status: PerformanceStatus
    original_target: float
    adjusted_target: float
    actual_achievement: float
    achievement_percent: float
    shift_duration_minutes: int
    allowed_fault_minutes: float
    delay_minutes: float
    actual_working_minutes: float
    working_time_ratio: int  # percent
    delay_rating: str
    message: str

    def to_dict(self) -> dict:
        return {
            "overall_score": self.overall_score,
            "status": self.status.value,
            "original_target": self.original_target,
            "adjusted_target": self.adjusted_target,
            "actual_achievement": self.actual_achievement,
            "achievement_percent": self.achievement_percent,
            "shift_duration_minutes": self.shift_duration_minutes,
            "allowed_fault_minutes": self.allowed_fault_minutes,
            "delay_minutes": self.delay_minutes,
            "actual_working_minutes": self.actual_working_minutes,
            "working_time_ratio": self.working_time_ratio,
            "delay_rating": self.delay_rating,
            "message": self.message,
        }
