"""Achievement scorer.

The nominal target is scaled by the share of the shift actually available
for production (shift minus allowed fault time); the score is achievement
against that adjusted target, capped at 100. Delay never changes the score,
it is only rated for display.
"""

from __future__ import annotations

import math

from .models import DelayRating, PerformanceStatus, ScoreResult

_STATUS_THRESHOLDS = (
    (100, PerformanceStatus.EXCELLENT),
    (80, PerformanceStatus.VERY_GOOD),
    (60, PerformanceStatus.GOOD),
    (40, PerformanceStatus.AVERAGE),
)


def _round_half_up(value: float, digits: int = 0) -> float:
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def status_for(score: int) -> PerformanceStatus:
    for threshold, status in _STATUS_THRESHOLDS:
        if score >= threshold:
            return status
    return PerformanceStatus.NEEDS_IMPROVEMENT


def rate_delay(delay_minutes: float) -> DelayRating:
    """Rate accumulated delay: <=30 / <=60 / <=120 minutes / more."""
    if delay_minutes <= 30:
        return DelayRating("Excellent", 100)
    if delay_minutes <= 60:
        return DelayRating("Good", 80)
    if delay_minutes <= 120:
        return DelayRating("Average", 60)
    return DelayRating("Poor", 40)


def format_minutes(minutes: float) -> str:
    """Human-readable duration: "45 min", "2 h", "1 h 30 min"."""
    total = int(minutes)
    hours, mins = divmod(total, 60)
    if hours == 0:
        return f"{mins} min"
    if mins == 0:
        return f"{hours} h"
    return f"{hours} h {mins} min"


def score(
    target_amount: float,
    actual_achievement: float,
    allowed_fault_minutes: float = 0,
    delay_minutes: float = 0,
    shift_duration_minutes: int = 480,
) -> ScoreResult:
    """Score a technician's achievement against the time-adjusted target.

    Args:
        target_amount: Nominal target for the full shift.
        actual_achievement: Produced amount.
        allowed_fault_minutes: Allowed fault time debited from the shift.
        delay_minutes: Delay over allowances (display only).
        shift_duration_minutes: Shift length from the shift calendar (> 0).

    Returns:
        ScoreResult with overall score in [0, 100] and status bucket.
    """
    actual_working = max(0, shift_duration_minutes - allowed_fault_minutes)
    ratio = actual_working / shift_duration_minutes
    adjusted_target = target_amount * ratio

    if adjusted_target > 0:
        percent = actual_achievement / adjusted_target * 100
    elif actual_achievement > 0:
        percent = 100.0
    else:
        percent = 0.0

    overall = int(min(100, max(0, _round_half_up(percent))))
    status = status_for(overall)

    if overall >= 100:
        message = "Target fully achieved"
    else:
        message = f"Achieved {int(_round_half_up(percent))}% of the adjusted target"

    return ScoreResult(
        overall_score=overall,
        status=status,
        original_target=target_amount,
        adjusted_target=_round_half_up(adjusted_target, 1),
        actual_achievement=actual_achievement,
        achievement_percent=_round_half_up(percent, 1),
        shift_duration_minutes=shift_duration_minutes,
        allowed_fault_minutes=allowed_fault_minutes,
        delay_minutes=delay_minutes,
        actual_working_minutes=actual_working,
        working_time_ratio=int(_round_half_up(ratio * 100)),
        delay_rating=rate_delay(delay_minutes).rating,
        message=message,
    )
