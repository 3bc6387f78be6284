"""Shift metrics aggregator.

Folds a shift's faults into totals:
- total allowed (deducted) time: variable faults debit their full reported
  duration; other faults debit min(allowed, reported)
- total delay: sum of delays that count as penalties
- effective working time: shift duration minus allowed time, floored at 0

Two entry points share the same fold: ``aggregate`` recomputes each fault
with the calculator, ``aggregate_from_stored`` trusts persisted values.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Iterable

from src.common.models import FaultReportItem

from .calculator import evaluate_occurrence
from .models import FaultEvaluation, FaultOccurrence, ShiftMetrics, StoredFaultRecord
from .rules import FaultRuleTable
from .shift_calendar import ShiftCalendar, default_calendar

logger = logging.getLogger(__name__)


def _fold(
    items: Iterable[tuple[float, float, float]],
    shift_duration: int,
) -> ShiftMetrics:
    """Fold (reported, allowed, delay) triples into ShiftMetrics."""
    total_allowed: float = 0
    total_delay: float = 0

    for reported, allowed, delay in items:
        if allowed == 0:
            total_allowed += reported
        else:
            total_allowed += min(allowed, reported)
        if delay > 0:
            total_delay += delay

    return ShiftMetrics(
        shift_duration_minutes=shift_duration,
        total_allowed_minutes=total_allowed,
        total_delay_minutes=total_delay,
        effective_working_minutes=max(0, shift_duration - total_allowed),
    )


def to_occurrences(
    items: Iterable[FaultReportItem],
    active_order_count: int = 1,
) -> list[FaultOccurrence]:
    """Attach the shift's active order count to reported fault items."""
    return [
        FaultOccurrence(
            code=item.code,
            reported_minutes=item.reported_minutes,
            quantity=item.quantity or 1,
            active_order_count=max(1, active_order_count),
        )
        for item in items
    ]


def evaluate_faults(
    items: Iterable[FaultReportItem],
    active_order_count: int = 1,
    rules: FaultRuleTable | None = None,
) -> list[FaultEvaluation]:
    """Evaluate every reported fault of a shift."""
    return [
        evaluate_occurrence(occ, rules=rules)
        for occ in to_occurrences(items, active_order_count)
    ]


def aggregate(
    occurrences: Iterable[FaultOccurrence],
    on_date: date | str | None = None,
    rules: FaultRuleTable | None = None,
    calendar: ShiftCalendar | None = None,
) -> ShiftMetrics:
    """Compute shift metrics by running the calculator on each occurrence."""
    calendar = calendar or default_calendar
    shift_duration = calendar.shift_duration_minutes(on_date)

    triples = []
    for occ in occurrences:
        result = evaluate_occurrence(occ, rules=rules).result
        triples.append((
            max(0, occ.reported_minutes),
            result.allowed_minutes,
            result.delay_minutes if result.counts_as_penalty else 0,
        ))

    metrics = _fold(triples, shift_duration)
    logger.info(
        "Shift metrics (%d faults, %d min shift): allowed=%s delay=%s effective=%s",
        len(triples),
        shift_duration,
        metrics.total_allowed_minutes,
        metrics.total_delay_minutes,
        metrics.effective_working_minutes,
    )
    return metrics


def aggregate_from_stored(
    records: Iterable[StoredFaultRecord],
    on_date: date | str | None = None,
    calendar: ShiftCalendar | None = None,
) -> ShiftMetrics:
    """Compute shift metrics from persisted allowed/delay values.

    A stored allowed time of 0 marks a variable fault, exactly as the
    calculator reports it, so both entry points agree.
    """
    calendar = calendar or default_calendar
    shift_duration = calendar.shift_duration_minutes(on_date)

    records = list(records)
    metrics = _fold(
        (
            (max(0, r.reported_minutes), r.allowed_minutes, r.delay_minutes)
            for r in records
        ),
        shift_duration,
    )
    logger.debug(
        "Stored metrics (%d records, %d min shift): allowed=%s delay=%s effective=%s",
        len(records),
        shift_duration,
        metrics.total_allowed_minutes,
        metrics.total_delay_minutes,
        metrics.effective_working_minutes,
    )
    return metrics
