"""Deterministic offline rollover algorithm.

Used whenever the reasoning service gives no usable answer. For each task,
``diff = achieved - target``:
- diff < -tolerance: rollover the shortage
- diff > tolerance: balance the surplus
- otherwise: none

Transfer time is amount / rate, where the rate is always positive.
"""

from __future__ import annotations

import logging
from typing import Iterable

from src.common.models import (
    RolloverAction,
    RolloverAnalysis,
    RolloverDecision,
    TaskAchievement,
)

logger = logging.getLogger(__name__)

OFFLINE_SUMMARY_PREFIX = "Offline estimate: "


def decide_task(
    task: TaskAchievement,
    tolerance: float = 5.0,
    fallback_rate: float = 100.0,
    nominal_shift_hours: float = 8.0,
) -> RolloverDecision:
    """Decide the rollover action for a single task."""
    diff = task.difference

    if diff < -tolerance:
        action = RolloverAction.ROLLOVER
        amount = abs(diff)
        reason = f"Offline: shortage of {amount:g} {task.target_unit}".rstrip()
    elif diff > tolerance:
        action = RolloverAction.BALANCE
        amount = abs(diff)
        reason = f"Offline: surplus of {amount:g} {task.target_unit}".rstrip()
    else:
        return RolloverDecision(
            task_id=task.task_id,
            product_name=task.product_name,
            action=RolloverAction.NONE,
            amount_to_transfer=0,
            time_to_transfer_hours=0,
            reason="Offline: target met",
        )

    rate = task.resolved_rate(fallback_rate, nominal_shift_hours)
    return RolloverDecision(
        task_id=task.task_id,
        product_name=task.product_name,
        action=action,
        amount_to_transfer=amount,
        time_to_transfer_hours=amount / rate,
        reason=reason,
    )


def offline_rollover_analysis(
    tasks: Iterable[TaskAchievement],
    tolerance: float = 5.0,
    fallback_rate: float = 100.0,
    nominal_shift_hours: float = 8.0,
) -> RolloverAnalysis:
    """Compute rollover decisions from arithmetic alone.

    Args:
        tasks: Task achievement deltas of the finalized shift.
        tolerance: Units of difference treated as "target met".
        fallback_rate: Rate (units/hour) when none can be derived.
        nominal_shift_hours: Hours used to derive a rate from the target.

    Returns:
        RolloverAnalysis flagged as a fallback outcome.
    """
    decisions: list[RolloverDecision] = []
    summary_parts: list[str] = []

    for task in tasks:
        decision = decide_task(task, tolerance, fallback_rate, nominal_shift_hours)
        decisions.append(decision)

        unit = f" {task.target_unit}" if task.target_unit else ""
        if decision.action == RolloverAction.ROLLOVER:
            summary_parts.append(
                f"roll over {decision.amount_to_transfer:g}{unit} of {task.product_name}"
            )
        elif decision.action == RolloverAction.BALANCE:
            summary_parts.append(
                f"balance surplus {decision.amount_to_transfer:g}{unit} of {task.product_name}"
            )

    summary = "; ".join(summary_parts) if summary_parts else "all targets met"
    logger.info("Offline rollover: %d decision(s) - %s", len(decisions), summary)

    return RolloverAnalysis(
        decisions=decisions,
        summary=OFFLINE_SUMMARY_PREFIX + summary,
        fallback=True,
    )
