"""Next-shift capacity planning for rollovers.

When a rollover needs more hours than the receiving shift has free, hours
are taken from the lowest-priority planned tasks first. Each deduction is
meant to cascade to the shift after. The plan is pure; applying it is the
persistence layer's job.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable

from src.common.models import PlannedTask

# Deductions leaving less than 3 minutes remove the task entirely
MIN_REMAINING_HOURS = 0.05
_EPSILON = 0.01

_AMOUNT_RE = re.compile(r"\d+\.?\d*\s*(كيلو|طن|kilometer|ton|units|kg|t)\b", re.IGNORECASE)
_TAG_RE = re.compile(r"\[.*?\]|\(.*?\)")
_MARKER_RE = re.compile(r"CASCADE|ROLLOVER|PULL", re.IGNORECASE)
_SPACE_RE = re.compile(r"\s+")


def normalize_product_name(description: str | None) -> str:
    """Strip amounts, tags and rollover markers from a task description."""
    if not description:
        return ""
    text = _AMOUNT_RE.sub("", description)
    text = _TAG_RE.sub("", text)
    text = _MARKER_RE.sub("", text)
    return _SPACE_RE.sub(" ", text).strip().lower()


def products_match(first: str | None, second: str | None) -> bool:
    """Exact normalized match, or prefix match for names longer than 3 chars."""
    a = normalize_product_name(first)
    b = normalize_product_name(second)
    return (
        a == b
        or (len(a) > 3 and b.startswith(a))
        or (len(b) > 3 and a.startswith(b))
    )


def find_matching_task(product_name: str, tasks: Iterable[PlannedTask]) -> PlannedTask | None:
    """First planned task for the same product, if any."""
    for task in tasks:
        if products_match(task.product_name, product_name):
            return task
    return None


@dataclass
class TaskDeduction:
    """Hours/amount removed from one planned task to make room."""

    task_id: int | str | None
    product_name: str
    hours: float
    amount: int
    rate: float
    unit: str = ""
    removes_task: bool = False

    def to_dict(self) -> dict:
        return {
            "task_id": self.task_id,
            "product_name": self.product_name,
            "hours": round(self.hours, 2),
            "amount": self.amount,
            "rate": self.rate,
            "unit": self.unit,
            "removes_task": self.removes_task,
        }


@dataclass
class CapacityPlan:
    """How a rollover of ``required_hours`` fits into the receiving shift."""

    shift_hours: float
    committed_hours: float
    required_hours: float
    deductions: list[TaskDeduction] = field(default_factory=list)

    @property
    def available_hours(self) -> float:
        return max(0.0, self.shift_hours - self.committed_hours)

    @property
    def freed_hours(self) -> float:
        return sum(d.hours for d in self.deductions)

    @property
    def shortfall_hours(self) -> float:
        """Hours that still do not fit after all deductions."""
        return max(0.0, self.required_hours - self.available_hours - self.freed_hours)

    @property
    def fits(self) -> bool:
        return self.shortfall_hours <= _EPSILON


def plan_capacity(
    required_hours: float,
    planned_tasks: Iterable[PlannedTask],
    shift_hours: float,
) -> CapacityPlan:
    """Plan deductions so a rollover fits within the shift's standard hours.

    Args:
        required_hours: Hours the rollover needs.
        planned_tasks: Tasks already planned on the receiving shift.
        shift_hours: Standard duration of the receiving shift in hours.

    Returns:
        CapacityPlan; ``deductions`` is empty when the rollover already fits.
    """
    tasks = list(planned_tasks)
    plan = CapacityPlan(
        shift_hours=shift_hours,
        committed_hours=sum(t.target_hours for t in tasks),
        required_hours=max(0.0, required_hours),
    )

    to_free = plan.required_hours - plan.available_hours
    if to_free <= 0:
        return plan

    # Highest priority number first = least important first
    for task in sorted(tasks, key=lambda t: t.priority, reverse=True):
        freed = plan.freed_hours
        if freed >= to_free - _EPSILON:
            break
        if task.target_hours <= 0:
            continue

        rate = task.production_rate_per_hour
        if not rate or rate <= 0:
            rate = task.target_amount / task.target_hours

        hours = min(task.target_hours, to_free - freed)
        plan.deductions.append(TaskDeduction(
            task_id=task.task_id,
            product_name=normalize_product_name(task.product_name),
            hours=hours,
            amount=round(rate * hours),
            rate=rate,
            unit=task.target_unit,
            removes_task=task.target_hours - hours < MIN_REMAINING_HOURS,
        ))

    return plan
