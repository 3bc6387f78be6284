"""Extra-time calculator.

Single source of truth for time-debit arithmetic: given one fault
occurrence it returns the allowed minutes and the delay (time spent over
the allowance). Pure function of its inputs and the rule table.
"""

from __future__ import annotations

import logging

from .models import ExtraTimeResult, FaultEvaluation, FaultOccurrence
from .rules import FaultRuleTable, default_rule_table

logger = logging.getLogger(__name__)

VARIABLE_FAULT_REASON = "Open-ended fault - no delay counted"


def _at_least_one(value: int | float | None) -> int:
    if value is None or value < 1:
        return 1
    return int(value)


def compute_extra_time(
    code: str,
    reported_minutes: float,
    quantity: int | None = 1,
    active_order_count: int | None = 1,
    rules: FaultRuleTable | None = None,
) -> ExtraTimeResult:
    """Compute allowed time and delay for one fault occurrence.

    Args:
        code: Two-digit fault code. Unknown codes are treated as variable.
        reported_minutes: Duration the technician reported.
        quantity: Units handled (cylinders, axles); None/<1 means 1.
        active_order_count: Concurrently open production orders; None/<1 means 1.
        rules: Rule table (defaults to the configured table).

    Returns:
        ExtraTimeResult with allowed minutes, delay and penalty flag.
    """
    rules = rules or default_rule_table()
    rule = rules.get(code)
    reported = max(0, reported_minutes or 0)
    quantity = _at_least_one(quantity)
    active_order_count = _at_least_one(active_order_count)

    standard = rule.standard_minutes if rule else 0
    if standard == 0:
        return ExtraTimeResult(
            allowed_minutes=0,
            delay_minutes=0,
            counts_as_penalty=False,
            reason=VARIABLE_FAULT_REASON,
        )

    if rule.is_per_order:
        standard = standard * active_order_count

    if rule.per_unit is not None:
        default = rule.per_unit.default_if_unspecified
        if quantity <= 1 and default:
            # Fixed allowance for "count not given"; not scaled by orders
            standard = default
        else:
            standard = rule.per_unit.unit_minutes * quantity

    delay = max(0, reported - standard)
    if delay > 0:
        reason = f"Delay of {delay:g} min over allowed time ({standard:g} min)"
    else:
        reason = f"Within allowed time ({standard:g} min)"

    return ExtraTimeResult(
        allowed_minutes=standard,
        delay_minutes=delay,
        counts_as_penalty=delay > 0,
        reason=reason,
    )


def evaluate_occurrence(
    occurrence: FaultOccurrence,
    rules: FaultRuleTable | None = None,
) -> FaultEvaluation:
    """Run the calculator on a FaultOccurrence and attach the fault name."""
    rules = rules or default_rule_table()
    result = compute_extra_time(
        occurrence.code,
        occurrence.reported_minutes,
        occurrence.quantity,
        occurrence.active_order_count,
        rules=rules,
    )
    logger.debug(
        "Fault %s: duration=%s qty=%s allowed=%s delay=%s",
        occurrence.code,
        occurrence.reported_minutes,
        occurrence.quantity,
        result.allowed_minutes,
        result.delay_minutes,
    )
    return FaultEvaluation(
        occurrence=occurrence,
        result=result,
        fault_name=rules.name_for(occurrence.code),
    )
