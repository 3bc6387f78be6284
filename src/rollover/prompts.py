"""Prompts for the rollover reasoning service.

The contract is the structured RolloverRequest; the text below is just
its rendering for the model.
"""

from __future__ import annotations

import json

from src.common.models import RolloverRequest

SYSTEM_PROMPT = (
    "You are a factory shift supervisor agent. "
    "Respond with a single valid JSON object only. Do not use Markdown."
)


def _format_task(task) -> str:
    unit = task.target_unit
    diff = task.difference
    sign = "+" if diff >= 0 else ""
    rate = (
        f"{task.production_rate_per_hour:g} {unit}/hour"
        if task.production_rate_per_hour
        else "unknown"
    )
    return (
        f"- taskId: {task.task_id}\n"
        f"  product: {task.product_name}\n"
        f"  target: {task.target_amount:g} {unit}\n"
        f"  achieved: {task.achieved_amount:g} {unit}\n"
        f"  difference: {sign}{diff:g} {unit}\n"
        f"  production rate: {rate}"
    )


def _format_next_shift(request: RolloverRequest) -> str:
    next_shift = request.next_shift
    if not next_shift.planned_tasks:
        lines = "   (no tasks planned)"
    else:
        lines = "\n".join(
            f"   - {t.product_name}: {t.target_amount:g} {t.target_unit} ({t.target_hours:g} h)"
            for t in next_shift.planned_tasks
        )
    return (
        f"Next shift: {next_shift.name} ({next_shift.date.isoformat()}), "
        f"{next_shift.total_hours:g} h already committed\n{lines}"
    )


RESPONSE_SCHEMA = {
    "decisions": [
        {
            "taskId": "number | string",
            "productName": "string",
            "action": "rollover | balance | none",
            "amountToTransfer": "number >= 0",
            "timeToTransfer": "hours, number >= 0",
            "reason": "string",
        }
    ],
    "summary": "string",
}


def build_rollover_prompt(request: RolloverRequest) -> str:
    """Render the user prompt for a rollover decision.

    Args:
        request: Validated rollover request.

    Returns:
        Prompt text ending with the required JSON shape.
    """
    tasks_section = "\n\n".join(_format_task(t) for t in request.tasks)

    return f"""\
Analyze the results of the finished shift and decide the rollover for each task.

## Current shift
- Date: {request.date.isoformat()}
- Shift: {request.shift_name}

## Tasks and achievements
{tasks_section}

## Receiving shift
{_format_next_shift(request)}

## Hard constraint
No shift may be committed beyond {request.max_shift_hours:g} hours.

## Rules
1. Shortage -> "rollover": carry the remaining amount to the next shift.
2. Surplus -> "balance": deduct the extra amount from future shifts' targets.
3. Otherwise -> "none" with amountToTransfer 0.

Return JSON only, in exactly this shape:
{json.dumps(RESPONSE_SCHEMA, indent=2)}"""
