"""CLI entry point for shift rollover decisions.

Usage:
    python -m src.rollover.main --input tests/fixtures/sample_shift.json --offline
    python -m src.rollover.main --input shift.json --output decisions.json
"""

from __future__ import annotations

import argparse
import json
from datetime import date
from pathlib import Path

from src.common.logging import setup_logging
from src.common.models import PlannedTask, RolloverAction, TaskAchievement

from .capacity import plan_capacity
from .engine import RolloverEngine

logger = setup_logging(module_name="rollover.main")


def main() -> None:
    parser = argparse.ArgumentParser(description="Decide rollover/balance for a finalized shift")
    parser.add_argument(
        "--input",
        type=Path,
        required=True,
        help="Shift JSON with shift, date, tasks and next_shift_tasks",
    )
    parser.add_argument(
        "--offline",
        action="store_true",
        help="Skip the reasoning service and use the offline algorithm",
    )
    parser.add_argument("--output", type=Path, help="Output JSON file path")

    args = parser.parse_args()

    with open(args.input, "r", encoding="utf-8") as f:
        payload = json.load(f)

    shift_name = payload["shift"]
    shift_date = date.fromisoformat(payload["date"])
    tasks = [TaskAchievement.model_validate(t) for t in payload.get("tasks", [])]
    planned = [PlannedTask.model_validate(t) for t in payload.get("next_shift_tasks", [])]

    engine = RolloverEngine()
    next_shift = engine.plan_next_shift(shift_name, shift_date, planned)
    logger.info(
        "Finalizing %s on %s -> next shift %s (%s)",
        shift_name, shift_date, next_shift.name, next_shift.date,
    )

    analysis = engine.analyze(shift_name, shift_date, tasks, next_shift, offline=args.offline)

    for d in analysis.decisions:
        logger.info(
            "  task %s %s: %s %g (%.2f h) - %s",
            d.task_id, d.product_name, d.action.value,
            d.amount_to_transfer, d.time_to_transfer_hours, d.reason,
        )
    logger.info("Summary: %s%s", analysis.summary, " [offline]" if analysis.fallback else "")

    rollover_hours = sum(
        d.time_to_transfer_hours
        for d in analysis.decisions
        if d.action == RolloverAction.ROLLOVER
    )
    shift_hours = engine.calendar.shift_duration_minutes(next_shift.date) / 60
    capacity = plan_capacity(rollover_hours, next_shift.planned_tasks, shift_hours)
    if capacity.deductions:
        logger.info(
            "Next shift needs %.2f h freed from %d task(s)",
            capacity.freed_hours, len(capacity.deductions),
        )

    output = {
        **analysis.model_dump(mode="json", by_alias=True),
        "next_shift": {"name": next_shift.name, "date": next_shift.date.isoformat()},
        "capacity": {
            "shift_hours": capacity.shift_hours,
            "available_hours": capacity.available_hours,
            "required_hours": capacity.required_hours,
            "shortfall_hours": capacity.shortfall_hours,
            "deductions": [d.to_dict() for d in capacity.deductions],
        },
    }

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            json.dump(output, f, ensure_ascii=False, indent=2)
        logger.info("Output written to %s", args.output)
    else:
        print(json.dumps(output, ensure_ascii=False, indent=2))


if __name__ == "__main__":
    main()
