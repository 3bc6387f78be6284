"""CLI entry point for fault-time evaluation.

Usage:
    python -m src.fault_time.main --input tests/fixtures/sample_fault_report.json
    python -m src.fault_time.main --input report.json --date 2025-01-24 --orders 2
    python -m src.fault_time.main --input report.json --target 1000 --achieved 820 --output out.json
"""

from __future__ import annotations

import argparse
import json
from pathlib import Path

from src.common.logging import setup_logging

from .aggregator import aggregate_from_stored, evaluate_faults
from .report_parser import parse_fault_payload
from .scorer import format_minutes, score
from .shift_calendar import default_calendar

logger = setup_logging(module_name="fault_time.main")


def main() -> None:
    parser = argparse.ArgumentParser(description="Fault-time evaluation for one shift")
    parser.add_argument(
        "--input",
        type=Path,
        required=True,
        help="Fault report JSON ({\"faults\": [...]} plus optional date/target/achievement)",
    )
    parser.add_argument("--date", help="Shift date YYYY-MM-DD (default: input or today)")
    parser.add_argument("--orders", type=int, help="Active production order count")
    parser.add_argument("--target", type=float, help="Nominal shift target")
    parser.add_argument("--achieved", type=float, help="Actual achievement")
    parser.add_argument("--output", type=Path, help="Output JSON file path")

    args = parser.parse_args()

    with open(args.input, "r", encoding="utf-8") as f:
        payload = json.load(f)

    shift_date = args.date or payload.get("date")
    orders = args.orders or payload.get("active_order_count", 1)
    target = args.target if args.target is not None else payload.get("target_amount")
    achieved = args.achieved if args.achieved is not None else payload.get("achievement")

    items = parse_fault_payload(payload)
    evaluations = evaluate_faults(items, active_order_count=orders)
    metrics = aggregate_from_stored(
        [e.to_stored_record() for e in evaluations], on_date=shift_date,
    )

    for e in evaluations:
        logger.info(
            "  %s %s: %g min, qty %d -> %s",
            e.occurrence.code,
            e.fault_name,
            e.occurrence.reported_minutes,
            e.occurrence.quantity,
            e.result.reason,
        )
    logger.info(
        "Shift %s: deducted %s, delay %s, effective %s",
        shift_date or "today",
        format_minutes(metrics.total_allowed_minutes),
        format_minutes(metrics.total_delay_minutes),
        format_minutes(metrics.effective_working_minutes),
    )

    output: dict = {
        "date": shift_date,
        "shifts": default_calendar.shifts_for_date(shift_date),
        "faults": [e.to_dict() for e in evaluations],
        "metrics": metrics.to_dict(),
    }

    if target is not None and achieved is not None:
        result = score(
            float(target),
            float(achieved),
            allowed_fault_minutes=metrics.total_allowed_minutes,
            delay_minutes=metrics.total_delay_minutes,
            shift_duration_minutes=metrics.shift_duration_minutes,
        )
        logger.info("Score: %d (%s) - %s", result.overall_score, result.status.value, result.message)
        output["score"] = result.to_dict()

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            json.dump(output, f, ensure_ascii=False, indent=2)
        logger.info("Output written to %s", args.output)
    else:
        print(json.dumps(output, ensure_ascii=False, indent=2))


if __name__ == "__main__":
    main()
