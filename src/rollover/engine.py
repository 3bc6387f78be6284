"""Rollover decision engine.

Asks a reasoning service (primary + fallback backend, via the retry
wrapper) how each task's shortage or surplus should move to future shifts,
validates the answer, and falls back to the offline algorithm whenever the
answer is missing or malformed.

Usage:
    engine = RolloverEngine()
    next_plan = engine.plan_next_shift("Third Shift", date(2025, 1, 23), planned)
    analysis = engine.analyze("Third Shift", date(2025, 1, 23), tasks, next_plan)
"""

from __future__ import annotations

import logging
import time
from datetime import date
from typing import Callable, Iterable

from pydantic import ValidationError

from src.common.config import Settings
from src.common.fallback import execute_with_fallback
from src.common.llm import ReasoningClient
from src.common.models import (
    NextShiftPlan,
    PlannedTask,
    RolloverAnalysis,
    RolloverRequest,
    TaskAchievement,
)
from src.fault_time.shift_calendar import ShiftCalendar

from .offline import offline_rollover_analysis
from .prompts import SYSTEM_PROMPT, build_rollover_prompt

logger = logging.getLogger(__name__)


def parse_rollover_response(data: object) -> RolloverAnalysis | None:
    """Validate a reasoning-service answer.

    Accepted shapes, tried in order:
    1. ``{"decisions": [...], "summary": ...}``
    2. the same wrapped in ``{"result": {...}}``
    3. ``{"decisions": {...}}`` (single object, wrapped into a list)

    Returns:
        RolloverAnalysis, or None when the answer is unusable.
    """
    if not isinstance(data, dict):
        return None

    candidate = data
    if not isinstance(candidate.get("decisions"), (list, dict)) and isinstance(
        candidate.get("result"), dict
    ):
        candidate = candidate["result"]

    decisions = candidate.get("decisions")
    if isinstance(decisions, dict):
        decisions = [decisions]
    elif not isinstance(decisions, list):
        return None

    try:
        return RolloverAnalysis(
            decisions=decisions,
            summary=str(candidate.get("summary") or ""),
            fallback=False,
        )
    except ValidationError as exc:
        logger.warning("Rollover response failed validation: %s", exc)
        return None


class RolloverEngine:
    """Decide rollover/balance actions for a finalized shift."""

    def __init__(
        self,
        settings: Settings | None = None,
        client: ReasoningClient | None = None,
        calendar: ShiftCalendar | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.settings = settings or Settings.load()
        self.client = client or ReasoningClient(self.settings.reasoning)
        self.calendar = calendar or ShiftCalendar.from_settings(self.settings.shifts)
        self._sleep = sleep

    def plan_next_shift(
        self,
        shift_name: str,
        shift_date: date,
        planned_tasks: Iterable[PlannedTask] = (),
    ) -> NextShiftPlan:
        """Build the receiving-shift context for ``shift_name`` on ``shift_date``."""
        name, next_date = self.calendar.next_shift(shift_name, shift_date)
        return NextShiftPlan(name=name, date=next_date, planned_tasks=list(planned_tasks))

    def build_request(
        self,
        shift_name: str,
        shift_date: date,
        tasks: list[TaskAchievement],
        next_shift: NextShiftPlan,
    ) -> RolloverRequest:
        max_hours = self.calendar.shift_duration_minutes(next_shift.date) / 60
        return RolloverRequest(
            shift_name=shift_name,
            date=shift_date,
            tasks=tasks,
            next_shift=next_shift,
            max_shift_hours=max_hours,
        )

    def offline(self, tasks: list[TaskAchievement]) -> RolloverAnalysis:
        cfg = self.settings.rollover
        return offline_rollover_analysis(
            tasks,
            tolerance=cfg.tolerance,
            fallback_rate=cfg.fallback_rate_per_hour,
            nominal_shift_hours=cfg.nominal_shift_hours,
        )

    def analyze(
        self,
        shift_name: str,
        shift_date: date,
        tasks: list[TaskAchievement],
        next_shift: NextShiftPlan,
        offline: bool = False,
    ) -> RolloverAnalysis:
        """Decide rollover actions for every task of the shift.

        Never raises for remote failures: any missing, failed or malformed
        answer yields the offline result (``fallback=True``).
        """
        tasks = list(tasks)
        if offline or not tasks:
            return self.offline(tasks)

        try:
            request = self.build_request(shift_name, shift_date, tasks, next_shift)
            prompt = build_rollover_prompt(request)

            result = execute_with_fallback(
                lambda: self.client.complete_primary(SYSTEM_PROMPT, prompt),
                lambda: self.client.complete_fallback(SYSTEM_PROMPT, prompt),
                operation_name="Rollover agent",
                max_attempts=self.settings.reasoning.rollover_max_attempts,
                sleep=self._sleep,
            )
        except Exception:
            logger.warning("Rollover request failed, switching to offline mode", exc_info=True)
            return self.offline(tasks)

        if result is None:
            logger.warning("Reasoning service gave no answer, switching to offline mode")
            return self.offline(tasks)

        analysis = parse_rollover_response(result)
        if analysis is None:
            logger.warning("Invalid rollover structure from reasoning service, switching to offline mode")
            return self.offline(tasks)

        logger.info("Rollover agent decision complete: %s", analysis.summary)
        return analysis
