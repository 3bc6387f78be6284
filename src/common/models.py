"""Shared Pydantic data models for Shift Ledger.

These models define the data contracts between the fault-time engine,
the rollover engine, and the external collaborators (fault extraction,
reasoning services, persistence). All modules import from here.
"""

from __future__ import annotations

import re
from datetime import date
from enum import Enum

from pydantic import AliasChoices, BaseModel, Field, field_validator

_NUMBER_RE = re.compile(r"-?\d+(?:\.\d+)?")


def parse_amount(value: object) -> float:
    """Parse a production amount that may be persisted as text ("1158 kg").

    Returns 0.0 when no number can be found.
    """
    if value is None:
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)
    match = _NUMBER_RE.search(str(value).replace(",", ""))
    return float(match.group(0)) if match else 0.0


# === Enums ===

class RolloverAction(str, Enum):
    """What to do with a task's target delta."""
    ROLLOVER = "rollover"
    BALANCE = "balance"
    NONE = "none"


# === Fault reporting ===

class FaultReportItem(BaseModel):
    """One fault as produced by the speech/AI extraction step."""
    code: str = Field(validation_alias=AliasChoices("code", "fault_code", "FaultCode"))
    reported_minutes: float = Field(
        ge=0,
        validation_alias=AliasChoices(
            "reported_minutes", "reportedMinutes", "detected_duration", "DetectedDuration",
        ),
    )
    quantity: int | None = Field(default=None, validation_alias=AliasChoices("quantity", "Quantity"))

    @field_validator("code", mode="before")
    @classmethod
    def _normalize_code(cls, v: object) -> str:
        text = str(v).strip()
        if text.isdigit() and len(text) < 2:
            text = text.zfill(2)
        return text

    @field_validator("quantity", mode="before")
    @classmethod
    def _normalize_quantity(cls, v: object) -> int | None:
        # "4 cylinders" -> 4; no usable number means unspecified
        qty = int(parse_amount(v))
        return qty if qty > 0 else None


# === Rollover inputs ===

class TaskAchievement(BaseModel):
    """Target vs. achievement delta for one task of a finalized shift."""
    task_id: int | str
    product_name: str = ""
    target_amount: float = 0.0
    target_unit: str = ""
    achieved_amount: float = 0.0
    production_rate_per_hour: float | None = None

    @property
    def difference(self) -> float:
        return self.achieved_amount - self.target_amount

    def resolved_rate(self, fallback_rate: float = 100.0, nominal_shift_hours: float = 8.0) -> float:
        """Production rate guaranteed to be positive.

        Explicit rate if positive, else target spread over a nominal shift,
        else the neutral fallback rate.
        """
        rate = self.production_rate_per_hour
        if rate is not None and rate > 0:
            return rate
        if self.target_amount > 0:
            return self.target_amount / nominal_shift_hours
        return fallback_rate

    @classmethod
    def from_record(cls, record: dict, nominal_shift_hours: float = 8.0) -> TaskAchievement:
        """Build from a persisted task row joined with its achievement.

        Achievement may be stored as text with a unit suffix. When the row
        has no production rate, achieved/8 is used; a zero result is left
        unset so the positive-rate fallback applies later.
        """
        achieved = parse_amount(record.get("achievement"))
        rate = record.get("production_rate")
        rate = float(rate) if rate else achieved / nominal_shift_hours
        return cls(
            task_id=record.get("task_id") or record.get("TaskID"),
            product_name=record.get("target_description") or record.get("product_name", ""),
            target_amount=parse_amount(record.get("target_amount")),
            target_unit=record.get("target_unit") or "",
            achieved_amount=achieved,
            production_rate_per_hour=rate if rate > 0 else None,
        )


class PlannedTask(BaseModel):
    """A task already planned on an upcoming shift."""
    task_id: int | str | None = None
    product_name: str = ""
    target_amount: float = 0.0
    target_unit: str = ""
    target_hours: float = Field(default=0.0, ge=0)
    production_rate_per_hour: float | None = None
    priority: int = 0  # lower number = more important


class NextShiftPlan(BaseModel):
    """The shift that receives rollovers."""
    name: str
    date: date
    planned_tasks: list[PlannedTask] = []

    @property
    def total_hours(self) -> float:
        return sum(t.target_hours for t in self.planned_tasks)


class RolloverRequest(BaseModel):
    """Structured request sent to the reasoning service."""
    shift_name: str
    date: date
    tasks: list[TaskAchievement]
    next_shift: NextShiftPlan
    max_shift_hours: float = Field(gt=0)


# === Rollover outputs ===

class RolloverDecision(BaseModel):
    """Decision for one task. Serialized with the camelCase wire names."""
    task_id: int | str = Field(alias="taskId")
    product_name: str = Field(default="", alias="productName")
    action: RolloverAction
    amount_to_transfer: float = Field(default=0.0, ge=0, alias="amountToTransfer")
    time_to_transfer_hours: float = Field(default=0.0, ge=0, alias="timeToTransfer")
    reason: str = ""

    model_config = {"populate_by_name": True}

    @field_validator("action", mode="before")
    @classmethod
    def _lower_action(cls, v: object) -> object:
        return v.strip().lower() if isinstance(v, str) else v

    @field_validator("reason", "product_name", mode="before")
    @classmethod
    def _null_to_empty(cls, v: object) -> object:
        return "" if v is None else v


class RolloverAnalysis(BaseModel):
    """Full rollover outcome for a finalized shift."""
    decisions: list[RolloverDecision]
    summary: str = ""
    fallback: bool = False

    model_config = {"populate_by_name": True}
