"""Shared test fixtures for Shift Ledger."""

import sys
from pathlib import Path

import pytest

# Ensure src is importable
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from src.common.models import PlannedTask, TaskAchievement
from src.fault_time.rules import FaultRuleTable
from src.fault_time.shift_calendar import ShiftCalendar


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the test fixtures directory."""
    return PROJECT_ROOT / "tests" / "fixtures"


@pytest.fixture
def rules() -> FaultRuleTable:
    """The project fault rule table."""
    return FaultRuleTable.from_yaml(PROJECT_ROOT / "config" / "fault_rules.yaml")


@pytest.fixture
def calendar() -> ShiftCalendar:
    return ShiftCalendar()


@pytest.fixture
def sample_tasks() -> list[TaskAchievement]:
    """Shortage, surplus and on-target tasks."""
    return [
        TaskAchievement(
            task_id=1,
            product_name="Blue plastic",
            target_amount=1000,
            target_unit="kg",
            achieved_amount=700,
            production_rate_per_hour=150,
        ),
        TaskAchievement(
            task_id=2,
            product_name="Steel film",
            target_amount=1000,
            target_unit="kg",
            achieved_amount=1200,
            production_rate_per_hour=150,
        ),
        TaskAchievement(
            task_id=3,
            product_name="Red labels",
            target_amount=500,
            target_unit="kg",
            achieved_amount=503,
        ),
    ]


@pytest.fixture
def planned_tasks() -> list[PlannedTask]:
    """Next shift fully booked: 5 h + 3 h."""
    return [
        PlannedTask(
            task_id=10,
            product_name="Blue plastic 750 kg",
            target_amount=750,
            target_unit="kg",
            target_hours=5,
            production_rate_per_hour=150,
            priority=1,
        ),
        PlannedTask(
            task_id=11,
            product_name="Green bags 300 kg",
            target_amount=300,
            target_unit="kg",
            target_hours=3,
            priority=5,
        ),
    ]
