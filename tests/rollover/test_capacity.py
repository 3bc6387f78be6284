"""Tests for next-shift capacity planning."""

from __future__ import annotations

import pytest

from src.common.models import PlannedTask
from src.rollover.capacity import (
    find_matching_task,
    normalize_product_name,
    plan_capacity,
    products_match,
)


class TestNormalizeProductName:
    @pytest.mark.parametrize("raw,expected", [
        ("Blue plastic 750 kg", "blue plastic"),
        ("Blue plastic 750kg [ROLLOVER]", "blue plastic"),
        ("Green bags (from Second Shift) 2.5 t", "green bags"),
        ("CASCADE Steel film 300 units", "steel film"),
        ("بلاستيك 1000 كيلو", "بلاستيك"),
        ("  Red   labels ", "red labels"),
        ("", ""),
        (None, ""),
    ])
    def test_normalize(self, raw, expected):
        assert normalize_product_name(raw) == expected

    def test_products_match(self):
        assert products_match("Blue plastic 750 kg", "blue plastic [PULL]")
        assert products_match("Blue plastic film", "Blue plastic")
        assert not products_match("Blue plastic", "Green bags")
        assert not products_match("Red", "Red labels")

    def test_find_matching_task(self, planned_tasks):
        match = find_matching_task("Green bags", planned_tasks)
        assert match is not None
        assert match.task_id == 11
        assert find_matching_task("Steel film", planned_tasks) is None


class TestPlanCapacity:
    def test_fits_without_deductions(self, planned_tasks):
        plan = plan_capacity(2, planned_tasks[:1], shift_hours=8)
        assert plan.available_hours == 3
        assert plan.deductions == []
        assert plan.fits

    def test_lowest_priority_task_gives_up_hours(self, planned_tasks):
        plan = plan_capacity(2, planned_tasks, shift_hours=8)
        assert len(plan.deductions) == 1
        deduction = plan.deductions[0]
        assert deduction.task_id == 11
        assert deduction.product_name == "green bags"
        assert deduction.hours == pytest.approx(2)
        # 300 over 3 h
        assert deduction.rate == pytest.approx(100)
        assert deduction.amount == 200
        assert deduction.removes_task is False
        assert plan.fits

    def test_cascades_to_next_priority(self, planned_tasks):
        plan = plan_capacity(4, planned_tasks, shift_hours=8)
        assert [d.task_id for d in plan.deductions] == [11, 10]
        green, blue = plan.deductions
        assert green.removes_task is True
        assert green.amount == 300
        assert blue.hours == pytest.approx(1)
        assert blue.amount == 150
        assert blue.removes_task is False
        assert plan.freed_hours == pytest.approx(4)
        assert plan.fits

    def test_shortfall_when_shift_too_small(self, planned_tasks):
        plan = plan_capacity(10, planned_tasks, shift_hours=8)
        assert plan.freed_hours == pytest.approx(8)
        assert plan.shortfall_hours == pytest.approx(2)
        assert not plan.fits

    def test_rest_day_shift_has_room(self, planned_tasks):
        plan = plan_capacity(4, planned_tasks, shift_hours=12)
        assert plan.deductions == []
        assert plan.available_hours == 4

    def test_tasks_without_hours_are_skipped(self):
        tasks = [
            PlannedTask(task_id=1, product_name="Idle", target_hours=0, priority=9),
            PlannedTask(task_id=2, product_name="Film", target_amount=800, target_hours=8, priority=1),
        ]
        plan = plan_capacity(1, tasks, shift_hours=8)
        assert [d.task_id for d in plan.deductions] == [2]
        assert plan.deductions[0].amount == 100

    def test_to_dict(self, planned_tasks):
        data = plan_capacity(2, planned_tasks, shift_hours=8).deductions[0].to_dict()
        assert data["hours"] == 2
        assert data["unit"] == "kg"
