"""Shift calendar: which shifts run on a date and how long they are.

Regular days run three 480-minute shifts; the weekly rest day (Friday)
runs two 720-minute shifts.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta

from src.common.config import ShiftSettings, settings


def _as_date(value: date | str | None) -> date:
    if value is None:
        return date.today()
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


@dataclass(frozen=True)
class ShiftCalendar:
    """Weekday-dependent shift layout."""

    rest_weekday: int = 4
    regular_shifts: tuple[str, ...] = ("First Shift", "Second Shift", "Third Shift")
    regular_shift_minutes: int = 480
    rest_day_shifts: tuple[str, ...] = ("First Shift", "Second Shift")
    rest_day_shift_minutes: int = 720

    @classmethod
    def from_settings(cls, config: ShiftSettings) -> ShiftCalendar:
        return cls(
            rest_weekday=config.rest_weekday,
            regular_shifts=tuple(config.regular_shifts),
            regular_shift_minutes=config.regular_shift_minutes,
            rest_day_shifts=tuple(config.rest_day_shifts),
            rest_day_shift_minutes=config.rest_day_shift_minutes,
        )

    def is_rest_day(self, on_date: date | str | None = None) -> bool:
        return _as_date(on_date).weekday() == self.rest_weekday

    def shift_names(self, on_date: date | str | None = None) -> tuple[str, ...]:
        """Shift names in running order for the date."""
        return self.rest_day_shifts if self.is_rest_day(on_date) else self.regular_shifts

    def shifts_for_date(self, on_date: date | str | None = None) -> dict[str, int]:
        """Map each shift name on the date to its duration in minutes."""
        minutes = self.shift_duration_minutes(on_date)
        return {name: minutes for name in self.shift_names(on_date)}

    def shift_duration_minutes(self, on_date: date | str | None = None) -> int:
        if self.is_rest_day(on_date):
            return self.rest_day_shift_minutes
        return self.regular_shift_minutes

    def next_shift(self, shift_name: str, on_date: date | str | None = None) -> tuple[str, date]:
        """Return the (name, date) of the shift after ``shift_name``.

        The last shift of a day hands over to the first shift of the next
        calendar day. An unknown shift name is treated as the last shift.
        """
        current = _as_date(on_date)
        order = self.shift_names(current)
        if shift_name in order and order.index(shift_name) < len(order) - 1:
            return order[order.index(shift_name) + 1], current

        next_day = current + timedelta(days=1)
        return self.shift_names(next_day)[0], next_day


default_calendar = ShiftCalendar.from_settings(settings.shifts)


def shifts_for_date(on_date: date | str | None = None) -> dict[str, int]:
    return default_calendar.shifts_for_date(on_date)


def shift_duration_minutes(on_date: date | str | None = None) -> int:
    return default_calendar.shift_duration_minutes(on_date)


def next_shift(shift_name: str, on_date: date | str | None = None) -> tuple[str, date]:
    return default_calendar.next_shift(shift_name, on_date)
