# app/domain/availability.py
"""
Doctor availability model and the bookability check.

A candidate datetime is evaluated on its own wall clock: its weekday and
time of day are compared to the schedule as given, with no timezone
conversion.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, time
from enum import Enum
from typing import Optional


class DayOfWeek(str, Enum):
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    @classmethod
    def of(cls, day: date) -> "DayOfWeek":
        # date.weekday(): Monday == 0
        return _WEEK[day.weekday()]


_WEEK = list(DayOfWeek)


@dataclass(frozen=True)
class DayWindow:
    start: time
    end: time
    is_available: bool = True

    def contains(self, at: time) -> bool:
        return self.is_available and self.start <= at < self.end


@dataclass(frozen=True)
class BreakWindow:
    on: date
    start: time
    end: time
    reason: Optional[str] = None

    def covers(self, at: datetime) -> bool:
        return at.date() == self.on and self.start <= at.time() < self.end


@dataclass(frozen=True)
class Availability:
    is_available: bool
    schedule: dict[DayOfWeek, DayWindow] = field(default_factory=dict)
    breaks: tuple[BreakWindow, ...] = ()

    def window_for(self, day: date) -> Optional[DayWindow]:
        return self.schedule.get(DayOfWeek.of(day))


def default_weekly_schedule() -> dict[DayOfWeek, DayWindow]:
    """Monday to Friday 09:00-17:00; weekends closed."""
    schedule = {}
    for day in DayOfWeek:
        weekend = day in (DayOfWeek.SATURDAY, DayOfWeek.SUNDAY)
        schedule[day] = DayWindow(time(9, 0), time(17, 0), is_available=not weekend)
    return schedule


def unbookable_reason(availability: Availability, at: datetime) -> Optional[str]:
    """Why `at` cannot be booked, or None when it can."""
    if not availability.is_available:
        return "doctor is not accepting new appointments"

    window = availability.window_for(at.date())
    # A missing weekday entry is treated like an unavailable one
    if window is None or not window.is_available:
        return f"doctor does not work on {DayOfWeek.of(at.date()).value}"
    if not window.contains(at.time()):
        return (
            f"outside working hours "
            f"{window.start.isoformat('minutes')}-{window.end.isoformat('minutes')}"
        )

    for b in availability.breaks:
        if b.covers(at):
            return b.reason or "doctor is on a break"
    return None


def is_bookable(availability: Availability, at: datetime) -> bool:
    return unbookable_reason(availability, at) is None


def validate_availability(availability: Availability) -> list[str]:
    """
    Shape problems in an availability; empty when valid.

    Breaks are not required to fall inside the weekday window.
    """
    problems: list[str] = []
    for day, window in availability.schedule.items():
        if window.is_available and window.start >= window.end:
            problems.append(f"{day.value}: start must be before end")
    for b in availability.breaks:
        if b.start >= b.end:
            problems.append(f"break on {b.on.isoformat()}: start must be before end")
    return problems


__all__ = [
    "DayOfWeek",
    "DayWindow",
    "BreakWindow",
    "Availability",
    "default_weekly_schedule",
    "is_bookable",
    "unbookable_reason",
    "validate_availability",
]
