# app/db/schemas/schedule_schemas.py
import datetime as dt
from typing import Annotated, Optional
from pydantic import AfterValidator, BaseModel, Field, ConfigDict, model_validator
from app.domain.availability import (
    Availability,
    BreakWindow,
    DayOfWeek,
    DayWindow,
    default_weekly_schedule,
    validate_availability,
)


def to_wall_clock(value):
    """Drop any UTC offset, keeping the clock reading as written."""
    if value is not None and value.tzinfo is not None:
        return value.replace(tzinfo=None)
    return value


# Slots and windows are read on their own wall clock, never converted
WallClockTime = Annotated[dt.time, AfterValidator(to_wall_clock)]
WallClockDateTime = Annotated[dt.datetime, AfterValidator(to_wall_clock)]


class DayWindowSchema(BaseModel):
    start: WallClockTime = Field(..., description="Local wall-clock start, inclusive")
    end: WallClockTime = Field(..., description="Local wall-clock end, exclusive")
    is_available: bool = True


class BreakSchema(BaseModel):
    date: dt.date
    start: WallClockTime
    end: WallClockTime
    reason: Optional[str] = Field(None, max_length=200)


def _default_schedule() -> dict[DayOfWeek, DayWindowSchema]:
    return {
        day: DayWindowSchema(start=w.start, end=w.end, is_available=w.is_available)
        for day, w in default_weekly_schedule().items()
    }


class AvailabilitySchema(BaseModel):
    """
    Weekdays left out of `schedule` are never bookable.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "is_available": True,
                "schedule": {
                    "monday": {"start": "09:00", "end": "17:00", "is_available": True}
                },
                "breaks": [
                    {"date": "2024-06-03", "start": "12:00", "end": "13:00", "reason": "Lunch"}
                ],
            }
        }
    )

    is_available: bool = True
    schedule: dict[DayOfWeek, DayWindowSchema] = Field(default_factory=_default_schedule)
    breaks: list[BreakSchema] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_windows(self) -> "AvailabilitySchema":
        problems = validate_availability(self.to_domain())
        if problems:
            raise ValueError("; ".join(problems))
        return self

    def to_domain(self) -> Availability:
        return Availability(
            is_available=self.is_available,
            schedule={
                day: DayWindow(w.start, w.end, w.is_available)
                for day, w in self.schedule.items()
            },
            breaks=tuple(
                BreakWindow(b.date, b.start, b.end, b.reason) for b in self.breaks
            ),
        )

    @classmethod
    def from_domain(cls, availability: Availability) -> "AvailabilitySchema":
        return cls(
            is_available=availability.is_available,
            schedule={
                day: DayWindowSchema(
                    start=w.start, end=w.end, is_available=w.is_available
                )
                for day, w in availability.schedule.items()
            },
            breaks=[
                BreakSchema(date=b.on, start=b.start, end=b.end, reason=b.reason)
                for b in availability.breaks
            ],
        )
