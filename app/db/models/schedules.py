# app/db/models/schedules.py
from __future__ import annotations
from datetime import date, time
from typing import Optional
from sqlalchemy import (
    String,
    Date,
    Time,
    Boolean,
    ForeignKey,
    UniqueConstraint,
    Enum as sqlalchemy_enum,
)
from sqlalchemy.orm import Mapped, mapped_column
from app.domain.availability import DayOfWeek
from .db_base_model import DbBaseModel
from .user_table import enum_values


class WeeklySchedule(DbBaseModel):
    """One row per doctor and weekday."""

    __tablename__ = "weekly_schedules"
    __table_args__ = (
        UniqueConstraint("doctor_id", "day_of_week", name="uq_weekly_schedule_day"),
    )

    schedule_id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=DbBaseModel.generate_uuid,
    )
    doctor_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("doctors.doctor_id", ondelete="CASCADE"),
        nullable=False,
    )
    day_of_week: Mapped[DayOfWeek] = mapped_column(
        sqlalchemy_enum(
            DayOfWeek,
            name="day_of_week",
            native_enum=False,
            length=10,
            values_callable=enum_values,
        ),
        nullable=False,
    )
    start_time: Mapped[time] = mapped_column(Time, nullable=False)
    end_time: Mapped[time] = mapped_column(Time, nullable=False)
    is_available: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


class ScheduleBreak(DbBaseModel):
    """A dated, timed carve-out within an otherwise available day."""

    __tablename__ = "schedule_breaks"

    break_id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=DbBaseModel.generate_uuid,
    )
    doctor_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("doctors.doctor_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    break_date: Mapped[date] = mapped_column(Date, nullable=False)
    start_time: Mapped[time] = mapped_column(Time, nullable=False)
    end_time: Mapped[time] = mapped_column(Time, nullable=False)
    reason: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)


__all__ = ["WeeklySchedule", "ScheduleBreak", "DayOfWeek"]
