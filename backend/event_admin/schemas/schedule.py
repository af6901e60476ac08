"""Pydantic schemas for schedule entries and schedule input."""
from __future__ import annotations
import datetime as dt
from typing import Optional
from pydantic import BaseModel, model_validator


class ScheduleEntry(BaseModel):
    date: dt.date
    start_time: dt.time
    end_time: Optional[dt.time] = None

    @model_validator(mode="after")
    def _end_after_start(self):
        if self.end_time is not None and self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self


class ScheduleInput(BaseModel):
    """Raw schedule form input: a single date, or an inclusive range when is_date_range is set."""
    date: Optional[dt.date] = None
    end_date: Optional[dt.date] = None
    start_time: Optional[dt.time] = None
    end_time: Optional[dt.time] = None
    is_date_range: bool = False


class ScheduleExpandRequest(BaseModel):
    input: ScheduleInput
    existing: list[ScheduleEntry] = []
