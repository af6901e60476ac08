"""Schedule input expansion for the event creation wizard."""
from datetime import timedelta
from typing import Iterable

from event_admin.schemas.schedule import ScheduleEntry, ScheduleInput

# Two fiscal periods
MAX_RANGE_DAYS = 731


class ScheduleValidationError(ValueError):
    """Raised for schedule input that cannot produce entries."""


def expand_schedule(schedule_input: ScheduleInput) -> list[ScheduleEntry]:
    """Turn a single date or an inclusive date range into schedule entries."""
    start_time = schedule_input.start_time
    end_time = schedule_input.end_time
    if start_time is None:
        raise ScheduleValidationError("Start time is required")
    if end_time is not None and end_time <= start_time:
        raise ScheduleValidationError("End time must be after start time")

    if not schedule_input.is_date_range:
        if schedule_input.date is None:
            raise ScheduleValidationError("Date is required")
        return [ScheduleEntry(date=schedule_input.date, start_time=start_time, end_time=end_time)]

    first, last = schedule_input.date, schedule_input.end_date
    if first is None or last is None:
        raise ScheduleValidationError("Start and end dates are required")
    if last < first:
        raise ScheduleValidationError("End date must not be before start date")

    days = (last - first).days + 1
    if days > MAX_RANGE_DAYS:
        raise ScheduleValidationError(f"Date range cannot span more than {MAX_RANGE_DAYS} days")
    return [
        ScheduleEntry(date=first + timedelta(days=offset), start_time=start_time, end_time=end_time)
        for offset in range(days)
    ]


def merge_schedules(existing: Iterable[ScheduleEntry], new: Iterable[ScheduleEntry]) -> list[ScheduleEntry]:
    """Append ``new`` to ``existing`` and sort ascending by date (stable for equal dates)."""
    return sorted([*existing, *new], key=lambda entry: entry.date)
