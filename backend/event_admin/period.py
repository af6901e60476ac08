"""Fiscal periods: 1 November of one year to 31 October of the next."""
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

import pytz

from event_admin.config import settings

FISCAL_START_MONTH = 11
FIRST_PERIOD_YEAR = 2020


def today(tz_name: Optional[str] = None) -> date:
    """Current date in the configured timezone."""
    tz = pytz.timezone(tz_name or settings.APP_TIMEZONE)
    return datetime.now(tz).date()


@dataclass(frozen=True)
class FiscalPeriod:
    start_year: int

    @property
    def start_date(self) -> date:
        return date(self.start_year, FISCAL_START_MONTH, 1)

    @property
    def end_date(self) -> date:
        return date(self.start_year + 1, FISCAL_START_MONTH - 1, 31)

    @property
    def label(self) -> str:
        return f"{self.start_year}-{self.start_year + 1}"

    def contains(self, day: Optional[date]) -> bool:
        if day is None:
            return False
        return self.start_date <= day <= self.end_date

    @classmethod
    def current(cls, on: Optional[date] = None) -> "FiscalPeriod":
        on = on or today()
        if on.month < FISCAL_START_MONTH:
            return cls(on.year - 1)
        return cls(on.year)


def available_periods(on: Optional[date] = None) -> list[FiscalPeriod]:
    """Selectable periods, newest first."""
    on = on or today()
    return [FiscalPeriod(year) for year in range(on.year + 2, FIRST_PERIOD_YEAR - 1, -1)]
