from __future__ import annotations

import calendar
from datetime import datetime, tzinfo
from typing import NamedTuple

from .errors import InvalidMonth, InvalidWorkingDays

MAX_WORKING_DAYS = 31


class AccrualPeriod(NamedTuple):
    # year first so tuple ordering is chronological
    year: int
    month: int

    @property
    def days(self) -> int:
        return calendar.monthrange(self.year, self.month)[1]

    def next(self) -> "AccrualPeriod":
        if self.month == 12:
            return AccrualPeriod(self.year + 1, 1)
        return AccrualPeriod(self.year, self.month + 1)

    def previous(self) -> "AccrualPeriod":
        if self.month == 1:
            return AccrualPeriod(self.year - 1, 12)
        return AccrualPeriod(self.year, self.month - 1)

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"


def period_of(moment: datetime, tz: tzinfo) -> AccrualPeriod:
    local = moment.astimezone(tz)
    return AccrualPeriod(local.year, local.month)


def is_weekend(moment: datetime, tz: tzinfo) -> bool:
    return moment.astimezone(tz).weekday() >= 5


def validate_month(month: int) -> None:
    if not 1 <= month <= 12:
        raise InvalidMonth(month=month)


def validate_working_days(days: int) -> None:
    # Bounded by the longest month only; the actual month length is not checked.
    if not 1 <= days <= MAX_WORKING_DAYS:
        raise InvalidWorkingDays(days=days)
