from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, tzinfo
from typing import NamedTuple, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

RecordKey = Tuple[str, int, int]  # (employee, month, year)


class TimeWindowConfig(BaseModel):
    """Wall-clock target with a symmetric tolerance, in seconds."""

    model_config = ConfigDict(frozen=True)

    hour: int = Field(ge=0, le=23)
    minute: int = Field(default=0, ge=0, le=59)
    second: int = Field(default=0, ge=0, le=59)
    tolerance: int = Field(default=0, ge=0, description="Half-width of the window in seconds")

    def target_on(self, day: date, tz: tzinfo) -> datetime:
        return datetime.combine(day, time(self.hour, self.minute, self.second), tzinfo=tz)

    def bounds(self, day: date, tz: tzinfo) -> Tuple[datetime, datetime]:
        target = self.target_on(day, tz)
        spread = timedelta(seconds=self.tolerance)
        return target - spread, target + spread

    def contains(self, moment: datetime, tz: tzinfo) -> bool:
        local = moment.astimezone(tz)
        start, end = self.bounds(local.date(), tz)
        return start <= local <= end


@dataclass
class Employee:
    id: str
    manager: str
    salary_per_day: int
    join_date: datetime


@dataclass
class MonthlyRecord:
    employee_id: str
    month: int
    year: int
    salary_snapshot: int
    working_days: int = 0
    is_checked_in: bool = False
    claimed: bool = False
    last_check_in: Optional[datetime] = None

    @property
    def key(self) -> RecordKey:
        return (self.employee_id, self.month, self.year)

    @property
    def amount_due(self) -> int:
        return self.working_days * self.salary_snapshot


@dataclass
class WorkingDayChange:
    """Audit trail of the latest manager override for a period.

    Not consulted by the quota check, which limits each override against the
    record's current working days. Cleared by an admin override.
    """

    employee_id: str
    month: int
    year: int
    days_changed: int = 0


class EmployeeInfo(NamedTuple):
    manager: str
    salary_per_day: int
    join_date: datetime


class CheckInInfo(NamedTuple):
    is_checked_in: bool
    working_days: int
    salary_snapshot: int
    claimed: bool
