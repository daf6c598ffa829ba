"""Daily attendance and working-day overrides.

Per (employee, month, year) a record moves NoRecord -> CheckedIn ->
CheckedOut (accumulating) -> Claimed. Check-out resolves its period from the
checkout instant, not from the matching check-in: a pair straddling a month
boundary finds no open check-in in the new month and is rejected.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .access import require_admin, require_employee, require_manager
from .errors import (
    AlreadyClaimed,
    CheckInFirst,
    CheckInWindowViolation,
    CheckOutWindowViolation,
    QuotaExceeded,
    WeekendNotAllowed,
)
from .events import ChangeWorkingDays, CheckIn, CheckOut
from .models import Employee, MonthlyRecord, WorkingDayChange
from .periods import is_weekend, period_of, validate_month, validate_working_days

if TYPE_CHECKING:
    from .ledger import PayrollLedger


def check_in(ledger: "PayrollLedger", caller: str) -> MonthlyRecord:
    state = ledger.state
    employee = require_employee(state, caller)
    now = ledger.now()
    tz = state.tz
    if is_weekend(now, tz):
        raise WeekendNotAllowed(employee=caller, at=now.isoformat())
    if not state.check_in.contains(now, tz):
        raise CheckInWindowViolation(employee=caller, at=now.isoformat())

    period = period_of(now, tz)
    existing = state.record(caller, period.month, period.year)
    if existing is not None and existing.claimed:
        raise AlreadyClaimed(employee=caller, period=str(period))
    record = state.open_record(employee, period.month, period.year)
    record.is_checked_in = True
    record.last_check_in = now
    ledger.events.publish(CheckIn(employee=caller, timestamp=now))
    return record


def check_out(ledger: "PayrollLedger", caller: str) -> MonthlyRecord:
    state = ledger.state
    require_employee(state, caller)
    now = ledger.now()
    tz = state.tz

    period = period_of(now, tz)
    record = state.record(caller, period.month, period.year)
    if record is None or not record.is_checked_in:
        raise CheckInFirst(employee=caller, period=str(period))
    if not state.check_out.contains(now, tz):
        raise CheckOutWindowViolation(employee=caller, at=now.isoformat())
    if record.claimed:
        raise AlreadyClaimed(employee=caller, period=str(period))

    record.working_days += 1
    record.is_checked_in = False
    ledger.events.publish(CheckOut(employee=caller, timestamp=now))
    return record


def _validate_override(ledger: "PayrollLedger", employee: Employee, month: int, year: int, days: int) -> None:
    validate_month(month)
    validate_working_days(days)
    record = ledger.state.record(employee.id, month, year)
    if record is not None and record.claimed:
        raise AlreadyClaimed(employee=employee.id, month=month, year=year)


def _apply_override(ledger: "PayrollLedger", caller: str, employee: Employee, month: int, year: int, days: int) -> MonthlyRecord:
    record = ledger.state.open_record(employee, month, year)
    record.working_days = days
    ledger.events.publish(ChangeWorkingDays(caller=caller, employee=employee.id, days=days))
    return record


def change_working_days(
    ledger: "PayrollLedger",
    caller: str,
    employee_id: str,
    month: int,
    year: int,
    days: int,
) -> MonthlyRecord:
    """Manager override, limited to ``max_change_working_days`` per change."""

    state = ledger.state
    employee = require_manager(state, caller, employee_id)
    _validate_override(ledger, employee, month, year, days)

    current = state.record(employee_id, month, year)
    delta = abs(days - (current.working_days if current else 0))
    if delta > state.max_change_working_days:
        raise QuotaExceeded(employee=employee_id, requested=delta, allowed=state.max_change_working_days)

    record = _apply_override(ledger, caller, employee, month, year, days)
    state.changes[record.key] = WorkingDayChange(employee_id=employee_id, month=month, year=year, days_changed=delta)
    return record


def change_working_days_by_admin(
    ledger: "PayrollLedger",
    caller: str,
    employee_id: str,
    month: int,
    year: int,
    days: int,
) -> MonthlyRecord:
    state = ledger.state
    require_admin(state, caller)
    employee = require_employee(state, employee_id)
    _validate_override(ledger, employee, month, year, days)

    record = _apply_override(ledger, caller, employee, month, year, days)
    # an admin correction clears the manager's change counter
    state.changes.pop(record.key, None)
    return record
