"""Employee lifecycle operations. All of them are admin-only."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .access import require_admin, require_employee
from .errors import AlreadyExists, InvalidAmount, InvalidWorkingDays
from .events import (
    AddEmployee,
    ChangeManager,
    ChangeMaxChangeWorkingDays,
    ChangePaymentAddress,
    ChangeSalary,
    RemoveEmployee,
)
from .models import Employee
from .periods import period_of
from .settlement import outstanding_records, settle_records

if TYPE_CHECKING:
    from .ledger import PayrollLedger


def _validate_salary(salary_per_day: int) -> None:
    if salary_per_day < 0:
        raise InvalidAmount("Salary per day must be non-negative", salary_per_day=salary_per_day)


def add_employee(ledger: "PayrollLedger", caller: str, employee_id: str, manager: str, salary_per_day: int) -> Employee:
    state = ledger.state
    require_admin(state, caller)
    if employee_id in state.employees:
        raise AlreadyExists(employee=employee_id)
    _validate_salary(salary_per_day)

    employee = Employee(id=employee_id, manager=manager, salary_per_day=salary_per_day, join_date=ledger.now())
    state.employees[employee_id] = employee
    ledger.events.publish(AddEmployee(employee=employee_id, manager=manager, salary_per_day=salary_per_day))
    return employee


def remove_employee(ledger: "PayrollLedger", caller: str, employee_id: str) -> int:
    """Pay out the unclaimed accruals of elapsed months, then drop the registry entry.

    The running month is left open: its record is kept unclaimed, so an
    employee added back under the same id keeps accruing on it and claims it
    once the month has ended. Returns the amount settled on removal.
    """

    state = ledger.state
    require_admin(state, caller)
    require_employee(state, employee_id)

    current = period_of(ledger.now(), state.tz)
    settled = settle_records(ledger, employee_id, outstanding_records(state, employee_id, before=current))
    del state.employees[employee_id]
    ledger.events.publish(RemoveEmployee(employee=employee_id))
    return settled


def change_salary(ledger: "PayrollLedger", caller: str, employee_id: str, salary_per_day: int) -> None:
    state = ledger.state
    require_admin(state, caller)
    employee = require_employee(state, employee_id)
    _validate_salary(salary_per_day)

    employee.salary_per_day = salary_per_day
    ledger.events.publish(ChangeSalary(employee=employee_id, salary_per_day=salary_per_day))


def change_manager(ledger: "PayrollLedger", caller: str, employee_id: str, manager: str) -> None:
    state = ledger.state
    require_admin(state, caller)
    employee = require_employee(state, employee_id)

    employee.manager = manager
    ledger.events.publish(ChangeManager(employee=employee_id, manager=manager))


def change_payment_address(ledger: "PayrollLedger", caller: str, employee_id: str, new_address: str) -> None:
    """Move the employee and all of its monthly records to a new identity."""

    state = ledger.state
    require_admin(state, caller)
    employee = require_employee(state, employee_id)
    if new_address in state.employees or state.records_for(new_address):
        raise AlreadyExists("Payment address already in use", address=new_address)

    del state.employees[employee_id]
    employee.id = new_address
    state.employees[new_address] = employee

    for key in [k for k in state.records if k[0] == employee_id]:
        record = state.records.pop(key)
        record.employee_id = new_address
        state.records[record.key] = record
    for key in [k for k in state.changes if k[0] == employee_id]:
        change = state.changes.pop(key)
        change.employee_id = new_address
        state.changes[(new_address, change.month, change.year)] = change

    ledger.events.publish(ChangePaymentAddress(employee=employee_id, new_address=new_address))


def change_max_change_working_days(ledger: "PayrollLedger", caller: str, max_change_working_days: int) -> None:
    state = ledger.state
    require_admin(state, caller)
    if max_change_working_days < 0:
        raise InvalidWorkingDays("Max change working days must be non-negative", days=max_change_working_days)

    state.max_change_working_days = max_change_working_days
    ledger.events.publish(ChangeMaxChangeWorkingDays(max_change_working_days=max_change_working_days))
