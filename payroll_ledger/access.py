from __future__ import annotations

from typing import TYPE_CHECKING

from .errors import NotFound, Unauthorized
from .events import ChangeAdmin
from .models import Employee
from .storage import LedgerState

if TYPE_CHECKING:
    from .ledger import PayrollLedger


def is_admin(state: LedgerState, caller: str) -> bool:
    return caller == state.admin


def require_admin(state: LedgerState, caller: str) -> None:
    if not is_admin(state, caller):
        raise Unauthorized("Only admin can call this function", caller=caller)


def require_employee(state: LedgerState, employee_id: str) -> Employee:
    employee = state.employees.get(employee_id)
    if employee is None:
        raise NotFound(employee=employee_id)
    return employee


def require_manager(state: LedgerState, caller: str, employee_id: str) -> Employee:
    employee = require_employee(state, employee_id)
    if caller != employee.manager:
        raise Unauthorized("Only manager can call this function", caller=caller, employee=employee_id)
    return employee


def change_admin(ledger: "PayrollLedger", caller: str, new_admin: str) -> None:
    require_admin(ledger.state, caller)
    ledger.state.admin = new_admin
    ledger.events.publish(ChangeAdmin(admin=new_admin))
