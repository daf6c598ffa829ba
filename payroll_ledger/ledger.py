from __future__ import annotations

import functools
import threading
from datetime import datetime, timezone
from typing import List, Optional

from opentelemetry import metrics, trace

from . import access, attendance, registry, settlement
from .access import require_employee
from .clock import Clock, SystemClock
from .errors import PayrollError
from .events import EventBus
from .fund import Fund
from .logging import get_logger
from .models import CheckInInfo, EmployeeInfo, MonthlyRecord, TimeWindowConfig, WorkingDayChange
from .storage import LedgerState

logger = get_logger(__name__)
tracer = trace.get_tracer(__name__)
meter = metrics.get_meter(__name__)

attendance_days_counter = meter.create_counter(
    "payroll.attendance.days", description="Working days accrued through check-out"
)
salary_paid_counter = meter.create_counter("payroll.salary.paid", description="Fund units paid out as salary")


def operation(func):
    """Run a ledger operation under the ledger lock, tracing it and logging rejections."""

    @functools.wraps(func)
    def wrapper(self: "PayrollLedger", *args, **kwargs):
        with self._lock, tracer.start_as_current_span(f"payroll_ledger.{func.__name__}"):
            try:
                return func(self, *args, **kwargs)
            except PayrollError as exc:
                logger.warning(
                    "operation_rejected",
                    operation=func.__name__,
                    code=exc.code,
                    reason=str(exc),
                    **exc.details,
                )
                raise

    return wrapper


class PayrollLedger:
    """Role-gated attendance and payroll state machine over a shared fund.

    Every mutating method takes the caller identity first. Operations are
    serialised by a per-ledger lock and either apply completely or raise a
    :class:`~payroll_ledger.errors.PayrollError` leaving state untouched.
    """

    def __init__(
        self,
        admin: str,
        max_change_working_days: int,
        check_in: TimeWindowConfig,
        check_out: TimeWindowConfig,
        fund: Fund,
        *,
        clock: Optional[Clock] = None,
        utc_offset_minutes: int = 0,
        events: Optional[EventBus] = None,
    ) -> None:
        state = LedgerState(
            admin=admin,
            max_change_working_days=max_change_working_days,
            check_in=check_in,
            check_out=check_out,
            utc_offset_minutes=utc_offset_minutes,
        )
        self._attach(state, fund, clock, events)

    @classmethod
    def restore(
        cls,
        state: LedgerState,
        fund: Fund,
        *,
        clock: Optional[Clock] = None,
        events: Optional[EventBus] = None,
    ) -> "PayrollLedger":
        ledger = cls.__new__(cls)
        ledger._attach(state, fund, clock, events)
        return ledger

    def _attach(self, state: LedgerState, fund: Fund, clock: Optional[Clock], events: Optional[EventBus]) -> None:
        self.state = state
        self.fund = fund
        self.clock = clock or SystemClock()
        self.events = events or EventBus()
        self._lock = threading.RLock()

    def now(self) -> datetime:
        moment = self.clock.now()
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=timezone.utc)
        return moment

    # read side, under the same lock as the operations

    @property
    def admin(self) -> str:
        return self.state.admin

    @property
    def max_change_working_days(self) -> int:
        return self.state.max_change_working_days

    def fund_balance(self) -> int:
        with self._lock:
            return self.fund.balance()

    def get_employee_info(self, employee_id: str) -> EmployeeInfo:
        with self._lock:
            employee = require_employee(self.state, employee_id)
            return EmployeeInfo(employee.manager, employee.salary_per_day, employee.join_date)

    def get_check_in_info(self, employee_id: str, month: int, year: int) -> CheckInInfo:
        with self._lock:
            record = self.state.record(employee_id, month, year)
            if record is None:
                return CheckInInfo(False, 0, 0, False)
            return CheckInInfo(record.is_checked_in, record.working_days, record.salary_snapshot, record.claimed)

    def get_working_day_change(self, employee_id: str, month: int, year: int) -> int:
        with self._lock:
            change: Optional[WorkingDayChange] = self.state.changes.get((employee_id, month, year))
            return change.days_changed if change else 0

    def records_for(self, employee_id: str) -> List[MonthlyRecord]:
        with self._lock:
            return self.state.records_for(employee_id)

    # admin

    @operation
    def change_admin(self, caller: str, new_admin: str) -> None:
        access.change_admin(self, caller, new_admin)

    @operation
    def add_employee(self, caller: str, employee_id: str, manager: str, salary_per_day: int) -> None:
        registry.add_employee(self, caller, employee_id, manager, salary_per_day)

    @operation
    def remove_employee(self, caller: str, employee_id: str) -> int:
        settled = registry.remove_employee(self, caller, employee_id)
        if settled:
            salary_paid_counter.add(settled)
        return settled

    @operation
    def change_salary(self, caller: str, employee_id: str, salary_per_day: int) -> None:
        registry.change_salary(self, caller, employee_id, salary_per_day)

    @operation
    def change_manager(self, caller: str, employee_id: str, manager: str) -> None:
        registry.change_manager(self, caller, employee_id, manager)

    @operation
    def change_payment_address(self, caller: str, employee_id: str, new_address: str) -> None:
        registry.change_payment_address(self, caller, employee_id, new_address)

    @operation
    def change_max_change_working_days(self, caller: str, max_change_working_days: int) -> None:
        registry.change_max_change_working_days(self, caller, max_change_working_days)

    @operation
    def change_working_days_by_admin(self, caller: str, employee_id: str, month: int, year: int, days: int) -> None:
        attendance.change_working_days_by_admin(self, caller, employee_id, month, year, days)

    @operation
    def add_fund(self, caller: str, amount: int) -> None:
        settlement.add_fund(self, caller, amount)

    @operation
    def withdraw_fund(self, caller: str, amount: int) -> None:
        settlement.withdraw_fund(self, caller, amount)

    # manager

    @operation
    def change_working_days(self, caller: str, employee_id: str, month: int, year: int, days: int) -> None:
        attendance.change_working_days(self, caller, employee_id, month, year, days)

    # employee self-service

    @operation
    def check_in(self, caller: str) -> None:
        attendance.check_in(self, caller)

    @operation
    def check_out(self, caller: str) -> None:
        attendance.check_out(self, caller)
        attendance_days_counter.add(1)

    @operation
    def get_paid(self, caller: str, month: int, year: int) -> int:
        amount = settlement.get_paid(self, caller, month, year)
        salary_paid_counter.add(amount)
        return amount
