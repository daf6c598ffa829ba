from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, List

from .access import require_admin, require_employee
from .errors import AlreadyClaimed, FutureMonthClaim, InsufficientFund, InvalidAmount, NoWorkingDays
from .events import AddFund, ClaimSalary, WithdrawFund
from .models import MonthlyRecord
from .periods import AccrualPeriod, period_of, validate_month
from .storage import LedgerState

if TYPE_CHECKING:
    from .ledger import PayrollLedger


def outstanding_records(state: LedgerState, employee_id: str, before: AccrualPeriod) -> List[MonthlyRecord]:
    """Unclaimed records with something to pay, for periods that ended before ``before``."""

    return [
        r
        for r in state.records_for(employee_id)
        if not r.claimed and r.amount_due > 0 and AccrualPeriod(r.year, r.month) < before
    ]


def settle_records(ledger: "PayrollLedger", recipient: str, records: Iterable[MonthlyRecord]) -> int:
    """Pay ``records`` in a single transfer; all of them or none.

    Records are flagged claimed before the transfer so a re-entrant call
    cannot pay twice, and unflagged again when the transfer fails.
    """

    records = list(records)
    total = sum(r.amount_due for r in records)
    balance = ledger.fund.balance()
    if balance < total:
        raise InsufficientFund(employee=recipient, available=balance, amount=total)
    if not records:
        return 0

    for record in records:
        record.claimed = True
    try:
        if total:
            ledger.fund.transfer_out(recipient, total)
    except Exception:
        for record in records:
            record.claimed = False
        raise

    now = ledger.now()
    for record in records:
        ledger.events.publish(
            ClaimSalary(
                employee=recipient,
                month=record.month,
                year=record.year,
                amount=record.amount_due,
                timestamp=now,
            )
        )
    return total


def get_paid(ledger: "PayrollLedger", caller: str, month: int, year: int) -> int:
    state = ledger.state
    validate_month(month)
    require_employee(state, caller)

    current = period_of(ledger.now(), state.tz)
    if AccrualPeriod(year, month) >= current:
        raise FutureMonthClaim(employee=caller, month=month, year=year)
    record = state.record(caller, month, year)
    if record is None or record.working_days == 0:
        raise NoWorkingDays(employee=caller, month=month, year=year)
    if record.claimed:
        raise AlreadyClaimed(employee=caller, month=month, year=year)

    return settle_records(ledger, caller, [record])


def _validate_amount(amount: int) -> None:
    if amount <= 0:
        raise InvalidAmount("Amount must be positive", amount=amount)


def add_fund(ledger: "PayrollLedger", caller: str, amount: int) -> None:
    require_admin(ledger.state, caller)
    _validate_amount(amount)
    ledger.fund.transfer_in(caller, amount)
    ledger.events.publish(AddFund(amount=amount))


def withdraw_fund(ledger: "PayrollLedger", caller: str, amount: int) -> None:
    require_admin(ledger.state, caller)
    _validate_amount(amount)
    balance = ledger.fund.balance()
    if amount > balance:
        raise InsufficientFund(available=balance, amount=amount)
    ledger.fund.transfer_out(caller, amount)
    ledger.events.publish(WithdrawFund(amount=amount))
