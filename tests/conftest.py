from datetime import date, datetime, timezone

import pytest

from payroll_ledger import DeterministicClock, PayrollLedger, TimeWindowConfig, Token, TokenFund

ADMIN = "admin"
EMPLOYEE = "alice"
EMPLOYEE_2 = "bob"
MANAGER = "mona"
MANAGER_2 = "mike"
MAX_CHANGE_WORKING_DAYS = 10
CHECK_IN = TimeWindowConfig(hour=8, minute=0, second=0, tolerance=900)
CHECK_OUT = TimeWindowConfig(hour=16, minute=0, second=0, tolerance=900)


def at(year: int, month: int, day: int, hour: int = 0, minute: int = 0, second: int = 0) -> datetime:
    return datetime(year, month, day, hour, minute, second, tzinfo=timezone.utc)


@pytest.fixture
def clock():
    # Thursday
    return DeterministicClock(at(2023, 5, 4, 12))


@pytest.fixture
def token():
    return Token(name="Payroll Token", symbol="PAY", total_supply=1_000_000, owner=ADMIN)


@pytest.fixture
def fund(token):
    return TokenFund(token)


@pytest.fixture
def ledger(fund, clock):
    return PayrollLedger(ADMIN, MAX_CHANGE_WORKING_DAYS, CHECK_IN, CHECK_OUT, fund, clock=clock)


@pytest.fixture
def staffed(ledger):
    ledger.add_employee(ADMIN, EMPLOYEE, MANAGER, 100)
    return ledger


@pytest.fixture
def work_day(clock):
    """Check ``employee`` in at 08:00 and out at 16:00 on ``day``."""

    def _work(ledger, employee, day: date) -> None:
        clock.set_time(at(day.year, day.month, day.day, 8))
        ledger.check_in(employee)
        clock.set_time(at(day.year, day.month, day.day, 16))
        ledger.check_out(employee)

    return _work
