from .clock import DeterministicClock, SystemClock
from .errors import PayrollError
from .events import EventBus, EventLog
from .fund import Token, TokenFund
from .ledger import PayrollLedger
from .models import CheckInInfo, EmployeeInfo, TimeWindowConfig
from .periods import AccrualPeriod
from .storage import LedgerState, LedgerStore

__all__ = [
    "AccrualPeriod",
    "CheckInInfo",
    "DeterministicClock",
    "EmployeeInfo",
    "EventBus",
    "EventLog",
    "LedgerState",
    "LedgerStore",
    "PayrollError",
    "PayrollLedger",
    "SystemClock",
    "TimeWindowConfig",
    "Token",
    "TokenFund",
]
