from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, ClassVar, Dict, List

from .logging import get_logger

logger = get_logger(__name__)

EVENT_LOG = Path("payroll_events.jsonl")


@dataclass(frozen=True)
class LedgerEvent:
    name: ClassVar[str] = "LedgerEvent"

    def to_dict(self) -> Dict[str, Any]:
        payload = {
            key: value.isoformat() if isinstance(value, datetime) else value
            for key, value in asdict(self).items()
        }
        return {"type": self.name, **payload}


@dataclass(frozen=True)
class AddEmployee(LedgerEvent):
    name: ClassVar[str] = "AddEmployee"
    employee: str
    manager: str
    salary_per_day: int


@dataclass(frozen=True)
class RemoveEmployee(LedgerEvent):
    name: ClassVar[str] = "RemoveEmployee"
    employee: str


@dataclass(frozen=True)
class ChangeSalary(LedgerEvent):
    name: ClassVar[str] = "ChangeSalary"
    employee: str
    salary_per_day: int


@dataclass(frozen=True)
class ChangeManager(LedgerEvent):
    name: ClassVar[str] = "ChangeManager"
    employee: str
    manager: str


@dataclass(frozen=True)
class ChangePaymentAddress(LedgerEvent):
    name: ClassVar[str] = "ChangePaymentAddress"
    employee: str
    new_address: str


@dataclass(frozen=True)
class ChangeMaxChangeWorkingDays(LedgerEvent):
    name: ClassVar[str] = "ChangeMaxChangeWorkingDays"
    max_change_working_days: int


@dataclass(frozen=True)
class ChangeAdmin(LedgerEvent):
    name: ClassVar[str] = "ChangeAdmin"
    admin: str


@dataclass(frozen=True)
class ChangeWorkingDays(LedgerEvent):
    name: ClassVar[str] = "ChangeWorkingDays"
    caller: str
    employee: str
    days: int


@dataclass(frozen=True)
class CheckIn(LedgerEvent):
    name: ClassVar[str] = "CheckIn"
    employee: str
    timestamp: datetime


@dataclass(frozen=True)
class CheckOut(LedgerEvent):
    name: ClassVar[str] = "CheckOut"
    employee: str
    timestamp: datetime


@dataclass(frozen=True)
class ClaimSalary(LedgerEvent):
    name: ClassVar[str] = "ClaimSalary"
    employee: str
    month: int
    year: int
    amount: int
    timestamp: datetime


@dataclass(frozen=True)
class AddFund(LedgerEvent):
    name: ClassVar[str] = "AddFund"
    amount: int


@dataclass(frozen=True)
class WithdrawFund(LedgerEvent):
    name: ClassVar[str] = "WithdrawFund"
    amount: int


EventHandler = Callable[[LedgerEvent], None]


class EventBus:
    """Keeps the emitted history and fans events out to subscribers.

    Events are published after the operation has applied its changes, so a
    failing subscriber is logged and does not undo or mask the operation.
    """

    def __init__(self) -> None:
        self.history: List[LedgerEvent] = []
        self._handlers: List[EventHandler] = []

    def subscribe(self, handler: EventHandler) -> None:
        self._handlers.append(handler)

    def publish(self, event: LedgerEvent) -> None:
        self.history.append(event)
        logger.info("ledger_event", **event.to_dict())
        for handler in self._handlers:
            try:
                handler(event)
            except Exception:
                logger.exception("event_handler_failed", type=event.name, handler=repr(handler))

    def of_type(self, event_type: type) -> List[LedgerEvent]:
        return [e for e in self.history if isinstance(e, event_type)]


class EventLog:
    """Append-only JSON lines audit trail; usable as an EventBus handler."""

    def __init__(self, path: Path = EVENT_LOG):
        self.path = path

    def __call__(self, event: LedgerEvent) -> None:
        self.log(event.to_dict())

    def log(self, entry: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        record = {**entry, "recorded_at": datetime.now(timezone.utc).isoformat()}
        with self.path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(record) + "\n")

    def read(self) -> List[Dict[str, Any]]:
        if not self.path.exists():
            return []
        with self.path.open("r", encoding="utf-8") as handle:
            return [json.loads(line) for line in handle if line.strip()]
