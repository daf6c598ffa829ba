from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Dict, Optional

from .models import Employee, MonthlyRecord, RecordKey, TimeWindowConfig, WorkingDayChange


@dataclass
class LedgerState:
    """Everything the ledger owns apart from the fund balance."""

    admin: str
    max_change_working_days: int
    check_in: TimeWindowConfig
    check_out: TimeWindowConfig
    utc_offset_minutes: int = 0
    employees: Dict[str, Employee] = field(default_factory=dict)
    records: Dict[RecordKey, MonthlyRecord] = field(default_factory=dict)
    changes: Dict[RecordKey, WorkingDayChange] = field(default_factory=dict)

    @property
    def tz(self) -> timezone:
        return timezone(timedelta(minutes=self.utc_offset_minutes))

    def record(self, employee_id: str, month: int, year: int) -> Optional[MonthlyRecord]:
        return self.records.get((employee_id, month, year))

    def open_record(self, employee: Employee, month: int, year: int) -> MonthlyRecord:
        """Return the record for the period, creating it with the current rate."""

        key = (employee.id, month, year)
        if key not in self.records:
            self.records[key] = MonthlyRecord(
                employee_id=employee.id,
                month=month,
                year=year,
                salary_snapshot=employee.salary_per_day,
            )
        return self.records[key]

    def records_for(self, employee_id: str) -> list[MonthlyRecord]:
        rows = [r for r in self.records.values() if r.employee_id == employee_id]
        return sorted(rows, key=lambda r: (r.year, r.month))


class LedgerStore:
    """JSON snapshot of a :class:`LedgerState`."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> LedgerState:
        content = json.loads(self.path.read_text())
        state = LedgerState(
            admin=content["admin"],
            max_change_working_days=content["max_change_working_days"],
            check_in=TimeWindowConfig(**content["check_in"]),
            check_out=TimeWindowConfig(**content["check_out"]),
            utc_offset_minutes=content.get("utc_offset_minutes", 0),
        )
        for data in content.get("employees", []):
            employee = self._deserialize_employee(data)
            state.employees[employee.id] = employee
        for data in content.get("records", []):
            record = self._deserialize_record(data)
            state.records[record.key] = record
        for data in content.get("changes", []):
            change = WorkingDayChange(**data)
            state.changes[(change.employee_id, change.month, change.year)] = change
        return state

    def save(self, state: LedgerState) -> None:
        payload = {
            "admin": state.admin,
            "max_change_working_days": state.max_change_working_days,
            "check_in": state.check_in.model_dump(),
            "check_out": state.check_out.model_dump(),
            "utc_offset_minutes": state.utc_offset_minutes,
            "employees": [asdict(e) for e in state.employees.values()],
            "records": [asdict(r) for r in state.records.values()],
            "changes": [asdict(c) for c in state.changes.values()],
        }
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(payload, default=self._datetime_serializer, indent=2))

    @staticmethod
    def _datetime_serializer(value):
        if isinstance(value, datetime):
            return value.isoformat()
        raise TypeError(f"Type {type(value)} not serializable")

    @staticmethod
    def _parse_datetime(value: Optional[str]) -> Optional[datetime]:
        return datetime.fromisoformat(value) if value else None

    def _deserialize_employee(self, data: dict) -> Employee:
        data["join_date"] = self._parse_datetime(data["join_date"])
        return Employee(**data)

    def _deserialize_record(self, data: dict) -> MonthlyRecord:
        data["last_check_in"] = self._parse_datetime(data.get("last_check_in"))
        return MonthlyRecord(**data)
