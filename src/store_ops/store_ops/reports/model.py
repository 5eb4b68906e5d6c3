from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Sequence

from ..core.enums import DayStatus


@dataclass(frozen=True)
class DayCell:
    """One (user, date) square of the attendance matrix."""

    date: date
    status: DayStatus
    hours: Decimal = Decimal("0.00")
    minutes: int = 0
    attendance_id: Optional[int] = None
    login_time: Optional[datetime] = None
    logout_time: Optional[datetime] = None

    @property
    def color(self) -> str:
        return self.status.color

    @property
    def is_absent(self) -> bool:
        return self.status == DayStatus.ABSENT

    def as_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "status": self.status.value,
            "color": self.color,
            "hours": str(self.hours),
            "minutes": self.minutes,
            "attendance_id": self.attendance_id,
            "login_time": self.login_time.isoformat() if self.login_time else None,
            "logout_time": self.logout_time.isoformat() if self.logout_time else None,
        }


@dataclass(frozen=True)
class UserSummary:
    total_days: int
    present_days: int
    total_hours: Decimal
    missing_hours: Decimal
    average_hours: Decimal

    @property
    def absent_days(self) -> int:
        return self.total_days - self.present_days

    def as_dict(self) -> dict:
        return {
            "present_days": self.present_days,
            "total_hours": str(self.total_hours),
            "missing_hours": str(self.missing_hours),
            "average_hours": str(self.average_hours),
            "total_days": self.total_days,
            "absent_days": self.absent_days,
        }


@dataclass(frozen=True)
class SummaryRow:
    user_id: int
    full_name: str
    username: str
    cells: Sequence[DayCell]
    summary: UserSummary

    def as_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "full_name": self.full_name,
            "username": self.username,
            "dates": [c.as_dict() for c in self.cells],
            "summary": self.summary.as_dict(),
        }


@dataclass(frozen=True)
class SummaryMatrix:
    start_date: date
    end_date: date
    columns: Sequence[date]
    rows: Sequence[SummaryRow]
    store_id: Optional[int] = None

    @property
    def total_days(self) -> int:
        return len(self.columns)

    def as_dict(self) -> dict:
        return {
            "data": [r.as_dict() for r in self.rows],
            "columns": [d.isoformat() for d in self.columns],
            "meta": {
                "start_date": self.start_date.isoformat(),
                "end_date": self.end_date.isoformat(),
                "total_days": self.total_days,
                "total_employees": len(self.rows),
                "store_id": self.store_id if self.store_id is not None else "all",
            },
        }
