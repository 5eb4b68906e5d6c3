from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from ..core.enums import SessionState


def work_minutes(login_time: datetime, logout_time: datetime) -> int:
    """Whole minutes between login and logout, rounded half-up."""
    seconds = Decimal(str((logout_time - login_time).total_seconds()))
    return int((seconds / 60).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _iso(value) -> Optional[str]:
    return value.isoformat() if value is not None else None


@dataclass(frozen=True)
class Coordinates:
    latitude: Decimal
    longitude: Decimal

    def as_dict(self) -> dict:
        return {"latitude": str(self.latitude), "longitude": str(self.longitude)}


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one clock-in/clock-out session.

    A record with a logout always carries its duration; a record without one
    never does.
    """

    attendance_id: int
    user_id: int
    store_id: int
    attendance_date: date
    login_time: datetime
    login_location: Optional[Coordinates] = None
    logout_time: Optional[datetime] = None
    logout_location: Optional[Coordinates] = None
    work_duration_minutes: Optional[int] = None
    store_name: Optional[str] = None
    full_name: Optional[str] = None
    username: Optional[str] = None

    def __post_init__(self):
        if (self.logout_time is None) != (self.work_duration_minutes is None):
            raise ValueError("logout_time and work_duration_minutes must be set together")

    @property
    def is_open(self) -> bool:
        return self.logout_time is None

    @property
    def state(self) -> SessionState:
        return SessionState.CLOCKED_IN if self.is_open else SessionState.CLOCKED_OUT

    def as_dict(self) -> dict:
        return {
            "attendance_id": self.attendance_id,
            "user_id": self.user_id,
            "store_id": self.store_id,
            "store_name": self.store_name,
            "full_name": self.full_name,
            "username": self.username,
            "attendance_date": self.attendance_date.isoformat(),
            "login_time": _iso(self.login_time),
            "logout_time": _iso(self.logout_time),
            "login_location": self.login_location.as_dict() if self.login_location else None,
            "logout_location": self.logout_location.as_dict() if self.logout_location else None,
            "work_duration_minutes": self.work_duration_minutes,
        }


@dataclass(frozen=True)
class ClockInResult:
    attendance_id: int
    store_id: int
    store_name: Optional[str]
    attendance_date: date
    login_time: datetime

    def as_dict(self) -> dict:
        return {
            "attendance_id": self.attendance_id,
            "store_id": self.store_id,
            "store_name": self.store_name,
            "attendance_date": self.attendance_date.isoformat(),
            "login_time": self.login_time.isoformat(),
        }


@dataclass(frozen=True)
class ClockOutResult:
    attendance_id: int
    login_time: datetime
    logout_time: datetime
    work_duration_minutes: int

    @property
    def work_duration_hours(self) -> Decimal:
        return (Decimal(self.work_duration_minutes) / 60).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)

    def as_dict(self) -> dict:
        return {
            "attendance_id": self.attendance_id,
            "login_time": self.login_time.isoformat(),
            "logout_time": self.logout_time.isoformat(),
            "work_duration_minutes": self.work_duration_minutes,
            "work_duration_hours": str(self.work_duration_hours),
        }


@dataclass(frozen=True)
class AttendanceStatusView:
    attendance_date: date
    record: Optional[AttendanceRecord]

    @property
    def state(self) -> SessionState:
        return self.record.state if self.record else SessionState.NOT_CLOCKED_IN

    def as_dict(self) -> dict:
        return {
            "date": self.attendance_date.isoformat(),
            "status": self.state.value,
            "attendance": self.record.as_dict() if self.record else None,
        }
