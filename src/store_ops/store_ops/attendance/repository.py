from __future__ import annotations

from datetime import date, datetime
from typing import Collection, Optional, Protocol, Sequence

from .model import AttendanceRecord, Coordinates


class AttendanceRepository(Protocol):
    def get_open_for_user_and_date(self, user_id: int, attendance_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_latest_for_user_and_date(self, user_id: int, attendance_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create_clock_in(
        self,
        *,
        user_id: int,
        store_id: int,
        attendance_date: date,
        login_time: datetime,
        location: Optional[Coordinates],
    ) -> Optional[int]:
        """Insert an open session; None when the user already has one open for the date."""

        raise NotImplementedError

    def close_session(
        self,
        *,
        attendance_id: int,
        logout_time: datetime,
        location: Optional[Coordinates],
        work_duration_minutes: int,
    ) -> bool:
        """Set logout fields only while the session is still open."""

        raise NotImplementedError

    def list_records(
        self,
        *,
        user_id: Optional[int] = None,
        store_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_in_range(
        self,
        *,
        start_date: date,
        end_date: date,
        user_ids: Collection[int],
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError
