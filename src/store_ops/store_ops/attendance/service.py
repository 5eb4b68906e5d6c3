from __future__ import annotations

import logging
from datetime import date
from typing import Any, Optional, Sequence

from ..common.datetime_utils import Clock, SystemClock, parse_iso_date, parse_iso_datetime
from ..common.validators import require_coordinate, require_id
from ..core.exceptions import (
    AlreadyClockedInError,
    NoOpenSessionError,
    NotFoundError,
    ValidationError,
)
from ..stores.repository import StoreRepository
from .model import (
    AttendanceRecord,
    AttendanceStatusView,
    ClockInResult,
    ClockOutResult,
    Coordinates,
    work_minutes,
)
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


def parse_coordinates(latitude: Any, longitude: Any) -> Optional[Coordinates]:
    """Both or neither; geolocation may be unavailable on the device."""
    if latitude in (None, "") and longitude in (None, ""):
        return None
    return Coordinates(
        latitude=require_coordinate(latitude, "latitude", limit=90),
        longitude=require_coordinate(longitude, "longitude", limit=180),
    )


class AttendanceService:
    """Use case: geolocated clock-in / clock-out.

    Timestamps are supplied by the caller (corrections, backfills) or taken
    from the injected clock; the duration is always computed here.
    """

    def __init__(self, attendance: AttendanceRepository, stores: StoreRepository, *, clock: Clock | None = None):
        self._attendance = attendance
        self._stores = stores
        self._clock = clock or SystemClock()

    def clock_in(
        self,
        user_id: int,
        *,
        store_id: Any,
        latitude: Any = None,
        longitude: Any = None,
        login_time: Any = None,
    ) -> ClockInResult:
        store_id = require_id(store_id, "store_id")
        location = parse_coordinates(latitude, longitude)
        now = parse_iso_datetime(login_time, "login_time") if login_time else self._clock.now()
        today = now.date()

        store = self._stores.get_by_id(store_id)
        if not store:
            raise NotFoundError(f"Store {store_id} does not exist")

        if self._attendance.get_open_for_user_and_date(user_id, today):
            raise AlreadyClockedInError(user_id, today)

        attendance_id = self._attendance.create_clock_in(
            user_id=user_id,
            store_id=store_id,
            attendance_date=today,
            login_time=now,
            location=location,
        )
        if attendance_id is None:
            raise AlreadyClockedInError(user_id, today)

        logger.info("clock-in attendance_id=%s user_id=%s store_id=%s at=%s", attendance_id, user_id, store_id, now)
        return ClockInResult(
            attendance_id=attendance_id,
            store_id=store_id,
            store_name=store.store_name,
            attendance_date=today,
            login_time=now,
        )

    def clock_out(
        self,
        user_id: int,
        *,
        latitude: Any = None,
        longitude: Any = None,
        logout_time: Any = None,
        work_date: Any = None,
    ) -> ClockOutResult:
        location = parse_coordinates(latitude, longitude)
        now = parse_iso_datetime(logout_time, "logout_time") if logout_time else self._clock.now()
        # an explicit work date lets a night shift close after midnight
        day = parse_iso_date(work_date) if work_date else now.date()

        record = self._attendance.get_open_for_user_and_date(user_id, day)
        if not record:
            raise NoOpenSessionError(user_id, day)
        if now < record.login_time:
            raise ValidationError("logout_time cannot be earlier than login_time")

        minutes = work_minutes(record.login_time, now)
        closed = self._attendance.close_session(
            attendance_id=record.attendance_id,
            logout_time=now,
            location=location,
            work_duration_minutes=minutes,
        )
        if not closed:
            raise NoOpenSessionError(user_id, day)

        logger.info(
            "clock-out attendance_id=%s user_id=%s at=%s minutes=%s", record.attendance_id, user_id, now, minutes
        )
        return ClockOutResult(
            attendance_id=record.attendance_id,
            login_time=record.login_time,
            logout_time=now,
            work_duration_minutes=minutes,
        )

    def get_status(self, user_id: int, *, attendance_date: Any = None) -> AttendanceStatusView:
        day = parse_iso_date(attendance_date) if attendance_date else self._clock.now().date()
        return AttendanceStatusView(
            attendance_date=day,
            record=self._attendance.get_latest_for_user_and_date(user_id, day),
        )

    def list_records(
        self,
        *,
        user_id: Any = None,
        store_id: Any = None,
        start_date: Any = None,
        end_date: Any = None,
    ) -> Sequence[AttendanceRecord]:
        start: Optional[date] = parse_iso_date(start_date, "start_date") if start_date else None
        end: Optional[date] = parse_iso_date(end_date, "end_date") if end_date else None
        if start and end and end < start:
            raise ValidationError("start_date must not be after end_date")
        return self._attendance.list_records(
            user_id=require_id(user_id, "user_id") if user_id else None,
            store_id=require_id(store_id, "store_id") if store_id else None,
            start_date=start,
            end_date=end,
        )
