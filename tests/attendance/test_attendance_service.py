from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

import pytest

from src.store_ops.store_ops.attendance.model import work_minutes
from src.store_ops.store_ops.attendance.service import AttendanceService
from src.store_ops.store_ops.common.datetime_utils import FixedClock
from src.store_ops.store_ops.core.enums import SessionState
from src.store_ops.store_ops.core.exceptions import (
    AlreadyClockedInError,
    NoOpenSessionError,
    NotFoundError,
    ValidationError,
)
from tests.fakes import InMemoryAttendance, InMemoryStores


def _make(now=datetime(2025, 3, 14, 9, 0)):
    attendance = InMemoryAttendance()
    return AttendanceService(attendance, InMemoryStores(), clock=FixedClock(now)), attendance


def test_clock_in_then_out_records_duration():
    service, attendance = _make()

    started = service.clock_in(7, store_id=1, latitude="12.9716", longitude="77.5946")
    finished = service.clock_out(7, latitude=12.97, longitude=77.59, logout_time="2025-03-14T17:30:00")

    assert started.attendance_date == date(2025, 3, 14)
    assert finished.work_duration_minutes == 510
    assert finished.work_duration_hours == Decimal("8.50")
    record = attendance.records[started.attendance_id]
    assert record.logout_time == datetime(2025, 3, 14, 17, 30)
    assert record.login_location.latitude == Decimal("12.9716")


def test_second_clock_in_while_open_is_rejected():
    service, _ = _make()
    service.clock_in(7, store_id=1)

    with pytest.raises(AlreadyClockedInError):
        service.clock_in(7, store_id=2)


def test_clock_in_again_after_clock_out_starts_new_session():
    service, attendance = _make()
    service.clock_in(7, store_id=1)
    service.clock_out(7, logout_time="2025-03-14T12:00:00")

    service.clock_in(7, store_id=1, login_time="2025-03-14T13:00:00")

    assert len(attendance.records) == 2


def test_clock_out_without_session_fails():
    service, _ = _make()

    with pytest.raises(NoOpenSessionError):
        service.clock_out(7)


def test_clock_out_cannot_precede_login():
    service, _ = _make()
    service.clock_in(7, store_id=1)

    with pytest.raises(ValidationError):
        service.clock_out(7, logout_time="2025-03-14T08:59:00")


def test_night_shift_closes_with_explicit_work_date():
    service, _ = _make(now=datetime(2025, 3, 14, 22, 0))
    service.clock_in(7, store_id=1)

    result = service.clock_out(7, logout_time="2025-03-15T06:00:00", work_date="2025-03-14")

    assert result.work_duration_minutes == 480


def test_clock_in_unknown_store_is_not_found():
    service, _ = _make()

    with pytest.raises(NotFoundError):
        service.clock_in(7, store_id=42)


@pytest.mark.parametrize("lat,lng", [("91", "0"), ("0", "181"), ("abc", "0"), ("10", None)])
def test_clock_in_validates_coordinates(lat, lng):
    service, _ = _make()

    with pytest.raises(ValidationError):
        service.clock_in(7, store_id=1, latitude=lat, longitude=lng)


def test_status_moves_through_session_states():
    service, _ = _make()

    assert service.get_status(7, attendance_date="2025-03-14").state == SessionState.NOT_CLOCKED_IN
    service.clock_in(7, store_id=1)
    assert service.get_status(7).state == SessionState.CLOCKED_IN
    service.clock_out(7, logout_time="2025-03-14T10:00:00")
    assert service.get_status(7).as_dict()["status"] == "clocked_out"


def test_list_records_filters_by_user_and_dates():
    service, attendance = _make()
    attendance.add(user_id=7, store_id=1, login_time=datetime(2025, 3, 1, 9, 0))
    attendance.add(user_id=7, store_id=1, login_time=datetime(2025, 3, 20, 9, 0))
    attendance.add(user_id=8, store_id=1, login_time=datetime(2025, 3, 2, 9, 0))

    records = service.list_records(user_id="7", start_date="2025-03-01", end_date="2025-03-10")

    assert [r.attendance_date for r in records] == [date(2025, 3, 1)]


def test_work_minutes_rounds_half_up():
    login = datetime(2025, 3, 14, 9, 0, 0)

    assert work_minutes(login, datetime(2025, 3, 14, 9, 0, 29)) == 0
    assert work_minutes(login, datetime(2025, 3, 14, 9, 0, 30)) == 1
    assert work_minutes(login, datetime(2025, 3, 14, 18, 0, 0)) == 540
